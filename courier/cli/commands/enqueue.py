"""``courier enqueue`` — push one event onto the SQLite queue."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from courier.config import CourierSettings
from courier.core.errors import QueueFullError
from courier.models.delivery import Address, Event, Payload
from courier.sources.queue import QueueSource

console = Console()


def _parse_addresses(values: list[str]) -> list[Address]:
    addresses: list[Address] = []
    for value in values:
        try:
            addresses.append(Address.parse(value))
        except ValueError as exc:
            raise typer.BadParameter(
                f"{value!r} is not a valid '<data_center>/<node_id>' address",
                param_hint="--to",
            ) from exc
    return addresses


def enqueue_cmd(
    origin: str = typer.Option(..., "--origin", help="Origin identifier of the payload."),
    data: str = typer.Option("", "--data", help="Payload data (UTF-8 text)."),
    to: Optional[List[str]] = typer.Option(
        None,
        "--to",
        "-t",
        help="Recipient as DATA_CENTER/NODE_ID.  Repeat for several recipients.",
    ),
    queue_db: Optional[Path] = typer.Option(
        None,
        "--queue-db",
        "-q",
        help="Path to the SQLite event queue.",
    ),
) -> None:
    """Queue one event for every --to recipient, in the order given."""
    settings = CourierSettings()
    recipients = _parse_addresses(to or [])
    event = Event(
        payload=Payload(origin=origin, data=data.encode("utf-8")),
        recipients=tuple(recipients),
    )

    with QueueSource(
        queue_db or settings.queue_db_path, max_depth=settings.max_local_queue
    ) as source:
        try:
            depth = source.push(event)
        except QueueFullError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            raise typer.Exit(code=1)

    console.print(
        f"[bold green]Queued[/bold green] event from {escape(origin)} "
        f"for {len(recipients)} recipient(s); queue depth is {depth}."
    )

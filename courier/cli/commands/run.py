"""``courier run`` — run the dispatch loop against the local queue and outbox.

Reads events from the SQLite queue, writes each delivery into the
per-node outbox directories, and keeps going until SIGINT/SIGTERM or
until ``--duration`` elapses.  A fault from the queue or the outbox ends
the run with exit code 1.
"""

from __future__ import annotations

import asyncio
import signal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from courier.config import CourierSettings
from courier.core.cancellation import CancellationToken
from courier.core.dispatcher import Dispatcher
from courier.core.logs import configure_logging
from courier.sinks.local_file import LocalFileSink
from courier.sources.queue import QueueSource

console = Console()

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def _serve(dispatcher: Dispatcher, duration: float | None) -> None:
    """Run *dispatcher* until a stop signal arrives or *duration* elapses."""
    token = CancellationToken()
    loop = asyncio.get_running_loop()

    installed: list[signal.Signals] = []
    for sig in _STOP_SIGNALS:
        try:
            loop.add_signal_handler(sig, token.cancel)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Not available on Windows or outside the main thread.
            continue

    if duration is not None:
        loop.call_later(duration, token.cancel)

    try:
        await dispatcher.run(token)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


def run_cmd(
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        min=0,
        help="Backoff in seconds when idle or after a rejection.",
    ),
    queue_db: Optional[Path] = typer.Option(
        None,
        "--queue-db",
        "-q",
        help="Path to the SQLite event queue.",
    ),
    outbox: Optional[Path] = typer.Option(
        None,
        "--outbox",
        "-o",
        help="Root directory of the per-node outbox.",
    ),
    node_capacity: Optional[int] = typer.Option(
        None,
        "--node-capacity",
        min=0,
        help="Undrained files per node before deliveries are rejected (0 = unlimited).",
    ),
    duration: Optional[float] = typer.Option(
        None,
        "--duration",
        "-d",
        min=0,
        help="Stop after this many seconds instead of waiting for a signal.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG shows every delivery attempt).",
    ),
) -> None:
    """Run the dispatcher until interrupted.

    Unset options fall back to COURIER_* environment variables.
    """
    settings = CourierSettings()
    configure_logging(log_level or settings.effective_log_level)

    source = QueueSource(
        queue_db or settings.queue_db_path, max_depth=settings.max_local_queue
    )
    sink = LocalFileSink(
        outbox or settings.outbox_path,
        capacity=settings.node_capacity if node_capacity is None else node_capacity,
    )
    dispatcher = Dispatcher(
        settings.idle_interval_seconds if interval is None else interval,
        source,
        sink,
    )

    console.print(
        f"[bold green]Dispatching[/bold green] from {source!r} "
        f"to {sink.base_path} (interval={dispatcher.idle_interval}s)"
    )
    try:
        asyncio.run(_serve(dispatcher, duration))
    except Exception as exc:
        console.print(f"[red]Dispatcher stopped on fault:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    finally:
        source.close()

    console.print(f"[dim]Dispatcher {dispatcher.state.value}.[/dim]")

"""``courier status`` — show queue depth and outbox contents."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from courier.config import CourierSettings
from courier.sinks.local_file import BACKLOG_DIR
from courier.sources.queue import QueueSource

console = Console()


def _outbox_counts(outbox: Path) -> list[tuple[str, str, int, int]]:
    """Return (data_center, node_id, delivered, parked) for every node inbox."""
    if not outbox.exists():
        return []
    rows: list[tuple[str, str, int, int]] = []
    for dc_dir in sorted(p for p in outbox.iterdir() if p.is_dir()):
        for node_dir in sorted(p for p in dc_dir.iterdir() if p.is_dir()):
            delivered = len(list(node_dir.glob("*.json")))
            parked = len(list((node_dir / BACKLOG_DIR).glob("*.json")))
            rows.append((dc_dir.name, node_dir.name, delivered, parked))
    return rows


def status_cmd(
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
) -> None:
    """Show pending events and delivered files per node."""
    settings = CourierSettings()
    queue_path = queue_db or settings.queue_db_path
    outbox_path = outbox or settings.outbox_path

    depth = 0
    if queue_path.exists():
        with QueueSource(queue_path, max_depth=settings.max_local_queue) as source:
            depth = source.depth

    console.print(f"[bold]Queue:[/bold] {depth} pending in {queue_path}")

    rows = _outbox_counts(outbox_path)
    if not rows:
        console.print(f"[dim]No deliveries under {outbox_path}.[/dim]")
        return

    table = Table(title="Outbox")
    table.add_column("Data center", style="cyan")
    table.add_column("Node", style="green")
    table.add_column("Files", justify="right")
    table.add_column("Backlog", justify="right")
    for data_center, node_id, delivered, parked in rows:
        table.add_row(data_center, node_id, str(delivered), str(parked))
    console.print(table)

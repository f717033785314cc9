"""Main Typer application — imports and registers all CLI commands.

Entry point: ``courier`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from courier.cli.commands.enqueue import enqueue_cmd
from courier.cli.commands.run import run_cmd
from courier.cli.commands.status import status_cmd

app = typer.Typer(
    name="courier",
    help="Courier: a single-loop event dispatcher with fixed backoff.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="run", help="Run the dispatch loop until interrupted.")(run_cmd)
app.command(name="enqueue", help="Queue one event for delivery.")(enqueue_cmd)
app.command(name="status", help="Show queue depth and outbox contents.")(status_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

"""Root logger setup for the ``courier`` command.

Library modules only ever call ``logging.getLogger(__name__)``; this is
the one place that attaches a handler, and only the CLI calls it.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO", *, console: Console | None = None) -> None:
    """Install a single :class:`RichHandler` on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.  Unknown level names fall back to INFO.
    """
    py_level = logging.getLevelName(level.upper())
    if not isinstance(py_level, int):
        py_level = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(py_level)

"""Tests for configure_logging — one RichHandler on the root logger."""

from __future__ import annotations

import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from courier.core.logs import configure_logging


class TestConfigureLogging:
    def test_installs_single_rich_handler(self, restore_root_logger):
        configure_logging("DEBUG")
        configure_logging("DEBUG")

        root = restore_root_logger
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
        assert root.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging("chatty")
        assert restore_root_logger.level == logging.INFO

    def test_writes_to_given_console(self, restore_root_logger):
        buffer = io.StringIO()
        configure_logging("INFO", console=Console(file=buffer, width=200))

        logging.getLogger("courier.test").info("queue drained")
        assert "queue drained" in buffer.getvalue()

"""Subcommands of the ``courier`` CLI."""

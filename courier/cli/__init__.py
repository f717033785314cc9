"""Courier CLI — Typer-based command-line interface.

Provides the ``courier`` command with subcommands for running the
dispatcher, queueing events and inspecting the queue and outbox.

All output uses Rich for formatted terminal display.
"""

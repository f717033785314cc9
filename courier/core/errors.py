"""Fault types raised by Courier sources, sinks and the cancellation token.

None of these are caught by the Dispatcher: a fault raised by a source
or sink ends the dispatch loop and reaches the caller of ``run``.
"""

from __future__ import annotations


class CourierError(RuntimeError):
    """Base class for all Courier faults."""


class OperationCancelled(CourierError):
    """Raised by a source or sink that observed a cancelled token."""


class QueueFullError(CourierError):
    """Raised when an event is pushed onto a queue that is at capacity."""


class MalformedEventError(CourierError):
    """Raised when a stored record cannot be decoded into an Event."""

"""Courier core — the dispatch loop, its cancellation token and fault types."""

from courier.core.cancellation import CancellationToken
from courier.core.dispatcher import Dispatcher, DispatcherState
from courier.core.errors import (
    CourierError,
    MalformedEventError,
    OperationCancelled,
    QueueFullError,
)

__all__ = [
    "CancellationToken",
    "Dispatcher",
    "DispatcherState",
    "CourierError",
    "MalformedEventError",
    "OperationCancelled",
    "QueueFullError",
]

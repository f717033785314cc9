"""Courier: a single-loop event dispatcher.

Drains one event at a time from a source, fans its payload out to each
addressed recipient through a sink, and applies one fixed backoff
interval whenever the source is empty or a recipient rejects a delivery.
"""

__version__ = "0.1.0"
__description__ = "Single-loop event dispatcher with fixed backoff and cooperative cancellation"

from courier.core.cancellation import CancellationToken
from courier.core.dispatcher import Dispatcher, DispatcherState
from courier.models.delivery import EMPTY, Address, Empty, Event, Payload, SendResult

__all__ = [
    "Dispatcher",
    "DispatcherState",
    "CancellationToken",
    "Address",
    "Payload",
    "Event",
    "Empty",
    "EMPTY",
    "SendResult",
    "__version__",
]

"""Courier data models — all Pydantic v2, all frozen (immutable)."""

from courier.models.delivery import (
    EMPTY,
    Address,
    Empty,
    Event,
    Payload,
    ReadOutcome,
    SendResult,
)

__all__ = [
    "Address",
    "Payload",
    "Event",
    "Empty",
    "EMPTY",
    "ReadOutcome",
    "SendResult",
]

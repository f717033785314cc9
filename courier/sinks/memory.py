"""In-memory sink — buffers deliveries per address until flushed.

With a ``capacity`` set, an address that already holds that many
undrained payloads rejects further sends, which is the backpressure
signal the dispatcher reacts to.  A rejected payload is not dropped: it
joins that address's backlog and is moved into the buffer, oldest
first, as soon as ``flush`` frees room.
"""

from __future__ import annotations

import logging
from collections import deque

from courier.core.cancellation import CancellationToken
from courier.models.delivery import Address, Payload, SendResult

logger = logging.getLogger(__name__)


class MemorySink:
    """Per-address in-memory buffers with a retry backlog.

    Parameters
    ----------
    capacity:
        Maximum undrained payloads per address.  ``0`` means unlimited.
    """

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._capacity = capacity
        self._buffers: dict[Address, list[Payload]] = {}
        self._backlogs: dict[Address, deque[Payload]] = {}

    @property
    def sink_name(self) -> str:
        return "memory"

    async def send(
        self,
        address: Address,
        payload: Payload,
        cancellation: CancellationToken,
    ) -> SendResult:
        if address in self._backlogs or self._is_full(address):
            # Queue behind anything already waiting so per-address order holds.
            self._backlogs.setdefault(address, deque()).append(payload)
            logger.debug(
                "MemorySink: %s is at capacity (%d), deferring payload from %s "
                "(backlog=%d)",
                address,
                self._capacity,
                payload.origin,
                len(self._backlogs[address]),
            )
            return SendResult.REJECTED
        self._buffers.setdefault(address, []).append(payload)
        return SendResult.ACCEPTED

    def pending(self, address: Address) -> list[Payload]:
        """Return a copy of the payloads buffered for *address*."""
        return list(self._buffers.get(address, []))

    def backlog(self, address: Address) -> list[Payload]:
        """Return a copy of the rejected payloads still waiting for *address*."""
        return list(self._backlogs.get(address, ()))

    def flush(self, address: Address | None = None) -> list[Payload]:
        """Return and clear buffered payloads, for one address or all.

        Draining frees capacity, so the backlog of every flushed address
        is moved into its buffer afterwards.
        """
        if address is not None:
            drained = self._buffers.pop(address, [])
            self._retry_backlog(address)
            return drained
        drained = [p for buffer in self._buffers.values() for p in buffer]
        self._buffers.clear()
        for waiting in list(self._backlogs):
            self._retry_backlog(waiting)
        return drained

    def _is_full(self, address: Address) -> bool:
        return bool(self._capacity) and len(self._buffers.get(address, ())) >= self._capacity

    def _retry_backlog(self, address: Address) -> int:
        backlog = self._backlogs.get(address)
        if not backlog:
            return 0
        moved = 0
        while backlog and not self._is_full(address):
            self._buffers.setdefault(address, []).append(backlog.popleft())
            moved += 1
        if not backlog:
            del self._backlogs[address]
        if moved:
            logger.debug("MemorySink: retried %d backlogged payload(s) for %s", moved, address)
        return moved

"""Dispatcher — drains one event at a time and fans it out to its recipients.

Each loop iteration reads one outcome from the source.  ``EMPTY`` triggers
the idle backoff.  A deliverable event is sent to every recipient in list
order, strictly one at a time; a ``REJECTED`` result triggers the same
backoff before the next recipient.  There is a single, constant backoff
interval, no retry count and no exponential growth.

Faults raised by the source or sink are not caught: they end the loop and
propagate to the caller of ``run``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from enum import Enum
from typing import Protocol

from courier.core.cancellation import CancellationToken
from courier.core.errors import OperationCancelled
from courier.models.delivery import Address, Empty, Payload, SendResult
from courier.sinks import DeliverySink
from courier.sources import EventSource


class DebugLogger(Protocol):
    """The only logging capability the dispatcher needs."""

    def debug(self, msg: str, *args: object) -> None: ...


class DispatcherState(str, Enum):
    """Where the dispatch loop currently is."""

    IDLE = "idle"
    DELIVERING = "delivering"
    STOPPED = "stopped"
    FAILED = "failed"


class Dispatcher:
    """Single cooperative delivery loop over one source and one sink.

    Parameters
    ----------
    idle_interval:
        Non-negative backoff, in seconds or as a ``timedelta``.  Applied
        when the source is empty and after every rejected send.
    source:
        Where events come from.
    sink:
        Where each (address, payload) pair is delivered.
    logger:
        Receives debug diagnostics.  Defaults to this module's logger.

    Usage
    -----
    >>> token = CancellationToken()
    >>> dispatcher = Dispatcher(0.5, source, sink)
    >>> await dispatcher.run(token)
    """

    def __init__(
        self,
        idle_interval: float | timedelta,
        source: EventSource,
        sink: DeliverySink,
        *,
        logger: DebugLogger | None = None,
    ) -> None:
        if isinstance(idle_interval, timedelta):
            idle_interval = idle_interval.total_seconds()
        if idle_interval < 0:
            raise ValueError(
                f"idle_interval must be non-negative, got {idle_interval}"
            )
        self._idle_interval = float(idle_interval)
        self._source = source
        self._sink = sink
        self._logger: DebugLogger = (
            logger if logger is not None else logging.getLogger(__name__)
        )
        self._state = DispatcherState.IDLE

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def idle_interval(self) -> float:
        """The backoff interval in seconds."""
        return self._idle_interval

    @property
    def state(self) -> DispatcherState:
        return self._state

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run(self, cancellation: CancellationToken) -> None:
        """Deliver events until *cancellation* fires.

        Returns normally once cancellation is observed, either at the top
        of an iteration, before a send, during a backoff, or as an
        ``OperationCancelled`` raised by the source or sink while the
        token is cancelled.  Any other exception propagates.
        """
        self._state = DispatcherState.IDLE
        try:
            while not cancellation.is_cancelled:
                self._state = DispatcherState.IDLE
                outcome = await self._source.read(cancellation)

                if isinstance(outcome, Empty):
                    self._logger.debug("No items")
                    if not await cancellation.sleep(self._idle_interval):
                        break
                    continue

                payload = outcome.payload
                if payload is None or not outcome.recipients:
                    # Nothing to send; yield to the event loop and re-poll.
                    await asyncio.sleep(0)
                    continue

                self._state = DispatcherState.DELIVERING
                if not await self._deliver(payload, outcome.recipients, cancellation):
                    break
        except OperationCancelled:
            if not cancellation.is_cancelled:
                self._state = DispatcherState.FAILED
                raise
        except asyncio.CancelledError:
            self._state = DispatcherState.STOPPED
            raise
        except Exception:
            self._state = DispatcherState.FAILED
            raise
        self._state = DispatcherState.STOPPED

    async def _deliver(
        self,
        payload: Payload,
        recipients: tuple[Address, ...],
        cancellation: CancellationToken,
    ) -> bool:
        """Send *payload* to each recipient in order.

        Returns ``False`` if cancellation was observed before every
        recipient was attempted.
        """
        for address in recipients:
            if cancellation.is_cancelled:
                return False

            result = await self._sink.send(address, payload, cancellation)
            if not isinstance(result, SendResult):
                raise TypeError(
                    f"Sink {self._sink.sink_name!r} returned {result!r}, "
                    f"expected a SendResult"
                )

            if result is SendResult.REJECTED:
                self._logger.debug(
                    "Delivery from %s to %s was rejected, backing off %.3fs",
                    payload.origin,
                    address,
                    self._idle_interval,
                )
                # The backoff also delays the next recipient of this event.
                if not await cancellation.sleep(self._idle_interval):
                    return False
            else:
                self._logger.debug(
                    "Data from %s is sent successfully to %s",
                    payload.origin,
                    address,
                )
        return True

    def __repr__(self) -> str:
        return (
            f"Dispatcher(idle_interval={self._idle_interval!r}, "
            f"state={self._state.value})"
        )

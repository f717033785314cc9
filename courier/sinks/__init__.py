"""Sink protocol for the Courier dispatch loop.

A sink publishes one payload to one address at a time and answers with
exactly ``SendResult.ACCEPTED`` or ``SendResult.REJECTED``.  Transport
errors are either retried inside the sink or raised; they are never
silently mapped to ``REJECTED``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from courier.core.cancellation import CancellationToken
from courier.models.delivery import Address, Payload, SendResult


@runtime_checkable
class DeliverySink(Protocol):
    """Protocol that every Courier sink must implement.

    Attributes
    ----------
    sink_name : str
        A human-readable identifier for this sink instance
        (e.g. ``"memory"``, ``"local_file"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the name of this sink."""
        ...

    async def send(
        self,
        address: Address,
        payload: Payload,
        cancellation: CancellationToken,
    ) -> SendResult:
        """Deliver *payload* to *address*.

        The sink may keep or copy the payload but must not mutate it.

        Parameters
        ----------
        address:
            The recipient.
        payload:
            The data to deliver, unchanged.
        cancellation:
            The dispatcher's token.  Long-running sends should honor it.
        """
        ...

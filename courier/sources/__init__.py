"""Source protocol for the Courier dispatch loop.

A source is a pull-based event provider.  The dispatcher calls ``read``
once per loop iteration and either gets an ``Event`` or the explicit
``EMPTY`` outcome.  How the underlying medium is consumed, persisted or
acknowledged is entirely the source's concern.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from courier.core.cancellation import CancellationToken
from courier.models.delivery import ReadOutcome


@runtime_checkable
class EventSource(Protocol):
    """Protocol that every Courier source must implement.

    Attributes
    ----------
    source_name : str
        A human-readable identifier for this source instance
        (e.g. ``"queue"``).
    """

    @property
    def source_name(self) -> str:
        """Return the name of this source."""
        ...

    async def read(self, cancellation: CancellationToken) -> ReadOutcome:
        """Return the next event, or ``EMPTY`` when nothing is available.

        Any exception raised here is a fault: the dispatcher does not
        catch it.

        Parameters
        ----------
        cancellation:
            The dispatcher's token.  Long-running reads should honor it.
        """
        ...

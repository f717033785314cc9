"""Cooperative cancellation token shared by the dispatch loop, its source
and its sink.

The token wraps an :class:`asyncio.Event`.  Nothing is ever forcibly
interrupted: holders check ``is_cancelled`` at well-defined points and use
``sleep`` for every backoff so a cancellation raised mid-sleep wakes them
immediately.
"""

from __future__ import annotations

import asyncio
import logging

from courier.core.errors import OperationCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """A one-shot cancellation signal.

    Usage
    -----
    >>> token = CancellationToken()
    >>> task = asyncio.create_task(dispatcher.run(token))
    >>> token.cancel()
    >>> await task
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation.  Calling it more than once is harmless."""
        if not self._event.is_set():
            logger.debug("Cancellation requested")
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise :class:`OperationCancelled` if the token has fired."""
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """Suspend for *seconds* unless cancelled first.

        Returns
        -------
        bool
            ``True`` if the whole interval elapsed, ``False`` if the token
            was (or already had been) cancelled.
        """
        if self._event.is_set():
            return False
        if seconds <= 0:
            await asyncio.sleep(0)
            return not self._event.is_set()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return True
        return False

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"

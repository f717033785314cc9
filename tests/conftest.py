"""Shared test fixtures and fakes for Courier."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from courier.core.cancellation import CancellationToken
from courier.models.delivery import (
    EMPTY,
    Address,
    Event,
    Payload,
    ReadOutcome,
    SendResult,
)

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class ScriptedSource:
    """Yields the scripted outcomes in order, then ``EMPTY`` forever.

    Every read is timestamped.  With ``cancel_after_reads`` set, the read
    with that ordinal cancels the token before returning.
    """

    def __init__(
        self,
        outcomes: Iterable[ReadOutcome] = (),
        *,
        cancel_after_reads: int | None = None,
        fault: BaseException | None = None,
    ) -> None:
        self._outcomes = list(outcomes)
        self._cancel_after = cancel_after_reads
        self._fault = fault
        self.read_times: list[float] = []
        self.tokens: list[CancellationToken] = []

    @property
    def source_name(self) -> str:
        return "scripted"

    @property
    def reads(self) -> int:
        return len(self.read_times)

    async def read(self, cancellation: CancellationToken) -> ReadOutcome:
        self.read_times.append(time.monotonic())
        self.tokens.append(cancellation)
        if self._cancel_after is not None and self.reads >= self._cancel_after:
            cancellation.cancel()
        if self._fault is not None:
            raise self._fault
        if self._outcomes:
            return self._outcomes.pop(0)
        return EMPTY


class ScriptedSink:
    """Answers per node id, records every call with a timestamp."""

    def __init__(
        self,
        results: dict[str, SendResult] | None = None,
        *,
        default: SendResult = SendResult.ACCEPTED,
        faults: dict[str, BaseException] | None = None,
        on_send: Callable[[Address, CancellationToken], Any] | None = None,
    ) -> None:
        self._results = results or {}
        self._default = default
        self._faults = faults or {}
        self._on_send = on_send
        self.calls: list[tuple[float, Address, Payload]] = []
        self.tokens: list[CancellationToken] = []

    @property
    def sink_name(self) -> str:
        return "scripted"

    @property
    def addresses(self) -> list[Address]:
        return [address for _, address, _ in self.calls]

    @property
    def send_times(self) -> list[float]:
        return [ts for ts, _, _ in self.calls]

    async def send(
        self,
        address: Address,
        payload: Payload,
        cancellation: CancellationToken,
    ) -> SendResult:
        self.calls.append((time.monotonic(), address, payload))
        self.tokens.append(cancellation)
        if self._on_send is not None:
            self._on_send(address, cancellation)
        if address.node_id in self._faults:
            raise self._faults[address.node_id]
        return self._results.get(address.node_id, self._default)


class RecordingLogger:
    """Collects formatted debug messages."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def debug(self, msg: str, *args: object) -> None:
        self.messages.append(msg % args if args else msg)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def _make_event(
    *node_ids: str,
    data_center: str = "us",
    origin: str = "svcA",
    data: bytes = b"\x01\x02\x03",
) -> Event:
    """Build an Event addressed to *node_ids* in one data center."""
    return Event(
        payload=Payload(origin=origin, data=data),
        recipients=tuple(Address(data_center=data_center, node_id=n) for n in node_ids),
    )


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory fixture: build an Event addressed to the given node ids."""
    return _make_event


@pytest.fixture
def scripted_source() -> type[ScriptedSource]:
    """Factory fixture: the ScriptedSource class."""
    return ScriptedSource


@pytest.fixture
def scripted_sink() -> type[ScriptedSink]:
    """Factory fixture: the ScriptedSink class."""
    return ScriptedSink


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)

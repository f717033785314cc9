"""Delivery data model — payloads, addresses, events and send results.

All models are frozen Pydantic v2 models.  ``Payload.data`` is opaque
bytes and is carried as base64 in JSON form so arbitrary binary content
survives the queue round trip.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict


class SendResult(str, Enum):
    """The only two outcomes a sink may report for one delivery."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Payload(BaseModel):
    """Opaque data plus the identifier of the service that produced it."""

    model_config = ConfigDict(
        frozen=True, ser_json_bytes="base64", val_json_bytes="base64"
    )

    origin: str
    data: bytes


class Address(BaseModel):
    """A delivery target: one node inside one data center.

    Both parts are plain strings compared by value.  Sinks that map an
    address onto something narrower (a directory, a URL) validate it
    themselves.
    """

    model_config = ConfigDict(frozen=True)

    data_center: str
    node_id: str

    def __str__(self) -> str:
        return f"{self.data_center}/{self.node_id}"

    @classmethod
    def parse(cls, value: str) -> Address:
        """Build an Address from ``"<data_center>/<node_id>"``.

        The textual form is ambiguous when either part contains ``/``, so
        only exactly two non-empty segments are accepted here.
        """
        data_center, sep, node_id = value.partition("/")
        if not sep or not data_center or not node_id or "/" in node_id:
            raise ValueError(
                f"Address {value!r} must look like '<data_center>/<node_id>'"
            )
        return cls(data_center=data_center, node_id=node_id)


class Event(BaseModel):
    """One unit of work pulled from a source.

    ``payload`` may be absent and ``recipients`` may be empty; such an
    event is read successfully but has nothing to deliver.
    """

    model_config = ConfigDict(
        frozen=True, ser_json_bytes="base64", val_json_bytes="base64"
    )

    payload: Payload | None = None
    recipients: tuple[Address, ...] = ()

    @property
    def is_deliverable(self) -> bool:
        return self.payload is not None and len(self.recipients) > 0


class Empty(BaseModel):
    """Read outcome meaning the source had nothing to yield."""

    model_config = ConfigDict(frozen=True)

    def __bool__(self) -> bool:
        return False


EMPTY = Empty()

ReadOutcome = Union[Event, Empty]

"""Tests for the delivery data models — validation, immutability, JSON form."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from courier.models.delivery import (
    EMPTY,
    Address,
    Empty,
    Event,
    Payload,
    SendResult,
)


class TestAddress:
    def test_equality_by_value(self):
        assert Address(data_center="us", node_id="1") == Address(data_center="us", node_id="1")
        assert Address(data_center="us", node_id="1") != Address(data_center="eu", node_id="1")

    def test_hashable(self):
        seen = {Address(data_center="us", node_id="1"), Address(data_center="us", node_id="1")}
        assert len(seen) == 1

    def test_frozen(self):
        address = Address(data_center="us", node_id="1")
        with pytest.raises(ValidationError):
            address.node_id = "2"  # type: ignore[misc]

    def test_str(self):
        assert str(Address(data_center="us", node_id="1")) == "us/1"

    def test_parse(self):
        assert Address.parse("eu-west/node-7") == Address(data_center="eu-west", node_id="node-7")

    @pytest.mark.parametrize("value", ["no-separator", "/1", "us/", "us/1/2"])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            Address.parse(value)

    @pytest.mark.parametrize(
        ("data_center", "node_id"),
        [("eu/west", "1"), ("us", "rack\\7"), ("..", "etc"), ("", "")],
    )
    def test_any_strings_are_accepted(self, data_center, node_id):
        address = Address(data_center=data_center, node_id=node_id)
        assert address.data_center == data_center
        assert address.node_id == node_id

    def test_slash_in_data_center_survives_json(self):
        event = Event(
            payload=Payload(origin="svcA", data=b"x"),
            recipients=(Address(data_center="eu/west", node_id="1"),),
        )
        assert Event.model_validate_json(event.model_dump_json()) == event


class TestPayload:
    def test_frozen(self):
        payload = Payload(origin="svcA", data=b"abc")
        with pytest.raises(ValidationError):
            payload.data = b"xyz"  # type: ignore[misc]

    def test_binary_data_survives_json(self):
        payload = Payload(origin="svcA", data=bytes(range(256)))
        restored = Payload.model_validate_json(payload.model_dump_json())
        assert restored == payload


class TestEvent:
    def test_deliverable(self):
        event = Event(
            payload=Payload(origin="svcA", data=b"\x01"),
            recipients=(Address(data_center="us", node_id="1"),),
        )
        assert event.is_deliverable is True

    def test_no_recipients_not_deliverable(self):
        assert Event(payload=Payload(origin="svcA", data=b"\x01")).is_deliverable is False

    def test_no_payload_not_deliverable(self):
        event = Event(recipients=(Address(data_center="us", node_id="1"),))
        assert event.is_deliverable is False

    def test_empty_data_is_still_deliverable(self):
        event = Event(
            payload=Payload(origin="svcA", data=b""),
            recipients=(Address(data_center="us", node_id="1"),),
        )
        assert event.is_deliverable is True

    def test_recipients_keep_order(self):
        nodes = ["3", "1", "2"]
        event = Event(
            payload=Payload(origin="svcA", data=b"x"),
            recipients=[Address(data_center="us", node_id=n) for n in nodes],
        )
        assert [a.node_id for a in event.recipients] == nodes
        assert isinstance(event.recipients, tuple)

    def test_json_round_trip(self):
        event = Event(
            payload=Payload(origin="svcA", data=b"\x00\xff"),
            recipients=(Address(data_center="us", node_id="1"), Address(data_center="us", node_id="2")),
        )
        assert Event.model_validate_json(event.model_dump_json()) == event


class TestEmptyAndSendResult:
    def test_empty_is_falsy_singleton_value(self):
        assert not EMPTY
        assert isinstance(EMPTY, Empty)
        assert Empty() == EMPTY

    def test_empty_is_not_an_event(self):
        assert not isinstance(EMPTY, Event)

    def test_send_result_values(self):
        assert SendResult.ACCEPTED == "accepted"
        assert SendResult.REJECTED == "rejected"
        assert len(SendResult) == 2

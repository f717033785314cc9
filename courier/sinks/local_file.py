"""Local file sink — writes each delivery to a JSON file per node.

Layout:
    {base_path}/{data_center}/{node_id}/{sequence:08d}-{digest}.json
    {base_path}/{data_center}/{node_id}/.backlog/{sequence:08d}-{digest}.json

Each file holds the payload origin, the base64 data and its content
address.  A node directory acts as that node's inbox: when ``capacity``
is set and the directory already holds that many files, the send is
rejected until something downstream drains it.  The rejected payload is
parked in the node's ``.backlog`` directory and moved into the inbox,
oldest first, on the next ``send`` or ``retry_backlog`` that finds room,
so a restart does not lose it.
"""

from __future__ import annotations

import base64
import json
import logging
from pathlib import Path

from courier.core.cancellation import CancellationToken
from courier.core.hasher import canonical_json_bytes, content_address
from courier.models.delivery import Address, Payload, SendResult

logger = logging.getLogger(__name__)

BACKLOG_DIR = ".backlog"


class LocalFileSink:
    """Writes deliveries to local JSON files.

    Parameters
    ----------
    base_path:
        Root directory for node inboxes.  Defaults to ``.courier/outbox``.
    capacity:
        Maximum files per node directory before sends are rejected.
        ``0`` means unlimited.
    """

    def __init__(self, base_path: Path | str | None = None, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._base = Path(base_path) if base_path else Path(".courier/outbox")
        self._base.mkdir(parents=True, exist_ok=True)
        self._capacity = capacity

    @property
    def sink_name(self) -> str:
        return "local_file"

    @property
    def base_path(self) -> Path:
        return self._base

    async def send(
        self,
        address: Address,
        payload: Payload,
        cancellation: CancellationToken,
    ) -> SendResult:
        """Write *payload* into the inbox directory of *address*.

        Raises ``ValueError`` for an address that cannot be used as a
        directory name.  OS errors are not caught; both reach the
        dispatcher as faults.
        """
        inbox = self._inbox(address)
        inbox.mkdir(parents=True, exist_ok=True)

        self.retry_backlog(address)
        if self.list_backlog(address) or self._is_full(inbox):
            parked = _write_record(inbox / BACKLOG_DIR, _record(payload))
            logger.debug(
                "LocalFileSink: %s is at capacity (%d), parked %s",
                address,
                self._capacity,
                parked.name,
            )
            return SendResult.REJECTED

        target_file = _write_record(inbox, _record(payload))
        logger.debug("LocalFileSink: wrote %s", target_file)
        return SendResult.ACCEPTED

    def retry_backlog(self, address: Address) -> int:
        """Move parked deliveries for *address* into its inbox while there is room.

        Returns the number of deliveries moved.
        """
        inbox = self._inbox(address)
        moved = 0
        for parked in self.list_backlog(address):
            if self._is_full(inbox):
                break
            target_file = _write_record(inbox, json.loads(parked.read_bytes()))
            parked.unlink()
            logger.debug("LocalFileSink: retried %s as %s", parked.name, target_file.name)
            moved += 1
        return moved

    def list_deliveries(self, address: Address) -> list[Path]:
        """List delivered files for *address*, oldest first."""
        return _json_files(self._inbox(address))

    def list_backlog(self, address: Address) -> list[Path]:
        """List rejected deliveries still parked for *address*, oldest first."""
        return _json_files(self._inbox(address) / BACKLOG_DIR)

    def read_delivery(self, path: Path) -> Payload:
        """Read one delivered (or parked) file back into a Payload."""
        record = json.loads(path.read_bytes())
        return Payload(origin=record["origin"], data=base64.b64decode(record["data"]))

    def _is_full(self, inbox: Path) -> bool:
        return bool(self._capacity) and len(_json_files(inbox)) >= self._capacity

    def _inbox(self, address: Address) -> Path:
        for part in (address.data_center, address.node_id):
            if part in ("", ".", "..", BACKLOG_DIR) or "/" in part or "\\" in part:
                raise ValueError(f"Address {address} cannot be mapped to a directory")
        return self._base / address.data_center / address.node_id


def _record(payload: Payload) -> dict[str, str]:
    return {
        "origin": payload.origin,
        "data": base64.b64encode(payload.data).decode("ascii"),
        "content_address": content_address(payload.data),
    }


def _write_record(directory: Path, record: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    sequence = _next_sequence(_json_files(directory))
    digest = record["content_address"].split(":", 1)[1][:12]
    target_file = directory / f"{sequence:08d}-{digest}.json"
    target_file.write_bytes(canonical_json_bytes(record))
    return target_file


def _json_files(directory: Path) -> list[Path]:
    if not directory.exists():
        return []
    return sorted(directory.glob("*.json"))


def _next_sequence(existing: list[Path]) -> int:
    if not existing:
        return 1
    last = existing[-1].name.split("-", 1)[0]
    try:
        return int(last) + 1
    except ValueError:
        return len(existing) + 1

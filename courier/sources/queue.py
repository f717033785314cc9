"""Queue source — a bounded FIFO of events with two backends.

1. **SQLite queue** (``queue_db_path`` provided): Persistent, crash-safe,
   survives restart, and can be filled by another process (the
   ``courier enqueue`` command).
2. **In-memory deque** (``queue_db_path`` is None): Volatile, bounded,
   suitable for tests and single-process use.

Events are stored as canonical JSON bytes.  ``read`` pops the oldest
event; there is no acknowledgement step, so delivery from this source is
at-most-once.
"""

from __future__ import annotations

import collections
import logging
import sqlite3
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from courier.core.cancellation import CancellationToken
from courier.core.errors import MalformedEventError, QueueFullError
from courier.core.hasher import canonical_json_bytes
from courier.models.delivery import EMPTY, Event, ReadOutcome

logger = logging.getLogger(__name__)


class QueueSource:
    """Pull-based event source backed by SQLite or an in-memory deque.

    Parameters
    ----------
    queue_db_path:
        Path to a SQLite database file for persistent queue storage.
        When ``None``, an in-memory deque is used (volatile).
    max_depth:
        Maximum number of queued events (both backends).
    """

    def __init__(
        self,
        queue_db_path: Path | str | None = None,
        *,
        max_depth: int = 1024,
    ) -> None:
        if max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self._max_depth = max_depth

        self._db: sqlite3.Connection | None = None
        if queue_db_path is not None:
            db_path = Path(queue_db_path)
            db_path.parent.mkdir(parents=True, exist_ok=True)
            self._db = sqlite3.connect(str(db_path))
            self._db.execute(
                "CREATE TABLE IF NOT EXISTS events ("
                "  id INTEGER PRIMARY KEY AUTOINCREMENT,"
                "  body BLOB NOT NULL,"
                "  created_at TEXT DEFAULT (datetime('now'))"
                ")"
            )
            self._db.commit()
            logger.info(
                "QueueSource: using SQLite queue at %s (max_depth=%d).",
                db_path,
                max_depth,
            )
        else:
            logger.info(
                "QueueSource: using in-memory queue (max_depth=%d).", max_depth
            )

        self._local: collections.deque[bytes] = collections.deque()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def source_name(self) -> str:
        return "queue"

    @property
    def is_persistent(self) -> bool:
        return self._db is not None

    @property
    def depth(self) -> int:
        """Number of events waiting in the queue."""
        if self._db is not None:
            row = self._db.execute("SELECT COUNT(*) FROM events").fetchone()
            return row[0] if row else 0
        return len(self._local)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def push(self, event: Event) -> int:
        """Append *event* to the queue and return the new depth.

        Raises
        ------
        QueueFullError
            If the queue already holds ``max_depth`` events.
        """
        body = canonical_json_bytes(event.model_dump(mode="json"))
        depth = self.depth
        if depth >= self._max_depth:
            raise QueueFullError(
                f"Event queue is full (depth={depth}).  Event dropped."
            )

        if self._db is not None:
            self._db.execute("INSERT INTO events (body) VALUES (?)", (body,))
            self._db.commit()
        else:
            self._local.append(body)

        logger.debug(
            "QueueSource.push: queued event for %d recipient(s) (depth=%d).",
            len(event.recipients),
            depth + 1,
        )
        return depth + 1

    async def read(self, cancellation: CancellationToken) -> ReadOutcome:
        """Pop the oldest event, or return ``EMPTY``.

        Raises
        ------
        MalformedEventError
            If the stored record cannot be decoded.  The record is
            removed first so it is not read again.
        """
        body = self._pop()
        if body is None:
            return EMPTY
        try:
            return Event.model_validate_json(body)
        except ValidationError as exc:
            raise MalformedEventError(f"Stored event is malformed: {exc}") from exc

    def close(self) -> None:
        """Release the SQLite connection and clear the in-memory queue."""
        if self._db is not None:
            self._db.close()
            self._db = None
        self._local.clear()
        logger.info("QueueSource: closed.")

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> QueueSource:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        backend = "sqlite" if self._db is not None else "memory"
        return f"QueueSource(backend={backend}, max_depth={self._max_depth})"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _pop(self) -> bytes | None:
        if self._db is not None:
            row = self._db.execute(
                "SELECT id, body FROM events ORDER BY id LIMIT 1"
            ).fetchone()
            if row is None:
                return None
            row_id, body = row
            self._db.execute("DELETE FROM events WHERE id = ?", (row_id,))
            self._db.commit()
            logger.debug("QueueSource.read: dequeued event id=%d.", row_id)
            return bytes(body)

        if self._local:
            return self._local.popleft()
        return None

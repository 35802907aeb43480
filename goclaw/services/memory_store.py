"""Conversation memory store.

Append-only durable log of {role, content, timestamp} rows for a single
session, layered over a message repository. The agent loop is the only
writer, so no locking is done here.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import StorageError
from ..models.message import Message
from ..repositories.base import AbstractMessageRepository

logger = logging.getLogger(__name__)

VALID_ROLES = ("user", "assistant", "system", "tool")
DEFAULT_SESSION_ID = "default"


class MemoryStore:
    """Service layer for persisted conversation history.

    Attributes:
        session_id: The fixed session identifier all rows are written under
    """

    def __init__(
        self,
        repository: AbstractMessageRepository,
        session_id: str = DEFAULT_SESSION_ID,
    ) -> None:
        """Initialize memory store.

        Args:
            repository: The repository to use for storage
            session_id: Session identifier for isolation
        """
        self._repository = repository
        self._session_id = session_id
        self._closed = False

    @classmethod
    def open(cls, file_path: str | Path, session_id: str = DEFAULT_SESSION_ID) -> "MemoryStore":
        """Open a SQLite-backed store, creating the file and schema if needed.

        Args:
            file_path: Path of the SQLite database file
            session_id: Session identifier for isolation

        Returns:
            A ready MemoryStore

        Raises:
            StorageError: If the database cannot be created or opened
        """
        from ..repositories.sqlalchemy import SQLAlchemyMessageRepository

        path = Path(file_path).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            repository = SQLAlchemyMessageRepository(f"sqlite:///{path}")
        except (OSError, SQLAlchemyError) as e:
            raise StorageError(str(e), operation="open") from e

        logger.debug(f"Opened memory store at {path} (session={session_id})")
        return cls(repository, session_id)

    @property
    def session_id(self) -> str:
        """Get the session ID."""
        return self._session_id

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        if self._closed:
            raise StorageError("store is closed", operation=name)
        try:
            yield
        except SQLAlchemyError as e:
            raise StorageError(str(e), operation=name) from e

    def _next_timestamp(self) -> datetime:
        """Return now, nudged forward so timestamps stay strictly increasing."""
        now = datetime.now()
        last = self._repository.last_timestamp(self._session_id)
        if last is not None and now <= last:
            now = last + timedelta(microseconds=1)
        return now

    # === Log operations ===

    def append(self, role: str, content: str) -> Message:
        """Append a message with the current timestamp.

        Args:
            role: One of user, assistant, system, tool
            content: Message text (may be empty)

        Returns:
            The persisted Message

        Raises:
            ValueError: If role is not a known role
            StorageError: If the write fails
        """
        if role not in VALID_ROLES:
            raise ValueError(f"invalid role: {role!r}")
        with self._operation("append"):
            message = self._repository.add(
                self._session_id, role, content or "", self._next_timestamp()
            )
        logger.debug(f"[{self._session_id}] Append {role} message #{message.id}")
        return message

    def history(self, limit: int = -1) -> list[Message]:
        """Return the oldest `limit` messages in ascending order.

        A negative limit returns every message.
        """
        with self._operation("history"):
            return self._repository.oldest(self._session_id, None if limit < 0 else limit)

    def recent(self, limit: int = -1) -> list[Message]:
        """Return the most recent `limit` messages in ascending order.

        A negative limit returns every message.
        """
        with self._operation("recent"):
            if limit < 0:
                return self._repository.oldest(self._session_id, None)
            return self._repository.newest(self._session_id, limit)

    def count(self) -> int:
        """Return the number of messages in the session."""
        with self._operation("count"):
            return self._repository.count(self._session_id)

    def clear(self) -> int:
        """Delete every message in the session.

        Returns:
            Number of rows deleted (0 when already empty)
        """
        with self._operation("clear"):
            deleted = self._repository.clear(self._session_id)
        logger.debug(f"[{self._session_id}] Clear: {deleted} messages")
        return deleted

    def to_provider_format(self, limit: int = -1) -> list[dict[str, str]]:
        """Return recent history as {role, content} pairs for the model client."""
        return [{"role": m.role, "content": m.content} for m in self.recent(limit)]

    # === Import / export ===

    def export_json(self) -> str:
        """Serialize every message in the session as a JSON array."""
        return json.dumps(
            [m.to_dict() for m in self.history(-1)],
            ensure_ascii=False,
            indent=2,
        )

    def import_json(self, data: str | bytes) -> int:
        """Bulk-append messages from a JSON array.

        Roles and content are preserved; ids and timestamps are reassigned.

        Returns:
            Number of messages imported

        Raises:
            StorageError: If the payload is not a JSON array of messages
        """
        try:
            items: Any = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(f"invalid JSON: {e}", operation="import") from e

        if not isinstance(items, list):
            raise StorageError("expected a JSON array of messages", operation="import")

        for index, item in enumerate(items):
            if (
                not isinstance(item, dict)
                or item.get("role") not in VALID_ROLES
                or not isinstance(item.get("content"), str)
            ):
                raise StorageError(f"invalid message at index {index}", operation="import")

        for item in items:
            self.append(item["role"], item["content"])

        logger.info(f"[{self._session_id}] Imported {len(items)} messages")
        return len(items)

    # === Lifecycle ===

    def close(self) -> None:
        """Release the backing handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._repository.close()
        logger.debug(f"[{self._session_id}] Memory store closed")

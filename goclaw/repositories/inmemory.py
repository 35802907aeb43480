"""In-memory repository implementation using SQLAlchemy ORM model objects.

Stores Message objects in a list for fast, transient storage during
development and testing.
"""

from datetime import datetime

from ..models.message import Message
from .base import AbstractMessageRepository


class InMemoryMessageRepository(AbstractMessageRepository):
    """In-memory repository storing Message model objects.

    Provides the same ordering and session isolation semantics as the
    SQL backend without database overhead.

    Note: Data is not persisted between process restarts.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory repository."""
        self._messages: list[Message] = []
        self._id_counter = 0

    def _session_messages(self, session_id: str) -> list[Message]:
        rows = [m for m in self._messages if m.session_id == session_id]
        return sorted(rows, key=lambda m: (m.timestamp, m.id))

    def add(self, session_id: str, role: str, content: str, timestamp: datetime) -> Message:
        self._id_counter += 1
        message = Message(
            id=self._id_counter,
            session_id=session_id,
            role=role,
            content=content,
            timestamp=timestamp,
        )
        self._messages.append(message)
        return message

    def oldest(self, session_id: str, limit: int | None = None) -> list[Message]:
        rows = self._session_messages(session_id)
        return rows if limit is None else rows[:limit]

    def newest(self, session_id: str, limit: int) -> list[Message]:
        if limit <= 0:
            return []
        return self._session_messages(session_id)[-limit:]

    def last_timestamp(self, session_id: str) -> datetime | None:
        rows = self._session_messages(session_id)
        return rows[-1].timestamp if rows else None

    def count(self, session_id: str) -> int:
        return len(self._session_messages(session_id))

    def clear(self, session_id: str) -> int:
        before = len(self._messages)
        self._messages = [m for m in self._messages if m.session_id != session_id]
        return before - len(self._messages)

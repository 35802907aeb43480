"""Abstract repository interface for message storage.

This module defines the contract that all message repository
implementations must follow, so the memory store can run against
SQLite in production and a dictionary in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ..models.message import Message


class AbstractMessageRepository(ABC):
    """Abstract repository for persisted conversation messages.

    The repository is responsible only for data access. Ordering rules,
    timestamps and error translation belong to the service layer.

    Every query is scoped by session_id.
    """

    @abstractmethod
    def add(self, session_id: str, role: str, content: str, timestamp: datetime) -> Message:
        """Insert a new message row.

        Args:
            session_id: The session identifier
            role: Message role
            content: Message text
            timestamp: Insertion time

        Returns:
            The saved Message with id populated
        """
        pass

    @abstractmethod
    def oldest(self, session_id: str, limit: int | None = None) -> list[Message]:
        """Return the first `limit` messages in ascending order.

        Args:
            session_id: The session identifier
            limit: Maximum rows to return, None for all

        Returns:
            Messages ordered by (timestamp, id) ascending
        """
        pass

    @abstractmethod
    def newest(self, session_id: str, limit: int) -> list[Message]:
        """Return the last `limit` messages, still in ascending order.

        Args:
            session_id: The session identifier
            limit: Maximum rows to return

        Returns:
            Messages ordered by (timestamp, id) ascending
        """
        pass

    @abstractmethod
    def last_timestamp(self, session_id: str) -> datetime | None:
        """Return the timestamp of the most recent message, if any."""
        pass

    @abstractmethod
    def count(self, session_id: str) -> int:
        """Count messages in a session."""
        pass

    @abstractmethod
    def clear(self, session_id: str) -> int:
        """Delete all messages in a session.

        Returns:
            Number of rows deleted
        """
        pass

    def close(self) -> None:
        """Release any backing resources."""
        return None

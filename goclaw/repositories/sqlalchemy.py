"""SQLAlchemy repository implementation for persistent storage.

Persists Message rows to a SQL database (SQLite by default) using
SQLAlchemy 2.0 ORM queries.
"""

from datetime import datetime

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker

from ..models.base import Base
from ..models.message import Message
from .base import AbstractMessageRepository


class SQLAlchemyMessageRepository(AbstractMessageRepository):
    """SQLAlchemy repository for persisted conversation messages.

    Example connection strings:
        - SQLite file: sqlite:///./goclaw.db
        - SQLite in memory: sqlite://
    """

    def __init__(
        self,
        connection_string: str,
        echo: bool = False,
        create_schema: bool = True,
    ) -> None:
        """Initialize SQLAlchemy repository.

        Args:
            connection_string: SQLAlchemy database URL
            echo: If True, log all SQL statements
            create_schema: Create the messages table and its index if missing
        """
        self.engine = create_engine(connection_string, echo=echo)
        self._session_factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
        )
        if create_schema:
            Base.metadata.create_all(self.engine)

    def _get_session(self) -> Session:
        """Get a new database session."""
        return self._session_factory()

    def add(self, session_id: str, role: str, content: str, timestamp: datetime) -> Message:
        with self._get_session() as session:
            message = Message(
                session_id=session_id,
                role=role,
                content=content,
                timestamp=timestamp,
            )
            session.add(message)
            session.commit()
            session.expunge(message)
            return message

    def oldest(self, session_id: str, limit: int | None = None) -> list[Message]:
        with self._get_session() as session:
            stmt = (
                select(Message)
                .where(Message.session_id == session_id)
                .order_by(Message.timestamp.asc(), Message.id.asc())
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = list(session.execute(stmt).scalars().all())
            session.expunge_all()
            return rows

    def newest(self, session_id: str, limit: int) -> list[Message]:
        with self._get_session() as session:
            stmt = (
                select(Message)
                .where(Message.session_id == session_id)
                .order_by(Message.timestamp.desc(), Message.id.desc())
                .limit(limit)
            )
            rows = list(session.execute(stmt).scalars().all())
            session.expunge_all()
            rows.reverse()
            return rows

    def last_timestamp(self, session_id: str) -> datetime | None:
        with self._get_session() as session:
            stmt = select(func.max(Message.timestamp)).where(Message.session_id == session_id)
            return session.execute(stmt).scalar_one_or_none()

    def count(self, session_id: str) -> int:
        with self._get_session() as session:
            stmt = select(func.count(Message.id)).where(Message.session_id == session_id)
            return session.execute(stmt).scalar_one()

    def clear(self, session_id: str) -> int:
        with self._get_session() as session:
            stmt = delete(Message).where(Message.session_id == session_id)
            result = session.execute(stmt)
            session.commit()
            return result.rowcount

    def close(self) -> None:
        """Dispose of the connection pool."""
        self.engine.dispose()

"""SQLAlchemy ORM model for persisted conversation messages.

Only final user and assistant messages are persisted. Tool-call
bookkeeping lives in transient request messages and never reaches
this table.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from .base import Base


class Message(Base):
    """SQLAlchemy model for one persisted chat message.

    Rows are immutable once written. Ordering within a session is
    insertion order; (timestamp, id) reproduces it.

    Attributes:
        id: Auto-incrementing primary key
        session_id: Logical conversation the message belongs to
        role: "user" or "assistant" (system/tool are never persisted)
        content: Message text, possibly empty
        timestamp: Wall-clock time the row was appended
    """

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(64), nullable=False)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False, default="")
    timestamp = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("idx_session_timestamp", "session_id", "timestamp"),
    )

    def to_dict(self) -> dict:
        """Serialize for JSON export."""
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "session_id": self.session_id,
        }

    def __repr__(self) -> str:
        return (
            f"Message(id={self.id}, session_id={self.session_id!r}, "
            f"role={self.role!r}, content_len={len(self.content or '')})"
        )

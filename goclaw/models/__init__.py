"""SQLAlchemy ORM models for the assistant."""

from .base import Base
from .message import Message

__all__ = ["Base", "Message"]

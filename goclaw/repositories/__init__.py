"""Repository pattern implementations for message storage."""

from .base import AbstractMessageRepository
from .inmemory import InMemoryMessageRepository

__all__ = [
    "AbstractMessageRepository",
    "InMemoryMessageRepository",
]

# SQLAlchemyMessageRepository is imported from .sqlalchemy directly

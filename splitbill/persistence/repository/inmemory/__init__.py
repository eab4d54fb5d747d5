"""In-memory repository implementations."""

from .session import InMemorySessionRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemorySessionRepository",
    "InMemoryUserRepository",
]

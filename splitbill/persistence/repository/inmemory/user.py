"""In-memory user repository for testing."""

import asyncio
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager

from splitbill.domain.model.user import User
from splitbill.domain.repository.user import UserRepository


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, users: Sequence[User] = ()) -> None:
        self._users: list[User] = list(users)
        self._lock = asyncio.Lock()

    def exclusive(self) -> AbstractAsyncContextManager[None]:
        """Hold the single-writer lock."""
        return self._lock

    async def load_all(self) -> list[User]:
        """Get a copy of every user."""
        return list(self._users)

    async def save_all(self, users: Sequence[User]) -> None:
        """Replace the collection."""
        self._users = list(users)

"""Session repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from splitbill.domain.model.session import Session
from splitbill.domain.value import SessionHandle


class SessionRepository(ABC):
    """Repository for server-side sessions."""

    @abstractmethod
    async def get(self, handle: SessionHandle) -> Optional[Session]:
        """Find a session by handle.

        Args:
            handle: The session handle

        Returns:
            The session if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Store a session (create or replace).

        Args:
            session: The session to store

        Returns:
            The stored session
        """
        pass

    @abstractmethod
    async def delete(self, handle: SessionHandle) -> bool:
        """Remove a session.

        Args:
            handle: The session handle

        Returns:
            True if a session was removed, False if none existed
        """
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Remove every session that has expired.

        Args:
            now: Current time

        Returns:
            Number of sessions removed
        """
        pass

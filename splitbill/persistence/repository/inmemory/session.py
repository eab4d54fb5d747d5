"""In-memory session repository.

Sessions live only in this process; a restart signs everyone out.
"""

from datetime import datetime
from typing import Optional

from splitbill.domain.model.session import Session
from splitbill.domain.repository.session import SessionRepository
from splitbill.domain.value import SessionHandle


class InMemorySessionRepository(SessionRepository):
    """In-memory implementation of SessionRepository."""

    def __init__(self) -> None:
        self._sessions: dict[SessionHandle, Session] = {}

    async def get(self, handle: SessionHandle) -> Optional[Session]:
        """Find a session by handle."""
        return self._sessions.get(handle)

    async def save(self, session: Session) -> Session:
        """Store a session."""
        self._sessions[session.handle] = session
        return session

    async def delete(self, handle: SessionHandle) -> bool:
        """Remove a session if present."""
        return self._sessions.pop(handle, None) is not None

    async def purge_expired(self, now: datetime) -> int:
        """Remove every expired session."""
        expired = [h for h, s in self._sessions.items() if s.is_expired(now)]
        for handle in expired:
            del self._sessions[handle]
        return len(expired)

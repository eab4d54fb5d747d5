"""Session lifecycle domain service."""

import secrets
from datetime import timedelta
from typing import Optional

import logfire

from splitbill.config import AuthSettings
from splitbill.domain.model import Session, User
from splitbill.domain.repository import SessionRepository
from splitbill.domain.value import PersistenceHint, SessionHandle
from splitbill.domain.value.common import ValueObject
from splitbill.util.error import SessionTokenError
from splitbill.util.jwt import create_session_token, verify_session_token

from .base import Clock, Service, utcnow


class IssuedSession(ValueObject):
    """A newly created session and the signed token handed to the browser."""

    token: str
    session: Session


class SessionManager(Service):
    """Issues, resolves and destroys server-side sessions.

    The server record is authoritative. The persistence hint is stored
    with it only so the interface layer can choose the cookie lifetime.
    """

    def __init__(
        self,
        session_repository: SessionRepository,
        auth_settings: AuthSettings,
        clock: Clock = utcnow,
    ) -> None:
        """Initialize session manager.

        Args:
            session_repository: Session repository
            auth_settings: Authentication settings
            clock: Source of the current time
        """
        self.session_repository = session_repository
        self.auth_settings = auth_settings
        self.clock = clock

    async def create(self, user: User, hint: PersistenceHint) -> IssuedSession:
        """Create a session for a user.

        Args:
            user: Authenticated user
            hint: Client persistence hint

        Returns:
            The stored session and its signed token
        """
        with logfire.span("session_manager.create", user_id=user.id):
            now = self.clock()
            await self.session_repository.purge_expired(now)

            session = Session(
                handle=SessionHandle(secrets.token_urlsafe(32)),
                user_id=user.id,
                persistence=hint,
                created_at=now,
                expires_at=now
                + timedelta(hours=self.auth_settings.session_lifetime_hours),
            )
            await self.session_repository.save(session)
            token = create_session_token(
                session.handle, session.expires_at, self.auth_settings
            )

            logfire.info(
                "Session created", user_id=user.id, persistence=hint.value
            )
            return IssuedSession(token=token, session=session)

    async def resolve(self, token: Optional[str]) -> Optional[Session]:
        """Find the live session a token names.

        Args:
            token: Token from the session cookie (may be absent)

        Returns:
            The session, or None if the token is missing, invalid, or names
            an unknown or expired session
        """
        if not token:
            return None

        try:
            payload = verify_session_token(token, self.auth_settings)
        except SessionTokenError as e:
            logfire.debug("Session token rejected", error=str(e))
            return None

        session = await self.session_repository.get(SessionHandle(payload.sid))
        if session is None:
            return None

        if session.is_expired(self.clock()):
            await self.session_repository.delete(session.handle)
            logfire.info("Expired session removed", user_id=session.user_id)
            return None

        return session

    async def destroy(self, token: Optional[str]) -> bool:
        """Destroy the session a token names.

        Destroying a missing or already destroyed session is not an error.

        Args:
            token: Token from the session cookie (may be absent)

        Returns:
            True if a session was removed
        """
        if not token:
            return False

        try:
            payload = verify_session_token(token, self.auth_settings)
            handle = SessionHandle(payload.sid)
        except SessionTokenError:
            return False

        removed = await self.session_repository.delete(handle)
        if removed:
            logfire.info("Session destroyed")
        return removed

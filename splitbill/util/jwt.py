"""Session token utilities.

The browser cookie carries a signed token naming the server-side session
handle. The token never carries user data.
"""

from datetime import datetime

import jwt
from pydantic import BaseModel

from splitbill.config import AuthSettings
from splitbill.util.error import SessionTokenError


class SessionTokenPayload(BaseModel):
    """Session token payload."""

    sid: str
    exp: datetime


def create_session_token(
    handle: str, expires_at: datetime, settings: AuthSettings
) -> str:
    """Sign a token for a session handle.

    Args:
        handle: Server-side session handle
        expires_at: Session expiry, copied into the ``exp`` claim
        settings: Authentication settings

    Returns:
        Encoded token
    """
    payload = {"sid": handle, "exp": expires_at}
    return jwt.encode(
        payload, settings.session_secret, algorithm=settings.session_algorithm
    )


def verify_session_token(token: str, settings: AuthSettings) -> SessionTokenPayload:
    """Verify and decode a session token.

    Args:
        token: Token from the session cookie
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        SessionTokenError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"require": ["sid", "exp"]},
        )
        return SessionTokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise SessionTokenError("Session token has expired")
    except jwt.InvalidTokenError:
        raise SessionTokenError("Invalid session token")

"""Unit tests for session token utilities."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from splitbill.util.error import SessionTokenError
from splitbill.util.jwt import create_session_token, verify_session_token
from tests.conftest import fast_auth_settings


class TestSessionToken:
    """Tests for create_session_token()/verify_session_token()."""

    def test_token_names_the_session(self):
        """Should carry only the handle and expiry."""
        settings = fast_auth_settings()
        expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        token = create_session_token("handle-1", expires_at, settings)
        payload = verify_session_token(token, settings)

        assert payload.sid == "handle-1"
        assert set(jwt.decode(token, options={"verify_signature": False})) == {
            "sid",
            "exp",
        }

    def test_expired_token(self):
        """Should reject an expired token."""
        settings = fast_auth_settings()
        expires_at = datetime.now(timezone.utc) - timedelta(seconds=5)
        token = create_session_token("handle-1", expires_at, settings)

        with pytest.raises(SessionTokenError):
            verify_session_token(token, settings)

    def test_tampered_token(self):
        """Should reject a token signed with another key."""
        expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
        token = create_session_token(
            "handle-1",
            expires_at,
            fast_auth_settings(session_secret="another-secret-0123456789abcdefgh"),
        )

        with pytest.raises(SessionTokenError):
            verify_session_token(token, fast_auth_settings())

    def test_token_without_session_claim(self):
        """A valid signature is not enough without a session handle."""
        settings = fast_auth_settings()
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            settings.session_secret,
            algorithm=settings.session_algorithm,
        )

        with pytest.raises(SessionTokenError):
            verify_session_token(token, settings)

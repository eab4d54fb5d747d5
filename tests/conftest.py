"""Test configuration and fixtures."""

import os
from datetime import datetime, timezone
from typing import Any

import logfire

# Cheap argon2 parameters and a fixed signing key for every test
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__SESSION_SECRET", "test-session-secret-0123456789abcdef")
os.environ.setdefault("AUTH__PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("AUTH__PASSWORD_HASH_MEMORY_COST", "1024")
os.environ.setdefault("AUTH__PASSWORD_HASH_PARALLELISM", "1")

logfire.configure(send_to_logfire=False, console=False)

from splitbill.config import AuthSettings  # noqa: E402
from splitbill.domain.model import User  # noqa: E402
from splitbill.domain.value import new_user_id  # noqa: E402


def fast_auth_settings(**overrides: Any) -> AuthSettings:
    """Auth settings with test-speed argon2 parameters."""
    values = {
        "session_secret": "test-session-secret-0123456789abcdef",
        "password_hash_time_cost": 1,
        "password_hash_memory_cost": 1024,
        "password_hash_parallelism": 1,
    }
    values.update(overrides)
    return AuthSettings(**values)


def make_user(**overrides: Any) -> User:
    """Build a user with sensible defaults for tests."""
    values: dict[str, Any] = {
        "id": new_user_id(),
        "display_name": "Ann",
        "email": "ann@x.com",
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return User(**values)

"""Mappers for converting between users-file records and domain models."""

from datetime import datetime, timezone

import logfire

from splitbill.domain.model import User
from splitbill.domain.value import UserId
from splitbill.persistence.records import UserRecord

# Prefix shared by every modular-crypt hash (argon2, bcrypt, ...)
HASH_PREFIX = "$"


def record_to_user(record: UserRecord) -> User:
    """Convert a users-file record to a User domain model.

    A ``password`` value that is not a hash was written by the old
    plaintext client and is discarded; the account then has no local
    password.

    Args:
        record: Parsed record

    Returns:
        User domain model
    """
    password_hash = record.password_hash
    if password_hash and not password_hash.startswith(HASH_PREFIX):
        logfire.warn("Discarding plaintext password from users file", user_id=record.id)
        password_hash = None

    display_name = record.display_name or record.username or record.email.split("@")[0]

    return User(
        id=UserId(record.id),
        display_name=display_name,
        email=record.email,
        username=record.username,
        password_hash=password_hash,
        external_id=record.external_id,
        avatar_url=record.avatar_url,
        created_at=record.created_at or datetime.now(timezone.utc),
        last_login_at=record.last_login_at,
    )


def user_to_record(user: User) -> UserRecord:
    """Convert a User domain model to a users-file record.

    Args:
        user: User domain model

    Returns:
        Record in the canonical shape
    """
    return UserRecord(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        username=user.username,
        password_hash=user.password_hash,
        external_id=user.external_id,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )

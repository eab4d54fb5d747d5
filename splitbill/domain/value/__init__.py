"""Domain value objects."""

from splitbill.domain.value.identifiers import SessionHandle, UserId, new_user_id
from splitbill.domain.value.types import (
    EMAIL_PATTERN,
    USERNAME_PATTERN,
    AuthProvider,
    DelegatedIdentity,
    FieldError,
    PersistenceHint,
    normalize_key,
)

__all__ = [
    # Identifiers
    "UserId",
    "SessionHandle",
    "new_user_id",
    # Types
    "AuthProvider",
    "DelegatedIdentity",
    "FieldError",
    "PersistenceHint",
    "EMAIL_PATTERN",
    "USERNAME_PATTERN",
    "normalize_key",
]

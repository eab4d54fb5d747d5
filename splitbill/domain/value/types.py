"""Domain value objects.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from splitbill.domain.value.common import ValueObject

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def normalize_key(value: str) -> str:
    """Normalize an email or username for case-insensitive comparison."""
    return value.strip().casefold()


class AuthProvider(str, Enum):
    """Supported delegated identity providers."""

    GOOGLE = "google"


class PersistenceHint(str, Enum):
    """How long the client should keep its mirror of the session.

    Only a hint for the UI layer; the server session lifetime is the same
    for both.
    """

    REMEMBER = "remember"
    EPHEMERAL = "ephemeral"

    @classmethod
    def from_remember_me(cls, remember_me: bool) -> "PersistenceHint":
        """Map a remember-me checkbox to a hint."""
        return cls.REMEMBER if remember_me else cls.EPHEMERAL


class FieldError(ValueObject):
    """A single rule violation on an input field."""

    field: str
    message: str
    code: str  # required, length, format, mismatch, terms, taken


class DelegatedIdentity(ValueObject):
    """Profile asserted by a delegated identity provider.

    Generic structure for user info returned from any OAuth provider.
    """

    provider: AuthProvider
    external_id: str  # Permanent subject identifier from the provider
    display_name: str
    email: str
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Providers must assert a usable email, it is the merge key."""
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Delegated identity must include a valid email")
        return v

    @field_validator("external_id")
    @classmethod
    def validate_external_id(cls, v: str) -> str:
        """Validate subject identifier is not empty."""
        if not v.strip():
            raise ValueError("Delegated identity must include a subject identifier")
        return v

"""User aggregate root.

Users sign in with a local password, a delegated identity provider, or both.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from splitbill.domain.model.common import DomainModel
from splitbill.domain.value import UserId, normalize_key


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(DomainModel):
    """User aggregate root.

    ``password_hash`` is absent for accounts created through a delegated
    identity provider; such accounts cannot sign in locally. ``id`` and
    ``created_at`` never change after creation.
    """

    id: UserId
    display_name: str
    email: str
    username: Optional[str] = None
    password_hash: Optional[str] = None
    external_id: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    last_login_at: Optional[datetime] = None

    @property
    def has_local_password(self) -> bool:
        """Whether the account can authenticate with a password."""
        return bool(self.password_hash)

    def matches_email(self, email: str) -> bool:
        """Case-insensitive email comparison."""
        return normalize_key(self.email) == normalize_key(email)

    def matches_username(self, username: str) -> bool:
        """Case-insensitive username comparison."""
        return self.username is not None and normalize_key(
            self.username
        ) == normalize_key(username)

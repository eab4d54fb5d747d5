"""Sanitized user representation shared by all responses."""

from datetime import datetime

from splitbill.application.usecase.base import CamelModel
from splitbill.domain.model import User


class UserView(CamelModel):
    """User as shown to clients.

    Built field by field from the domain model, so secret fields can
    never leak into a response.
    """

    id: str
    display_name: str
    email: str
    username: str | None = None
    avatar_url: str | None = None
    has_local_password: bool
    created_at: datetime
    last_login_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        """Build the view of a user."""
        return cls(
            id=user.id,
            display_name=user.display_name,
            email=user.email,
            username=user.username,
            avatar_url=user.avatar_url,
            has_local_password=user.has_local_password,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )

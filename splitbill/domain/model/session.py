"""Authenticated session entity."""

from datetime import datetime

from splitbill.domain.model.common import DomainModel
from splitbill.domain.value import PersistenceHint, SessionHandle, UserId


class Session(DomainModel):
    """Server-side session record, keyed by an unguessable handle.

    Expiry is fixed at creation and never slides.
    """

    handle: SessionHandle
    user_id: UserId
    persistence: PersistenceHint
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Whether the session has passed its expiry."""
        return now >= self.expires_at

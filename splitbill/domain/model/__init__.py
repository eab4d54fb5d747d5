"""Domain model entities."""

from splitbill.domain.model.session import Session
from splitbill.domain.model.user import User

__all__ = [
    "User",
    "Session",
]

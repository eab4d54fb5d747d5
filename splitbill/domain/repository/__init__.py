"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from splitbill.domain.repository.session import SessionRepository
from splitbill.domain.repository.user import UserRepository

__all__ = [
    "UserRepository",
    "SessionRepository",
]

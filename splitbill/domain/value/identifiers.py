"""Strongly typed identifiers for domain entities.

Identifiers are opaque strings so the store never relies on numeric
ordering or width.
"""

from typing import NewType
from uuid import uuid4

UserId = NewType("UserId", str)
SessionHandle = NewType("SessionHandle", str)


def new_user_id() -> UserId:
    """Generate a fresh user identifier."""
    return UserId(uuid4().hex)

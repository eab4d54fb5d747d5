"""User use cases."""

from .list_users import ListUsersUseCase

__all__ = ["ListUsersUseCase"]

"""Repository implementations."""

from .user import JsonFileUserRepository

__all__ = [
    "JsonFileUserRepository",
]

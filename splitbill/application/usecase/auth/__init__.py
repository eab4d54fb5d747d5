"""Authentication use cases."""

from .delegated_login import DelegatedLoginUseCase
from .get_session import GetSessionUseCase
from .register import RegisterUseCase
from .sign_in import SignInUseCase
from .sign_out import SignOutUseCase

__all__ = [
    "DelegatedLoginUseCase",
    "GetSessionUseCase",
    "RegisterUseCase",
    "SignInUseCase",
    "SignOutUseCase",
]

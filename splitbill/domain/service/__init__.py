"""Domain services."""

from .auth_service import AuthService, OAuthClient
from .base import Clock, Service, utcnow
from .identity_service import IdentityReconciler
from .password_service import PasswordService
from .session_service import IssuedSession, SessionManager
from .user_service import UserService
from .validation_service import RegistrationForm, RegistrationValidator

__all__ = [
    "AuthService",
    "Clock",
    "IdentityReconciler",
    "IssuedSession",
    "OAuthClient",
    "PasswordService",
    "RegistrationForm",
    "RegistrationValidator",
    "Service",
    "SessionManager",
    "UserService",
    "utcnow",
]

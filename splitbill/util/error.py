"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Configuration error."""

    pass


class SessionTokenError(UtilError):
    """Session cookie token is missing, tampered with, or expired."""

    pass

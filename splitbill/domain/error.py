"""Domain layer errors."""

from splitbill.domain.value.types import FieldError

INVALID_CREDENTIALS = "Invalid credentials"


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """User input violates one or more field rules.

    All violations are reported together.
    """

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        super().__init__("; ".join(error.message for error in errors))


class ConflictError(DomainError):
    """An account already uses the given email or username."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class AuthenticationError(DomainError):
    """Sign-in failed.

    The message is always the same so callers cannot tell an unknown
    identifier from a wrong password or a delegated-only account.
    """

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class StoreError(DomainError):
    """The user store could not be written."""

    pass


class DelegatedIdentityUnavailableError(DomainError):
    """Delegated sign-in was requested for a provider that is not configured."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Sign-in with {provider} is not available")

"""Registration and sign-in input rules."""

from collections.abc import Sequence
from typing import Optional

from splitbill.domain.model.user import User
from splitbill.domain.value import EMAIL_PATTERN, USERNAME_PATTERN, FieldError
from splitbill.domain.value.common import ValueObject

from .base import Service

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 60
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30


class RegistrationForm(ValueObject):
    """Fields submitted to create a local account.

    ``username`` is only set by clients that sign in by username.
    ``confirm`` is only checked when the client collects it.
    """

    display_name: str
    email: str
    password: str
    confirm: Optional[str] = None
    agree_to_terms: bool = False
    username: Optional[str] = None


class RegistrationValidator(Service):
    """Field-level rules applied before any account is stored.

    Every rule is checked independently and all violations are returned
    together.
    """

    def __init__(self, password_min_length: int) -> None:
        """Initialize validator.

        Args:
            password_min_length: Minimum password length for every client
        """
        self.password_min_length = password_min_length

    def validate_registration(
        self, form: RegistrationForm, users: Sequence[User]
    ) -> list[FieldError]:
        """Check a registration form against the field rules and the store.

        Args:
            form: Submitted registration fields
            users: Current store contents, for uniqueness checks

        Returns:
            Every violation found (empty when the form is acceptable)
        """
        errors: list[FieldError] = []
        errors.extend(self._check_name(form.display_name))
        if form.username is not None:
            errors.extend(self._check_username(form.username))
        errors.extend(self._check_email(form.email))
        errors.extend(self._check_password(form.password))
        if form.confirm is not None:
            errors.extend(self._check_confirm(form.password, form.confirm))
        if not form.agree_to_terms:
            errors.append(
                FieldError(
                    field="agreeToTerms",
                    message="You must agree to the Terms of Service and Privacy Policy",
                    code="terms",
                )
            )

        # Uniqueness only means something for well-formed values
        failed = {error.field for error in errors}
        errors.extend(
            error
            for error in self.find_conflicts(form, users)
            if error.field not in failed
        )
        return errors

    def find_conflicts(
        self, form: RegistrationForm, users: Sequence[User]
    ) -> list[FieldError]:
        """Find existing accounts that already use the form's email or username.

        Args:
            form: Submitted registration fields
            users: Current store contents

        Returns:
            One ``taken`` error per conflicting field
        """
        conflicts: list[FieldError] = []
        username = (form.username or "").strip()
        if username and any(user.matches_username(username) for user in users):
            conflicts.append(
                FieldError(
                    field="username",
                    message="Username already exists. Please choose another one.",
                    code="taken",
                )
            )
        email = form.email.strip()
        if email and any(user.matches_email(email) for user in users):
            conflicts.append(
                FieldError(
                    field="email", message="Email already registered", code="taken"
                )
            )
        return conflicts

    def validate_sign_in(self, identifier: str, password: str) -> list[FieldError]:
        """Check that sign-in fields are present.

        Credentials themselves are checked by ``UserService.authenticate``.

        Args:
            identifier: Email or username
            password: Plaintext password

        Returns:
            Missing-field violations
        """
        errors: list[FieldError] = []
        if not identifier.strip():
            errors.append(
                FieldError(
                    field="identifier",
                    message="Email or username is required",
                    code="required",
                )
            )
        if not password:
            errors.append(
                FieldError(
                    field="password", message="Password is required", code="required"
                )
            )
        return errors

    def _check_name(self, name: str) -> list[FieldError]:
        name = name.strip()
        if not name:
            return [FieldError(field="name", message="Name is required", code="required")]
        if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            return [
                FieldError(
                    field="name",
                    message=f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
                    code="length",
                )
            ]
        return []

    def _check_username(self, username: str) -> list[FieldError]:
        username = username.strip()
        if not username:
            return [
                FieldError(
                    field="username", message="Username is required", code="required"
                )
            ]
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            return [
                FieldError(
                    field="username",
                    message=f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters",
                    code="length",
                )
            ]
        if not USERNAME_PATTERN.match(username):
            return [
                FieldError(
                    field="username",
                    message="Username can only contain letters, numbers, and underscores",
                    code="format",
                )
            ]
        return []

    def _check_email(self, email: str) -> list[FieldError]:
        email = email.strip()
        if not email:
            return [FieldError(field="email", message="Email is required", code="required")]
        if not EMAIL_PATTERN.match(email):
            return [
                FieldError(
                    field="email",
                    message="Please enter a valid email address",
                    code="format",
                )
            ]
        return []

    def _check_password(self, password: str) -> list[FieldError]:
        if not password:
            return [
                FieldError(
                    field="password", message="Password is required", code="required"
                )
            ]
        if len(password) < self.password_min_length:
            return [
                FieldError(
                    field="password",
                    message=f"Password must be at least {self.password_min_length} characters long",
                    code="length",
                )
            ]
        return []

    def _check_confirm(self, password: str, confirm: str) -> list[FieldError]:
        if not confirm:
            return [
                FieldError(
                    field="confirm",
                    message="Please confirm your password",
                    code="required",
                )
            ]
        if confirm != password:
            return [
                FieldError(field="confirm", message="Passwords do not match", code="mismatch")
            ]
        return []

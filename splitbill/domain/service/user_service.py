"""User domain service."""

from collections.abc import Sequence
from typing import NoReturn, Optional

import logfire

from splitbill.domain.error import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from splitbill.domain.model import User
from splitbill.domain.repository import UserRepository
from splitbill.domain.value import FieldError, UserId, new_user_id

from .base import Clock, Service, utcnow
from .password_service import PasswordService
from .validation_service import RegistrationForm, RegistrationValidator


def find_by_id(users: Sequence[User], user_id: UserId) -> Optional[User]:
    """Find a user by id in a loaded collection."""
    return next((user for user in users if user.id == user_id), None)


def find_by_email(users: Sequence[User], email: str) -> Optional[User]:
    """Find a user by email (case-insensitive) in a loaded collection."""
    return next((user for user in users if user.matches_email(email)), None)


def find_by_identifier(users: Sequence[User], identifier: str) -> Optional[User]:
    """Find a user by email or username (case-insensitive).

    Email matches win over username matches.
    """
    return find_by_email(users, identifier) or next(
        (user for user in users if user.matches_username(identifier)), None
    )


class UserService(Service):
    """Domain service for local accounts: registration, sign-in, lookup."""

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordService,
        validator: RegistrationValidator,
        clock: Clock = utcnow,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            password_service: Password hashing service
            validator: Registration and sign-in rules
            clock: Source of the current time
        """
        self.user_repository = user_repository
        self.password_service = password_service
        self.validator = validator
        self.clock = clock

    async def list_users(self) -> list[User]:
        """Get every user in store order.

        Returns:
            All users
        """
        with logfire.span("user_service.list_users"):
            users = await self.user_repository.load_all()
            logfire.info("Users listed", count=len(users))
            return users

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=user_id):
            user = find_by_id(await self.user_repository.load_all(), user_id)
            if not user:
                logfire.warn("User not found", user_id=user_id)
                raise NotFoundError("User", user_id)
            return user

    async def register(self, form: RegistrationForm) -> User:
        """Create a local account with a hashed password.

        Args:
            form: Submitted registration fields

        Returns:
            The stored user

        Raises:
            ValidationError: If any field rule is violated
            ConflictError: If the email or username is already in use
            StoreError: If the store could not be written
        """
        with logfire.span("user_service.register"):
            errors = self.validator.validate_registration(
                form, await self.user_repository.load_all()
            )
            if errors:
                self._raise_rejection(errors)

            password_hash = await self.password_service.hash_password(form.password)

            async with self.user_repository.exclusive():
                users = await self.user_repository.load_all()
                # The store may have changed while the password was hashing
                conflicts = self.validator.find_conflicts(form, users)
                if conflicts:
                    self._raise_rejection(conflicts)

                user = User(
                    id=new_user_id(),
                    display_name=form.display_name.strip(),
                    email=form.email.strip(),
                    username=form.username.strip() if form.username else None,
                    password_hash=password_hash,
                    created_at=self.clock(),
                    last_login_at=None,
                )
                await self.user_repository.save_all([*users, user])

            logfire.info("User registered", user_id=user.id)
            return user

    async def authenticate(self, identifier: str, password: str) -> User:
        """Check local credentials and record the login.

        Args:
            identifier: Email or username
            password: Plaintext password

        Returns:
            The user with ``last_login_at`` refreshed

        Raises:
            ValidationError: If a field is missing
            AuthenticationError: For an unknown identifier, an account
                without a local password, or a wrong password (one
                indistinguishable error for all three)
            StoreError: If the login timestamp could not be written
        """
        errors = self.validator.validate_sign_in(identifier, password)
        if errors:
            raise ValidationError(errors)

        with logfire.span("user_service.authenticate"):
            user = find_by_identifier(
                await self.user_repository.load_all(), identifier.strip()
            )

            if user is None:
                await self.password_service.burn_verification(password)
                self._reject("unknown_identifier")
            if not user.has_local_password:
                await self.password_service.burn_verification(password)
                self._reject("no_local_password", user.id)
            if not await self.password_service.verify_password(
                password, user.password_hash
            ):
                self._reject("password_mismatch", user.id)

            upgraded_hash = None
            if self.password_service.needs_rehash(user.password_hash):
                upgraded_hash = await self.password_service.hash_password(password)

            updated = await self.record_login(user.id, password_hash=upgraded_hash)
            logfire.info("User signed in", user_id=updated.id)
            return updated

    async def record_login(
        self, user_id: UserId, password_hash: Optional[str] = None
    ) -> User:
        """Set ``last_login_at`` to now for one user.

        Args:
            user_id: User ID
            password_hash: Replacement hash for an upgraded password, if any

        Returns:
            The updated user

        Raises:
            NotFoundError: If the user disappeared from the store
            StoreError: If the store could not be written
        """
        changes: dict = {"last_login_at": self.clock()}
        if password_hash:
            changes["password_hash"] = password_hash

        async with self.user_repository.exclusive():
            users = await self.user_repository.load_all()
            for index, user in enumerate(users):
                if user.id == user_id:
                    updated = user.model_copy(update=changes)
                    users[index] = updated
                    await self.user_repository.save_all(users)
                    if password_hash:
                        logfire.info("Password hash upgraded", user_id=user_id)
                    return updated
        raise NotFoundError("User", user_id)

    def _reject(self, reason: str, user_id: UserId | None = None) -> NoReturn:
        logfire.warn("Sign-in rejected", reason=reason, user_id=user_id)
        raise AuthenticationError()

    def _raise_rejection(self, errors: list[FieldError]) -> NoReturn:
        if all(error.code == "taken" for error in errors):
            logfire.info("Registration conflict", fields=[e.field for e in errors])
            raise ConflictError(errors[0].field, errors[0].message)
        raise ValidationError(errors)

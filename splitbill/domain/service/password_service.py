"""Password hashing domain service."""

import asyncio

import bcrypt
import logfire
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from splitbill.config import AuthSettings

from .base import Service

# Hashes written by the previous server (bcrypt, any revision)
LEGACY_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_legacy_hash(password_hash: str) -> bool:
    """Whether a stored hash predates argon2 and must be upgraded."""
    return password_hash.startswith(LEGACY_BCRYPT_PREFIXES)


class PasswordService(Service):
    """One-way password transform and verifier.

    New hashes are argon2id. bcrypt hashes left by the previous server
    still verify so those accounts can sign in and be upgraded. Hashing
    and verification are CPU-bound and run in a worker thread.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize password service.

        Args:
            auth_settings: Authentication settings (argon2 cost parameters)
        """
        self._hasher = PasswordHasher(
            time_cost=auth_settings.password_hash_time_cost,
            memory_cost=auth_settings.password_hash_memory_cost,
            parallelism=auth_settings.password_hash_parallelism,
        )
        self._dummy_hash: str | None = None

    async def hash_password(self, plain: str) -> str:
        """Hash a plaintext password with a fresh salt.

        Args:
            plain: Plaintext password

        Returns:
            Encoded hash (includes algorithm, parameters and salt)

        Raises:
            ValueError: If the password is empty
        """
        if not plain:
            raise ValueError("Cannot hash an empty password")
        with logfire.span("password_service.hash_password"):
            return await asyncio.to_thread(self._hasher.hash, plain)

    async def verify_password(self, plain: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash.

        Args:
            plain: Plaintext password
            password_hash: Stored hash

        Returns:
            True if the password matches, False otherwise (including
            malformed or foreign hash formats)
        """
        if not plain or not password_hash:
            return False
        with logfire.span("password_service.verify_password"):
            return await asyncio.to_thread(self._verify, password_hash, plain)

    def needs_rehash(self, password_hash: str) -> bool:
        """Whether a verified hash should be replaced with a fresh argon2id one.

        True for legacy bcrypt hashes and for argon2 hashes made with other
        cost parameters than the current settings.

        Args:
            password_hash: Stored hash that just verified

        Returns:
            True if the hash should be upgraded
        """
        if is_legacy_hash(password_hash):
            return True
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return False

    async def burn_verification(self, plain: str) -> None:
        """Spend the time of one verification without a real account.

        Keeps failed sign-ins for unknown or password-less accounts from
        answering faster than a wrong password does.

        Args:
            plain: Plaintext password from the request
        """
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(
                self._hasher.hash, "splitbill-timing-equalizer"
            )
        await asyncio.to_thread(self._verify, self._dummy_hash, plain or "-")

    def _verify(self, password_hash: str, plain: str) -> bool:
        if is_legacy_hash(password_hash):
            return self._verify_bcrypt(password_hash, plain)
        try:
            return self._hasher.verify(password_hash, plain)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError):
            logfire.warn("Stored password hash is not a supported hash format")
            return False

    @staticmethod
    def _verify_bcrypt(password_hash: str, plain: str) -> bool:
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), password_hash.encode("ascii"))
        except ValueError:
            # Malformed hash, or a password bcrypt cannot take (over 72 bytes)
            logfire.warn("Stored bcrypt hash could not be checked")
            return False

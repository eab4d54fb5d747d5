"""JSON flat-file implementation of User repository."""

import asyncio
import os
import tempfile
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from pathlib import Path

import logfire
from pydantic import ValidationError

from splitbill.domain.error import StoreError
from splitbill.domain.model import User
from splitbill.domain.repository import UserRepository
from splitbill.persistence.mappers import record_to_user, user_to_record
from splitbill.persistence.records import USERS_FILE

EMPTY_STORE = b"[]\n"


class JsonFileUserRepository(UserRepository):
    """Users kept as one JSON array in a single file.

    Every save rewrites the whole file through a temporary file in the
    same directory and an atomic rename, so a reader sees either the old
    or the new contents, never a truncated file. File I/O runs in worker
    threads.
    """

    def __init__(self, path: Path) -> None:
        """Initialize repository with the users file location.

        Args:
            path: Path of the users JSON file
        """
        self.path = path
        self._lock = asyncio.Lock()

    def exclusive(self) -> AbstractAsyncContextManager[None]:
        """Hold the single-writer lock for one load-modify-save cycle."""
        return self._lock

    async def initialize(self) -> None:
        """Create an empty store if the file does not exist yet."""
        await asyncio.to_thread(self._initialize)

    async def load_all(self) -> list[User]:
        """Load every user record, resetting an unreadable store to empty.

        Returns:
            All users in file order
        """
        with logfire.span("json_user_repository.load_all"):
            return await asyncio.to_thread(self._load)

    async def save_all(self, users: Sequence[User]) -> None:
        """Replace the file contents with the given users.

        Args:
            users: The complete new collection

        Raises:
            StoreError: If the file could not be written
        """
        with logfire.span("json_user_repository.save_all", count=len(users)):
            payload = USERS_FILE.dump_json(
                [user_to_record(user) for user in users],
                by_alias=True,
                exclude_none=True,
                indent=2,
            )
            try:
                await asyncio.to_thread(self._write, payload)
            except OSError as e:
                logfire.error("Users file write failed", path=str(self.path), error=str(e))
                raise StoreError("Failed to save user data") from e

    def _initialize(self) -> None:
        if self.path.exists():
            return
        try:
            self._write(EMPTY_STORE)
            logfire.info("Users file created", path=str(self.path))
        except OSError as e:
            logfire.error("Users file could not be created", path=str(self.path), error=str(e))

    def _load(self) -> list[User]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            self._initialize()
            return []
        except OSError as e:
            logfire.error("Users file unreadable", path=str(self.path), error=str(e))
            self._reset()
            return []

        if not raw.strip():
            return []

        try:
            records = USERS_FILE.validate_json(raw)
        except ValidationError as e:
            logfire.error(
                "Users file corrupt",
                path=str(self.path),
                error_count=e.error_count(),
            )
            self._reset()
            return []

        return [record_to_user(record) for record in records]

    def _reset(self) -> None:
        """Move the bad file aside and start over with an empty store."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, backup)
            logfire.warn("Users file moved aside", backup=str(backup))
        except OSError as e:
            logfire.error("Users file could not be moved aside", error=str(e))
        try:
            self._write(EMPTY_STORE)
        except OSError as e:
            logfire.error("Users file could not be reset", error=str(e))

    def _write(self, payload: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

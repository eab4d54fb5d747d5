"""User repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager

from splitbill.domain.model.user import User


class UserRepository(ABC):
    """Repository for the User aggregate.

    The store is one collection that is loaded and saved whole; there is
    no partial-record update. Every change is load, compute, save, run
    inside ``exclusive()`` so concurrent changes cannot overwrite each
    other.
    """

    @abstractmethod
    def exclusive(self) -> AbstractAsyncContextManager[None]:
        """Hold the store's single-writer lock for one load-modify-save cycle.

        Returns:
            Async context manager; not reentrant
        """
        pass

    @abstractmethod
    async def load_all(self) -> list[User]:
        """Load every user record.

        Never raises: unreadable or corrupt storage is reset to an empty
        store and logged.

        Returns:
            All users in store order (copies, safe to modify)
        """
        pass

    @abstractmethod
    async def save_all(self, users: Sequence[User]) -> None:
        """Replace the whole collection.

        A failed write leaves the previous contents intact.

        Args:
            users: The complete new collection

        Raises:
            StoreError: If the collection could not be written
        """
        pass

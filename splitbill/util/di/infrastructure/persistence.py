"""Persistence infrastructure providers."""

from dishka import Scope, provide

from splitbill.config import Settings
from splitbill.domain.repository import SessionRepository, UserRepository
from splitbill.persistence.repository import JsonFileUserRepository
from splitbill.persistence.repository.inmemory import InMemorySessionRepository
from splitbill.util.di.base import ProviderBase


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using the JSON users file.

    Both repositories are APP-scoped: the users file lock and the session
    table must be shared by every request.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_user_repository(self, settings: Settings) -> UserRepository:
        """Provide the users file repository, creating the file if absent."""
        repository = JsonFileUserRepository(settings.store.path)
        await repository.initialize()
        return repository

    @provide(scope=Scope.APP)
    def get_session_repository(self) -> SessionRepository:
        """Provide process-local session repository."""
        return InMemorySessionRepository()

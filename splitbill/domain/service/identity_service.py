"""Delegated identity reconciliation domain service."""

import logfire

from splitbill.domain.model import User
from splitbill.domain.repository import UserRepository
from splitbill.domain.value import DelegatedIdentity, new_user_id

from .base import Clock, Service, utcnow


class IdentityReconciler(Service):
    """Merges delegated identity assertions into the user store by email.

    Replaying the same assertion only refreshes profile fields and the
    login timestamp; it never creates a second record for an email.
    """

    def __init__(self, user_repository: UserRepository, clock: Clock = utcnow) -> None:
        """Initialize identity reconciler.

        Args:
            user_repository: User repository
            clock: Source of the current time
        """
        self.user_repository = user_repository
        self.clock = clock

    async def reconcile(self, identity: DelegatedIdentity) -> User:
        """Create or update the user that owns the asserted email.

        An existing record keeps its id, creation time, username and any
        local password; display name, avatar and external id follow the
        latest assertion.

        Args:
            identity: Profile asserted by the provider

        Returns:
            The stored user

        Raises:
            StoreError: If the store could not be written
        """
        with logfire.span(
            "identity_reconciler.reconcile",
            provider=identity.provider.value,
            external_id=identity.external_id,
        ):
            async with self.user_repository.exclusive():
                users = await self.user_repository.load_all()
                now = self.clock()

                for index, existing in enumerate(users):
                    if existing.matches_email(identity.email):
                        user = existing.model_copy(
                            update={
                                "display_name": identity.display_name,
                                "avatar_url": identity.avatar_url,
                                "external_id": identity.external_id,
                                "last_login_at": now,
                            }
                        )
                        users[index] = user
                        await self.user_repository.save_all(users)
                        logfire.info(
                            "Delegated identity merged into existing user",
                            user_id=user.id,
                            had_local_password=user.has_local_password,
                        )
                        return user

                user = User(
                    id=new_user_id(),
                    display_name=identity.display_name,
                    email=identity.email,
                    external_id=identity.external_id,
                    avatar_url=identity.avatar_url,
                    created_at=now,
                    last_login_at=now,
                )
                await self.user_repository.save_all([*users, user])
                logfire.info("User created from delegated identity", user_id=user.id)
                return user

"""Domain layer DI providers."""

from dishka import Scope, provide

from splitbill.config import AuthSettings
from splitbill.domain.repository import SessionRepository, UserRepository
from splitbill.domain.service import (
    AuthService,
    IdentityReconciler,
    OAuthClient,
    PasswordService,
    RegistrationValidator,
    SessionManager,
    UserService,
)
from splitbill.domain.value import AuthProvider
from splitbill.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services are REQUEST-scoped; the repositories they wrap are shared.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_password_service(self, auth_settings: AuthSettings) -> PasswordService:
        """Provide password hashing service (shared, caches its dummy hash)."""
        return PasswordService(auth_settings=auth_settings)

    @provide
    def get_registration_validator(
        self, auth_settings: AuthSettings
    ) -> RegistrationValidator:
        """Provide registration and sign-in rules."""
        return RegistrationValidator(
            password_min_length=auth_settings.password_min_length
        )

    @provide
    def get_auth_service(
        self, oauth_clients: dict[AuthProvider, OAuthClient]
    ) -> AuthService:
        """Provide delegated authentication service.

        Args:
            oauth_clients: Enabled providers and their OAuth clients

        Returns:
            AuthService configured with the enabled OAuth clients
        """
        return AuthService(oauth_clients=oauth_clients)

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        password_service: PasswordService,
        validator: RegistrationValidator,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            password_service=password_service,
            validator=validator,
        )

    @provide
    def get_identity_reconciler(
        self, user_repository: UserRepository
    ) -> IdentityReconciler:
        """Provide delegated identity reconciler."""
        return IdentityReconciler(user_repository=user_repository)

    @provide
    def get_session_manager(
        self, session_repository: SessionRepository, auth_settings: AuthSettings
    ) -> SessionManager:
        """Provide session manager."""
        return SessionManager(
            session_repository=session_repository, auth_settings=auth_settings
        )

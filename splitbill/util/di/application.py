"""Application layer DI providers."""

from dishka import Scope, provide

from splitbill.application.usecase.auth import (
    DelegatedLoginUseCase,
    GetSessionUseCase,
    RegisterUseCase,
    SignInUseCase,
    SignOutUseCase,
)
from splitbill.application.usecase.user import ListUsersUseCase
from splitbill.config import Settings
from splitbill.domain.service import (
    AuthService,
    IdentityReconciler,
    SessionManager,
    UserService,
)
from splitbill.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_register_use_case(self, user_service: UserService) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_sign_in_use_case(
        self, user_service: UserService, session_manager: SessionManager
    ) -> SignInUseCase:
        """Provide sign-in use case."""
        return SignInUseCase(
            user_service=user_service, session_manager=session_manager
        )

    @provide(scope=Scope.REQUEST)
    def get_delegated_login_use_case(
        self,
        auth_service: AuthService,
        identity_reconciler: IdentityReconciler,
        session_manager: SessionManager,
    ) -> DelegatedLoginUseCase:
        """Provide delegated login use case."""
        return DelegatedLoginUseCase(
            auth_service=auth_service,
            identity_reconciler=identity_reconciler,
            session_manager=session_manager,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_session_use_case(
        self, session_manager: SessionManager, user_service: UserService
    ) -> GetSessionUseCase:
        """Provide session check use case."""
        return GetSessionUseCase(
            session_manager=session_manager, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_sign_out_use_case(
        self, session_manager: SessionManager, settings: Settings
    ) -> SignOutUseCase:
        """Provide sign-out use case."""
        return SignOutUseCase(session_manager=session_manager, settings=settings)

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_list_users_use_case(self, user_service: UserService) -> ListUsersUseCase:
        """Provide list users use case."""
        return ListUsersUseCase(user_service=user_service)

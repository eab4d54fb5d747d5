"""Delegated (OAuth) login use case."""

from datetime import datetime
from typing import Optional

import logfire
from pydantic import BaseModel

from splitbill.application.usecase.base import BaseUseCase
from splitbill.application.usecase.view import UserView
from splitbill.domain.service import AuthService, IdentityReconciler, SessionManager
from splitbill.domain.value import AuthProvider, PersistenceHint


class DelegatedLoginRequest(BaseModel):
    """Login request from OAuth callback."""

    provider: AuthProvider
    code: str  # OAuth authorization code
    state: str  # One-time state issued when the flow started


class DelegatedLoginResponse(BaseModel):
    """Reconciled user and the session established for them."""

    user: UserView
    token: str
    persistence: PersistenceHint
    expires_at: datetime


class DelegatedLoginUseCase(BaseUseCase):
    """Use case for signing in through a delegated identity provider."""

    def __init__(
        self,
        auth_service: AuthService,
        identity_reconciler: IdentityReconciler,
        session_manager: SessionManager,
    ) -> None:
        """Initialize delegated login use case.

        Args:
            auth_service: Delegated authentication service
            identity_reconciler: Merges the asserted profile into the store
            session_manager: Session manager
        """
        self.auth_service = auth_service
        self.identity_reconciler = identity_reconciler
        self.session_manager = session_manager

    async def execute(
        self, request: DelegatedLoginRequest, replaced_token: Optional[str] = None
    ) -> DelegatedLoginResponse:
        """Execute delegated login flow.

        Steps:
        1. Complete OAuth flow with the provider and get the profile
        2. Merge the profile into the store by email
        3. End the session named by ``replaced_token``, if any
        4. Open a remembered session

        Raises:
            DelegatedIdentityUnavailableError: If the provider is not enabled
            ProviderError: If the OAuth exchange fails
            StoreError: If the users file could not be written
        """
        identity = await self.auth_service.complete_login(
            request.provider, request.code, request.state
        )
        user = await self.identity_reconciler.reconcile(identity)
        await self.session_manager.destroy(replaced_token)

        # Browser redirects carry no remember-me choice
        issued = await self.session_manager.create(user, PersistenceHint.REMEMBER)

        logfire.info(
            "Delegated login completed",
            user_id=user.id,
            provider=request.provider.value,
        )
        return DelegatedLoginResponse(
            user=UserView.from_user(user),
            token=issued.token,
            persistence=issued.session.persistence,
            expires_at=issued.session.expires_at,
        )

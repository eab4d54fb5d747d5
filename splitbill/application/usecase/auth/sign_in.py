"""Local sign-in use case."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from splitbill.application.usecase.base import BaseUseCase, CamelModel
from splitbill.application.usecase.view import UserView
from splitbill.domain.service import SessionManager, UserService
from splitbill.domain.value import PersistenceHint


class SignInRequest(CamelModel):
    """Sign-in form. ``identifier`` is an email or a username."""

    identifier: str = Field(
        "", validation_alias=AliasChoices("identifier", "email", "username")
    )
    password: str = ""
    remember_me: bool = Field(
        False, validation_alias=AliasChoices("rememberMe", "remember", "remember_me")
    )


class SignInResponse(CamelModel):
    """Signed-in user and the session established for them."""

    user: UserView
    token: str
    persistence: PersistenceHint
    expires_at: datetime


class SignInUseCase(BaseUseCase):
    """Use case for signing in with a local password."""

    def __init__(
        self, user_service: UserService, session_manager: SessionManager
    ) -> None:
        """Initialize sign-in use case.

        Args:
            user_service: User domain service
            session_manager: Session manager
        """
        self.user_service = user_service
        self.session_manager = session_manager

    async def execute(
        self, request: SignInRequest, replaced_token: Optional[str] = None
    ) -> SignInResponse:
        """Check credentials and open a session.

        Args:
            request: Sign-in form
            replaced_token: Session cookie already held by the caller; its
                session ends once the credentials are accepted

        Raises:
            ValidationError: If a field is missing
            AuthenticationError: If the credentials are not accepted
            StoreError: If the login time could not be recorded
        """
        user = await self.user_service.authenticate(
            request.identifier, request.password
        )
        await self.session_manager.destroy(replaced_token)
        issued = await self.session_manager.create(
            user, PersistenceHint.from_remember_me(request.remember_me)
        )
        return SignInResponse(
            user=UserView.from_user(user),
            token=issued.token,
            persistence=issued.session.persistence,
            expires_at=issued.session.expires_at,
        )

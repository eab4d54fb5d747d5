"""Session check use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from splitbill.application.usecase.base import BaseUseCase, CamelModel
from splitbill.application.usecase.view import UserView
from splitbill.domain.error import NotFoundError
from splitbill.domain.service import SessionManager, UserService


class GetSessionRequest(BaseModel):
    """Get session request."""

    token: Optional[str] = None  # Session cookie value


class GetSessionResponse(CamelModel):
    """Authentication status."""

    authenticated: bool
    user: Optional[UserView] = None


class GetSessionUseCase(BaseUseCase):
    """Use case for checking whether the caller holds a valid session."""

    def __init__(
        self, session_manager: SessionManager, user_service: UserService
    ) -> None:
        """Initialize session check use case.

        Args:
            session_manager: Session manager
            user_service: User domain service
        """
        self.session_manager = session_manager
        self.user_service = user_service

    async def execute(self, request: GetSessionRequest) -> GetSessionResponse:
        """Resolve the session and load its user.

        Never raises for a bad or stale session; it is reported as
        unauthenticated.
        """
        session = await self.session_manager.resolve(request.token)
        if session is None:
            return GetSessionResponse(authenticated=False)

        try:
            user = await self.user_service.get_by_id(session.user_id)
        except NotFoundError:
            # Session outlived its user record
            logfire.warn("Session for missing user", user_id=session.user_id)
            await self.session_manager.destroy(request.token)
            return GetSessionResponse(authenticated=False)

        return GetSessionResponse(authenticated=True, user=UserView.from_user(user))

"""Sign-out use case."""

from typing import Optional

from pydantic import BaseModel

from splitbill.application.usecase.base import BaseUseCase
from splitbill.config import Settings
from splitbill.domain.service import SessionManager


class SignOutRequest(BaseModel):
    """Sign-out request."""

    token: Optional[str] = None  # Session cookie value


class SignOutResponse(BaseModel):
    """Sign-out result."""

    success: bool
    redirect: str


class SignOutUseCase(BaseUseCase):
    """Use case for ending a session. Idempotent."""

    def __init__(self, session_manager: SessionManager, settings: Settings) -> None:
        """Initialize sign-out use case.

        Args:
            session_manager: Session manager
            settings: Application settings
        """
        self.session_manager = session_manager
        self.settings = settings

    async def execute(self, request: SignOutRequest) -> SignOutResponse:
        """Destroy the session, if any, and return where to go next."""
        await self.session_manager.destroy(request.token)
        return SignOutResponse(
            success=True, redirect=self.settings.auth.post_logout_redirect
        )

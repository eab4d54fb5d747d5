"""List users use case."""

from pydantic import BaseModel

from splitbill.application.usecase.base import BaseUseCase
from splitbill.application.usecase.view import UserView
from splitbill.domain.service import UserService


class ListUsersResponse(BaseModel):
    """List users response."""

    users: list[UserView]


class ListUsersUseCase(BaseUseCase):
    """Use case for listing every account (sanitized)."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize list users use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: None = None) -> ListUsersResponse:
        """List users in store order."""
        users = await self.user_service.list_users()
        return ListUsersResponse(users=[UserView.from_user(user) for user in users])

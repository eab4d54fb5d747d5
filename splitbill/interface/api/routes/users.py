"""User listing routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from splitbill.application.usecase.user import ListUsersUseCase
from splitbill.application.usecase.view import UserView

router = APIRouter(prefix="/api/users", tags=["users"], route_class=DishkaRoute)


@router.get("", response_model=list[UserView])
async def list_users(
    list_users_use_case: FromDishka[ListUsersUseCase],
) -> list[UserView]:
    """List every account without secret fields.

    Example:
        GET /api/users

        Response:
        [
            {
                "id": "5f0c...",
                "displayName": "Ann",
                "email": "ann@x.com",
                "hasLocalPassword": true,
                "createdAt": "2025-01-15T12:34:56Z",
                ...
            }
        ]
    """
    response = await list_users_use_case.execute()
    return response.users

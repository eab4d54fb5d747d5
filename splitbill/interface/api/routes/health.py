"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from splitbill.config import Settings
from splitbill.domain.service import AuthService
from splitbill.domain.value import AuthProvider

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    google_sign_in: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings], auth_service: FromDishka[AuthService]
) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status and whether Google sign-in is enabled
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        google_sign_in=auth_service.is_available(AuthProvider.GOOGLE),
    )

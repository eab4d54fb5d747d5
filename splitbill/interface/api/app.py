"""FastAPI application."""

from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from splitbill.config import Settings
from splitbill.domain.repository import UserRepository
from splitbill.domain.service.auth_service import OAuthClient
from splitbill.domain.value import AuthProvider
from splitbill.interface.api.errors import register_error_handlers
from splitbill.interface.api.routes import auth, health, users
from splitbill.util.di.container import create_container, setup_di
from splitbill.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, conftest.py does.

    Args:
        container: DI container to use (production container if omitted)
    """
    settings = Settings()
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create the users file and resolve Google credentials up front so
        # configuration problems show in the startup log
        await container.get(UserRepository)
        oauth_clients = await container.get(dict[AuthProvider, OAuthClient])
        logfire.info(
            "Auth gateway started",
            delegated_providers=[provider.value for provider in oauth_clients],
        )
        yield
        await container.close()

    # Instrument httpx for outbound calls to Google
    instrument_httpx()

    app_instance = FastAPI(
        title="Split Bill Auth API",
        description="Registration, sign-in and sessions for the Split Bill calculator",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.base_url,
            "http://localhost:3000",  # Local development
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container)
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(users.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()

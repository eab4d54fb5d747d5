"""Authentication routes.

JSON endpoints live under ``/api/auth``; the browser-facing Google
redirect flow and ``/logout`` keep the paths the web client links to.
"""

import logging
import secrets
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from splitbill.adapter.error import ProviderError
from splitbill.adapter.google import STATE_TTL_SECONDS
from splitbill.application.usecase.auth import (
    DelegatedLoginUseCase,
    GetSessionUseCase,
    RegisterUseCase,
    SignInUseCase,
    SignOutUseCase,
)
from splitbill.application.usecase.auth.delegated_login import DelegatedLoginRequest
from splitbill.application.usecase.auth.get_session import GetSessionRequest
from splitbill.application.usecase.auth.register import RegisterRequest
from splitbill.application.usecase.auth.sign_in import SignInRequest
from splitbill.application.usecase.auth.sign_out import SignOutRequest
from splitbill.config import Settings
from splitbill.domain.error import (
    AuthenticationError,
    ConflictError,
    DelegatedIdentityUnavailableError,
    StoreError,
    ValidationError,
)
from splitbill.domain.service import AuthService
from splitbill.domain.value import AuthProvider, PersistenceHint
from splitbill.interface.api.errors import SERVER_ERROR, error_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"], route_class=DishkaRoute)

GOOGLE_FLOW_PATH = "/auth/google"


def _set_session_cookie(
    response: Response, token: str, persistence: PersistenceHint, settings: Settings
) -> None:
    """Attach the session cookie.

    Remembered sessions survive a browser restart; ephemeral ones are
    browser-session cookies. The server-side lifetime is the same.
    """
    max_age = (
        settings.auth.session_lifetime_seconds
        if persistence == PersistenceHint.REMEMBER
        else None
    )
    response.set_cookie(
        key=settings.auth.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
        max_age=max_age,
    )


def _clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth.session_cookie_name,
        path="/",
        secure=settings.secure_cookies,
        httponly=True,
        samesite="lax",
    )


def _session_token(request: Request, settings: Settings) -> str | None:
    return request.cookies.get(settings.auth.session_cookie_name)


@router.post("/api/auth/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(
    request: RegisterRequest,
    register_use_case: FromDishka[RegisterUseCase],
):
    """Create a local account.

    Example:
        POST /api/auth/signup
        {
            "name": "Ann",
            "email": "ann@x.com",
            "password": "longenough1",
            "confirm": "longenough1",
            "agreeToTerms": true
        }

        201: {"message": "User created successfully", "user": {...}}
        400: {"error": "...", "fields": [{"field": "email", "message": "..."}]}
        409: {"error": "Email already registered"}
    """
    try:
        response = await register_use_case.execute(request)
    except ValidationError as e:
        return error_response(
            status.HTTP_400_BAD_REQUEST, e.errors[0].message, e.errors
        )
    except ConflictError as e:
        return error_response(status.HTTP_409_CONFLICT, str(e))
    except StoreError:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save user data"
        )

    logger.info(f"Account created: user_id={response.user.id}")
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.post("/api/auth/signin")
async def sign_in(
    request: SignInRequest,
    http_request: Request,
    sign_in_use_case: FromDishka[SignInUseCase],
    settings: FromDishka[Settings],
):
    """Sign in with email or username and password.

    Every credential failure gets the same 401 body. A session already
    named by the request cookie is ended when sign-in succeeds.

    Example:
        POST /api/auth/signin
        {"identifier": "ann@x.com", "password": "longenough1", "rememberMe": true}

        200: {"message": "Sign in successful", "user": {...}, "persistence": "remember"}
        401: {"error": "Invalid credentials"}
    """
    try:
        result = await sign_in_use_case.execute(
            request, replaced_token=_session_token(http_request, settings)
        )
    except ValidationError as e:
        return error_response(
            status.HTTP_400_BAD_REQUEST, e.errors[0].message, e.errors
        )
    except AuthenticationError as e:
        return error_response(status.HTTP_401_UNAUTHORIZED, str(e))
    except StoreError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)

    response = JSONResponse(
        content={
            "message": "Sign in successful",
            "user": result.user.model_dump(mode="json", by_alias=True),
            "persistence": result.persistence.value,
        }
    )
    _set_session_cookie(response, result.token, result.persistence, settings)
    return response


@router.get("/api/auth/session")
async def get_session(
    request: Request,
    get_session_use_case: FromDishka[GetSessionUseCase],
    settings: FromDishka[Settings],
):
    """Report whether the caller holds a valid session.

    Example:
        200: {"authenticated": true, "user": {...}}
        401: {"authenticated": false, "message": "Not authenticated"}
    """
    result = await get_session_use_case.execute(
        GetSessionRequest(token=_session_token(request, settings))
    )
    if not result.authenticated:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"authenticated": False, "message": "Not authenticated"},
        )
    return JSONResponse(content=result.model_dump(mode="json", by_alias=True))


@router.post("/api/auth/signout")
async def sign_out(
    request: Request,
    sign_out_use_case: FromDishka[SignOutUseCase],
    settings: FromDishka[Settings],
):
    """End the session (JSON clients).

    Example:
        200: {"success": true, "redirect": "/"}
    """
    result = await sign_out_use_case.execute(
        SignOutRequest(token=_session_token(request, settings))
    )
    response = JSONResponse(content=result.model_dump(mode="json"))
    _clear_session_cookie(response, settings)
    return response


@router.get("/logout")
async def logout(
    request: Request,
    sign_out_use_case: FromDishka[SignOutUseCase],
    settings: FromDishka[Settings],
):
    """End the session and send the browser to the landing page."""
    result = await sign_out_use_case.execute(
        SignOutRequest(token=_session_token(request, settings))
    )
    response = RedirectResponse(url=result.redirect, status_code=status.HTTP_302_FOUND)
    _clear_session_cookie(response, settings)
    return response


@router.get("/auth/google")
async def google_login(
    auth_service: FromDishka[AuthService],
    settings: FromDishka[Settings],
):
    """Start the Google sign-in redirect flow.

    The state is also kept in a short-lived cookie so only the browser
    that started the flow can finish it.

    Returns:
        302 to the Google consent screen, or 503 if Google sign-in is not
        configured
    """
    state = secrets.token_urlsafe(32)
    try:
        auth_url = await auth_service.initiate_login(AuthProvider.GOOGLE, state)
    except DelegatedIdentityUnavailableError as e:
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))

    response = RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.auth.oauth_state_cookie_name,
        value=state,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path=GOOGLE_FLOW_PATH,
        max_age=STATE_TTL_SECONDS,
    )
    return response


@router.get("/auth/google/callback")
async def google_callback(
    request: Request,
    delegated_login_use_case: FromDishka[DelegatedLoginUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    """Finish Google sign-in: reconcile the profile and open a session.

    Every failure redirects to the landing page with an ``error`` query
    parameter instead of showing an error page.

    Example:
        GET /auth/google/callback?code=abc123&state=xyz789
        Cookie: splitbill_oauth_state=xyz789

        Redirects to: /dashboard
        Sets cookie: splitbill_session
    """
    if error or not code or not state:
        logger.warning(f"Google callback without code: error={error}")
        return _login_failed(settings, "access_denied" if error else "auth_failed")

    expected_state = request.cookies.get(settings.auth.oauth_state_cookie_name)
    if not expected_state or not secrets.compare_digest(
        expected_state.encode(), state.encode()
    ):
        logger.warning("Google callback state does not match this browser")
        return _login_failed(settings, "auth_failed")

    try:
        result = await delegated_login_use_case.execute(
            DelegatedLoginRequest(provider=AuthProvider.GOOGLE, code=code, state=state),
            replaced_token=_session_token(request, settings),
        )
    except DelegatedIdentityUnavailableError:
        return _login_failed(settings, "unavailable")
    except ProviderError as e:
        logger.error(f"Google OAuth error during callback: {e}")
        return _login_failed(settings, "auth_failed")
    except StoreError:
        return _login_failed(settings, "server_error")

    logger.info(f"Google login successful for user: {result.user.id}")
    response = RedirectResponse(
        url=settings.auth.post_login_redirect, status_code=status.HTTP_302_FOUND
    )
    _clear_state_cookie(response, settings)
    _set_session_cookie(response, result.token, result.persistence, settings)
    return response


def _login_failed(settings: Settings, reason: str) -> RedirectResponse:
    response = RedirectResponse(
        url=f"{settings.auth.login_error_redirect}?{urlencode({'error': reason})}",
        status_code=status.HTTP_302_FOUND,
    )
    _clear_state_cookie(response, settings)
    return response


def _clear_state_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.auth.oauth_state_cookie_name,
        path=GOOGLE_FLOW_PATH,
        secure=settings.secure_cookies,
        httponly=True,
        samesite="lax",
    )

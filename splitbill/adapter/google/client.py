"""Google OAuth 2.0 / OpenID Connect client implementation."""

import time
from urllib.parse import urlencode

import httpx
import logfire
from pydantic import ValidationError

from splitbill.adapter.error import ProviderError
from splitbill.domain.service.auth_service import OAuthClient
from splitbill.domain.value import AuthProvider, DelegatedIdentity

# Unused authorization requests are forgotten after this many seconds
STATE_TTL_SECONDS = 600


class GoogleOAuthError(ProviderError):
    """Google OAuth error."""

    pass


class GoogleOAuthClient(OAuthClient):
    """Base class for Google OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class PendingStates:
    """One-time ``state`` values of authorization requests in flight."""

    def __init__(self, ttl_seconds: float = STATE_TTL_SECONDS) -> None:
        self.ttl_seconds = ttl_seconds
        self._issued: dict[str, float] = {}

    def add(self, state: str) -> None:
        """Remember a state until it is used or goes stale."""
        now = time.monotonic()
        self._issued = {
            s: t for s, t in self._issued.items() if now - t < self.ttl_seconds
        }
        self._issued[state] = now

    def consume(self, state: str) -> bool:
        """Forget a state, reporting whether it was live."""
        issued_at = self._issued.pop(state, None)
        return issued_at is not None and time.monotonic() - issued_at < self.ttl_seconds


class RealGoogleOAuthClient(GoogleOAuthClient):
    """Google OAuth 2.0 authorization code flow.

    Requests the ``openid email profile`` scopes and reads the profile
    from the OpenID Connect userinfo endpoint.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> None:
        """Initialize Google OAuth client.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            redirect_uri: Callback URL registered with Google
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

        self.authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
        self.token_url = "https://oauth2.googleapis.com/token"
        self.user_info_url = "https://openidconnect.googleapis.com/v1/userinfo"

        # Single process, so in-memory storage is enough
        self._states = PendingStates()

    async def initiate_authorization(self, state: str) -> str:
        """Build the Google consent screen URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        self._states.add(state)

        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }

        logfire.info(
            "Google OAuth authorization initiated", redirect_uri=self.redirect_uri
        )
        return f"{self.authorize_url}?{urlencode(params)}"

    async def complete_authorization(self, code: str, state: str) -> DelegatedIdentity:
        """Exchange the callback code for the user's Google profile.

        Args:
            code: Authorization code from Google callback
            state: State parameter for verification

        Returns:
            Profile asserted by Google

        Raises:
            GoogleOAuthError: If the state is unknown, the exchange fails,
                or the profile lacks a verified email
        """
        if not self._states.consume(state):
            logfire.warn("Google OAuth callback with unknown state")
            raise GoogleOAuthError("Invalid or expired state")

        access_token = await self._exchange_code_for_token(code)
        user_info = await self._get_user_info(access_token)

        if not user_info.get("email_verified", False):
            logfire.warn("Google account email not verified", sub=user_info.get("sub"))
            raise GoogleOAuthError("Google account email is not verified")

        try:
            identity = DelegatedIdentity(
                provider=AuthProvider.GOOGLE,
                external_id=str(user_info.get("sub", "")),
                display_name=user_info.get("name") or user_info.get("email", ""),
                email=user_info.get("email", ""),
                avatar_url=user_info.get("picture"),
            )
        except ValidationError as e:
            logfire.error("Google profile incomplete", error_count=e.error_count())
            raise GoogleOAuthError("Google profile is missing required fields") from e

        logfire.info("Google OAuth completed", external_id=identity.external_id)
        return identity

    async def _exchange_code_for_token(self, code: str) -> str:
        """Exchange authorization code for access token.

        Raises:
            GoogleOAuthError: If token exchange fails
        """
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                    timeout=30.0,
                )

                if response.status_code != 200:
                    logfire.error(
                        "Google token exchange failed",
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise GoogleOAuthError(
                        f"Token exchange failed: {response.status_code}"
                    )

                result = response.json()
                return result["access_token"]

        except httpx.HTTPError as e:
            logfire.error("Google token exchange HTTP error", error=str(e))
            raise GoogleOAuthError(f"HTTP error during token exchange: {e}")
        except (KeyError, ValueError) as e:
            logfire.error("Google token response malformed", error=str(e))
            raise GoogleOAuthError("Malformed token response")

    async def _get_user_info(self, access_token: str) -> dict:
        """Get the OpenID Connect profile.

        Raises:
            GoogleOAuthError: If the request fails
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.user_info_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                    timeout=30.0,
                )

                if response.status_code != 200:
                    logfire.error(
                        "Google user info request failed",
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise GoogleOAuthError(
                        f"User info request failed: {response.status_code}"
                    )

                return response.json()

        except httpx.HTTPError as e:
            logfire.error("Google user info HTTP error", error=str(e))
            raise GoogleOAuthError(f"HTTP error fetching user info: {e}")
        except ValueError as e:
            logfire.error("Google user info malformed", error=str(e))
            raise GoogleOAuthError("Malformed user info response")


class MockGoogleOAuthClient(GoogleOAuthClient):
    """Mock Google OAuth client for testing.

    Enforces one-time states like the real client; the asserted profile
    defaults to a fixed test user and can be replaced per test.
    """

    def __init__(self, identity: DelegatedIdentity | None = None) -> None:
        """Initialize mock client without real OAuth configuration.

        Args:
            identity: Profile to assert on every completed login
        """
        self.identity = identity or DelegatedIdentity(
            provider=AuthProvider.GOOGLE,
            external_id="mockgoogle123",
            display_name="Mock Google User",
            email="mock@gmail.com",
            avatar_url="https://example.com/avatar.jpg",
        )
        self._states = PendingStates()

    async def initiate_authorization(self, state: str) -> str:
        """Return mock authorization URL."""
        self._states.add(state)
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> DelegatedIdentity:
        """Return the configured profile.

        Raises:
            GoogleOAuthError: If the state was not issued by this client
        """
        if not self._states.consume(state):
            raise GoogleOAuthError("Invalid or expired state")
        return self.identity

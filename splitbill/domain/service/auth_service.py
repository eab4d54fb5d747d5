"""Delegated authentication domain service."""

import logfire

from splitbill.domain.error import DelegatedIdentityUnavailableError
from splitbill.domain.value import AuthProvider, DelegatedIdentity

from .base import Service


class OAuthClient:
    """Generic OAuth client interface for all providers."""

    async def initiate_authorization(self, state: str) -> str:
        """Initiate OAuth authorization flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str, state: str) -> DelegatedIdentity:
        """Complete OAuth authorization flow.

        Args:
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Profile asserted by the provider
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service for delegated authentication.

    Only providers whose credentials loaded at startup are registered;
    asking for any other provider fails with
    ``DelegatedIdentityUnavailableError``.
    """

    def __init__(self, oauth_clients: dict[AuthProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Map of enabled provider to OAuth client
        """
        self.oauth_clients = oauth_clients

    def is_available(self, provider: AuthProvider) -> bool:
        """Whether sign-in with a provider is enabled."""
        return provider in self.oauth_clients

    async def initiate_login(self, provider: AuthProvider, state: str) -> str:
        """Initiate OAuth login flow.

        Args:
            provider: Authentication provider to use
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to

        Raises:
            DelegatedIdentityUnavailableError: If provider is not enabled
        """
        return await self._client(provider).initiate_authorization(state)

    async def complete_login(
        self, provider: AuthProvider, code: str, state: str
    ) -> DelegatedIdentity:
        """Complete OAuth login flow.

        Args:
            provider: Authentication provider used
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Profile asserted by the provider

        Raises:
            DelegatedIdentityUnavailableError: If provider is not enabled
        """
        return await self._client(provider).complete_authorization(code, state)

    def _client(self, provider: AuthProvider) -> OAuthClient:
        client = self.oauth_clients.get(provider)
        if not client:
            logfire.warn("Delegated sign-in unavailable", provider=provider.value)
            raise DelegatedIdentityUnavailableError(provider.value)
        return client

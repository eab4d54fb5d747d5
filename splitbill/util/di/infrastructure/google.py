"""Google infrastructure providers."""

from dishka import Scope, provide
import logfire

from splitbill.adapter.google import RealGoogleOAuthClient, load_google_credentials
from splitbill.config import Settings
from splitbill.domain.service.auth_service import OAuthClient
from splitbill.domain.value import AuthProvider
from splitbill.util.di.base import ProviderBase
from splitbill.util.error import ConfigurationError


class GoogleProvider(ProviderBase):
    """Google component base.

    Provides the map of enabled delegated identity providers.
    """

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_oauth_clients(self, settings: Settings) -> dict[AuthProvider, OAuthClient]:
        """Provide enabled OAuth clients by provider.

        Missing or malformed Google credentials leave Google sign-in
        disabled; local accounts are unaffected.

        Returns:
            Dictionary mapping AuthProvider to OAuthClient
        """
        try:
            credentials = load_google_credentials(settings.google)
        except ConfigurationError as e:
            logfire.warn("Google sign-in disabled", reason=str(e))
            return {}

        logfire.info("Google sign-in enabled", callback_url=settings.google.callback_url)
        return {
            AuthProvider.GOOGLE: RealGoogleOAuthClient(
                client_id=credentials.client_id,
                client_secret=credentials.client_secret,
                redirect_uri=settings.google.callback_url,
            )
        }

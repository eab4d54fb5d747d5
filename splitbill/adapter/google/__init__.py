"""Google OAuth adapter."""

from .client import (
    STATE_TTL_SECONDS,
    GoogleOAuthClient,
    GoogleOAuthError,
    MockGoogleOAuthClient,
    RealGoogleOAuthClient,
)
from .credentials import GoogleCredentials, load_google_credentials

__all__ = [
    "STATE_TTL_SECONDS",
    "GoogleCredentials",
    "GoogleOAuthClient",
    "GoogleOAuthError",
    "MockGoogleOAuthClient",
    "RealGoogleOAuthClient",
    "load_google_credentials",
]

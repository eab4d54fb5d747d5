"""Google OAuth client credentials.

Explicit settings win; otherwise the client secret JSON file downloaded
from the Google console is read. Its shape is::

    {"web": {"client_id": "...", "client_secret": "...", ...}}
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from splitbill.config import GoogleOAuthSettings
from splitbill.util.error import ConfigurationError


class GoogleCredentials(BaseModel):
    """OAuth client id and secret."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)


class _ClientSecretFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    web: GoogleCredentials


def load_google_credentials(settings: GoogleOAuthSettings) -> GoogleCredentials:
    """Resolve Google credentials from settings or the credentials file.

    Args:
        settings: Google OAuth settings

    Returns:
        Client credentials

    Raises:
        ConfigurationError: If credentials are missing or malformed
    """
    if settings.client_id and settings.client_secret:
        return GoogleCredentials(
            client_id=settings.client_id, client_secret=settings.client_secret
        )

    if settings.credentials_file is None:
        raise ConfigurationError("Google OAuth credentials are not configured")

    try:
        raw = settings.credentials_file.read_bytes()
    except OSError as e:
        raise ConfigurationError(
            f"Google credentials file unreadable: {settings.credentials_file}"
        ) from e

    try:
        return _ClientSecretFile.model_validate_json(raw).web
    except ValidationError as e:
        raise ConfigurationError(
            f"Google credentials file malformed: {settings.credentials_file}"
        ) from e

"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseModel):
    """User store configuration."""

    # JSON file holding every user record, rewritten on each change
    path: Path = Path("data/users.json")


class AuthSettings(BaseModel):
    """Authentication configuration."""

    # Session token signing
    session_secret: str = "CHANGE_ME_IN_PRODUCTION"  # Must be overridden in production
    session_algorithm: str = "HS256"
    session_lifetime_hours: int = 24
    session_cookie_name: str = "splitbill_session"

    # Holds the OAuth state of a Google sign-in started by this browser
    oauth_state_cookie_name: str = "splitbill_oauth_state"

    # One minimum for every client and for the server
    password_min_length: int = 8

    # Argon2 cost parameters (defaults hash in well under 100ms)
    password_hash_time_cost: int = 3
    password_hash_memory_cost: int = 65536  # KiB
    password_hash_parallelism: int = 4

    # Where the browser goes after delegated login, logout, or a failed login
    post_login_redirect: str = "/dashboard"
    post_logout_redirect: str = "/"
    login_error_redirect: str = "/"  # Gets an ?error=... query parameter

    @property
    def session_lifetime_seconds(self) -> int:
        """Session lifetime in seconds."""
        return self.session_lifetime_hours * 60 * 60


class GoogleOAuthSettings(BaseModel):
    """Google OAuth 2.0 configuration.

    Credentials come either from CLIENT_ID/CLIENT_SECRET or from the
    client secret JSON file downloaded from the Google console.
    """

    client_id: str | None = None
    client_secret: str | None = None
    credentials_file: Path | None = None

    # Set by Settings validator from api.base_url when not given
    callback_url: str | None = None


class APISettings(BaseModel):
    """API configuration."""

    host: str
    port: int
    protocol: Literal["http", "https"]

    @computed_field
    @property
    def base_url(self) -> str:
        """Construct base URL from host.

        In development: http://localhost:3000
        In production: https://<host>
        """
        if self.host == "localhost":
            return f"{self.protocol}://{self.host}:{self.port}"
        else:
            # Production uses standard ports (80/443)
            return f"{self.protocol}://{self.host}"


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    logfire_token: str | None = None

    # If None, sends when a token is present
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, nested groups use ``__``:

        HOST=localhost
        PORT=3000
        STORE__PATH=/var/lib/splitbill/users.json
        AUTH__SESSION_SECRET=...
        GOOGLE__CREDENTIALS_FILE=client_secret.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Git commit SHA (loaded from version.txt file or defaults to "unknown")
    git_sha: str = "unknown"

    host: str = "localhost"
    port: int = 3000

    store: StoreSettings = StoreSettings()
    auth: AuthSettings = AuthSettings()
    google: GoogleOAuthSettings = GoogleOAuthSettings()
    api: APISettings = APISettings(
        host="localhost", port=3000, protocol="http"
    )  # Overwritten in validator
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def initialize_api_settings(self) -> "Settings":
        """Initialize API settings from host and environment."""
        protocol: Literal["http", "https"] = (
            "http" if self.environment in ("test", "development") else "https"
        )

        self.api = APISettings(host=self.host, port=self.port, protocol=protocol)

        if not self.google.callback_url:
            self.google.callback_url = f"{self.api.base_url}/auth/google/callback"

        self.git_sha = self._load_git_sha()

        return self

    @staticmethod
    def _load_git_sha() -> str:
        """Load git SHA from version file.

        Returns:
            Git SHA if version file exists, otherwise "unknown"
        """
        version_file = Path("/app/version.txt")
        if version_file.exists():
            try:
                return version_file.read_text().strip()
            except OSError:
                return "unknown"
        return "unknown"

    @property
    def secure_cookies(self) -> bool:
        """Whether cookies should carry the Secure flag."""
        return self.api.protocol == "https"

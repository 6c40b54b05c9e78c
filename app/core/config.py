"""Application configuration from environment variables."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Fit or Forget API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"
    home_path: str = "/"

    # Database (PostgreSQL)
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "fitorforget"
    database_password: str = ""  # Set in .env - never commit
    database_name: str = "fitorforget"
    database_ssl_mode: str = "prefer"

    # Pool (production tuning)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # WebAuthn relying party. Origins are comma-separated; browsers require HTTPS.
    webauthn_rp_id: str = "local.fitorforget.com"
    webauthn_rp_name: str = "Fit or Forget"
    webauthn_origins: str = "https://local.fitorforget.com:3000"
    webauthn_timeout_ms: int = 120_000  # time allowed for the biometric prompt
    webauthn_user_verification: str = "preferred"  # required / preferred / discouraged

    # Server-side sessions: no expiry, they live until logout
    session_cookie_name: str = "_fitorforget_session"
    session_cookie_secure: bool | None = None  # None = secure outside development

    def _build_db_url(self, scheme: str = "postgresql", ssl_query: str = "sslmode=require") -> str:
        user = quote_plus(self.database_user)
        password = quote_plus(self.database_password)
        return (
            f"{scheme}://{user}:{password}@{self.database_host}:{self.database_port}"
            f"/{self.database_name}?{ssl_query}"
        )

    @property
    def database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        return self._build_db_url(scheme="postgresql", ssl_query=f"sslmode={self.database_ssl_mode}")

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (asyncpg driver)."""
        return self._build_db_url(scheme="postgresql+asyncpg", ssl_query=f"ssl={self.database_ssl_mode}")

    @property
    def allowed_webauthn_origins(self) -> list[str]:
        return [o.strip() for o in self.webauthn_origins.split(",") if o.strip()]

    @property
    def secure_cookies(self) -> bool:
        if self.session_cookie_secure is not None:
            return self.session_cookie_secure
        return self.environment != "development"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()

"""Application settings and configuration.

This module defines all configuration options for the FM tracking monitor.
Settings are loaded from environment variables with sensible defaults.
Core components never read this module directly: the API layer turns the
settings into the immutable ``CarrierConfig`` and ``MonitorConfig`` objects
and hands them to constructors.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SYNC_DELAY_SECONDS = 1.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="FM Monitor", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./fm_monitor.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # FM Transportes integration
    fm_api_url: str = Field(
        default="https://integration.fmtransportes.com.br/api",
        alias="FM_API_URL",
    )
    fm_api_user: str = Field(default="apikey", alias="FM_API_USER")
    fm_api_password: str = Field(default="", alias="FM_API_PASSWORD")
    fm_client_document: str = Field(default="", alias="FM_CLIENT_DOCUMENT")
    fm_tracking_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="FM_TRACKING_TIMEOUT_SECONDS",
    )

    # Sweep pacing; the carrier allows one tracking request per second.
    fm_sync_delay_seconds: float = Field(
        default=1.1,
        ge=MIN_SYNC_DELAY_SECONDS,
        alias="FM_SYNC_DELAY_SECONDS",
    )

    # Staleness thresholds
    alert_threshold_hours: int = Field(default=24, ge=0, alias="ALERT_THRESHOLD_HOURS")
    critical_threshold_hours: int = Field(default=48, ge=0, alias="CRITICAL_THRESHOLD_HOURS")

    # CORS configuration for the monitoring front-end
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()

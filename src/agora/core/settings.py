"""Application settings and configuration.

This module defines all configuration options for the Agora discussion service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    This class defines all configuration options for the Agora service.
    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Agora", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./agora.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Threading and ranking
    max_reply_depth: int = Field(default=6, ge=1, alias="FORUM_MAX_REPLY_DEPTH")
    candidate_window_max: int = Field(default=200, ge=1, alias="FORUM_CANDIDATE_WINDOW_MAX")
    candidate_window_multiplier: int = Field(
        default=5,
        ge=1,
        alias="FORUM_CANDIDATE_WINDOW_MULTIPLIER",
    )
    hot_decay_seconds: float = Field(default=45000.0, gt=0, alias="FORUM_HOT_DECAY_SECONDS")
    default_page_size: int = Field(default=20, ge=1, alias="FORUM_DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, ge=1, alias="FORUM_MAX_PAGE_SIZE")

    # Content limits
    max_body_length: int = Field(default=10_000, ge=1, alias="FORUM_MAX_BODY_LENGTH")
    max_title_length: int = Field(default=200, ge=1, alias="FORUM_MAX_TITLE_LENGTH")

    # Seconds suggested to clients retrying after a transient store failure
    store_retry_after_seconds: int = Field(default=1, ge=0, alias="STORE_RETRY_AFTER_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
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

        Returns:
            Database URL compatible with synchronous database drivers
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    def candidate_window(self, page_size: int) -> int:
        """Return how many threads to fetch before ranking a page in memory."""
        return min(self.candidate_window_max, self.candidate_window_multiplier * page_size)


settings = Settings()  # type: ignore[call-arg]

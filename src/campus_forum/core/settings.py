"""Application settings and configuration.

This module defines all configuration options for the Campus Forum backend.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Campus Forum", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./campus_forum.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Identity shown in place of the author inside anonymous categories
    anonymous_display_name: str = Field(default="Anonymous", alias="ANONYMOUS_DISPLAY_NAME")

    # Pagination
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")

    # Content limits
    max_post_title_length: int = Field(default=200, alias="MAX_POST_TITLE_LENGTH")
    max_post_length: int = Field(default=50_000, alias="MAX_POST_LENGTH")
    max_comment_length: int = Field(default=5000, alias="MAX_COMMENT_LENGTH")
    max_message_length: int = Field(default=5000, alias="MAX_MESSAGE_LENGTH")
    min_password_length: int = Field(default=6, alias="MIN_PASSWORD_LENGTH")
    max_username_length: int = Field(default=20, alias="MAX_USERNAME_LENGTH")
    max_bio_length: int = Field(default=200, alias="MAX_BIO_LENGTH")
    max_avatar_url_length: int = Field(default=500, alias="MAX_AVATAR_URL_LENGTH")
    min_report_reason_length: int = Field(default=5, alias="MIN_REPORT_REASON_LENGTH")
    max_report_reason_length: int = Field(default=500, alias="MAX_REPORT_REASON_LENGTH")

    # Admin dashboard
    active_user_window_days: int = Field(default=30, alias="ACTIVE_USER_WINDOW_DAYS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
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
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for Alembic."""
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]

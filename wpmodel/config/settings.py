"""Package Settings using Pydantic.

Environment-based configuration with validation.

Environment Variables:
    WP_MODEL_DATABASE_URL: SQLAlchemy connection string to the WordPress DB
    WP_MODEL_TABLE_PREFIX: WordPress table prefix ($table_prefix in wp-config.php)
    WP_MODEL_EMPTY_TRASH_DAYS: 0 вимикає trash (як EMPTY_TRASH_DAYS у WordPress)
    WP_MODEL_ENVIRONMENT: development | staging | production

Example .env file:
    WP_MODEL_DATABASE_URL=mysql+pymysql://wp:wp@localhost:3306/wordpress
    WP_MODEL_TABLE_PREFIX=wp_
    WP_MODEL_LOG_FORMAT=console
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Package settings.

    All settings can be overridden via environment variables
    with the ``WP_MODEL_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="WP_MODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Core ====================
    app_name: str = "wp-model"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # ==================== Database ====================
    database_url: str = Field(
        default="sqlite:///:memory:",
        description="SQLAlchemy connection string to the WordPress database",
    )
    db_echo: bool = Field(default=False, description="Log SQL queries")
    table_prefix: str = Field(default="wp_", description="WordPress table prefix")

    # ==================== WordPress ====================
    empty_trash_days: int = Field(
        default=30,
        ge=0,
        description="Days before trashed posts are purged, 0 disables trash",
    )
    posts_per_page: int = Field(
        default=10,
        description="Default page size of post queries (-1 for no paging)",
    )

    # ==================== Events ====================
    event_prefix: str = Field(
        default="wp_model",
        min_length=1,
        description="Prefix of model event names: {prefix}/{object_type}/{event}",
    )

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # ==================== Validators ====================

    @field_validator("table_prefix")
    @classmethod
    def validate_table_prefix(cls, v: str) -> str:
        """Table prefix can only contain letters, numbers and underscores."""
        if v and not v.replace("_", "").isalnum():
            raise ValueError("table_prefix must contain only letters, numbers and underscores")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    @property
    def trash_enabled(self) -> bool:
        """Check if posts go to the trash before deletion."""
        return self.empty_trash_days > 0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings instance.
    """
    return Settings()

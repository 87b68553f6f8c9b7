from __future__ import annotations

"""Centralized configuration using pydantic-settings.

All configuration is loaded from environment variables and .env files.
A single ``Settings`` instance is built at startup and handed to the
application factory, the logging setup and the database layer.
"""

from enum import Enum
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = ConfigDict(frozen=True)

    url: str | None = Field(None, description="Full database URL")
    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("subscriptions", description="Database name")
    username: str = Field("postgres", description="Database username")
    password: str = Field("", description="Database password")

    # Connection pool
    pool_size: int = Field(10, description="Connection pool size")
    max_overflow: int = Field(20, description="Max overflow connections")
    pool_timeout: int = Field(30, description="Pool timeout in seconds")
    pool_recycle: int = Field(3600, description="Recycle connections after seconds")
    pool_pre_ping: bool = Field(True, description="Test connections before use")

    echo: bool = Field(False, description="Echo SQL statements")

    @property
    def sqlalchemy_url(self) -> str:
        """Build SQLAlchemy async database URL."""
        if self.url:
            return self.url
        # URL-encode credentials to handle special characters safely
        username = quote_plus(self.username)
        password = quote_plus(self.password) if self.password else ""
        return (
            f"postgresql+asyncpg://{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url.startswith("sqlite")

    @property
    def is_sqlite_memory(self) -> bool:
        """SQLite URL with no file path, or an explicit ``:memory:`` database."""
        if not self.is_sqlite:
            return False
        url = self.sqlalchemy_url
        return ":memory:" in url or url.split("://", 1)[-1] in ("", "/")


class ObservabilitySettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    log_level: LogLevel = Field(LogLevel.DEBUG, description="Log level")
    log_format: str = Field("json", description="Log format (json or console)")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return v


class Settings(BaseSettings):
    """Main application settings.

    All settings can be overridden via environment variables.
    For nested settings, use double underscore: DATABASE__POOL_SIZE=20
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    # Application metadata
    app_name: str = Field("subscription-tracker", description="Application name")
    app_version: str = Field("1.0.0", description="Application version")
    environment: Environment = Field(Environment.DEVELOPMENT, description="Deployment environment")
    debug: bool = Field(False, description="Debug mode")

    # Server configuration
    host: str = Field("0.0.0.0", description="Server host")  # nosec B104
    port: int = Field(8000, description="Server port")

    database: DatabaseSettings = DatabaseSettings()  # type: ignore[call-arg]
    observability: ObservabilitySettings = ObservabilitySettings()  # type: ignore[call-arg]

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment."""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == Environment.DEVELOPMENT


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the settings instance once per process."""
    return Settings()  # type: ignore[call-arg]


def reset_settings() -> None:
    """Reset settings (mainly for testing)."""
    get_settings.cache_clear()

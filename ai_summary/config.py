"""
Configuration for the AI Summary service.

Provides environment-based configuration with Pydantic settings and the
logging setup shared by the API process, the Celery worker and the CLI.
"""

from __future__ import annotations

import logging
import re
import sys
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_PROVIDERS: tuple[str, ...] = ("openrouter", "gemini")
DEFAULT_PROVIDER = "openrouter"

_API_KEY_ALPHABET = re.compile(r"^[a-zA-Z0-9\-_]+$")


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the individual fields",
    )
    host: str = "localhost"
    port: int = 5432
    name: str = "ai_summary"
    user: str = "postgres"
    password: SecretStr = SecretStr("")
    pool_size: int = 5
    max_overflow: int = 10

    def sqlalchemy_url(self) -> str:
        """Build SQLAlchemy database URL."""
        if self.url:
            return self.url
        user = quote_plus(self.user)
        pwd = quote_plus(self.password.get_secret_value())
        return f"postgresql+psycopg://{user}:{pwd}@{self.host}:{self.port}/{self.name}"


class CacheSettings(BaseModel):
    """Cache tier settings."""

    backend: str = Field(
        default="redis",
        description="Cache backend: 'redis', 'memory' or 'none'",
    )
    summary_ttl: int = 86400
    api_response_ttl: int = 3600
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value):
        backend = str(value or "").strip().lower()
        return backend if backend in ("redis", "memory", "none") else "redis"

    def redis_url(self) -> str:
        """Build Redis URL."""
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


class SiteSettings(BaseModel):
    """Identity of the publishing site."""

    name: str = "AI Summary"
    url: str = "http://localhost:8000"
    public: bool = True


class CelerySettings(BaseModel):
    """Celery worker settings."""

    broker_url: str = "redis://localhost:6379/0"
    result_backend: str = "redis://localhost:6379/0"
    task_always_eager: bool = False


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables.

    Uses pydantic-settings to support .env and environment overrides.
    """

    service_name: str = Field(
        default="ai-summary",
        validation_alias=AliasChoices("SERVICE_NAME"),
    )

    # Provider selection
    provider: str = Field(
        default=DEFAULT_PROVIDER,
        validation_alias=AliasChoices("AI_SUMMARY_PROVIDER", "PROVIDER"),
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AI_SUMMARY_API_KEY", "API_KEY"),
    )
    openrouter_model: str = Field(
        default="meta-llama/llama-3.1-8b-instruct:free",
        validation_alias=AliasChoices("OPENROUTER_MODEL", "AI_SUMMARY_OPENROUTER_MODEL"),
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        validation_alias=AliasChoices("GEMINI_MODEL", "AI_SUMMARY_GEMINI_MODEL"),
    )
    temperature: float = Field(
        default=0.7,
        validation_alias=AliasChoices("AI_SUMMARY_TEMPERATURE", "TEMPERATURE"),
    )
    max_tokens: int = Field(
        default=150,
        validation_alias=AliasChoices("AI_SUMMARY_MAX_TOKENS", "SUMMARY_MAX_TOKENS"),
    )
    language: str = Field(
        default="English",
        validation_alias=AliasChoices("AI_SUMMARY_LANGUAGE", "SUMMARY_LANGUAGE"),
    )
    max_content_length: int = Field(
        default=8000,
        validation_alias=AliasChoices("AI_SUMMARY_MAX_CONTENT_LENGTH", "MAX_CONTENT_LENGTH"),
    )
    request_timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("AI_SUMMARY_REQUEST_TIMEOUT", "REQUEST_TIMEOUT"),
    )

    # Behaviour
    auto_generate: bool = Field(
        default=False,
        validation_alias=AliasChoices("AI_SUMMARY_AUTO_GENERATE", "AUTO_GENERATE"),
    )
    robots_txt_integration: bool = Field(
        default=True,
        validation_alias=AliasChoices("AI_SUMMARY_ROBOTS_TXT", "ROBOTS_TXT_INTEGRATION"),
    )
    bulk_delay_seconds: float = Field(
        default=1.0,
        validation_alias=AliasChoices("AI_SUMMARY_BULK_DELAY", "BULK_DELAY_SECONDS"),
    )
    batch_delay_seconds: float = Field(
        default=0.1,
        validation_alias=AliasChoices("AI_SUMMARY_BATCH_DELAY", "BATCH_DELAY_SECONDS"),
    )
    rate_limit_per_hour: int = Field(
        default=50,
        validation_alias=AliasChoices("AI_SUMMARY_RATE_LIMIT", "RATE_LIMIT_PER_HOUR"),
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: str = Field(
        default="json",
        validation_alias=AliasChoices("LOG_FORMAT"),
        description="Log format: 'json' or 'text'",
    )

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    site: SiteSettings = Field(default_factory=SiteSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)

    database_url_override: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    @field_validator("provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        provider = str(value or "").strip().lower()
        return provider if provider in SUPPORTED_PROVIDERS else DEFAULT_PROVIDER

    @field_validator("temperature", mode="before")
    @classmethod
    def _clamp_temperature(cls, value):
        try:
            temperature = float(value)
        except (TypeError, ValueError):
            return 0.7
        return max(0.0, min(1.0, temperature))

    @property
    def model(self) -> str:
        """Model name of the selected provider."""
        if self.provider == "gemini":
            return self.gemini_model
        return self.openrouter_model

    @property
    def database_url(self) -> str:
        """Get database connection string."""
        return self.database_url_override or self.database.sqlalchemy_url()


@lru_cache
def get_settings() -> AppSettings:
    """Get cached settings instance."""
    return AppSettings()


def validate_api_key(api_key: Optional[str], provider: str = DEFAULT_PROVIDER) -> bool:
    """Check that an API key looks plausible for the given provider.

    OpenRouter keys are at least 20 characters, Gemini keys exactly 39;
    both use the ``[A-Za-z0-9_-]`` alphabet.
    """
    if not api_key:
        return False
    if provider == "openrouter":
        return len(api_key) >= 20 and bool(_API_KEY_ALPHABET.match(api_key))
    if provider == "gemini":
        return len(api_key) == 39 and bool(_API_KEY_ALPHABET.match(api_key))
    return len(api_key) >= 10


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Configure logging based on settings.

    Args:
        settings: Optional settings instance, uses cached settings if not provided
    """
    if settings is None:
        settings = get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if settings.log_format == "json":
        import json

        class JSONFormatter(logging.Formatter):
            def format(self, record):
                log_record = {
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                    "service": settings.service_name,
                }
                for key in ("document_id", "provider", "error"):
                    if hasattr(record, key):
                        log_record[key] = getattr(record, key)
                if record.exc_info:
                    log_record["exception"] = self.formatException(record.exc_info)
                return json.dumps(log_record, default=str)

        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

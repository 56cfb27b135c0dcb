"""Application configuration settings.

Defines and loads configuration variables and settings used across the application,
including environment-specific and default configurations.
"""

import json
from pathlib import Path

from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from sufra.core.config.logging_sink import LoggingSink


class _Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    DATABASE_URL: str = Field(default="sqlite:///./sufra.db", alias="DATABASE_URL")
    DATABASE_ECHO: bool = Field(default=False, alias="DATABASE_ECHO")

    # Security and middleware settings
    ALLOWED_ORIGINS: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "https://localhost:3000",
        ],
        alias="ALLOWED_ORIGINS",
    )
    SUPER_ADMIN_EMAIL: str | None = Field(default=None, alias="SUPER_ADMIN_EMAIL")

    # Stored media
    MEDIA_ROOT: str = Field(default="./storage", alias="MEDIA_ROOT")
    MEDIA_BASE_URL: str = Field(default="/storage", alias="MEDIA_BASE_URL")

    # Generative language API
    GEMINI_API_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_API_BASE_URL",
    )
    GEMINI_TIMEOUT_SECONDS: float = Field(default=30.0, alias="GEMINI_TIMEOUT_SECONDS")
    GEMINI_API_KEY: str | None = Field(default=None, alias="GEMINI_API_KEY")
    GEMINI_MODEL: str | None = Field(default=None, alias="GEMINI_MODEL")
    AI_BULK_TAG_DELAY_SECONDS: float = Field(
        default=1.0, alias="AI_BULK_TAG_DELAY_SECONDS"
    )

    LOGGING_CONFIG_PATH: str = Field(
        str(
            (
                Path(__file__).parent.parent.parent.parent / "config" / "logging.json"
            ).resolve(),
        ),
        alias="LOGGING_CONFIG_PATH",
    )

    _LOGGING_SINKS: list[LoggingSink] = PrivateAttr(default_factory=list)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_default=True,
        extra="ignore",
    )

    def __init__(self) -> None:
        """Load logging config after Pydantic initialization."""
        super().__init__()

        config_path = Path(self.LOGGING_CONFIG_PATH).expanduser().resolve()
        with config_path.open("r", encoding="utf-8") as f:
            config = json.load(f)
        sinks = config.get("sinks", [])
        self._LOGGING_SINKS = [
            LoggingSink.from_dict(s) for s in sinks if isinstance(s, dict)
        ]

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL

    @property
    def database_echo(self) -> bool:
        return self.DATABASE_ECHO

    @property
    def logging_sinks(self) -> list[LoggingSink]:
        return self._LOGGING_SINKS

    @property
    def logging_stdout_sink(self) -> LoggingSink | None:
        return next(
            (sink for sink in self._LOGGING_SINKS if sink.sink == "sys.stdout"),
            None,
        )

    @property
    def logging_file_sink(self) -> LoggingSink | None:
        return next(
            (
                sink
                for sink in self._LOGGING_SINKS
                if isinstance(sink.sink, str) and sink.sink.endswith(".log")
            ),
            None,
        )

    @property
    def allowed_origins(self) -> list[str]:
        """Get allowed origins for CORS."""
        return self.ALLOWED_ORIGINS

    @property
    def super_admin_email(self) -> str | None:
        """Get the email address that is always treated as an administrator."""
        return self.SUPER_ADMIN_EMAIL

    @property
    def media_root(self) -> Path:
        """Get the directory stored images live under."""
        return Path(self.MEDIA_ROOT).expanduser()

    @property
    def media_base_url(self) -> str:
        """Get the public URL prefix for stored images."""
        return self.MEDIA_BASE_URL.rstrip("/")

    @property
    def gemini_api_base_url(self) -> str:
        """Get the generative language API base URL."""
        return self.GEMINI_API_BASE_URL.rstrip("/")

    @property
    def gemini_timeout_seconds(self) -> float:
        return self.GEMINI_TIMEOUT_SECONDS

    @property
    def gemini_api_key(self) -> str | None:
        """Get the fallback API key used when none is stored in platform settings."""
        return self.GEMINI_API_KEY

    @property
    def gemini_model(self) -> str | None:
        """Get the fallback model used when none is stored in platform settings."""
        return self.GEMINI_MODEL

    @property
    def ai_bulk_tag_delay_seconds(self) -> float:
        """Get the fixed pause inserted between bulk tagging requests."""
        return self.AI_BULK_TAG_DELAY_SECONDS


_settings: _Settings | None = None


def get_settings() -> _Settings:
    """Get application settings singleton.

    Returns:     Application settings instance
    """
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = _Settings()
    return _settings


settings = get_settings()

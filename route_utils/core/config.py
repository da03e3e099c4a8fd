"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env is looked up in the host project's working directory, not next to the package
ENV_FILE = Path.cwd() / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Route utils settings"""

    # Tagging
    tag_prefix: str = Field(
        default="",
        description="Prefix applied to every generated route tag (e.g. a module path)"
    )
    fallback_responder_tag: str = Field(
        default="createResponder",
        description="Tag used by responders created without an explicit tag"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level for route_utils loggers")
    log_format: str = Field(
        default="text",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens) - NOT RECOMMENDED"
    )

    # Middleware
    request_id_header: str = Field(
        default="X-Request-ID",
        description="Header used to echo the request id back to the client"
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and text formats are supported"""
        value = v.lower().strip()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper().strip()

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_UTILS_",
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

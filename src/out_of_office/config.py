"""Configuration management for the Out-of-Office agent.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REPLY_BODY = (
    "Hello,\n"
    "\n"
    "Thank you for your email. I am currently out of the office with limited "
    "access to email. I will get back to you as soon as possible after my return.\n"
    "\n"
    "Regards,\n"
    "{signature}"
)


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the OOO_ prefix (e.g., OOO_POLL_INTERVAL_SECONDS).
    """

    model_config = SettingsConfigDict(
        env_prefix="OOO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gmail Configuration
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to the OAuth client-secret file downloaded from Google Cloud",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the token file written after the first interactive login",
    )
    gmail_scope: str = Field(
        default="https://mail.google.com/",
        description=(
            "OAuth scope used for Gmail access. Sending, labelling and reading "
            "threads needs full mailbox access."
        ),
    )
    oauth_port: int = Field(
        default=0,
        description="Local port for the OAuth redirect server (0 picks a free port)",
    )

    # Auto-responder Configuration
    label_name: str = Field(
        default="Out of Office",
        description="Label applied to conversations that received an auto-reply",
    )
    poll_interval_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Seconds to wait between two polls of the inbox",
    )
    unread_query: str = Field(
        default="in:inbox is:unread",
        description="Gmail search query selecting messages to consider on each poll",
    )
    reply_subject_prefix: str = Field(
        default="Out of Office: ",
        description="Prefix prepended to the original subject of the auto-reply",
    )
    reply_body_template: str = Field(
        default=DEFAULT_REPLY_BODY,
        description="Plain-text reply body; {signature} is replaced with the owner's address",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("reply_body_template")
    @classmethod
    def _check_reply_body_template(cls, value: str) -> str:
        try:
            value.format(signature="owner@example.com")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(
                "reply_body_template may only use the {signature} placeholder; "
                f"escape literal braces as {{{{ and }}}} ({exc!r})"
            ) from exc
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()

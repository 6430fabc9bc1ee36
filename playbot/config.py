"""Playbot configuration management."""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class PlaybotSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Telegram
    telegram_bot_token: Optional[str] = Field(default=None, description="Telegram bot token")
    max_message_length: int = Field(default=4096, description="Telegram message size limit")
    mod_user_ids: list[int] = Field(
        default_factory=list,
        description="Telegram user IDs treated as moderators in every chat",
    )
    concurrent_updates: int = Field(default=256, description="Updates handled at the same time")

    # Playground
    playground_url: str = Field(
        default="https://play.rust-lang.org",
        description="Rust Playground base URL",
    )
    referer: Optional[str] = Field(default=None, description="Referer header sent to the playground")
    http_timeout: float = Field(default=60.0, description="Playground request timeout (seconds)")

    # Local rustfmt
    rustfmt_path: str = Field(default="rustfmt", description="rustfmt executable")
    rustfmt_timeout: float = Field(default=10.0, description="rustfmt timeout (seconds)")

    debug: bool = Field(default=False, description="Debug mode")

    model_config = {"env_prefix": "PLAYBOT_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> PlaybotSettings:
    """Load settings from environment."""
    settings = PlaybotSettings()

    import logging
    logger = logging.getLogger("playbot.config")
    if not settings.playground_url.startswith("https://"):
        logger.warning(
            f"Playground URL {settings.playground_url} is not https; "
            "user code and gists will travel unencrypted."
        )

    return settings

"""slackwhen configuration management."""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger("slackwhen.config")


class SlackWhenSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Slack (one bot identity for the whole process)
    slack_bot_token: Optional[str] = Field(default=None, description="Slack bot token (xoxb-...)")
    slack_api_url: str = Field(default="https://slack.com/api", description="Slack Web API base URL")
    default_channel: str = Field(default="#test", description="Channel used when a request omits one")

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=5000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    # Remote calls
    request_timeout: float = Field(default=10.0, description="Per-request HTTP timeout (seconds)")

    # Message lookup
    search_timeout: float = Field(default=5.0, description="Timeout per history search attempt (seconds)")
    search_max_retries: int = Field(default=2, description="Retries after the first search attempt")
    search_backoff: float = Field(default=0.5, description="Linear backoff step between attempts (seconds)")
    search_window: float = Field(default=2.0, description="Half-width of the history search window (seconds)")
    cache_ttl: float = Field(default=30.0, description="Message cache time-to-live (seconds)")

    model_config = {"env_prefix": "SLACKWHEN_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> SlackWhenSettings:
    """Load settings from environment."""
    settings = SlackWhenSettings()

    if not settings.slack_bot_token:
        logger.warning(
            "SLACKWHEN_SLACK_BOT_TOKEN is not set; every Slack API call "
            "will be rejected with not_authed."
        )

    return settings

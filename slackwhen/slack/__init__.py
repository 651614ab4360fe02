"""Slack Web API access."""

from .client import SlackClient, SLACK_API

__all__ = ["SlackClient", "SLACK_API"]

"""slackwhen — edit, delete and schedule Slack messages by human date/time."""

__version__ = "0.1.0"

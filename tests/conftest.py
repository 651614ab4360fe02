"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from slackwhen.cache import MessageCache


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Isolated cache per test, driven by the fake clock."""
    return MessageCache(ttl=30.0, clock=clock)


@pytest.fixture
def slack_client():
    """SlackClient stand-in. By default the bot is already a channel member."""
    client = MagicMock()
    client.auth_test = AsyncMock(return_value={"ok": True, "user_id": "UBOT"})
    client.conversations_members = AsyncMock(
        return_value={"ok": True, "members": ["UBOT", "U123"], "response_metadata": {"next_cursor": ""}}
    )
    client.conversations_join = AsyncMock(return_value={"ok": True, "channel": {"id": "C123"}})
    client.conversations_history = AsyncMock(return_value={"ok": True, "messages": []})
    client.chat_post_message = AsyncMock(return_value={"ok": True, "channel": "C123", "ts": "1700000000.000100"})
    client.chat_schedule_message = AsyncMock(
        return_value={"ok": True, "channel": "C123", "scheduled_message_id": "Q1", "post_at": 0}
    )
    client.chat_update = AsyncMock(return_value={"ok": True, "channel": "C123"})
    client.chat_delete = AsyncMock(return_value={"ok": True, "channel": "C123"})
    return client


@pytest.fixture
def no_sleep():
    """Awaitable sleep that records delays instead of waiting."""
    return AsyncMock(return_value=None)

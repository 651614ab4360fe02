"""The five user-facing messaging operations.

Each operation checks its required inputs, makes sure the bot is in the
channel, then performs its Slack call. Anything that goes wrong past the
input check comes out as a single OperationError whose message reads
"<Action> failed: <reason>"; the underlying exception stays on __cause__.
"""

import logging
from typing import Optional

from .cache import MessageCache
from .datetime_resolver import resolve
from .errors import InvalidInput, OperationError, SlackWhenError, remote_reason
from .membership import ChannelMembershipGuard
from .resolver import MessageResolver
from .slack.client import SlackClient

logger = logging.getLogger("slackwhen.operations")

HISTORY_LIMIT = 10


def _ok(response: dict) -> dict:
    return {"ok": True, "response": response}


class MessagingOperations:
    """send / schedule / list / edit / delete against one Slack workspace."""

    def __init__(
        self,
        client: SlackClient,
        cache: MessageCache,
        guard: Optional[ChannelMembershipGuard] = None,
        resolver: Optional[MessageResolver] = None,
        default_channel: str = "#test",
    ):
        self._client = client
        self._cache = cache
        self._guard = guard or ChannelMembershipGuard(client)
        self._resolver = resolver or MessageResolver(client, cache)
        self.default_channel = default_channel

    def _channel(self, channel: Optional[str]) -> str:
        return channel or self.default_channel

    @staticmethod
    def _fail(operation: str, action: str, e: Exception) -> OperationError:
        reason = remote_reason(e)
        logger.error(f"{operation} error: {reason}")
        return OperationError(operation, f"{action} failed: {reason}")

    async def _locate(self, channel: str, date: str, time: str) -> tuple[int, dict]:
        """Resolve date+time and find the nearest real message."""
        target = resolve(date, time)
        message = await self._resolver.find_near(channel, target)
        return target, message

    # ── Direct writes ─────────────────────────────────────

    async def send(self, channel: Optional[str], text: str) -> dict:
        """Post ``text`` immediately."""
        if not text:
            raise InvalidInput("Text is required")
        channel = self._channel(channel)
        try:
            await self._guard.ensure_member(channel)
            data = await self._client.chat_post_message(channel, text)
        except SlackWhenError as e:
            raise self._fail("send", "Send message", e) from e

        logger.info(f"Message sent to {channel} (ts: {data.get('ts')})")
        return _ok(data)

    async def schedule(self, channel: Optional[str], text: str, date: str, time: str) -> dict:
        """Schedule ``text`` for delivery at the given local date and time."""
        if not text or not date or not time:
            raise InvalidInput("Text, date and time are required")
        channel = self._channel(channel)
        try:
            await self._guard.ensure_member(channel)
            post_at = resolve(date, time)
            data = await self._client.chat_schedule_message(channel, text, post_at)
        except SlackWhenError as e:
            raise self._fail("schedule", "Schedule message", e) from e

        logger.info(f"Message scheduled in {channel} for {post_at}")
        return _ok({**data, "human_readable_schedule": f"Scheduled for {date} at {time}"})

    # ── Reads ─────────────────────────────────────────────

    async def list(self, channel: Optional[str]) -> dict:
        """Return the latest messages and seed the cache with them."""
        channel = self._channel(channel)
        try:
            await self._guard.ensure_member(channel)
            data = await self._client.conversations_history(
                channel, inclusive=True, limit=HISTORY_LIMIT,
            )
        except SlackWhenError as e:
            raise self._fail("list", "Retrieve messages", e) from e

        for msg in data.get("messages") or []:
            if msg.get("ts"):
                self._cache.put(channel, msg["ts"], msg)
        return _ok(data)

    # ── Time-addressed writes ─────────────────────────────

    async def edit(self, channel: Optional[str], date: str, time: str, new_text: str) -> dict:
        """Replace the text of the message posted nearest date+time."""
        if not date or not time or not new_text:
            raise InvalidInput("Date, time and new text are required")
        channel = self._channel(channel)
        try:
            await self._guard.ensure_member(channel)
            target, message = await self._locate(channel, date, time)
            data = await self._client.chat_update(channel, message["ts"], new_text)
        except SlackWhenError as e:
            raise self._fail("edit", "Edit message", e) from e

        updated = {**message, "text": new_text}
        self._cache.replace_message(channel, message["ts"], updated)
        self._cache.put(channel, message["ts"], updated)
        self._cache.put(channel, target, updated)
        logger.info(f"Edited message {message['ts']} in {channel}")
        return _ok({**data, "human_readable_time": f"Edited message from {date} at {time}"})

    async def delete(self, channel: Optional[str], date: str, time: str) -> dict:
        """Delete the message posted nearest date+time."""
        if not date or not time:
            raise InvalidInput("Date and time are required")
        channel = self._channel(channel)
        try:
            await self._guard.ensure_member(channel)
            _, message = await self._locate(channel, date, time)
            data = await self._client.chat_delete(channel, message["ts"])
        except SlackWhenError as e:
            raise self._fail("delete", "Delete message", e) from e

        self._cache.discard_message(channel, message["ts"])
        logger.info(f"Deleted message {message['ts']} in {channel}")
        return _ok({**data, "human_readable_time": f"Deleted message from {date} at {time}"})

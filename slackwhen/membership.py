"""Make sure the bot is in a channel before touching it.

A missing join is the most common reason Slack rejects a post, so every
operation goes through ChannelMembershipGuard first.
"""

import logging
from typing import Optional

from .errors import InvalidChannelId, JoinFailed, MembershipCheckFailed, RemoteError, remote_reason
from .slack.client import SlackClient

logger = logging.getLogger("slackwhen.membership")

# C = public channel, G = private channel, D = direct message
CHANNEL_PREFIXES = ("C", "G", "D")


def validate_channel_id(channel: str):
    """Raise InvalidChannelId unless the id has a known conversation prefix."""
    if not channel or channel[0] not in CHANNEL_PREFIXES:
        raise InvalidChannelId(
            "Invalid channel ID format. Must start with C (public), G (private), or D (DM)"
        )


class ChannelMembershipGuard:
    """Checks membership and joins the channel when needed."""

    def __init__(self, client: SlackClient):
        self._client = client
        self._bot_user_id: Optional[str] = None

    async def _bot_id(self) -> str:
        # One bot identity per process, so auth.test only needs to succeed once
        if self._bot_user_id is None:
            data = await self._client.auth_test()
            user_id = data.get("user_id")
            if not user_id:
                raise MembershipCheckFailed("auth.test returned no user_id")
            self._bot_user_id = user_id
        return self._bot_user_id

    async def _members(self, channel: str) -> set[str]:
        members: set[str] = set()
        cursor = None
        while True:
            data = await self._client.conversations_members(channel, cursor=cursor)
            members.update(data.get("members") or [])
            cursor = (data.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                return members

    def _assume_not_member(self, channel: str, error: Exception) -> bool:
        """Fallback when membership can't be checked: report "not a member".

        conversations.join on a channel the bot is already in succeeds
        without side effects.
        """
        logger.warning(
            f"Error checking membership of {channel}: {remote_reason(error)} "
            "(assuming not a member)"
        )
        return False

    async def is_member(self, channel: str) -> bool:
        """Best-effort membership check. Never raises on remote errors."""
        try:
            bot_id = await self._bot_id()
            return bot_id in await self._members(channel)
        except (RemoteError, MembershipCheckFailed) as e:
            return self._assume_not_member(channel, e)

    async def join(self, channel: str):
        try:
            await self._client.conversations_join(channel)
        except RemoteError as e:
            reason = remote_reason(e)
            logger.error(f"Error joining channel {channel}: {reason}")
            raise JoinFailed(f"Failed to join channel: {reason}") from e
        logger.info(f"Joined channel {channel}")

    async def ensure_member(self, channel: str):
        """Guarantee the bot is a member of ``channel``.

        Raises:
            InvalidChannelId: bad id shape (no network call is made)
            JoinFailed: the bot was not a member and joining failed
        """
        validate_channel_id(channel)

        if not await self.is_member(channel):
            logger.info(f"Bot not in channel {channel}, attempting to join...")
            await self.join(channel)

"""Tests for channel membership guard."""

import pytest
from unittest.mock import AsyncMock

from slackwhen.errors import InvalidChannelId, JoinFailed, RemoteApiError, RemoteError
from slackwhen.membership import ChannelMembershipGuard, validate_channel_id


class TestValidateChannelId:

    @pytest.mark.parametrize("channel", ["C123", "G456", "D789"])
    def test_valid_prefixes(self, channel):
        validate_channel_id(channel)

    @pytest.mark.parametrize("channel", ["#test", "general", "U123", "c123", ""])
    def test_invalid(self, channel):
        with pytest.raises(InvalidChannelId, match="Must start with C"):
            validate_channel_id(channel)


class TestEnsureMember:

    @pytest.mark.asyncio
    async def test_invalid_channel_makes_no_network_call(self, slack_client):
        guard = ChannelMembershipGuard(slack_client)
        with pytest.raises(InvalidChannelId):
            await guard.ensure_member("#test")
        slack_client.auth_test.assert_not_called()
        slack_client.conversations_members.assert_not_called()
        slack_client.conversations_join.assert_not_called()

    @pytest.mark.asyncio
    async def test_member_does_not_join(self, slack_client):
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        slack_client.conversations_members.assert_called_once_with("C123", cursor=None)
        slack_client.conversations_join.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_member_joins(self, slack_client):
        slack_client.conversations_members.return_value = {"ok": True, "members": ["U123"]}
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        slack_client.conversations_join.assert_called_once_with("C123")

    @pytest.mark.asyncio
    async def test_membership_error_falls_back_to_join(self, slack_client):
        slack_client.conversations_members.side_effect = RemoteApiError(
            "conversations.members", "channel_not_found"
        )
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        slack_client.conversations_join.assert_called_once_with("C123")

    @pytest.mark.asyncio
    async def test_auth_error_falls_back_to_join(self, slack_client):
        slack_client.auth_test.side_effect = RemoteError("auth.test: ConnectError")
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        slack_client.conversations_join.assert_called_once_with("C123")

    @pytest.mark.asyncio
    async def test_missing_user_id_falls_back_to_join(self, slack_client):
        slack_client.auth_test.return_value = {"ok": True}
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        slack_client.conversations_join.assert_called_once()

    @pytest.mark.asyncio
    async def test_join_failure_carries_reason(self, slack_client):
        slack_client.conversations_members.return_value = {"ok": True, "members": []}
        slack_client.conversations_join.side_effect = RemoteApiError(
            "conversations.join", "method_not_supported_for_channel_type"
        )
        guard = ChannelMembershipGuard(slack_client)
        with pytest.raises(JoinFailed, match="method_not_supported_for_channel_type"):
            await guard.ensure_member("D123")

    @pytest.mark.asyncio
    async def test_members_are_paginated(self, slack_client):
        slack_client.conversations_members = AsyncMock(side_effect=[
            {"ok": True, "members": ["U1"], "response_metadata": {"next_cursor": "abc"}},
            {"ok": True, "members": ["UBOT"], "response_metadata": {"next_cursor": ""}},
        ])
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        assert slack_client.conversations_members.call_count == 2
        slack_client.conversations_members.assert_called_with("C123", cursor="abc")
        slack_client.conversations_join.assert_not_called()

    @pytest.mark.asyncio
    async def test_bot_identity_is_cached(self, slack_client):
        guard = ChannelMembershipGuard(slack_client)
        await guard.ensure_member("C123")
        await guard.ensure_member("C456")
        slack_client.auth_test.assert_called_once()
        assert slack_client.conversations_members.call_count == 2

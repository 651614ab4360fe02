"""Tests for the slackwhen CLI."""

import pytest
from click.testing import CliRunner
from unittest.mock import AsyncMock, MagicMock, patch

from slackwhen.cli import cli
from slackwhen.errors import OperationError


@pytest.fixture
def mock_ops():
    ops = MagicMock()
    ops.send = AsyncMock(return_value={"ok": True, "response": {"channel": "C123", "ts": "1.000100"}})
    ops.schedule = AsyncMock(return_value={"ok": True, "response": {
        "scheduled_message_id": "Q1", "human_readable_schedule": "Scheduled for 01/01/2031 at 08:00",
    }})
    ops.list = AsyncMock(return_value={"ok": True, "response": {"messages": [
        {"ts": "1700000000.000100", "text": "hello world"},
    ]}})
    ops.edit = AsyncMock(return_value={"ok": True, "response": {"ts": "1.000100"}})
    ops.delete = AsyncMock(return_value={"ok": True, "response": {"ts": "1.000100"}})
    with patch("slackwhen.cli.shared._build_operations", return_value=ops):
        yield ops


class TestCommands:

    def test_send(self, mock_ops):
        result = CliRunner().invoke(cli, ["send", "hello", "-c", "C123"])
        assert result.exit_code == 0
        assert "Message sent" in result.output
        mock_ops.send.assert_called_once_with("C123", "hello")

    def test_schedule(self, mock_ops):
        result = CliRunner().invoke(cli, ["schedule", "later", "01/01/2031", "08:00"])
        assert result.exit_code == 0
        assert "Scheduled for 01/01/2031 at 08:00" in result.output
        mock_ops.schedule.assert_called_once_with(None, "later", "01/01/2031", "08:00")

    def test_messages_table(self, mock_ops):
        result = CliRunner().invoke(cli, ["messages", "--channel", "C123"])
        assert result.exit_code == 0
        assert "hello world" in result.output
        mock_ops.list.assert_called_once_with("C123")

    def test_messages_empty(self, mock_ops):
        mock_ops.list.return_value = {"ok": True, "response": {"messages": []}}
        result = CliRunner().invoke(cli, ["messages"])
        assert result.exit_code == 0
        assert "No messages" in result.output

    def test_edit(self, mock_ops):
        result = CliRunner().invoke(cli, ["edit", "31/12/2023", "14:30", "fixed", "-c", "C123"])
        assert result.exit_code == 0
        mock_ops.edit.assert_called_once_with("C123", "31/12/2023", "14:30", "fixed")

    def test_delete(self, mock_ops):
        result = CliRunner().invoke(cli, ["delete", "31/12/2023", "14:30"])
        assert result.exit_code == 0
        assert "Message deleted" in result.output

    def test_failure_exits_1(self, mock_ops):
        mock_ops.delete.side_effect = OperationError("delete", "Delete message failed: message_not_found")
        result = CliRunner().invoke(cli, ["delete", "31/12/2023", "14:30"])
        assert result.exit_code == 1
        assert "message_not_found" in result.output

    def test_help_without_command(self):
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 0
        assert "slackwhen serve" in result.output

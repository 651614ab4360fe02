"""Shared utilities for slackwhen CLI commands."""

import asyncio
import sys

from rich.console import Console

from slackwhen.errors import SlackWhenError

console = Console()


def _build_operations():
    """Build MessagingOperations from environment settings."""
    from slackwhen.config import load_settings
    from slackwhen.server import build_operations

    return build_operations(load_settings())


def _run_operation(coro_factory):
    """Run one operation, print a red error and exit 1 on failure.

    Args:
        coro_factory: Callable taking MessagingOperations and returning a coroutine

    Returns:
        The operation's success envelope
    """
    ops = _build_operations()
    try:
        return asyncio.run(coro_factory(ops))
    except SlackWhenError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

"""Find the real Slack message closest to an approximate time.

Slack has no "message at time T" lookup, and a human-typed time is only
accurate to a second or two. The resolver queries a small history window
around the target, picks the nearest ts, and retries with linear backoff
when the window comes back empty or the request fails.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .cache import MessageCache
from .errors import NotFound, RemoteError, SearchTimeout, remote_reason
from .slack.client import SlackClient

logger = logging.getLogger("slackwhen.resolver")

SEARCH_TIMEOUT = 5.0
MAX_RETRIES = 2
BACKOFF_STEP = 0.5
SEARCH_WINDOW = 2.0
SEARCH_LIMIT = 5


def closest_message(messages: list[dict], target: float) -> dict:
    """Return the message whose ts is nearest ``target``.

    Ties keep the earliest message in API order (Slack returns newest first).
    """
    best = messages[0]
    best_diff = abs(float(best["ts"]) - target)
    for msg in messages[1:]:
        diff = abs(float(msg["ts"]) - target)
        if diff < best_diff:
            best, best_diff = msg, diff
    return best


class MessageResolver:
    """Cache-first, retrying lookup of the message nearest a given epoch."""

    def __init__(
        self,
        client: SlackClient,
        cache: MessageCache,
        timeout: float = SEARCH_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        backoff: float = BACKOFF_STEP,
        window: float = SEARCH_WINDOW,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the resolver.

        Args:
            client: Slack API client
            cache: Shared message cache
            timeout: Seconds allowed per history search attempt
            max_retries: Attempts after the first one
            backoff: Wait after failed attempt N is ``backoff * N``
            window: Half-width of the search window around the target
            sleep: Awaitable sleep (injectable for tests)
        """
        self._client = client
        self._cache = cache
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.window = window
        self._sleep = sleep

    async def _search(self, channel: str, target: float) -> dict:
        """One attempt: bounded history query, cancelled on timeout."""
        try:
            data = await asyncio.wait_for(
                self._client.conversations_history(
                    channel,
                    oldest=target - self.window,
                    latest=target + self.window,
                    inclusive=True,
                    limit=SEARCH_LIMIT,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise SearchTimeout("Message search timed out") from None

        messages = data.get("messages") or []
        if not messages:
            raise NotFound("Message not found at the specified time")
        return closest_message(messages, target)

    async def find_near(self, channel: str, target: float) -> dict:
        """Return the message nearest ``target`` epoch seconds in ``channel``.

        Raises:
            NotFound: every attempt failed; ``last_error`` holds the final cause
        """
        cached = self._cache.get(channel, target)
        if cached is not None:
            logger.debug(f"Cache hit for {channel}:{target}")
            return cached

        attempts = 1 + self.max_retries
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                message = await self._search(channel, target)
            except (SearchTimeout, NotFound, RemoteError) as e:
                last_error = e
                if attempt < attempts:
                    delay = self.backoff * attempt
                    logger.warning(
                        f"Message search in {channel} near {target} failed "
                        f"(attempt {attempt}/{attempts}): {remote_reason(e)}, retrying in {delay}s"
                    )
                    await self._sleep(delay)
                continue

            self._cache.put(channel, target, message)
            return message

        reason = remote_reason(last_error) if last_error else "no attempts made"
        logger.error(f"find_near failed after {attempts} attempts: {reason}")
        raise NotFound(
            f"Failed to find message: {reason}",
            last_error=last_error,
            attempts=attempts,
        )

"""Slack Web API client. The only module that talks HTTP to Slack."""

import logging
from typing import Optional

import httpx

from ..errors import RemoteApiError, RemoteError

logger = logging.getLogger("slackwhen.slack.client")

SLACK_API = "https://slack.com/api"


class SlackClient:
    """Thin async wrapper over the Slack Web API methods slackwhen needs.

    Every method returns the decoded JSON body. A body with ``ok: false``
    raises RemoteApiError carrying Slack's error code verbatim; transport
    failures and non-2xx responses raise RemoteError.
    """

    def __init__(
        self,
        token: Optional[str],
        base_url: str = SLACK_API,
        timeout: float = 10.0,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.token or ''}",
            "Content-Type": "application/json; charset=utf-8",
        }

    async def _call(
        self,
        method: str,
        params: Optional[dict] = None,
        body: Optional[dict] = None,
    ) -> dict:
        """Invoke one API method. Reads use GET + query, writes POST + JSON."""
        url = f"{self.base_url}/{method}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if body is None:
                    resp = await client.get(url, params=params, headers=self._headers())
                else:
                    resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            if code == 429:
                retry_after = e.response.headers.get("retry-after", "a moment")
                raise RemoteError(f"{method}: rate limited, retry after {retry_after}") from e
            raise RemoteError(f"{method}: HTTP {code}") from e
        except httpx.HTTPError as e:
            raise RemoteError(f"{method}: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise RemoteError(f"{method}: invalid JSON response") from e

        if not data.get("ok"):
            error = data.get("error") or f"{method} failed"
            logger.debug(f"{method} returned ok:false ({error})")
            raise RemoteApiError(method, error)
        return data

    # ── Identity & membership ─────────────────────────────

    async def auth_test(self) -> dict:
        return await self._call("auth.test")

    async def conversations_members(self, channel: str, cursor: Optional[str] = None) -> dict:
        params = {"channel": channel}
        if cursor:
            params["cursor"] = cursor
        return await self._call("conversations.members", params=params)

    async def conversations_join(self, channel: str) -> dict:
        return await self._call("conversations.join", body={"channel": channel})

    # ── History ───────────────────────────────────────────

    async def conversations_history(
        self,
        channel: str,
        oldest: Optional[float] = None,
        latest: Optional[float] = None,
        inclusive: bool = True,
        limit: int = 10,
    ) -> dict:
        """Fetch channel history, optionally bounded to [oldest, latest]."""
        params: dict = {
            "channel": channel,
            "inclusive": "true" if inclusive else "false",
            "limit": limit,
        }
        if oldest is not None:
            params["oldest"] = oldest
        if latest is not None:
            params["latest"] = latest
        return await self._call("conversations.history", params=params)

    # ── Writes ────────────────────────────────────────────

    async def chat_post_message(self, channel: str, text: str) -> dict:
        return await self._call("chat.postMessage", body={"channel": channel, "text": text})

    async def chat_schedule_message(self, channel: str, text: str, post_at: int) -> dict:
        return await self._call(
            "chat.scheduleMessage",
            body={"channel": channel, "text": text, "post_at": post_at},
        )

    async def chat_update(self, channel: str, ts: str, text: str) -> dict:
        return await self._call("chat.update", body={"channel": channel, "ts": ts, "text": text})

    async def chat_delete(self, channel: str, ts: str) -> dict:
        return await self._call("chat.delete", body={"channel": channel, "ts": ts})

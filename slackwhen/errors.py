"""Error hierarchy and caller-facing error classification."""

import asyncio
from typing import Optional

import httpx


# ════════════════════════════════════════════════════════
# Exception hierarchy: callers classify by type, not by
# string matching.  server.py and the CLI catch these.
# ════════════════════════════════════════════════════════

class SlackWhenError(Exception):
    """Base class for all slackwhen errors."""
    pass


class InvalidInput(SlackWhenError):
    """A required field is missing from the caller's request."""
    pass


class InvalidChannelId(SlackWhenError):
    """Channel id does not start with C (public), G (private) or D (DM)."""
    pass


class MembershipCheckFailed(SlackWhenError):
    """auth.test or conversations.members could not be queried."""
    pass


class JoinFailed(SlackWhenError):
    """conversations.join failed."""
    pass


class DateTimeError(SlackWhenError):
    """Base class for date/time parsing failures."""
    pass


class InvalidFormat(DateTimeError):
    """Date or time missing, or date not in dd/mm/yyyy."""
    pass


class InvalidDate(DateTimeError):
    """Numeric parts do not compose a real calendar moment."""
    pass


class InvalidTime(DateTimeError):
    """Time parts are not parseable numbers."""
    pass


class RemoteError(SlackWhenError):
    """Transport failure or non-2xx response from the Slack API."""
    pass


class RemoteApiError(RemoteError):
    """Slack answered with ok:false."""

    def __init__(self, method: str, error: str):
        self.method = method
        self.error = error
        super().__init__(error)


class ResolutionError(SlackWhenError):
    """Base class for message lookup failures."""
    pass


class SearchTimeout(ResolutionError):
    """A history search attempt did not finish within the search timeout."""
    pass


class NotFound(ResolutionError):
    """No message found near the requested time after all attempts.

    ``last_error`` keeps the cause of the final failed attempt so callers
    can tell an empty window from a flaky network.
    """

    def __init__(self, message: str, last_error: Optional[Exception] = None, attempts: int = 0):
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts


class OperationError(SlackWhenError):
    """Single operation-scoped failure wrapping whatever went wrong inside."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation


def remote_reason(e: Exception) -> str:
    """Return the platform's error code when there is one, else the message."""
    if isinstance(e, RemoteApiError):
        return e.error
    return str(e) or type(e).__name__


def classify_error(e: Exception) -> tuple[int, str]:
    """Map any exception to an HTTP status code and a user-facing message.

    Returns:
        Tuple of (status_code, message)
    """
    if isinstance(e, InvalidInput):
        return 400, str(e)

    if isinstance(e, OperationError):
        cause = e.__cause__
        if isinstance(cause, (InvalidChannelId, DateTimeError)):
            return 400, str(e)
        if isinstance(cause, NotFound):
            return 404, str(e)
        return 500, str(e)

    if isinstance(e, (InvalidChannelId, DateTimeError)):
        return 400, str(e)
    if isinstance(e, NotFound):
        return 404, str(e)
    if isinstance(e, SlackWhenError):
        return 500, str(e)

    # Raw transport errors that slipped past the client
    if isinstance(e, httpx.HTTPStatusError):
        return 502, f"Slack API returned HTTP {e.response.status_code}"
    if isinstance(e, (httpx.TimeoutException, asyncio.TimeoutError)):
        return 504, "Request to Slack timed out. Please try again."
    if isinstance(e, httpx.HTTPError):
        return 502, "Cannot reach the Slack API. Please try again later."

    type_name = type(e).__name__
    return 500, f"Something went wrong ({type_name}). Check logs for details."

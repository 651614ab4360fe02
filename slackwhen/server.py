"""
slackwhen HTTP API
==================

Endpoints:
- POST   /send      {text, channel?}
- POST   /schedule  {text, date, time, channel?}
- GET    /messages  ?channel=
- POST   /edit      {date, time, newText, channel?}
- DELETE /delete    {date, time, channel?}
- GET    /health

Every success is ``{"ok": true, "response": {...}}``; every failure is
``{"ok": false, "error": "<message>"}``: a missing or malformed body is a
400, anything else gets its status from classify_error.

Usage:
    uvicorn slackwhen.server:create_app --factory --port 5000
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .cache import MessageCache
from .config import SlackWhenSettings, load_settings
from .errors import SlackWhenError, classify_error
from .operations import MessagingOperations
from .resolver import MessageResolver
from .slack.client import SlackClient

logger = logging.getLogger("slackwhen.server")


# =============================================================================
# REQUEST BODIES
# =============================================================================

class SendRequest(BaseModel):
    text: Optional[str] = None
    channel: Optional[str] = None


class ScheduleRequest(BaseModel):
    text: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    channel: Optional[str] = None


class EditRequest(BaseModel):
    date: Optional[str] = None
    time: Optional[str] = None
    new_text: Optional[str] = Field(default=None, alias="newText")
    channel: Optional[str] = None


class DeleteRequest(BaseModel):
    date: Optional[str] = None
    time: Optional[str] = None
    channel: Optional[str] = None


def _describe_validation_error(exc: RequestValidationError) -> str:
    """One-line message for the first problem in a rejected request body."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    if not field:
        return f"Invalid request body: {first.get('msg')}"
    return f"Invalid value for {field}: {first.get('msg')}"


# =============================================================================
# WIRING
# =============================================================================

def build_operations(settings: SlackWhenSettings) -> MessagingOperations:
    """Build the client, cache, resolver and operations from settings."""
    client = SlackClient(
        settings.slack_bot_token,
        base_url=settings.slack_api_url,
        timeout=settings.request_timeout,
    )
    cache = MessageCache(ttl=settings.cache_ttl)
    resolver = MessageResolver(
        client,
        cache,
        timeout=settings.search_timeout,
        max_retries=settings.search_max_retries,
        backoff=settings.search_backoff,
        window=settings.search_window,
    )
    return MessagingOperations(
        client,
        cache,
        resolver=resolver,
        default_channel=settings.default_channel,
    )


def create_app(
    operations: Optional[MessagingOperations] = None,
    settings: Optional[SlackWhenSettings] = None,
) -> FastAPI:
    """Create the FastAPI app. Pass ``operations`` to skip building from settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "operations", None) is None:
            app.state.operations = build_operations(settings or load_settings())
            logger.info("Slack operations initialized")
        yield
        app.state.operations = None

    app = FastAPI(
        title="slackwhen",
        description="Send, schedule, edit and delete Slack messages by human date/time",
        lifespan=lifespan,
    )
    app.state.operations = operations

    @app.exception_handler(SlackWhenError)
    async def slackwhen_error_handler(request: Request, exc: SlackWhenError):
        status, message = classify_error(exc)
        return JSONResponse(status_code=status, content={"ok": False, "error": message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"ok": False, "error": message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {type(exc).__name__}: {exc}", exc_info=exc)
        status, message = classify_error(exc)
        return JSONResponse(status_code=status, content={"ok": False, "error": message})

    def ops(request: Request) -> MessagingOperations:
        return request.app.state.operations

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    @app.get("/health")
    async def health_check(request: Request):
        if ops(request) is None:
            return JSONResponse(status_code=503, content={"ok": False, "error": "Not initialized"})
        return {"ok": True, "status": "online"}

    @app.post("/send")
    async def send(request: Request, body: Optional[SendRequest] = None):
        body = body or SendRequest()
        return await ops(request).send(body.channel, body.text)

    @app.post("/schedule")
    async def schedule(request: Request, body: Optional[ScheduleRequest] = None):
        body = body or ScheduleRequest()
        return await ops(request).schedule(body.channel, body.text, body.date, body.time)

    @app.get("/messages")
    async def messages(request: Request, channel: Optional[str] = None):
        return await ops(request).list(channel)

    @app.post("/edit")
    async def edit(request: Request, body: Optional[EditRequest] = None):
        body = body or EditRequest()
        return await ops(request).edit(body.channel, body.date, body.time, body.new_text)

    @app.delete("/delete")
    async def delete(request: Request, body: Optional[DeleteRequest] = None):
        body = body or DeleteRequest()
        return await ops(request).delete(body.channel, body.date, body.time)

    return app

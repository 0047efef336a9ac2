"""Fixed-order request pipeline run before any route.

Stages run in list order; a stage returns a Response to short-circuit the
rest of the pipeline and the route, or None to continue.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import HTMLResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from aurora.app.core.state import AppState
from aurora.app.services.faults import chaos_triggered
from aurora.app.services.identity import TOKEN_PARAM

log = logging.getLogger(__name__)

Stage = Callable[[Request], Awaitable[Response | None]]

SIMULATED_FAILURE_HTML = "<h3>500 Internal Server Error</h3><p>Simulated failure (Chaos Mode)</p>"


class LoggingStage:
    async def __call__(self, request: Request) -> Response | None:
        log.info("%s %s", request.method, request.url.path)
        return None


class IdentityStage:
    """Attach the resolved identity to ``request.state``; never short-circuits."""

    def __init__(self, state: AppState) -> None:
        self.state = state

    async def __call__(self, request: Request) -> Response | None:
        settings = self.state.settings
        cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
        token = request.query_params.get(TOKEN_PARAM)
        if token is None and request.method == "POST":
            token = await _form_token(request)
        request.state.identity = self.state.identity.resolve(cookie=cookie, token=token)
        return None


class ChaosStage:
    def __init__(self, state: AppState) -> None:
        self.state = state

    async def __call__(self, request: Request) -> Response | None:
        if chaos_triggered(self.state.config, request.url.path, self.state.rng):
            log.warning("Chaos: failing %s %s", request.method, request.url.path)
            return HTMLResponse(SIMULATED_FAILURE_HTML, status_code=500)
        return None


async def _form_token(request: Request) -> str | None:
    """Read the ``token`` field from a urlencoded or multipart body."""
    try:
        async with request.form() as form:
            token = form.get(TOKEN_PARAM)
    except HTTPException:
        # Unparsable form bodies carry no identity; the route reports the error.
        return None
    return token if isinstance(token, str) else None


def default_stages(state: AppState) -> list[Stage]:
    return [LoggingStage(), IdentityStage(state), ChaosStage(state)]


class RequestPipeline:
    """ASGI middleware that buffers the body so stages and the route can both read it."""

    def __init__(self, app: ASGIApp, stages: Sequence[Stage]) -> None:
        self.app = app
        self.stages = list(stages)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        body = await _read_body(receive)
        scope.setdefault("state", {})
        request = Request(scope, _replay(body, receive))
        for stage in self.stages:
            response = await stage(request)
            if response is not None:
                await response(scope, receive, send)
                return
        await self.app(scope, _replay(body, receive), send)


async def _read_body(receive: Receive) -> bytes:
    chunks = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def _replay(body: bytes, receive: Receive) -> Receive:
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay

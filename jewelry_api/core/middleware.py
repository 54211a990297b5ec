"""
HTTP middleware for response hardening and request body limits.

Upload routes take multipart forms, which are parsed before any route dependency
(authentication included) runs. The body limit is therefore enforced here, ahead
of the app, so an oversized or endless body is refused without being buffered.
"""

import logging
from collections.abc import Iterable

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "SAMEORIGIN",
    "referrer-policy": "no-referrer",
    "x-xss-protection": "0",
    "cross-origin-resource-policy": "cross-origin",
}

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds conservative security headers to every response, static files included."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def _error_body(code: str, message: str) -> dict:
    return {"success": False, "error": code, "message": message}


class BodySizeLimitMiddleware:
    """
    Caps request bodies on the given path prefixes.

    A declared Content-Length over the cap is answered with 413 before the app
    sees the request. Without a usable length, bytes are counted as they arrive;
    once the cap is passed the client gets 413 and the app sees a disconnect.
    """

    def __init__(self, app: ASGIApp, max_body_size: int, path_prefixes: Iterable[str]) -> None:
        self.app = app
        self.max_body_size = max_body_size
        self.path_prefixes = tuple(p.rstrip("/") for p in path_prefixes)

    def applies_to(self, scope: Scope) -> bool:
        if scope["type"] != "http" or scope.get("method") not in _BODY_METHODS:
            return False
        path = scope.get("path", "")
        return any(path == p or path.startswith(p + "/") for p in self.path_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not self.applies_to(scope):
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                length = int(declared)
            except ValueError:
                length = -1
            if length < 0:
                await self._reply(
                    scope, receive, send, 400, "invalid_request", "Invalid Content-Length header"
                )
                return
            if length > self.max_body_size:
                logger.info("Rejected body on %s: content-length=%s", scope["path"], length)
                await self._reply_too_large(scope, receive, send)
                return

        received = 0
        rejected = False
        replied = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, rejected, replied
            if rejected:
                return {"type": "http.disconnect"}
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    rejected = True
                    logger.info(
                        "Rejected streamed body on %s after %s bytes", scope["path"], received
                    )
                    if not response_started:
                        replied = True
                        await self._reply_too_large(scope, receive, send)
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            # The 413 has already gone out; whatever the app answers is dropped.
            if replied:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        await self.app(scope, limited_receive, guarded_send)

    async def _reply_too_large(self, scope: Scope, receive: Receive, send: Send) -> None:
        mib = self.max_body_size / (1024 * 1024)
        await self._reply(
            scope,
            receive,
            send,
            413,
            "payload_too_large",
            f"Request body too large. Maximum size is {mib:g}MB",
        )

    @staticmethod
    async def _reply(
        scope: Scope, receive: Receive, send: Send, status_code: int, code: str, message: str
    ) -> None:
        response = JSONResponse(status_code=status_code, content=_error_body(code, message))
        await response(scope, receive, send)

"""ASGI middleware enforcing the request body ceiling."""

import logging
from typing import Optional

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from server import config
from server.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than a fixed number of bytes.

    A declared Content-Length over the limit is answered with 413 before the
    application runs. Bodies without a declared length are counted as they
    are received; crossing the limit raises PayloadTooLargeError inside the
    handler reading the body, which the application's exception handlers
    turn into a 413.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: Optional[int] = None):
        self.app = app
        self.max_body_bytes = max_body_bytes

    def _limit(self) -> int:
        if self.max_body_bytes is not None:
            return self.max_body_bytes
        return config.MAX_BODY_BYTES

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self._limit()
        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > limit:
            logger.warning(
                f"Rejected body of {declared} bytes (limit {limit}) for {scope['method']} {scope['path']}"
            )
            response = JSONResponse(
                status_code=413,
                content={"detail": "Request body too large", "code": "PAYLOAD_TOO_LARGE"}
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise PayloadTooLargeError("Request body too large")
            return message

        await self.app(scope, limited_receive, send)

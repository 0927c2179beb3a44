import logging
import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = b"x-request-id"


class RequestLoggingMiddleware:
    """
    Pure ASGI middleware that tags every HTTP request with an id and
    writes one access log line when it finishes.

    The id is taken from an incoming ``X-Request-ID`` header when the
    caller (usually a proxy) sent one, otherwise generated, and is echoed
    back on the response so client and server logs can be joined.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = dict(scope["headers"]).get(REQUEST_ID_HEADER, b"").decode("latin-1")
        if not request_id:
            request_id = uuid.uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id

        start = time.perf_counter()
        status_code = 500

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            logger.info(
                "[%s] %s %s -> %d (%.2f ms)",
                request_id,
                scope["method"],
                scope["path"],
                status_code,
                (time.perf_counter() - start) * 1000,
            )

"""Request ID middleware: tags every HTTP request and response with an ID.

Pure ASGI rather than BaseHTTPMiddleware, so headers set by exception
handlers inside the stack are not lost.
"""

import uuid
from typing import Any

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from apikit.config import settings


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp, header_name: str | None = None) -> None:
        self.app = app
        self.header_name = (header_name or settings.request_id_header).lower().encode("latin-1")

    def _incoming_id(self, scope: Scope) -> str:
        for name, value in scope.get("headers", []):
            if name == self.header_name:
                return value.decode("latin-1")
        return ""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming_id(scope) or str(uuid.uuid4())

        # Readable downstream as request.state.request_id
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers: list[Any] = list(message.get("headers", []))
                headers.append((self.header_name, request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_id)

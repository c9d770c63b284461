# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""CORS middleware for Starlette: pure ASGI."""

from __future__ import annotations

from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from crossorigin.cors.interceptor import CorsInterceptor
from crossorigin.cors.policy import CorsPolicy


class AsgiExchange:
    """HttpExchange over raw ASGI.

    The request is the connection scope and the response is the
    ``http.response.start`` message, so headers are injected without
    buffering the body.
    """

    def method(self, request: Scope) -> str:
        return str(request["method"])

    def header(self, request: Scope, name: str) -> str | None:
        return Headers(scope=request).get(name)

    def empty_response(self, status_code: int) -> Message:
        return {"type": "http.response.start", "status": status_code, "headers": []}

    def set_header(self, response: Message, name: str, value: str) -> Message:
        response.setdefault("headers", [])
        MutableHeaders(scope=response)[name] = value
        return response


class CorsPolicyMiddleware:
    """Applies a :class:`CorsPolicy` to every HTTP response.

    ``OPTIONS`` requests are answered here with an empty 204 and never reach
    the wrapped app.  Non-HTTP scopes (websocket, lifespan) pass through.

    Uses raw ASGI protocol instead of ``BaseHTTPMiddleware`` so streaming
    responses are not buffered.
    """

    def __init__(self, app: ASGIApp, policy: CorsPolicy | None = None) -> None:
        self.app = app
        self._interceptor: CorsInterceptor[Scope, Message] = CorsInterceptor(
            policy or CorsPolicy(), AsgiExchange()
        )

    @property
    def policy(self) -> CorsPolicy:
        return self._interceptor.policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        interceptor = self._interceptor

        if interceptor.is_preflight(scope):
            await send(interceptor.preflight(scope))
            await send({"type": "http.response.body", "body": b""})
            return

        async def send_with_cors(message: Any) -> None:
            if message["type"] == "http.response.start":
                message = interceptor.decorate(scope, message)
            await send(message)

        await self.app(scope, receive, send_with_cors)

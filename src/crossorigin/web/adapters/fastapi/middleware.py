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
"""CORS for FastAPI applications.

:func:`install_cors` adds the pure ASGI :class:`CorsPolicyMiddleware`.
:func:`cors_http_middleware` works on FastAPI ``Request``/``Response``
objects instead, for apps that compose ``@app.middleware("http")``
functions; Starlette runs those under ``BaseHTTPMiddleware``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response

from crossorigin.cors.interceptor import CorsInterceptor
from crossorigin.cors.policy import CorsPolicy
from crossorigin.web.adapters.starlette.middleware import CorsPolicyMiddleware

CallNext = Callable[[Request], Awaitable[Response]]
HttpMiddleware = Callable[[Request, CallNext], Awaitable[Response]]


class FastAPIExchange:
    """HttpExchange over FastAPI ``Request`` / ``Response`` objects."""

    def method(self, request: Request) -> str:
        return request.method

    def header(self, request: Request, name: str) -> str | None:
        return request.headers.get(name)

    def empty_response(self, status_code: int) -> Response:
        return Response(status_code=status_code)

    def set_header(self, response: Response, name: str, value: str) -> Response:
        response.headers[name] = value
        return response


def cors_http_middleware(policy: CorsPolicy) -> HttpMiddleware:
    """Build an HTTP middleware function applying *policy*.

    Usage::

        app.middleware("http")(cors_http_middleware(policy))
    """
    interceptor: CorsInterceptor[Request, Response] = CorsInterceptor(policy, FastAPIExchange())

    async def cors_middleware(request: Request, call_next: CallNext) -> Response:
        return await interceptor.intercept_async(request, call_next)

    return cors_middleware


def install_cors(app: FastAPI, policy: CorsPolicy) -> FastAPI:
    """Add *policy* to *app* as its outermost middleware.

    Must run before the app starts serving.
    """
    app.add_middleware(CorsPolicyMiddleware, policy=policy)
    return app

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
"""CorsInterceptor: preflight short-circuit and header injection.

Each request goes through one pass::

    OPTIONS   -> empty 204 response (handler never called) -+
    otherwise -> handler(request)                           -+-> CORS headers -> caller

The interceptor is generic over the host's request and response types; an
:class:`~crossorigin.web.ports.exchange.HttpExchange` supplies the
framework-specific pieces.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Generic

from crossorigin.cors.headers import ORIGIN, apply_cors_headers
from crossorigin.cors.policy import CorsPolicy
from crossorigin.logging.loggers import get_logger
from crossorigin.web.ports.exchange import HttpExchange, RequestT, ResponseT

PREFLIGHT_METHOD = "OPTIONS"
PREFLIGHT_STATUS = 204

logger = get_logger("crossorigin.cors")


class CorsInterceptor(Generic[RequestT, ResponseT]):
    """Applies a :class:`CorsPolicy` to requests of one hosting framework.

    Holds no per-request state, so one instance can serve any number of
    concurrent requests.
    """

    def __init__(self, policy: CorsPolicy, exchange: HttpExchange[RequestT, ResponseT]) -> None:
        self._policy = policy
        self._exchange = exchange

    @property
    def policy(self) -> CorsPolicy:
        return self._policy

    def is_preflight(self, request: RequestT) -> bool:
        return self._exchange.method(request) == PREFLIGHT_METHOD

    def request_origin(self, request: RequestT) -> str:
        """The request's ``Origin`` header, ``""`` when absent."""
        return self._exchange.header(request, ORIGIN) or ""

    def preflight(self, request: RequestT) -> ResponseT:
        """Answer a preflight request without reaching the handler."""
        logger.debug("cors_preflight", origin=self.request_origin(request))
        response = self._exchange.empty_response(PREFLIGHT_STATUS)
        return self.decorate(request, response)

    def decorate(self, request: RequestT, response: ResponseT) -> ResponseT:
        """Attach the policy's headers for *request* to *response*."""
        return apply_cors_headers(
            self._policy,
            self.request_origin(request),
            response,
            self._exchange.set_header,
        )

    def intercept(self, request: RequestT, handler: Callable[[RequestT], ResponseT]) -> ResponseT:
        if self.is_preflight(request):
            return self.preflight(request)
        return self.decorate(request, handler(request))

    async def intercept_async(
        self,
        request: RequestT,
        handler: Callable[[RequestT], Awaitable[ResponseT]],
    ) -> ResponseT:
        if self.is_preflight(request):
            return self.preflight(request)
        return self.decorate(request, await handler(request))

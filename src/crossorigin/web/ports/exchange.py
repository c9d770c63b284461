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
"""HttpExchange protocol: framework-agnostic request/response access.

The CORS interceptor only ever needs four things from a hosting framework,
so vendor-specific types (Starlette messages, FastAPI responses, ...) stay
confined to the adapter layer.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


@runtime_checkable
class HttpExchange(Protocol[RequestT, ResponseT]):
    """Adapter between a host framework's native types and the CORS core."""

    def method(self, request: RequestT) -> str:
        """Return the request method token, e.g. ``"OPTIONS"``."""
        ...

    def header(self, request: RequestT, name: str) -> str | None:
        """Return the request header *name* (case-insensitive), or ``None``."""
        ...

    def empty_response(self, status_code: int) -> ResponseT:
        """Build a response with *status_code* and an empty body."""
        ...

    def set_header(self, response: ResponseT, name: str, value: str) -> ResponseT:
        """Set header *name* on *response*, replacing any existing value."""
        ...

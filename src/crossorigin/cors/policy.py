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
"""CorsPolicy: immutable CORS configuration with a chained builder.

Every builder method returns a new policy with exactly one field changed::

    policy = (
        CorsPolicy.new()
        .allow_origin("https://app.example.com")
        .allow_origin("https://admin.example.com")
        .allow_method(HTTPMethod.GET)
        .allow_method(HTTPMethod.POST)
        .allow_header("Authorization")
        .max_age(600)
    )

A default policy emits no headers at all.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from http import HTTPMethod

from crossorigin.cors.methods import canonical_method
from crossorigin.cors.origin import WILDCARD, AllowedOrigin, OriginSet, Wildcard, validate_origin
from crossorigin.kernel.exceptions import InvalidOriginException
from crossorigin.logging.loggers import get_logger

logger = get_logger("crossorigin.cors")


@dataclass(frozen=True)
class CorsPolicy:
    """Declarative CORS policy.

    Attributes:
        allowed_origin: ``None`` means ``Access-Control-Allow-Origin`` is never sent.
        exposed_headers: Response headers made readable to client-side scripts.
        cache_max_age: Preflight cache duration in seconds.
        credentials: Any non-``None`` value emits ``Access-Control-Allow-Credentials: true``.
        allowed_methods: Canonical method tokens.
        allowed_headers: Request header names, case preserved.
    """

    allowed_origin: AllowedOrigin | None = None
    exposed_headers: frozenset[str] = frozenset()
    cache_max_age: int | None = None
    credentials: bool | None = None
    allowed_methods: frozenset[str] = frozenset()
    allowed_headers: frozenset[str] = frozenset()

    @classmethod
    def new(cls) -> CorsPolicy:
        return cls()

    def allow_all_origins(self) -> CorsPolicy:
        """Allow any origin, discarding previously allowed origins."""
        return replace(self, allowed_origin=WILDCARD)

    def allow_origin(self, origin: str) -> CorsPolicy:
        """Add *origin* to the allowed set.

        A malformed origin is logged and ignored; the chain carries on with
        this policy unchanged.  Once all origins are allowed, adding a
        specific one has no effect.
        """
        try:
            validate_origin(origin)
        except InvalidOriginException as exc:
            logger.warning("cors_origin_rejected", origin=origin, reason=str(exc))
            return self

        current = self.allowed_origin
        if isinstance(current, Wildcard):
            return self
        if isinstance(current, OriginSet):
            return replace(self, allowed_origin=current.with_origin(origin))
        return replace(self, allowed_origin=OriginSet.of(origin))

    def expose_header(self, name: str) -> CorsPolicy:
        return replace(self, exposed_headers=self.exposed_headers | {name})

    def max_age(self, seconds: int) -> CorsPolicy:
        return replace(self, cache_max_age=seconds)

    def allow_credentials(self) -> CorsPolicy:
        return replace(self, credentials=True)

    def allow_method(self, method: str | HTTPMethod) -> CorsPolicy:
        return replace(self, allowed_methods=self.allowed_methods | {canonical_method(method)})

    def allow_header(self, name: str) -> CorsPolicy:
        return replace(self, allowed_headers=self.allowed_headers | {name})

    @property
    def is_empty(self) -> bool:
        """``True`` when this policy would not emit any header."""
        return self == CorsPolicy()

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
"""Turns a :class:`CorsPolicy` and a request origin into response headers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from crossorigin.cors.methods import ordered_methods
from crossorigin.cors.origin import OriginSet, Wildcard
from crossorigin.cors.policy import CorsPolicy
from crossorigin.logging.loggers import get_logger

ResponseT = TypeVar("ResponseT")

ORIGIN = "Origin"
VARY = "Vary"
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ACCESS_CONTROL_MAX_AGE = "Access-Control-Max-Age"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"

logger = get_logger("crossorigin.cors")


def _join(values: list[str]) -> str:
    return ",".join(values)


def allow_origin_headers(policy: CorsPolicy, origin: str) -> list[tuple[str, str]]:
    """Resolve ``Access-Control-Allow-Origin`` (and ``Vary``) for *origin*.

    - no allowed origin configured: nothing
    - wildcard: ``*``, whatever the request sent
    - exactly one configured origin: that origin, whatever the request sent
    - several configured origins: the request origin plus ``Vary: Origin``
      when it is a member, nothing otherwise
    """
    allowed = policy.allowed_origin
    if allowed is None:
        return []
    if isinstance(allowed, Wildcard):
        return [(ACCESS_CONTROL_ALLOW_ORIGIN, str(allowed))]
    if isinstance(allowed, OriginSet):
        single = allowed.single
        if single is not None:
            return [(ACCESS_CONTROL_ALLOW_ORIGIN, single)]
        if origin in allowed:
            return [(ACCESS_CONTROL_ALLOW_ORIGIN, origin), (VARY, ORIGIN)]
        logger.debug("cors_request_origin_denied", origin=origin)
        return []
    raise TypeError(f"Unsupported allowed origin: {allowed!r}")


def cors_headers(policy: CorsPolicy, origin: str) -> list[tuple[str, str]]:
    """Compute the CORS response headers for a request from *origin*.

    *origin* is the request's ``Origin`` header, or ``""`` when it was
    absent.  Headers come back in a fixed order: allow-origin (and vary),
    expose-headers, max-age, allow-credentials, allow-methods,
    allow-headers.
    """
    headers = allow_origin_headers(policy, origin)

    if policy.exposed_headers:
        headers.append((ACCESS_CONTROL_EXPOSE_HEADERS, _join(sorted(policy.exposed_headers))))

    if policy.cache_max_age is not None:
        headers.append((ACCESS_CONTROL_MAX_AGE, str(policy.cache_max_age)))

    # Presence alone enables credentials; the stored value is not consulted.
    if policy.credentials is not None:
        headers.append((ACCESS_CONTROL_ALLOW_CREDENTIALS, "true"))

    if policy.allowed_methods:
        headers.append((ACCESS_CONTROL_ALLOW_METHODS, _join(ordered_methods(policy.allowed_methods))))

    if policy.allowed_headers:
        headers.append((ACCESS_CONTROL_ALLOW_HEADERS, _join(sorted(policy.allowed_headers))))

    return headers


def apply_cors_headers(
    policy: CorsPolicy,
    origin: str,
    response: ResponseT,
    set_header: Callable[[ResponseT, str, str], ResponseT],
) -> ResponseT:
    """Fold :func:`cors_headers` over *response* through *set_header*."""
    for name, value in cors_headers(policy, origin):
        response = set_header(response, name, value)
    return response

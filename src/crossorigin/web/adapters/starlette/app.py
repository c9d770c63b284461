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
"""Starlette application factory with CORS applied."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from crossorigin.config.properties.cors import load_policy
from crossorigin.core.config import Config
from crossorigin.cors.policy import CorsPolicy
from crossorigin.logging.loggers import configure_logging
from crossorigin.web.adapters.starlette.middleware import CorsPolicyMiddleware


def create_app(
    routes: Sequence[BaseRoute] = (),
    cors: CorsPolicy | None = None,
    debug: bool = False,
    middleware: Sequence[Middleware] = (),
    lifespan: Any = None,
    config: Config | None = None,
) -> Starlette:
    """Create a Starlette application.

    When *config* is given, ``crossorigin.logging`` is applied first and
    *cors* defaults to the policy bound from ``crossorigin.cors``.

    When a policy is present, :class:`CorsPolicyMiddleware` is installed as
    the outermost middleware so preflight requests are answered before any
    other middleware runs.
    """
    if config is not None:
        configure_logging(config)
        if cors is None:
            cors = load_policy(config)

    stack: list[Middleware] = []
    if cors is not None:
        stack.append(Middleware(CorsPolicyMiddleware, policy=cors))
    stack.extend(middleware)

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=stack,
        lifespan=lifespan,
    )

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
"""FastAPI application factory with CORS applied."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from starlette.middleware import Middleware

from crossorigin.config.properties.cors import load_policy
from crossorigin.core.config import Config
from crossorigin.cors.policy import CorsPolicy
from crossorigin.logging.loggers import configure_logging
from crossorigin.web.adapters.starlette.middleware import CorsPolicyMiddleware


def create_app(
    title: str = "crossorigin",
    version: str = "0.1.0",
    description: str = "",
    debug: bool = False,
    docs_enabled: bool = True,
    cors: CorsPolicy | None = None,
    lifespan: Any = None,
    config: Config | None = None,
) -> FastAPI:
    """Create a FastAPI application, applying *cors* when given.

    FastAPI provides built-in OpenAPI docs (Swagger UI at ``/docs``, ReDoc at
    ``/redoc``); *docs_enabled* toggles them.  *config* is handled as in the
    Starlette factory: logging is configured and *cors* defaults to the
    bound ``crossorigin.cors`` policy.
    """
    if config is not None:
        configure_logging(config)
        if cors is None:
            cors = load_policy(config)

    middleware: list[Middleware] = []
    if cors is not None:
        middleware.append(Middleware(CorsPolicyMiddleware, policy=cors))

    return FastAPI(
        title=title,
        version=version,
        description=description,
        debug=debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        middleware=middleware,
        lifespan=lifespan,
    )

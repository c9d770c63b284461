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
"""crossorigin: declarative CORS policies applied to HTTP responses.

Build a :class:`CorsPolicy` once at startup and hand it to a host adapter::

    from crossorigin import CorsPolicy
    from crossorigin.web.adapters.starlette import CorsPolicyMiddleware

    policy = CorsPolicy.new().allow_origin("https://app.example.com").allow_method("GET")
    app.add_middleware(CorsPolicyMiddleware, policy=policy)
"""

from crossorigin.config.properties import CorsProperties, load_policy
from crossorigin.core.config import Config
from crossorigin.cors import (
    WILDCARD,
    CorsInterceptor,
    CorsPolicy,
    OriginSet,
    Wildcard,
    apply_cors_headers,
    cors_headers,
)
from crossorigin.kernel.exceptions import (
    ConfigurationException,
    CrossOriginException,
    InvalidOriginException,
)
from crossorigin.logging import configure_logging
from crossorigin.web.ports import HttpExchange

__version__ = "0.1.0"

__all__ = [
    "WILDCARD",
    "Config",
    "ConfigurationException",
    "CorsInterceptor",
    "CorsPolicy",
    "CorsProperties",
    "CrossOriginException",
    "HttpExchange",
    "InvalidOriginException",
    "OriginSet",
    "Wildcard",
    "apply_cors_headers",
    "configure_logging",
    "cors_headers",
    "load_policy",
]

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
"""CORS configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from crossorigin.core.config import Config, config_properties
from crossorigin.cors.policy import CorsPolicy

WILDCARD_ORIGIN = "*"


@config_properties(prefix="crossorigin.cors")
@dataclass
class CorsProperties:
    """CORS policy as configuration (crossorigin.cors.*).

    Example ``crossorigin.yaml``::

        crossorigin:
          cors:
            allowed_origins: ["https://app.example.com", "https://admin.example.com"]
            allowed_methods: [GET, POST]
            allowed_headers: [Authorization, Content-Type]
            exposed_headers: [X-Request-Id]
            allow_credentials: true
            max_age: 600

    Every field defaults to "not configured", so an empty section yields a
    policy that adds no headers.
    """

    allowed_origins: list[str] = field(default_factory=list)
    exposed_headers: list[str] = field(default_factory=list)
    max_age: int | None = None
    allow_credentials: bool = False
    allowed_methods: list[str] = field(default_factory=list)
    allowed_headers: list[str] = field(default_factory=list)

    def to_policy(self) -> CorsPolicy:
        """Replay these properties through the :class:`CorsPolicy` builder.

        ``"*"`` among the origins allows all origins.  Malformed origins are
        logged and skipped exactly as with :meth:`CorsPolicy.allow_origin`.
        """
        policy = CorsPolicy.new()

        for origin in self.allowed_origins:
            if origin == WILDCARD_ORIGIN:
                policy = policy.allow_all_origins()
            else:
                policy = policy.allow_origin(origin)

        for name in self.exposed_headers:
            policy = policy.expose_header(name)

        if self.max_age is not None:
            policy = policy.max_age(self.max_age)

        if self.allow_credentials:
            policy = policy.allow_credentials()

        for method in self.allowed_methods:
            policy = policy.allow_method(method)

        for name in self.allowed_headers:
            policy = policy.allow_header(name)

        return policy


def load_policy(config: Config) -> CorsPolicy:
    """Bind ``crossorigin.cors`` from *config* and build the policy."""
    return config.bind(CorsProperties).to_policy()

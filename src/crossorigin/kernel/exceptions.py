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
"""Exception hierarchy for crossorigin.

Nothing in this hierarchy is raised while a request is being handled. A
misconfigured policy degrades to fewer headers; these exceptions only
surface at startup (configuration binding) or internally between the
origin validator and the policy builder.
"""

from __future__ import annotations


class CrossOriginException(Exception):
    """Base exception for all crossorigin errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_INVALID_ORIGIN").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(CrossOriginException):
    """Configuration could not be loaded, resolved or bound."""


class InvalidOriginException(ConfigurationException):
    """An origin is not a syntactically well-formed absolute URI."""

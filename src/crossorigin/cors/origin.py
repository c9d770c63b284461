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
"""Allowed-origin variants: :class:`Wildcard` or a non-empty :class:`OriginSet`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import AnyUrl, TypeAdapter, ValidationError

from crossorigin.kernel.exceptions import InvalidOriginException

_URI_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class Wildcard:
    """Any origin is allowed; emitted as ``*``."""

    def __str__(self) -> str:
        return "*"


WILDCARD = Wildcard()


@dataclass(frozen=True)
class OriginSet:
    """A non-empty, case-sensitive set of allowed origins."""

    origins: frozenset[str]

    def __post_init__(self) -> None:
        if not self.origins:
            raise ValueError("OriginSet requires at least one origin")

    @classmethod
    def of(cls, *origins: str) -> OriginSet:
        return cls(frozenset(origins))

    def with_origin(self, origin: str) -> OriginSet:
        if origin in self.origins:
            return self
        return OriginSet(self.origins | {origin})

    @property
    def single(self) -> str | None:
        """The only member when the set has exactly one, else ``None``."""
        if len(self.origins) == 1:
            return next(iter(self.origins))
        return None

    def __contains__(self, origin: object) -> bool:
        return origin in self.origins


AllowedOrigin = Union[Wildcard, OriginSet]


def _invalid(origin: str, detail: str) -> InvalidOriginException:
    return InvalidOriginException(
        f"Invalid origin {origin!r}: {detail}",
        code="CORS_INVALID_ORIGIN",
        context={"origin": origin},
    )


def validate_origin(origin: str) -> str:
    """Return *origin* unchanged if it parses as an absolute URI.

    Only a pass/fail syntactic check; the parsed form is discarded so the
    configured string is what later gets compared and echoed.  Surrounding
    whitespace is refused even though the URI parser would trim it.

    Raises:
        InvalidOriginException: If *origin* is not a well-formed absolute URI.
    """
    if origin != origin.strip():
        raise _invalid(origin, "leading or trailing whitespace")
    try:
        _URI_ADAPTER.validate_python(origin)
    except ValidationError as exc:
        detail = "; ".join(e["msg"] for e in exc.errors())
        raise _invalid(origin, detail) from exc
    return origin

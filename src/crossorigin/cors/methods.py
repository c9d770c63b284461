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
"""HTTP method tokens as they appear in ``Access-Control-Allow-Methods``.

Method names are case-sensitive: ``GET`` is the standard method while
``get`` is a custom token and is emitted exactly as supplied.
"""

from __future__ import annotations

from collections.abc import Iterable
from http import HTTPMethod

STANDARD_METHODS: tuple[str, ...] = (
    "GET",
    "POST",
    "HEAD",
    "PUT",
    "DELETE",
    "TRACE",
    "CONNECT",
    "OPTIONS",
    "PATCH",
)

_STANDARD_RANK = {name: rank for rank, name in enumerate(STANDARD_METHODS)}


def canonical_method(method: str | HTTPMethod) -> str:
    """Return the wire token for *method*."""
    if isinstance(method, HTTPMethod):
        return method.value
    return method


def is_standard(token: str) -> bool:
    return token in _STANDARD_RANK


def _method_sort_key(token: str) -> tuple[int, str]:
    if is_standard(token):
        return _STANDARD_RANK[token], ""
    return len(STANDARD_METHODS), token


def ordered_methods(tokens: Iterable[str]) -> list[str]:
    """Standard methods in canonical order, then custom tokens sorted."""
    return sorted(tokens, key=_method_sort_key)

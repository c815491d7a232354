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
"""Policy key -> CSP directive name conversion."""

from __future__ import annotations

import re

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

CSP_DIRECTIVES: frozenset[str] = frozenset({
    "base-uri",
    "block-all-mixed-content",
    "child-src",
    "connect-src",
    "default-src",
    "fenced-frame-src",
    "font-src",
    "form-action",
    "frame-ancestors",
    "frame-src",
    "img-src",
    "manifest-src",
    "media-src",
    "object-src",
    "prefetch-src",
    "report-to",
    "report-uri",
    "require-trusted-types-for",
    "sandbox",
    "script-src",
    "script-src-attr",
    "script-src-elem",
    "style-src",
    "style-src-attr",
    "style-src-elem",
    "trusted-types",
    "upgrade-insecure-requests",
    "worker-src",
})
"""Directive names defined by CSP Level 3 and the Reporting API."""


def to_kebab_case(key: str) -> str:
    """Convert ``scriptSrc`` or ``script_src`` to ``script-src``."""
    return _CAMEL_BOUNDARY_RE.sub(r"-\1", key).replace("_", "-").lower()


def _spellings(directive: str) -> list[str]:
    head, *rest = directive.split("-")
    camel = head + "".join(part.capitalize() for part in rest)
    return [directive, directive.replace("-", "_"), camel]


_KNOWN: dict[str, str] = {
    spelling: directive for directive in CSP_DIRECTIVES for spelling in _spellings(directive)
}


class DirectiveNameFormatter:
    """Maps policy keys to CSP directive names.

    Known directives resolve through a precomputed table; anything else is
    converted once and remembered for the lifetime of this formatter.
    """

    def __init__(self) -> None:
        self._cache: dict[str, str] = dict(_KNOWN)

    def __call__(self, key: str) -> str:
        name = self._cache.get(key)
        if name is None:
            name = to_kebab_case(key)
            self._cache[key] = name
        return name

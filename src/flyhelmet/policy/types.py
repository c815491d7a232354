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
"""Security policy model — resolved, immutable policy types.

Instances of these types are produced by :func:`flyhelmet.policy.resolver.resolve`
and are never built by hand in application code. Every field carries a
concrete value; ``None`` on an optional section means the user explicitly
switched that header off.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Source:
    """Common CSP source expressions."""

    SELF = "'self'"
    UNSAFE_INLINE = "'unsafe-inline'"
    HTTPS = "https:"
    DATA = "data:"
    NONE = "'none'"
    BLOB = "blob:"


class Mode(str, Enum):
    """Runtime mode the header set is composed for."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class FrameOptions(str, Enum):
    """Values for ``X-Frame-Options``."""

    DENY = "DENY"
    SAMEORIGIN = "SAMEORIGIN"
    ALLOW_FROM = "ALLOW-FROM"


class ReferrerPolicy(str, Enum):
    """Values for ``Referrer-Policy``."""

    NO_REFERRER = "no-referrer"
    NO_REFERRER_WHEN_DOWNGRADE = "no-referrer-when-downgrade"
    ORIGIN = "origin"
    ORIGIN_WHEN_CROSS_ORIGIN = "origin-when-cross-origin"
    SAME_ORIGIN = "same-origin"
    STRICT_ORIGIN = "strict-origin"
    STRICT_ORIGIN_WHEN_CROSS_ORIGIN = "strict-origin-when-cross-origin"
    UNSAFE_URL = "unsafe-url"


class CrossOriginResourcePolicy(str, Enum):
    """Values for ``Cross-Origin-Resource-Policy``."""

    SAME_ORIGIN = "same-origin"
    SAME_SITE = "same-site"
    CROSS_ORIGIN = "cross-origin"


class CrossOriginOpenerPolicy(str, Enum):
    """Values for ``Cross-Origin-Opener-Policy``."""

    UNSAFE_NONE = "unsafe-none"
    SAME_ORIGIN_ALLOW_POPUPS = "same-origin-allow-popups"
    SAME_ORIGIN = "same-origin"


def _frozen_mapping(data: Mapping | None = None) -> Mapping:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class CspPolicy:
    """Content-Security-Policy directives in emission order.

    ``directives`` maps header directive names (``script-src``) to their
    source tokens. Directives with no tokens are kept but never emitted.
    """

    directives: Mapping[str, tuple[str, ...]] = field(default_factory=_frozen_mapping)
    use_nonce: bool = False
    report_only: bool = False


@dataclass(frozen=True)
class HstsPolicy:
    """HTTP Strict Transport Security settings."""

    max_age: int = 15_552_000  # 180 days
    include_subdomains: bool = True
    preload: bool = True


@dataclass(frozen=True)
class ReportEndpoint:
    """One Reporting API endpoint."""

    url: str
    priority: int | None = None
    weight: int | None = None


@dataclass(frozen=True)
class ReportGroup:
    """A ``Report-To`` endpoint group.

    ``max_age`` is non-negative and ``endpoints`` is never empty once the
    group has passed through the resolver.
    """

    group: str
    max_age: int
    endpoints: tuple[ReportEndpoint, ...]
    include_subdomains: bool = False


@dataclass(frozen=True)
class SecurityPolicy:
    """Fully resolved security policy shared read-only across requests."""

    csp: CspPolicy | None
    frame_options: FrameOptions | None
    xss_protection: bool
    dns_prefetch: bool
    referrer_policy: ReferrerPolicy | None
    permissions_policy: Mapping[str, tuple[str, ...]] | None
    hsts: HstsPolicy | None
    corp: CrossOriginResourcePolicy | None
    coop: CrossOriginOpenerPolicy | None
    report_to: tuple[ReportGroup, ...] = ()
    custom_headers: Mapping[str, str] = field(default_factory=_frozen_mapping)

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
"""Header builders — pure functions from a policy section to a header value.

For a fixed input every builder returns the same string; only the CSP
value varies, and only through the nonce passed in by the caller.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from flyhelmet.policy.directives import DirectiveNameFormatter
from flyhelmet.policy.types import CspPolicy, HstsPolicy, ReportEndpoint, ReportGroup

CSP_HEADER_NAME = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER_NAME = "Content-Security-Policy-Report-Only"
FRAME_OPTIONS_HEADER_NAME = "X-Frame-Options"
XSS_PROTECTION_HEADER_NAME = "X-XSS-Protection"
CONTENT_TYPE_OPTIONS_HEADER_NAME = "X-Content-Type-Options"
REFERRER_POLICY_HEADER_NAME = "Referrer-Policy"
DNS_PREFETCH_HEADER_NAME = "X-DNS-Prefetch-Control"
CORP_HEADER_NAME = "Cross-Origin-Resource-Policy"
COOP_HEADER_NAME = "Cross-Origin-Opener-Policy"
REPORT_TO_HEADER_NAME = "Report-To"
PERMISSIONS_POLICY_HEADER_NAME = "Permissions-Policy"
HSTS_HEADER_NAME = "Strict-Transport-Security"
NONCE_HEADER_NAME = "X-Nonce"

MANAGED_HEADER_NAMES: frozenset[str] = frozenset(
    name.lower()
    for name in (
        CSP_HEADER_NAME,
        CSP_REPORT_ONLY_HEADER_NAME,
        FRAME_OPTIONS_HEADER_NAME,
        XSS_PROTECTION_HEADER_NAME,
        CONTENT_TYPE_OPTIONS_HEADER_NAME,
        REFERRER_POLICY_HEADER_NAME,
        DNS_PREFETCH_HEADER_NAME,
        CORP_HEADER_NAME,
        COOP_HEADER_NAME,
        REPORT_TO_HEADER_NAME,
        PERMISSIONS_POLICY_HEADER_NAME,
        HSTS_HEADER_NAME,
        NONCE_HEADER_NAME,
    )
)
"""Lower-cased names of every header this library writes."""

NONCE_DIRECTIVES: frozenset[str] = frozenset({"script-src", "style-src"})
"""Directives that receive the ``'nonce-<value>'`` token in nonce mode."""


def csp_header_name(csp: CspPolicy) -> str:
    """Return the CSP header name for *csp* (enforcing or report-only)."""
    return CSP_REPORT_ONLY_HEADER_NAME if csp.report_only else CSP_HEADER_NAME


def build_csp(
    csp: CspPolicy,
    nonce: str | None = None,
    formatter: DirectiveNameFormatter | None = None,
) -> str:
    """Serialize CSP directives in policy order.

    Directives with no source tokens are skipped; a directive holding only
    an empty token (``upgrade-insecure-requests``) is emitted bare. When
    nonce mode is on and
    *nonce* is given, ``script-src`` and ``style-src`` get one extra
    ``'nonce-<value>'`` token.
    """
    fmt = formatter or DirectiveNameFormatter()
    inject = nonce if csp.use_nonce else None
    clauses: list[str] = []

    for key, sources in csp.directives.items():
        if not sources:
            continue
        name = fmt(key)
        tokens = [t for t in sources if t]
        if inject and name in NONCE_DIRECTIVES:
            tokens.append(f"'nonce-{inject}'")
        clauses.append(" ".join([name, *tokens]))

    return "; ".join(clauses)


def build_permissions_policy(policy: Mapping[str, Iterable[str]]) -> str:
    """Serialize features as ``feature=()`` or ``feature=(origin ...)``."""
    return ", ".join(f"{feature}=({' '.join(origins)})" for feature, origins in policy.items())


def _report_endpoint(endpoint: ReportEndpoint) -> dict[str, Any]:
    data: dict[str, Any] = {"url": endpoint.url}
    if endpoint.priority is not None:
        data["priority"] = endpoint.priority
    if endpoint.weight is not None:
        data["weight"] = endpoint.weight
    return data


def build_report_to(groups: Iterable[ReportGroup]) -> str:
    """Serialize report groups as a compact JSON array.

    Field names are the snake_case names the Reporting API expects on the
    wire (``max_age``, ``include_subdomains``).
    """
    payload = [
        {
            "group": group.group,
            "max_age": group.max_age,
            "endpoints": [_report_endpoint(e) for e in group.endpoints],
            "include_subdomains": group.include_subdomains,
        }
        for group in groups
    ]
    return json.dumps(payload, separators=(",", ":"))


def build_hsts(hsts: HstsPolicy) -> str:
    """Serialize HSTS as ``max-age=N[; includeSubDomains][; preload]``."""
    value = f"max-age={hsts.max_age}"
    if hsts.include_subdomains:
        value += "; includeSubDomains"
    if hsts.preload:
        value += "; preload"
    return value

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
"""Security headers composer — framework-agnostic.

:class:`SecurityHeaders` resolves a policy once, precomputes every header
that does not depend on per-response randomness, and composes the final
header map for each response. Vendor adapters only copy that map onto
their own response type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import structlog

from flyhelmet.config.properties import mode_from_config, policy_from_config
from flyhelmet.core.config import Config
from flyhelmet.policy.builders import (
    CONTENT_TYPE_OPTIONS_HEADER_NAME,
    COOP_HEADER_NAME,
    CORP_HEADER_NAME,
    DNS_PREFETCH_HEADER_NAME,
    FRAME_OPTIONS_HEADER_NAME,
    HSTS_HEADER_NAME,
    NONCE_HEADER_NAME,
    PERMISSIONS_POLICY_HEADER_NAME,
    REFERRER_POLICY_HEADER_NAME,
    REPORT_TO_HEADER_NAME,
    XSS_PROTECTION_HEADER_NAME,
    build_csp,
    build_hsts,
    build_permissions_policy,
    build_report_to,
    csp_header_name,
)
from flyhelmet.policy.directives import DirectiveNameFormatter
from flyhelmet.policy.nonce import NonceGenerator, generate_nonce
from flyhelmet.policy.resolver import resolve, resolve_mode
from flyhelmet.policy.types import Mode, SecurityPolicy, Source

logger = structlog.get_logger("flyhelmet.web.security_headers")


@dataclass(frozen=True)
class ComposedHeaders:
    """Headers for one response, in write order, plus the nonce they carry."""

    headers: Mapping[str, str]
    nonce: str | None = None


def build_static_headers(policy: SecurityPolicy) -> dict[str, str]:
    """Build every header whose value is fixed for the policy's lifetime."""
    headers: dict[str, str] = {}

    if policy.frame_options is not None:
        headers[FRAME_OPTIONS_HEADER_NAME] = policy.frame_options.value
    if policy.xss_protection:
        headers[XSS_PROTECTION_HEADER_NAME] = "1; mode=block"
    headers[CONTENT_TYPE_OPTIONS_HEADER_NAME] = "nosniff"
    if policy.referrer_policy is not None:
        headers[REFERRER_POLICY_HEADER_NAME] = policy.referrer_policy.value
    headers[DNS_PREFETCH_HEADER_NAME] = "on" if policy.dns_prefetch else "off"
    if policy.corp is not None:
        headers[CORP_HEADER_NAME] = policy.corp.value
    if policy.coop is not None:
        headers[COOP_HEADER_NAME] = policy.coop.value
    if policy.report_to:
        headers[REPORT_TO_HEADER_NAME] = build_report_to(policy.report_to)

    headers.update(policy.custom_headers)
    return headers


class SecurityHeaders:
    """Composes the security header set for outgoing responses.

    Args:
        policy: Partial policy mapping merged over the built-in defaults, or
            an already resolved :class:`SecurityPolicy`.
        mode: Runtime mode. ``Strict-Transport-Security`` is only emitted in
            :attr:`Mode.PRODUCTION`. Pinned for the lifetime of the instance.
        nonce_generator: Source of per-response CSP nonces.

    Raises:
        ConfigValidationError: If *policy* does not resolve.
    """

    def __init__(
        self,
        policy: Mapping[str, Any] | SecurityPolicy | None = None,
        mode: Mode | str = Mode.DEVELOPMENT,
        nonce_generator: NonceGenerator = generate_nonce,
    ) -> None:
        self._formatter = DirectiveNameFormatter()
        if isinstance(policy, SecurityPolicy):
            self.policy = policy
        else:
            self.policy = resolve(policy, formatter=self._formatter)
        self.mode = resolve_mode(mode)
        self._nonce_generator = nonce_generator

        self.static_headers: Mapping[str, str] = MappingProxyType(build_static_headers(self.policy))
        self._permissions_policy = (
            build_permissions_policy(self.policy.permissions_policy)
            if self.policy.permissions_policy is not None
            else None
        )
        self._hsts = (
            build_hsts(self.policy.hsts)
            if self.policy.hsts is not None and self.mode is Mode.PRODUCTION
            else None
        )

        self._log_configuration()

    @classmethod
    def from_config(cls, config: Config, nonce_generator: NonceGenerator = generate_nonce) -> SecurityHeaders:
        """Build from the ``flyhelmet.security`` and ``flyhelmet.mode`` settings."""
        return cls(
            policy_from_config(config),
            mode=mode_from_config(config),
            nonce_generator=nonce_generator,
        )

    def compose(self) -> ComposedHeaders:
        """Return the header map for a single response.

        Write order is static headers, CSP (and ``X-Nonce``),
        Permissions-Policy, then HSTS; later entries win on name collision.
        """
        headers = dict(self.static_headers)
        nonce: str | None = None

        csp = self.policy.csp
        if csp is not None:
            nonce = self._nonce_generator() if csp.use_nonce else None
            headers[csp_header_name(csp)] = build_csp(csp, nonce, self._formatter)
            if nonce is not None:
                headers[NONCE_HEADER_NAME] = nonce

        if self._permissions_policy is not None:
            headers[PERMISSIONS_POLICY_HEADER_NAME] = self._permissions_policy
        if self._hsts is not None:
            headers[HSTS_HEADER_NAME] = self._hsts

        return ComposedHeaders(headers=MappingProxyType(headers), nonce=nonce)

    def _log_configuration(self) -> None:
        csp = self.policy.csp
        if csp is not None and csp.use_nonce:
            for name in ("script-src", "style-src"):
                if Source.UNSAFE_INLINE in csp.directives.get(name, ()):
                    logger.warning(
                        "csp_nonce_overrides_unsafe_inline",
                        directive=name,
                    )
        if self.policy.hsts is not None and self._hsts is None:
            logger.info("hsts_skipped_outside_production", mode=self.mode.value)

        logger.info(
            "security_headers_configured",
            mode=self.mode.value,
            static_headers=sorted(self.static_headers),
            csp_report_only=bool(csp and csp.report_only),
            csp_nonce=bool(csp and csp.use_nonce),
        )

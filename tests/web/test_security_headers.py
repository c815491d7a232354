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
"""Tests for the framework-agnostic SecurityHeaders composer."""

from __future__ import annotations

import itertools
from unittest.mock import MagicMock

import pytest

from flyhelmet.core.config import Config
from flyhelmet.kernel.exceptions import ConfigValidationError
from flyhelmet.policy.resolver import resolve
from flyhelmet.policy.types import Mode
from flyhelmet.web import security_headers as module
from flyhelmet.web.security_headers import ComposedHeaders, SecurityHeaders, build_static_headers

DEFAULT_CSP_VALUE = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: blob:; "
    "font-src 'self'; "
    "connect-src 'self'; "
    "frame-src 'self'; "
    "object-src 'none'; "
    "base-uri 'self'"
)


def _counter_nonces():
    counter = itertools.count(1)
    return lambda: f"nonce{next(counter)}"


class TestStaticHeaders:
    def test_default_static_headers_in_order(self):
        assert list(build_static_headers(resolve())) == [
            "X-Frame-Options",
            "X-XSS-Protection",
            "X-Content-Type-Options",
            "Referrer-Policy",
            "X-DNS-Prefetch-Control",
            "Cross-Origin-Resource-Policy",
            "Cross-Origin-Opener-Policy",
        ]

    def test_nosniff_always_emitted(self):
        policy = resolve({
            "frame_options": None,
            "xss_protection": False,
            "referrer_policy": None,
            "corp": None,
            "coop": None,
        })
        headers = build_static_headers(policy)
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Frame-Options" not in headers
        assert "X-XSS-Protection" not in headers

    def test_dns_prefetch_on_and_off(self):
        assert build_static_headers(resolve())["X-DNS-Prefetch-Control"] == "off"
        assert build_static_headers(resolve({"dns_prefetch": True}))["X-DNS-Prefetch-Control"] == "on"

    def test_report_to_and_custom_headers(self):
        policy = resolve({
            "report_to": [{"group": "csp", "max_age": 60, "endpoints": ["https://r.example"]}],
            "custom_headers": {"X-Powered-By": "flyhelmet"},
        })
        headers = build_static_headers(policy)
        assert headers["Report-To"].startswith('[{"group":"csp"')
        assert list(headers)[-1] == "X-Powered-By"

    def test_static_headers_are_read_only(self):
        helmet = SecurityHeaders()
        with pytest.raises(TypeError):
            helmet.static_headers["X-Frame-Options"] = "SAMEORIGIN"  # type: ignore[index]


class TestCompose:
    def test_end_to_end_defaults(self):
        composed = SecurityHeaders({"frameOptions": "DENY", "xssProtection": True}).compose()
        headers = composed.headers
        assert headers["X-Frame-Options"] == "DENY"
        assert headers["X-XSS-Protection"] == "1; mode=block"
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert headers["Content-Security-Policy"] == DEFAULT_CSP_VALUE
        assert headers["Permissions-Policy"] == "camera=(), microphone=(), geolocation=(), interest-cohort=()"
        assert headers["Cross-Origin-Resource-Policy"] == "same-origin"
        assert headers["Cross-Origin-Opener-Policy"] == "same-origin"
        assert "Strict-Transport-Security" not in headers
        assert composed.nonce is None

    def test_write_order(self):
        headers = SecurityHeaders(mode=Mode.PRODUCTION).compose().headers
        assert list(headers)[-3:] == [
            "Content-Security-Policy",
            "Permissions-Policy",
            "Strict-Transport-Security",
        ]

    def test_hsts_only_in_production(self):
        production = SecurityHeaders(mode="production").compose().headers
        development = SecurityHeaders(mode="development").compose().headers
        assert production["Strict-Transport-Security"] == "max-age=15552000; includeSubDomains; preload"
        assert "Strict-Transport-Security" not in development

    def test_hsts_disabled_even_in_production(self):
        headers = SecurityHeaders({"hsts": False}, mode=Mode.PRODUCTION).compose().headers
        assert "Strict-Transport-Security" not in headers

    def test_report_only_csp(self):
        headers = SecurityHeaders({"csp": {"report_only": True}}).compose().headers
        assert "Content-Security-Policy" not in headers
        assert headers["Content-Security-Policy-Report-Only"] == DEFAULT_CSP_VALUE

    def test_csp_and_permissions_policy_can_be_disabled(self):
        headers = SecurityHeaders({"csp": None, "permissions_policy": False}).compose().headers
        assert "Content-Security-Policy" not in headers
        assert "Permissions-Policy" not in headers

    def test_idempotent_without_nonce(self):
        helmet = SecurityHeaders(mode=Mode.PRODUCTION)
        assert dict(helmet.compose().headers) == dict(helmet.compose().headers)

    def test_composed_headers_read_only(self):
        composed = SecurityHeaders().compose()
        assert isinstance(composed, ComposedHeaders)
        with pytest.raises(TypeError):
            composed.headers["X-Frame-Options"] = "SAMEORIGIN"  # type: ignore[index]

    def test_accepts_resolved_policy(self):
        policy = resolve({"referrer_policy": "no-referrer"})
        helmet = SecurityHeaders(policy)
        assert helmet.policy is policy
        assert helmet.compose().headers["Referrer-Policy"] == "no-referrer"


class TestNonce:
    def test_nonce_in_csp_and_header(self):
        helmet = SecurityHeaders({"csp": {"use_nonce": True}}, nonce_generator=lambda: "abc")
        composed = helmet.compose()
        csp = composed.headers["Content-Security-Policy"]
        assert composed.nonce == "abc"
        assert composed.headers["X-Nonce"] == "abc"
        assert "script-src 'self' 'unsafe-inline' 'nonce-abc'" in csp
        assert "style-src 'self' 'unsafe-inline' 'nonce-abc'" in csp
        assert csp.count("'nonce-abc'") == 2

    def test_nonce_changes_per_response(self):
        helmet = SecurityHeaders({"csp": {"use_nonce": True}})
        first = helmet.compose()
        second = helmet.compose()
        assert first.nonce != second.nonce
        assert f"'nonce-{first.nonce}'" in first.headers["Content-Security-Policy"]
        assert f"'nonce-{second.nonce}'" in second.headers["Content-Security-Policy"]

    def test_only_nonce_dependent_headers_differ(self):
        helmet = SecurityHeaders({"csp": {"use_nonce": True}}, mode="production", nonce_generator=_counter_nonces())
        first = dict(helmet.compose().headers)
        second = dict(helmet.compose().headers)
        differing = {name for name in first if first[name] != second[name]}
        assert differing == {"Content-Security-Policy", "X-Nonce"}

    def test_generator_not_called_without_nonce_mode(self):
        generator = MagicMock(return_value="unused")
        SecurityHeaders(nonce_generator=generator).compose()
        generator.assert_not_called()


class TestValidationAtConstruction:
    def test_negative_hsts_max_age(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            SecurityHeaders({"hsts": {"max_age": -1}})
        assert exc_info.value.code == "POLICY_HSTS_MAX_AGE"

    def test_empty_report_endpoints(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            SecurityHeaders({"report_to": [{"group": "g", "max_age": 10, "endpoints": []}]})
        assert exc_info.value.code == "POLICY_REPORT_ENDPOINTS"

    def test_unknown_mode(self):
        with pytest.raises(ConfigValidationError):
            SecurityHeaders(mode="staging")


class TestFromConfig:
    def test_reads_security_section_and_mode(self):
        config = Config({
            "flyhelmet": {
                "mode": "production",
                "security": {"frame_options": "SAMEORIGIN", "hsts": {"max_age": 60, "preload": False}},
            }
        })
        helmet = SecurityHeaders.from_config(config)
        headers = helmet.compose().headers
        assert helmet.mode is Mode.PRODUCTION
        assert headers["X-Frame-Options"] == "SAMEORIGIN"
        assert headers["Strict-Transport-Security"] == "max-age=60; includeSubDomains"

    def test_empty_config_uses_defaults(self):
        helmet = SecurityHeaders.from_config(Config({}))
        assert helmet.mode is Mode.DEVELOPMENT
        assert helmet.policy == resolve()


class TestConfigurationLogging:
    @pytest.fixture()
    def log(self, monkeypatch):
        mock = MagicMock()
        monkeypatch.setattr(module, "logger", mock)
        return mock

    def test_configured_event(self, log):
        SecurityHeaders(mode="production")
        log.info.assert_called_once()
        assert log.info.call_args.args[0] == "security_headers_configured"
        assert log.info.call_args.kwargs["mode"] == "production"

    def test_hsts_skipped_noted(self, log):
        SecurityHeaders()
        events = [c.args[0] for c in log.info.call_args_list]
        assert events == ["hsts_skipped_outside_production", "security_headers_configured"]

    def test_nonce_with_unsafe_inline_warns(self, log):
        SecurityHeaders({"csp": {"use_nonce": True}})
        warned = [c.kwargs["directive"] for c in log.warning.call_args_list]
        assert warned == ["script-src", "style-src"]

    def test_no_warning_without_unsafe_inline(self, log):
        SecurityHeaders({"csp": {"use_nonce": True, "script_src": ["'self'"], "style_src": ["'self'"]}})
        log.warning.assert_not_called()

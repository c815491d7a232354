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
"""Policy resolver — merges a partial user policy over secure defaults.

Merge rules:

* Every top-level field given by the user replaces the default outright.
* ``csp``, ``permissions_policy`` and ``hsts`` are shallow-merged with their
  defaults instead (see :func:`merge_csp`, :func:`merge_permissions_policy`
  and :func:`merge_hsts`): user keys win, default keys the user did not
  mention are kept.
* ``None`` (or ``False``) on an optional section switches that header off.

Keys may be written in snake_case, camelCase or kebab-case so policies
ported from JavaScript configs or YAML files resolve the same way.
Any problem raises :class:`~flyhelmet.kernel.exceptions.ConfigValidationError`.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

from flyhelmet.kernel.exceptions import ConfigValidationError
from flyhelmet.policy.builders import MANAGED_HEADER_NAMES
from flyhelmet.policy.directives import DirectiveNameFormatter, to_kebab_case
from flyhelmet.policy.types import (
    CrossOriginOpenerPolicy,
    CrossOriginResourcePolicy,
    CspPolicy,
    FrameOptions,
    HstsPolicy,
    Mode,
    ReferrerPolicy,
    ReportEndpoint,
    ReportGroup,
    SecurityPolicy,
    Source,
)

E = TypeVar("E", bound=Enum)

_HEADER_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

_FORBIDDEN_CUSTOM_HEADERS: frozenset[str] = MANAGED_HEADER_NAMES | {"set-cookie"}

_CSP_FLAGS = frozenset({"use_nonce", "report_only"})

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_CSP = CspPolicy(
    directives=MappingProxyType({
        "default-src": (Source.SELF,),
        "script-src": (Source.SELF, Source.UNSAFE_INLINE),
        "style-src": (Source.SELF, Source.UNSAFE_INLINE),
        "img-src": (Source.SELF, Source.DATA, Source.BLOB),
        "font-src": (Source.SELF,),
        "connect-src": (Source.SELF,),
        "frame-src": (Source.SELF,),
        "object-src": (Source.NONE,),
        "base-uri": (Source.SELF,),
    }),
)

DEFAULT_PERMISSIONS_POLICY: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "camera": (),
    "microphone": (),
    "geolocation": (),
    "interest-cohort": (),
})

DEFAULT_HSTS = HstsPolicy()

DEFAULT_POLICY = SecurityPolicy(
    csp=DEFAULT_CSP,
    frame_options=FrameOptions.DENY,
    xss_protection=True,
    dns_prefetch=False,
    referrer_policy=ReferrerPolicy.STRICT_ORIGIN_WHEN_CROSS_ORIGIN,
    permissions_policy=DEFAULT_PERMISSIONS_POLICY,
    hsts=DEFAULT_HSTS,
    corp=CrossOriginResourcePolicy.SAME_ORIGIN,
    coop=CrossOriginOpenerPolicy.SAME_ORIGIN,
)

POLICY_FIELDS: frozenset[str] = frozenset({
    "csp",
    "frame_options",
    "xss_protection",
    "dns_prefetch",
    "referrer_policy",
    "permissions_policy",
    "hsts",
    "corp",
    "coop",
    "report_to",
    "custom_headers",
})


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


_KEY_ALIASES = {"include_sub_domains": "include_subdomains"}


def normalize_key(key: str) -> str:
    """Convert ``maxAge`` / ``max-age`` / ``max_age`` to ``max_age``.

    ``includeSubDomains`` maps to ``include_subdomains``.
    """
    name = to_kebab_case(str(key)).replace("-", "_")
    return _KEY_ALIASES.get(name, name)


def _normalize_section(
    data: Any, allowed: frozenset[str], path: str
) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigValidationError(
            f"'{path}' must be a mapping, got {type(data).__name__}",
            code="POLICY_TYPE",
            field=path,
        )
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = normalize_key(key)
        if name not in allowed:
            raise ConfigValidationError(
                f"Unknown key '{key}' in '{path}'",
                code="POLICY_UNKNOWN_KEY",
                field=f"{path}.{key}",
                allowed=sorted(allowed),
            )
        normalized[name] = value
    return normalized


def _is_disabled(value: Any) -> bool:
    return value is None or value is False


def _as_bool(value: Any, path: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.lower() in ("false", "0", "no", "off"):
        return False
    raise ConfigValidationError(
        f"'{path}' must be a boolean, got {value!r}", code="POLICY_TYPE", field=path
    )


def _as_non_negative_int(value: Any, path: str, code: str) -> int:
    if isinstance(value, bool):
        raise ConfigValidationError(
            f"'{path}' must be a non-negative integer", code=code, field=path
        )
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigValidationError(
            f"'{path}' must be a non-negative integer, got {value!r}",
            code=code,
            field=path,
        ) from exc
    if number != value and not isinstance(value, str):
        raise ConfigValidationError(
            f"'{path}' must be a non-negative integer, got {value!r}",
            code=code,
            field=path,
        )
    if number < 0:
        raise ConfigValidationError(
            f"'{path}' must be non-negative, got {number}", code=code, field=path, value=number
        )
    return number


def _as_enum(enum_cls: type[E], value: Any, path: str) -> E | None:
    if _is_disabled(value):
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ConfigValidationError(
            f"'{path}' must be one of {[m.value for m in enum_cls]}, got {value!r}",
            code="POLICY_ENUM",
            field=path,
        ) from exc


def _as_tokens(value: Any, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Mapping):
        raise ConfigValidationError(
            f"'{path}' must be a list of strings, got a mapping",
            code="POLICY_TYPE",
            field=path,
        )
    if isinstance(value, Iterable):
        return tuple(str(v) for v in value)
    raise ConfigValidationError(
        f"'{path}' must be a list of strings, got {value!r}", code="POLICY_TYPE", field=path
    )


# ---------------------------------------------------------------------------
# Section merges
# ---------------------------------------------------------------------------


def merge_csp(
    base: CspPolicy,
    override: Mapping[str, Any],
    formatter: DirectiveNameFormatter | None = None,
) -> CspPolicy:
    """Shallow-merge user CSP settings over *base*.

    Directive keys are normalized to header directive names first, so
    ``scriptSrc`` replaces the default ``script-src`` in place. New
    directives are appended after the defaults in the order given.
    ``True`` emits a directive without sources, ``False`` drops it.
    """
    if not isinstance(override, Mapping):
        raise ConfigValidationError(
            f"'csp' must be a mapping, got {type(override).__name__}",
            code="POLICY_TYPE",
            field="csp",
        )
    fmt = formatter or DirectiveNameFormatter()
    directives = dict(base.directives)
    use_nonce = base.use_nonce
    report_only = base.report_only

    for key, value in override.items():
        flag = normalize_key(key)
        if flag not in _CSP_FLAGS:
            name = fmt(key)
            if isinstance(value, bool):
                # Valueless directives such as upgrade-insecure-requests.
                directives[name] = ("",) if value else ()
            else:
                directives[name] = _as_tokens(value, f"csp.{name}")
        elif flag == "use_nonce":
            use_nonce = _as_bool(value, "csp.use_nonce")
        else:
            report_only = _as_bool(value, "csp.report_only")

    return CspPolicy(
        directives=MappingProxyType(directives),
        use_nonce=use_nonce,
        report_only=report_only,
    )


def merge_permissions_policy(
    base: Mapping[str, tuple[str, ...]],
    override: Mapping[str, Any],
) -> Mapping[str, tuple[str, ...]]:
    """Shallow-merge feature allow-lists. Feature names are kept verbatim."""
    if not isinstance(override, Mapping):
        raise ConfigValidationError(
            f"'permissions_policy' must be a mapping, got {type(override).__name__}",
            code="POLICY_TYPE",
            field="permissions_policy",
        )
    merged = dict(base)
    for feature, origins in override.items():
        merged[str(feature)] = _as_tokens(origins, f"permissions_policy.{feature}")
    return MappingProxyType(merged)


def merge_hsts(base: HstsPolicy, override: Mapping[str, Any]) -> HstsPolicy:
    """Shallow-merge HSTS settings, validating ``max_age``."""
    data = _normalize_section(
        override, frozenset({"max_age", "include_subdomains", "preload"}), "hsts"
    )
    return HstsPolicy(
        max_age=(
            _as_non_negative_int(data["max_age"], "hsts.max_age", "POLICY_HSTS_MAX_AGE")
            if "max_age" in data
            else base.max_age
        ),
        include_subdomains=(
            _as_bool(data["include_subdomains"], "hsts.include_subdomains")
            if "include_subdomains" in data
            else base.include_subdomains
        ),
        preload=_as_bool(data["preload"], "hsts.preload") if "preload" in data else base.preload,
    )


# ---------------------------------------------------------------------------
# Report-To and custom headers
# ---------------------------------------------------------------------------


def _report_endpoint(value: Any, path: str) -> ReportEndpoint:
    if isinstance(value, str):
        value = {"url": value}
    data = _normalize_section(value, frozenset({"url", "priority", "weight"}), path)
    url = data.get("url")
    if not isinstance(url, str) or not url:
        raise ConfigValidationError(
            f"'{path}.url' is required", code="POLICY_REPORT_ENDPOINT", field=f"{path}.url"
        )
    return ReportEndpoint(
        url=url,
        priority=_as_non_negative_int(data["priority"], f"{path}.priority", "POLICY_TYPE")
        if data.get("priority") is not None
        else None,
        weight=_as_non_negative_int(data["weight"], f"{path}.weight", "POLICY_TYPE")
        if data.get("weight") is not None
        else None,
    )


def resolve_report_group(value: Any, path: str = "report_to[0]") -> ReportGroup:
    """Validate one Report-To group descriptor."""
    data = _normalize_section(
        value, frozenset({"group", "max_age", "endpoints", "include_subdomains"}), path
    )
    group = data.get("group")
    if not isinstance(group, str) or not group:
        raise ConfigValidationError(
            f"'{path}.group' is required", code="POLICY_REPORT_GROUP", field=f"{path}.group"
        )
    if "max_age" not in data:
        raise ConfigValidationError(
            f"'{path}.max_age' is required",
            code="POLICY_REPORT_MAX_AGE",
            field=f"{path}.max_age",
        )
    max_age = _as_non_negative_int(data["max_age"], f"{path}.max_age", "POLICY_REPORT_MAX_AGE")

    raw_endpoints = data.get("endpoints") or []
    if isinstance(raw_endpoints, (str, Mapping)):
        raw_endpoints = [raw_endpoints]
    endpoints = tuple(
        _report_endpoint(e, f"{path}.endpoints[{i}]") for i, e in enumerate(raw_endpoints)
    )
    if not endpoints:
        raise ConfigValidationError(
            f"'{path}.endpoints' must contain at least one endpoint",
            code="POLICY_REPORT_ENDPOINTS",
            field=f"{path}.endpoints",
        )

    return ReportGroup(
        group=group,
        max_age=max_age,
        endpoints=endpoints,
        include_subdomains=_as_bool(
            data.get("include_subdomains", False), f"{path}.include_subdomains"
        ),
    )


def _report_groups(value: Any) -> tuple[ReportGroup, ...]:
    if _is_disabled(value):
        return ()
    if isinstance(value, Mapping):
        value = [value]
    return tuple(resolve_report_group(g, f"report_to[{i}]") for i, g in enumerate(value))


def _custom_headers(value: Any) -> Mapping[str, str]:
    if _is_disabled(value):
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise ConfigValidationError(
            "'custom_headers' must be a mapping", code="POLICY_TYPE", field="custom_headers"
        )
    headers: dict[str, str] = {}
    for name, header_value in value.items():
        path = f"custom_headers.{name}"
        if not isinstance(name, str) or not _HEADER_TOKEN_RE.match(name):
            raise ConfigValidationError(
                f"Invalid header name {name!r}", code="POLICY_CUSTOM_HEADER", field=path
            )
        if name.lower() in _FORBIDDEN_CUSTOM_HEADERS:
            raise ConfigValidationError(
                f"Header '{name}' cannot be set through custom_headers",
                code="POLICY_CUSTOM_HEADER_RESERVED",
                field=path,
            )
        if not isinstance(header_value, str):
            raise ConfigValidationError(
                f"Header '{name}' value must be a string, got {header_value!r}",
                code="POLICY_CUSTOM_HEADER",
                field=path,
            )
        text = header_value
        if "\r" in text or "\n" in text:
            raise ConfigValidationError(
                f"Header '{name}' value must not contain line breaks",
                code="POLICY_CUSTOM_HEADER",
                field=path,
            )
        try:
            text.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise ConfigValidationError(
                f"Header '{name}' value must be latin-1 encodable",
                code="POLICY_CUSTOM_HEADER",
                field=path,
            ) from exc
        headers[name] = text
    return MappingProxyType(headers)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def resolve(
    user_policy: Mapping[str, Any] | None = None,
    formatter: DirectiveNameFormatter | None = None,
) -> SecurityPolicy:
    """Resolve *user_policy* over :data:`DEFAULT_POLICY`.

    Args:
        user_policy: Partial policy mapping; missing fields take the defaults.
        formatter: Directive-name formatter used to normalize CSP keys.

    Returns:
        The fully resolved, immutable :class:`SecurityPolicy`.

    Raises:
        ConfigValidationError: If any field is malformed, including a
            negative HSTS or Report-To ``max_age`` and an empty endpoint list.
    """
    user = _normalize_section(user_policy or {}, POLICY_FIELDS, "policy")
    base = DEFAULT_POLICY

    def pick(name: str, convert: Callable[[Any], Any]) -> Any:
        return convert(user[name]) if name in user else getattr(base, name)

    def merged(name: str, merge: Callable[[Any], Any]) -> Callable[[Any], Any]:
        # True keeps the defaults, None/False switches the header off.
        def convert(value: Any) -> Any:
            if _is_disabled(value):
                return None
            if value is True:
                return getattr(base, name)
            return merge(value)

        return convert

    return SecurityPolicy(
        csp=pick("csp", merged("csp", lambda v: merge_csp(DEFAULT_CSP, v, formatter))),
        frame_options=pick("frame_options", lambda v: _as_enum(FrameOptions, v, "frame_options")),
        xss_protection=pick("xss_protection", lambda v: _as_bool(v, "xss_protection")),
        dns_prefetch=pick("dns_prefetch", lambda v: _as_bool(v, "dns_prefetch")),
        referrer_policy=pick(
            "referrer_policy", lambda v: _as_enum(ReferrerPolicy, v, "referrer_policy")
        ),
        permissions_policy=pick(
            "permissions_policy",
            merged(
                "permissions_policy",
                lambda v: merge_permissions_policy(DEFAULT_PERMISSIONS_POLICY, v),
            ),
        ),
        hsts=pick("hsts", merged("hsts", lambda v: merge_hsts(DEFAULT_HSTS, v))),
        corp=pick("corp", lambda v: _as_enum(CrossOriginResourcePolicy, v, "corp")),
        coop=pick("coop", lambda v: _as_enum(CrossOriginOpenerPolicy, v, "coop")),
        report_to=pick("report_to", _report_groups),
        custom_headers=pick("custom_headers", _custom_headers),
    )


def resolve_mode(value: Mode | str) -> Mode:
    """Parse a runtime mode, case-insensitively."""
    try:
        return Mode(str(getattr(value, "value", value)).lower())
    except ValueError as exc:
        raise ConfigValidationError(
            f"'mode' must be one of {[m.value for m in Mode]}, got {value!r}",
            code="POLICY_ENUM",
            field="mode",
        ) from exc

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
"""FlyHelmet Web — security header composition and framework integration.

Framework-agnostic types are exported directly; the default adapter
(Starlette) is re-exported for convenience.
"""

from flyhelmet.web.adapters.starlette import (
    SecurityHeadersFilter,
    SecurityHeadersMiddleware,
    WebFilterChainMiddleware,
    apply_headers,
)
from flyhelmet.web.filters import CallNext, OncePerRequestFilter, WebFilter
from flyhelmet.web.security_headers import ComposedHeaders, SecurityHeaders, build_static_headers

__all__ = [
    # Framework-agnostic
    "CallNext",
    "ComposedHeaders",
    "OncePerRequestFilter",
    "SecurityHeaders",
    "WebFilter",
    "build_static_headers",
    # Starlette adapter
    "SecurityHeadersFilter",
    "SecurityHeadersMiddleware",
    "WebFilterChainMiddleware",
    "apply_headers",
]

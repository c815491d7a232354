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
"""Security headers filter — injects the composed header set into every response."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from flyhelmet.container.ordering import HIGHEST_PRECEDENCE, order
from flyhelmet.policy.nonce import NonceGenerator, generate_nonce
from flyhelmet.policy.types import Mode, SecurityPolicy
from flyhelmet.web.adapters.starlette.injector import apply_headers
from flyhelmet.web.filters import CallNext, OncePerRequestFilter
from flyhelmet.web.security_headers import SecurityHeaders


@order(HIGHEST_PRECEDENCE + 300)
class SecurityHeadersFilter(OncePerRequestFilter):
    """Adds security headers to every response.

    The policy is resolved once here; a bad policy raises
    :class:`~flyhelmet.kernel.exceptions.ConfigValidationError` from the
    constructor. Downstream exceptions are not caught.

    When CSP nonce mode is on, the nonce is stored on
    ``request.state.csp_nonce`` before the handler runs.
    """

    def __init__(
        self,
        policy: Mapping[str, Any] | SecurityPolicy | None = None,
        mode: Mode | str = Mode.DEVELOPMENT,
        *,
        headers: SecurityHeaders | None = None,
        nonce_generator: NonceGenerator = generate_nonce,
        url_patterns: Iterable[str] | None = None,
        exclude_patterns: Iterable[str] | None = None,
    ) -> None:
        self.headers = headers or SecurityHeaders(policy, mode=mode, nonce_generator=nonce_generator)
        self.configure_patterns(url_patterns, exclude_patterns)

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        composed = self.headers.compose()
        if composed.nonce is not None:
            request.state.csp_nonce = composed.nonce
        response = await call_next(request)
        return apply_headers(response, composed.headers)

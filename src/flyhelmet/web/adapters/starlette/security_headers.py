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
"""Security headers middleware for Starlette — pure ASGI."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flyhelmet.policy.types import Mode, SecurityPolicy
from flyhelmet.web.security_headers import SecurityHeaders


class SecurityHeadersMiddleware:
    """Adds security headers to every HTTP response.

    Works on the ``http.response.start`` message, so streaming bodies are
    never buffered. Each response gets its own composed header map (and
    its own nonce); the downstream ASGI message is copied, not edited.

    The nonce is exposed as ``request.state.csp_nonce`` before the app
    runs so templates can render matching ``nonce`` attributes.
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: Mapping[str, Any] | SecurityPolicy | None = None,
        mode: Mode | str = Mode.DEVELOPMENT,
        headers: SecurityHeaders | None = None,
    ) -> None:
        self.app = app
        self.headers = headers or SecurityHeaders(policy, mode=mode)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        composed = self.headers.compose()
        if composed.nonce is not None:
            scope.setdefault("state", {})["csp_nonce"] = composed.nonce

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                message = {**message, "headers": list(message.get("headers", []))}
                headers = MutableHeaders(scope=message)
                for name, value in composed.headers.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)

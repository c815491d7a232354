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
"""WebFilterChainMiddleware — pure ASGI middleware hosting response filters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from flyhelmet.container.ordering import sort_by_order
from flyhelmet.web.filters import CallNext, WebFilter


class _CapturedResponse:
    """ASGI ``send`` target that records one downstream response."""

    def __init__(self) -> None:
        self.status_code = 200
        self.raw_headers: list[tuple[bytes, bytes]] = []
        self.body = bytearray()

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
            self.raw_headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            self.body.extend(message.get("body", b""))

    def to_response(self) -> Response:
        response = Response(content=bytes(self.body), status_code=self.status_code)
        # Downstream headers already carry content-length and content-type.
        response.raw_headers[:] = self.raw_headers
        return response


class WebFilterChainMiddleware:
    """Runs the downstream app, then hands its response through each filter.

    Filters are sorted by ``@order`` (lowest first, i.e. outermost) and the
    chain is assembled once. The downstream response is buffered into a
    :class:`Response` so filters can return a new response object; use
    :class:`~flyhelmet.web.adapters.starlette.security_headers.SecurityHeadersMiddleware`
    where bodies must stream. Exceptions raised downstream propagate unchanged.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self.filters = sort_by_order(filters)
        chain: CallNext = self._call_downstream
        for web_filter in reversed(self.filters):
            chain = _link(web_filter, chain)
        self._chain = chain

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response = cast(Response, await self._chain(Request(scope, receive, send)))
        await response(scope, receive, send)

    async def _call_downstream(self, request: Request) -> Response:
        captured = _CapturedResponse()
        await self.app(request.scope, request.receive, captured)
        return captured.to_response()


def _link(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def _step(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return _step

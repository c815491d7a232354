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
"""Header injector — copies a response and writes security headers onto the copy."""

from __future__ import annotations

import copy
from collections.abc import Mapping

from starlette.datastructures import MutableHeaders
from starlette.responses import Response


def copy_response(response: Response) -> Response:
    """Return a shallow copy of *response* with its own header list.

    Status, body (or body iterator for streaming responses), media type and
    background task are carried over. Repeated headers such as
    ``Set-Cookie`` are kept as separate entries.
    """
    clone = copy.copy(response)
    # Drop the cached MutableHeaders view; it points at the original list.
    clone.__dict__.pop("_headers", None)
    clone.raw_headers = list(response.raw_headers)
    return clone


def apply_headers(response: Response, headers: Mapping[str, str]) -> Response:
    """Return a new response carrying *response* plus *headers*.

    Each entry replaces any header of the same name set downstream
    (case-insensitive, last writer wins). *response* itself is not modified.
    """
    result = copy_response(response)
    target = MutableHeaders(raw=result.raw_headers)
    for name, value in headers.items():
        target[name] = value
    return result

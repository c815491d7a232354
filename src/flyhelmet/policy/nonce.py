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
"""CSP nonce generation."""

from __future__ import annotations

import secrets
from collections.abc import Callable

NONCE_BYTES: int = 16
"""Minimum entropy, in bytes, of a generated nonce."""

NonceGenerator = Callable[[], str]


def generate_nonce(nbytes: int = NONCE_BYTES) -> str:
    """Generate a single-use CSP nonce.

    Returns:
        A URL-safe base64-encoded random string drawn from :mod:`secrets`.
    """
    return secrets.token_urlsafe(max(nbytes, NONCE_BYTES))

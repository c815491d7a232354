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
"""Tests for CSP nonce generation."""

from __future__ import annotations

import base64

from flyhelmet.policy.nonce import NONCE_BYTES, generate_nonce


def _decoded_len(nonce: str) -> int:
    return len(base64.urlsafe_b64decode(nonce + "=" * (-len(nonce) % 4)))


class TestGenerateNonce:
    def test_default_entropy(self):
        assert _decoded_len(generate_nonce()) == NONCE_BYTES

    def test_minimum_entropy_enforced(self):
        assert _decoded_len(generate_nonce(4)) == NONCE_BYTES

    def test_larger_nonce(self):
        assert _decoded_len(generate_nonce(32)) == 32

    def test_url_safe_alphabet(self):
        nonce = generate_nonce()
        assert all(c.isalnum() or c in "-_" for c in nonce)

    def test_unique(self):
        assert len({generate_nonce() for _ in range(200)}) == 200

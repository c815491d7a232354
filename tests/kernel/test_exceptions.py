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
"""Tests for the FlyHelmet exception hierarchy."""

from __future__ import annotations

import pytest

from flyhelmet.kernel.exceptions import ConfigValidationError, FlyHelmetException, ValidationException
from flyhelmet.policy.resolver import resolve


class TestFlyHelmetException:
    def test_message_code_context(self):
        exc = FlyHelmetException("bad", code="X", context={"k": 1})
        assert str(exc) == "bad"
        assert exc.code == "X"
        assert exc.context == {"k": 1}

    def test_defaults(self):
        exc = FlyHelmetException("bad")
        assert exc.code is None
        assert exc.context == {}


class TestConfigValidationError:
    def test_hierarchy(self):
        exc = ConfigValidationError("bad", code="POLICY_TYPE", field="hsts")
        assert isinstance(exc, ValidationException)
        assert isinstance(exc, FlyHelmetException)

    def test_field_in_context(self):
        exc = ConfigValidationError("bad", code="POLICY_TYPE", field="report_to[0]", value=3)
        assert exc.field == "report_to[0]"
        assert exc.context == {"field": "report_to[0]", "value": 3}

    def test_catchable_as_base_type(self):
        with pytest.raises(FlyHelmetException) as exc_info:
            resolve({"report_to": [{"group": "g", "max_age": 10, "endpoints": []}]})
        assert exc_info.value.code == "POLICY_REPORT_ENDPOINTS"
        assert exc_info.value.context["field"] == "report_to[0].endpoints"

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
"""Unified exception hierarchy for FlyHelmet.

All library exceptions inherit from FlyHelmetException so callers can catch
one type at application setup. Policy problems are always reported while the
middleware is being constructed, never while a request is being served.
"""

from __future__ import annotations


class FlyHelmetException(Exception):
    """Base exception for all FlyHelmet errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "POLICY_HSTS_MAX_AGE").
        context: Arbitrary key-value pairs describing the offending input.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ValidationException(FlyHelmetException):
    """Input validation failures."""


class ConfigValidationError(ValidationException):
    """A security policy could not be resolved into a valid configuration.

    The ``context`` dict always carries a ``field`` entry naming the policy
    path that failed (e.g. ``"report_to[0].endpoints"``).
    """

    def __init__(self, message: str, code: str, field: str, **context: object) -> None:
        super().__init__(message, code=code, context={"field": field, **context})
        self.field = field

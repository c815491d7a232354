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
"""FlyHelmet configuration properties (flyhelmet.*)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from flyhelmet.core.config import Config, config_properties
from flyhelmet.policy.resolver import resolve, resolve_mode
from flyhelmet.policy.types import Mode, SecurityPolicy


@config_properties(prefix="flyhelmet")
@dataclass
class HelmetProperties:
    """Top-level settings.

    mode may be overridden with the FLYHELMET_MODE environment
    variable; security holds the partial policy passed to the resolver.
    """

    mode: str = Mode.DEVELOPMENT.value
    security: dict[str, Any] = field(default_factory=dict)
    logging: dict[str, Any] = field(default_factory=dict)


def mode_from_config(config: Config) -> Mode:
    """Read the runtime mode once; callers pin the result for their lifetime."""
    return resolve_mode(config.bind(HelmetProperties).mode)


def policy_from_config(config: Config) -> SecurityPolicy:
    """Resolve the ``flyhelmet.security`` section into a policy."""
    return resolve(config.bind(HelmetProperties).security)

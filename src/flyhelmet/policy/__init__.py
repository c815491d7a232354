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
"""FlyHelmet Policy — security policy model, resolution and header builders."""

from flyhelmet.policy.builders import (
    build_csp,
    build_hsts,
    build_permissions_policy,
    build_report_to,
    csp_header_name,
)
from flyhelmet.policy.directives import DirectiveNameFormatter
from flyhelmet.policy.nonce import generate_nonce
from flyhelmet.policy.resolver import (
    DEFAULT_POLICY,
    merge_csp,
    merge_hsts,
    merge_permissions_policy,
    resolve,
)
from flyhelmet.policy.types import (
    CrossOriginOpenerPolicy,
    CrossOriginResourcePolicy,
    CspPolicy,
    FrameOptions,
    HstsPolicy,
    Mode,
    ReferrerPolicy,
    ReportEndpoint,
    ReportGroup,
    SecurityPolicy,
    Source,
)

__all__ = [
    # Model
    "CrossOriginOpenerPolicy",
    "CrossOriginResourcePolicy",
    "CspPolicy",
    "FrameOptions",
    "HstsPolicy",
    "Mode",
    "ReferrerPolicy",
    "ReportEndpoint",
    "ReportGroup",
    "SecurityPolicy",
    "Source",
    # Resolution
    "DEFAULT_POLICY",
    "merge_csp",
    "merge_hsts",
    "merge_permissions_policy",
    "resolve",
    # Builders
    "DirectiveNameFormatter",
    "build_csp",
    "build_hsts",
    "build_permissions_policy",
    "build_report_to",
    "csp_header_name",
    "generate_nonce",
]

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
"""FlyHelmet — security header composition for ASGI applications.

Typical use::

    from starlette.applications import Starlette
    from starlette.middleware import Middleware

    from flyhelmet import SecurityHeadersFilter, WebFilterChainMiddleware

    helmet = SecurityHeadersFilter({"csp": {"use_nonce": True}}, mode="production")
    app = Starlette(middleware=[Middleware(WebFilterChainMiddleware, filters=[helmet])])
"""

__version__ = "0.1.0"

from flyhelmet.kernel.exceptions import ConfigValidationError, FlyHelmetException  # noqa: E402
from flyhelmet.policy import (  # noqa: E402
    CrossOriginOpenerPolicy,
    CrossOriginResourcePolicy,
    FrameOptions,
    Mode,
    ReferrerPolicy,
    SecurityPolicy,
    Source,
    resolve,
)
from flyhelmet.web import (  # noqa: E402
    SecurityHeaders,
    SecurityHeadersFilter,
    SecurityHeadersMiddleware,
    WebFilterChainMiddleware,
)

__all__ = [
    "ConfigValidationError",
    "CrossOriginOpenerPolicy",
    "CrossOriginResourcePolicy",
    "FlyHelmetException",
    "FrameOptions",
    "Mode",
    "ReferrerPolicy",
    "SecurityHeaders",
    "SecurityHeadersFilter",
    "SecurityHeadersMiddleware",
    "SecurityPolicy",
    "Source",
    "WebFilterChainMiddleware",
    "__version__",
    "resolve",
]

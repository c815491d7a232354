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
"""Filter contract — the ``(request, call_next) -> response`` seam.

This is the only integration point with the host framework. Requests and
responses are typed as ``Any`` so vendor types stay in the adapter layer;
paths are read through ``request.url.path``.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Coroutine, Iterable
from fnmatch import fnmatch
from typing import Any, Protocol, runtime_checkable

# Concrete type: Callable[[Request], Coroutine[Any, Any, Response]]
CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """Protocol for response filters run by ``WebFilterChainMiddleware``."""

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Await ``call_next(request)`` and return the (possibly new) response."""
        ...

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` to skip this filter for the given request."""
        ...


class OncePerRequestFilter(abc.ABC):
    """Base class for :class:`WebFilter` implementations with path matching.

    Attributes:
        url_patterns: Glob patterns this filter applies to. Empty means
            every path.
        exclude_patterns: Glob patterns skipped even when ``url_patterns``
            matches.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def configure_patterns(
        self,
        url_patterns: Iterable[str] | None = None,
        exclude_patterns: Iterable[str] | None = None,
    ) -> None:
        """Override the class-level patterns for this instance."""
        if url_patterns is not None:
            self.url_patterns = list(url_patterns)
        if exclude_patterns is not None:
            self.exclude_patterns = list(exclude_patterns)

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path
        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True
        return any(fnmatch(path, p) for p in self.exclude_patterns)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Execute the filter logic.  Must call ``await call_next(request)`` to proceed."""
        ...

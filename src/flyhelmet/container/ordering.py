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
"""Filter ordering — @order decorator and precedence constants."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

T = TypeVar("T", bound=type)

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1

_ORDER_ATTR = "__flyhelmet_order__"


def order(value: int) -> Callable[[T], T]:
    """Set the chain position for a filter class.

    Lower value = runs earlier (outermost). Undecorated filters default to 0.
    """

    def decorator(cls: T) -> T:
        setattr(cls, _ORDER_ATTR, value)
        return cls

    return decorator


def get_order(obj: Any) -> int:
    """Get the order value for a filter class or instance, defaulting to 0."""
    return getattr(obj, _ORDER_ATTR, 0)


def sort_by_order(items: Iterable[Any]) -> list[Any]:
    """Return *items* sorted by :func:`get_order`; ties keep their input order."""
    return sorted(items, key=get_order)

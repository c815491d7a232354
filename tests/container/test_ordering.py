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
"""Tests for @order and sort_by_order."""

from __future__ import annotations

from flyhelmet.container.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, get_order, order, sort_by_order


@order(HIGHEST_PRECEDENCE)
class First:
    pass


@order(LOWEST_PRECEDENCE)
class Last:
    pass


class Unordered:
    pass


class TestOrdering:
    def test_get_order_on_class_and_instance(self):
        assert get_order(First) == HIGHEST_PRECEDENCE
        assert get_order(Last()) == LOWEST_PRECEDENCE

    def test_default_order_is_zero(self):
        assert get_order(Unordered) == 0

    def test_sort_by_order(self):
        first, last, unordered = First(), Last(), Unordered()
        assert sort_by_order([last, unordered, first]) == [first, unordered, last]

    def test_ties_keep_input_order(self):
        a, b = Unordered(), Unordered()
        assert sort_by_order([b, a]) == [b, a]

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
"""Filter ordering: the @order decorator and precedence bounds."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T", bound=type)
ItemT = TypeVar("ItemT")

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1

_ORDER_ATTR = "__socialmesh_order__"


def order(value: int) -> Callable[[T], T]:
    """Give a filter class its position in the request chain; lower runs first.

    Classes without ``@order`` sit at 0, after the built-in transaction id
    and request logging filters.
    """

    def decorator(cls: T) -> T:
        setattr(cls, _ORDER_ATTR, value)
        return cls

    return decorator


def get_order(cls: type) -> int:
    return getattr(cls, _ORDER_ATTR, 0)


def sorted_by_order(items: Iterable[ItemT]) -> list[ItemT]:
    """Instances sorted by their class's ``@order``; ties keep their given order."""
    return sorted(items, key=lambda item: get_order(type(item)))

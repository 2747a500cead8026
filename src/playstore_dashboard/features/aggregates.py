from __future__ import annotations

import math
import numbers
from collections.abc import Callable, Hashable, Iterable
from typing import Any, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

UNDEFINED = float("nan")


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _as_summable(value: Any) -> int | float:
    if _is_finite_number(value):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0
        return number if math.isfinite(number) else 0
    return 0


def group_by(items: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, list[T]]:
    """Group items by key; keys keep first-seen order, items keep input order."""
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def sum_by(items: Iterable[T], value_fn: Callable[[T], Any]) -> int | float:
    total: int | float = 0
    for item in items:
        total += _as_summable(value_fn(item))
    return total


def _finite_values(items: Iterable[T], value_fn: Callable[[T], Any]) -> list[float]:
    return [value for value in map(value_fn, items) if _is_finite_number(value)]


def mean_by(items: Iterable[T], value_fn: Callable[[T], Any]) -> float:
    values = _finite_values(items, value_fn)
    if not values:
        return UNDEFINED
    return sum(values) / len(values)


def median_by(items: Iterable[T], value_fn: Callable[[T], Any]) -> float:
    values = sorted(_finite_values(items, value_fn))
    if not values:
        return UNDEFINED
    mid = len(values) // 2
    if len(values) % 2:
        return float(values[mid])
    return (values[mid - 1] + values[mid]) / 2


def count_by(items: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, int]:
    counts: dict[K, int] = {}
    for item in items:
        key = key_fn(item)
        counts[key] = counts.get(key, 0) + 1
    return counts

"""Settings-aware equality used by the structural comparator."""

from __future__ import annotations

import re
from typing import Any

from .models import ComparisonSettings
from .utils import is_numeric


FUZZY_SIMILARITY_THRESHOLD = 0.8

_WHITESPACE_RUN = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]", re.ASCII)


def normalize_for_fuzzy(value: str) -> str:
    """Trim, collapse whitespace, strip punctuation and lowercase."""
    value = _WHITESPACE_RUN.sub(" ", value.strip())
    return _PUNCTUATION.sub("", value).lower()


def levenshtein_distance(first: str, second: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, char_a in enumerate(first, start=1):
        current = [i]
        for j, char_b in enumerate(second, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                current[j - 1] + 1,
                previous[j] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def fuzzy_match(first: str, second: str) -> bool:
    """
    Approximate string equality.

    Strings equal after normalization match outright; otherwise they match
    when their normalized similarity (1 - distance / longest length) is at
    least 0.80.
    """
    norm_first = normalize_for_fuzzy(first)
    norm_second = normalize_for_fuzzy(second)

    if norm_first == norm_second:
        return True

    distance = levenshtein_distance(norm_first, norm_second)
    longest = max(len(norm_first), len(norm_second))
    similarity = 1 - distance / longest
    return similarity >= FUZZY_SIMILARITY_THRESHOLD


def compare_strings(old: str, new: str, settings: ComparisonSettings) -> bool:
    if settings.ignore_case:
        old = old.lower()
        new = new.lower()

    if settings.fuzzy_match:
        return fuzzy_match(old, new)

    return old == new


def _scalars_equal(old: Any, new: Any) -> bool:
    if isinstance(old, bool) or isinstance(new, bool):
        return isinstance(old, bool) and isinstance(new, bool) and old == new
    if is_numeric(old) and is_numeric(new):
        return old == new
    if type(old) != type(new):
        return False
    return old == new


def values_equal(old: Any, new: Any, settings: ComparisonSettings) -> bool:
    """
    Deep equality honouring ignore_case, fuzzy_match and ignore_order.

    Under ignore_order two arrays of the same length are equal when every
    element of each has an equal counterpart in the other.
    """
    if old is None or new is None:
        return old is None and new is None

    if isinstance(old, str) and isinstance(new, str):
        if old == new:
            return True
        return compare_strings(old, new, settings)

    if isinstance(old, list) and isinstance(new, list):
        if len(old) != len(new):
            return False
        if settings.ignore_order:
            return (
                all(any(values_equal(a, b, settings) for b in new) for a in old)
                and all(any(values_equal(a, b, settings) for a in old) for b in new)
            )
        return all(values_equal(a, b, settings) for a, b in zip(old, new))

    if isinstance(old, dict) and isinstance(new, dict):
        if len(old) != len(new):
            return False
        return all(key in new and values_equal(old[key], new[key], settings) for key in old)

    if isinstance(old, (dict, list)) or isinstance(new, (dict, list)):
        return False

    return _scalars_equal(old, new)

"""Structural diffing of two parsed JSON documents."""

from __future__ import annotations

from typing import Any

from .models import (
    ComparisonSettings,
    ComparisonSummary,
    Difference,
    DiffType,
)
from .comparators import values_equal
from .source_map import SourceLocator
from .utils import build_path, count_properties, is_object


class Differ:
    """
    Performs a depth-first, pre-order deep comparison.

    Handles:
    - Missing/null values (additions and deletions)
    - Primitive comparisons through settings-aware equality
    - Array comparisons (by index, or greedy order-insensitive matching)
    - Object key unions
    """

    def __init__(
        self,
        settings: ComparisonSettings,
        left_locator: SourceLocator,
        right_locator: SourceLocator,
    ):
        self.settings = settings
        self.left_locator = left_locator
        self.right_locator = right_locator
        self.differences: list[Difference] = []

    def diff(self, old: Any, new: Any, path: str = ""):
        """
        Compare two values and record differences found below path.

        Walks with an explicit work stack, so nesting depth is not bounded
        by the interpreter's recursion limit.

        Args:
            old: The left/baseline value
            new: The right value
            path: Current structural path ('' for the document root)
        """
        pending = [(self._diff_value, (old, new, path))]
        while pending:
            step, args = pending.pop()
            follow_up = step(*args)
            if follow_up:
                pending.extend(reversed(follow_up))

    def _diff_value(self, old: Any, new: Any, path: str):
        if old is None and new is None:
            return None

        if old is None:
            self._add_addition(path, new)
            return None

        if new is None:
            self._add_deletion(path, old)
            return None

        if not is_object(old) or not is_object(new):
            if not values_equal(old, new, self.settings):
                self._add_modification(path, old, new)
            return None

        if isinstance(old, list) and isinstance(new, list):
            return self._diff_arrays(old, new, path)

        if isinstance(old, list) != isinstance(new, list):
            # Array on one side, object on the other: full replacement
            self._add_modification(path, old, new)
            return None

        return self._diff_objects(old, new, path)

    def _diff_objects(self, old: dict, new: dict, path: str) -> list:
        """Union the key sets, preserving left-then-right key order."""
        all_keys = list(old.keys()) + [key for key in new.keys() if key not in old]
        steps = []

        for key in all_keys:
            child_path = build_path(path, key)

            if key not in old:
                steps.append((self._add_addition, (child_path, new[key])))
            elif key not in new:
                steps.append((self._add_deletion, (child_path, old[key])))
            else:
                steps.append((self._diff_value, (old[key], new[key], child_path)))
        return steps

    def _diff_arrays(self, old: list, new: list, path: str):
        if self.settings.ignore_order:
            self._diff_unordered_arrays(old, new, path)
            return None
        return self._diff_strict_arrays(old, new, path)

    def _diff_strict_arrays(self, old: list, new: list, path: str) -> list:
        """Compare arrays index-by-index (order matters)."""
        steps = []
        for i in range(max(len(old), len(new))):
            child_path = build_path(path, i)
            if i >= len(old):
                steps.append((self._add_addition, (child_path, new[i])))
            elif i >= len(new):
                steps.append((self._add_deletion, (child_path, old[i])))
            else:
                steps.append((self._diff_value, (old[i], new[i], child_path)))
        return steps

    def _diff_unordered_arrays(self, old: list, new: list, path: str):
        """
        Greedy first-fit matching.

        Each left element, in order, claims the first unclaimed right
        element equal to it. Unmatched left elements are deletions, then
        unclaimed right elements are additions.
        """
        new_matched = [False] * len(new)

        for i, old_item in enumerate(old):
            found = False
            for j, new_item in enumerate(new):
                if new_matched[j]:
                    continue
                if values_equal(old_item, new_item, self.settings):
                    new_matched[j] = True
                    found = True
                    break

            if not found:
                self._add_deletion(build_path(path, i), old_item)

        for j, matched in enumerate(new_matched):
            if not matched:
                self._add_addition(build_path(path, j), new[j])

    def summary(self, old: Any, new: Any) -> ComparisonSummary:
        """
        Count differences by type.

        unchanged is an approximation: the smaller document's node count
        minus the number of differences, floored at zero.
        """
        additions = sum(1 for d in self.differences if d.type == DiffType.ADDITION)
        deletions = sum(1 for d in self.differences if d.type == DiffType.DELETION)
        modifications = sum(1 for d in self.differences if d.type == DiffType.MODIFICATION)

        total_changes = additions + deletions + modifications
        unchanged = max(0, min(count_properties(old), count_properties(new)) - total_changes)

        return ComparisonSummary(
            additions=additions,
            deletions=deletions,
            modifications=modifications,
            unchanged=unchanged,
        )

    def _add_addition(self, path: str, new_value: Any):
        self.differences.append(Difference(
            type=DiffType.ADDITION,
            path=path or "root",
            new_value=new_value,
            right_line=self.right_locator.line_for(path),
        ))

    def _add_deletion(self, path: str, old_value: Any):
        self.differences.append(Difference(
            type=DiffType.DELETION,
            path=path or "root",
            old_value=old_value,
            left_line=self.left_locator.line_for(path),
        ))

    def _add_modification(self, path: str, old_value: Any, new_value: Any):
        self.differences.append(Difference(
            type=DiffType.MODIFICATION,
            path=path or "root",
            old_value=old_value,
            new_value=new_value,
            left_line=self.left_locator.line_for(path),
            right_line=self.right_locator.line_for(path),
        ))

"""Pre-comparison masking of ignored paths."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any

from .jsonpath_utils import JSONPathMatcher

logger = logging.getLogger(__name__)


class Masker:
    """
    Removes fields matched by JSONPath expressions from both documents.

    The inputs are copied first; callers keep their parsed values intact.
    """

    def __init__(self, ignore_paths: list[str]):
        self.ignore_paths = list(ignore_paths or [])

    def mask(self, old_json: Any, new_json: Any) -> tuple[Any, Any]:
        """
        Apply masking to both payloads.

        Returns:
            Tuple of (masked_old, masked_new)
        """
        if not self.ignore_paths:
            return old_json, new_json

        logger.debug("Masking %d ignore paths", len(self.ignore_paths))
        old = JSONPathMatcher.delete_paths(deepcopy(old_json), self.ignore_paths)
        new = JSONPathMatcher.delete_paths(deepcopy(new_json), self.ignore_paths)
        return old, new

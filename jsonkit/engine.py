"""Comparison engine: the public entry point of the structural comparator."""

from __future__ import annotations

import logging
from typing import Optional

from .models import ComparisonSettings, ComparisonResult
from .differ import Differ
from .masker import Masker
from .parsing import parse_json
from .source_map import SourceLocator
from .exceptions import CompareError, InputParseError

logger = logging.getLogger(__name__)


class JsonComparator:
    """
    Orchestrates a comparison of two JSON texts:

    1. Parsing: both texts must be valid JSON
    2. Line mapping: build path -> line maps of both texts
    3. Masking: drop paths listed in settings.ignore_paths
    4. Diffing: recursive comparison and summary
    """

    def __init__(self, settings: Optional[ComparisonSettings] = None):
        """
        Initialize the comparator.

        Args:
            settings: Comparison settings (uses defaults if not provided)
        """
        self.settings = settings or ComparisonSettings()

    def compare(self, json_text1: str, json_text2: str) -> ComparisonResult:
        """
        Compare two JSON texts.

        Args:
            json_text1: The left (baseline) document
            json_text2: The right document

        Returns:
            ComparisonResult with the flat list of differences and a summary

        Raises:
            CompareError: if either text is not valid JSON
        """
        try:
            old = parse_json(json_text1)
            new = parse_json(json_text2)
        except InputParseError as e:
            raise CompareError(f"Failed to compare JSONs: {e.message}", cause=e) from e

        old, new = Masker(self.settings.ignore_paths).mask(old, new)

        differ = Differ(
            settings=self.settings,
            left_locator=SourceLocator(json_text1),
            right_locator=SourceLocator(json_text2),
        )
        differ.diff(old, new)
        summary = differ.summary(old, new)

        logger.debug(
            "Compared documents: %d additions, %d deletions, %d modifications",
            summary.additions, summary.deletions, summary.modifications,
        )
        return ComparisonResult(differences=differ.differences, summary=summary)


def compare_jsons(
    json_text1: str,
    json_text2: str,
    settings: Optional[ComparisonSettings] = None
) -> ComparisonResult:
    """
    Convenience function to compare two JSON texts.

    Args:
        json_text1: The left (baseline) document
        json_text2: The right document
        settings: Optional comparison settings

    Returns:
        ComparisonResult

    Raises:
        CompareError: if either text is not valid JSON
    """
    return JsonComparator(settings).compare(json_text1, json_text2)

"""JSON formatting helpers: prettify, minify and syntax checking."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .models import ComparisonSettings
from .exceptions import InputParseError, InvalidJsonError
from .parsing import parse_json


@dataclass
class SyntaxCheckResult:
    is_valid: bool
    error: Optional[str] = None
    line_number: Optional[int] = None
    column_number: Optional[int] = None

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"isValid": self.is_valid}
        if self.error is not None:
            result["error"] = self.error
        if self.line_number is not None:
            result["lineNumber"] = self.line_number
        if self.column_number is not None:
            result["columnNumber"] = self.column_number
        return result


def _load(text: str) -> Any:
    try:
        return parse_json(text)
    except InputParseError as e:
        raise InvalidJsonError() from e


def prettify_json(text: str, settings: Optional[ComparisonSettings] = None) -> str:
    """
    Re-serialize JSON text with the configured indentation.

    An indentation of 0 produces compact output. With sort_keys, object keys
    are sorted at every level.

    Raises:
        InvalidJsonError: if the text is not valid JSON
    """
    settings = settings or ComparisonSettings()
    data = _load(text)

    if not settings.indentation:
        return minify_value(data, sort_keys=settings.sort_keys)

    return json.dumps(
        data,
        indent=settings.indentation,
        sort_keys=settings.sort_keys,
        ensure_ascii=False,
    )


def minify_value(data: Any, sort_keys: bool = False) -> str:
    return json.dumps(data, separators=(",", ":"), sort_keys=sort_keys, ensure_ascii=False)


def minify_json(text: str) -> str:
    """
    Strip all insignificant whitespace from JSON text.

    Raises:
        InvalidJsonError: if the text is not valid JSON
    """
    return minify_value(_load(text))


def check_json_syntax(text: str) -> SyntaxCheckResult:
    """Check JSON text; blank input counts as valid (nothing entered yet)."""
    if not text.strip():
        return SyntaxCheckResult(is_valid=True)

    try:
        parse_json(text)
    except InputParseError as e:
        return SyntaxCheckResult(
            is_valid=False,
            error=e.message,
            line_number=e.line,
            column_number=e.column,
        )
    return SyntaxCheckResult(is_valid=True)


def format_json_error(
    error: str,
    line_number: Optional[int] = None,
    column_number: Optional[int] = None
) -> str:
    """Append '(Line n, Column m)' to an error message when a position is known."""
    if line_number and column_number:
        return f"{error} (Line {line_number}, Column {column_number})"
    if line_number:
        return f"{error} (Line {line_number})"
    return error

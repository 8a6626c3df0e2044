"""
jsonkit - JSON developer utilities

Two engines behind a JSON tools front end: a structural comparator that
reports additions, deletions and modifications with source line numbers,
and a JSON Schema validator with categorized, located errors and
suggestions. Inputs may be JSON or YAML text.
"""

import logging

from .engine import JsonComparator, compare_jsons
from .models import (
    ComparisonSettings,
    ComparisonResult,
    ComparisonSummary,
    Difference,
    DiffType,
    ValidatorOptions,
    ValidationError,
    ValidationResult,
    ValidationSummary,
    SchemaInfo,
    SchemaDraft,
    ErrorCategory,
    Severity,
    LogLevel,
    BatchFile,
    BatchValidationResult,
    SchemaVisualization,
)
from .exceptions import (
    JsonKitError,
    InputParseError,
    CompareError,
    InvalidJsonError,
    UnresolvedRefError,
)
from .validator import EnhancedJsonSchemaValidator, ValidationContext
from .formatter import (
    SyntaxCheckResult,
    prettify_json,
    minify_json,
    check_json_syntax,
    format_json_error,
)
from .parsing import parse_input
from .runner import BatchRunner, BatchReport, load_options
from .logging_config import configure_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    # Comparator
    "JsonComparator",
    "compare_jsons",
    "ComparisonSettings",
    "ComparisonResult",
    "ComparisonSummary",
    "Difference",
    "DiffType",
    # Validator
    "EnhancedJsonSchemaValidator",
    "ValidationContext",
    "ValidatorOptions",
    "ValidationError",
    "ValidationResult",
    "ValidationSummary",
    "SchemaInfo",
    "SchemaDraft",
    "ErrorCategory",
    "Severity",
    "BatchFile",
    "BatchValidationResult",
    "SchemaVisualization",
    # Formatter
    "SyntaxCheckResult",
    "prettify_json",
    "minify_json",
    "check_json_syntax",
    "format_json_error",
    "parse_input",
    # Batch runner
    "BatchRunner",
    "BatchReport",
    "load_options",
    # Errors and logging
    "JsonKitError",
    "InputParseError",
    "CompareError",
    "InvalidJsonError",
    "UnresolvedRefError",
    "LogLevel",
    "configure_logging",
]

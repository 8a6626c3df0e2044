"""Data models for the jsonkit comparison and validation engines."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class DiffType(Enum):
    ADDITION = "addition"
    DELETION = "deletion"
    MODIFICATION = "modification"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class ErrorCategory(Enum):
    REQUIRED = "required"
    TYPE = "type"
    FORMAT = "format"
    PATTERN = "pattern"
    ENUM = "enum"
    CONSTRAINT = "constraint"
    REFERENCE = "reference"
    CUSTOM = "custom"


class SchemaDraft(Enum):
    DRAFT_03 = "draft-03"
    DRAFT_04 = "draft-04"
    DRAFT_06 = "draft-06"
    DRAFT_07 = "draft-07"
    DRAFT_2019_09 = "2019-09"
    DRAFT_2020_12 = "2020-12"
    AUTO = "auto"


def _snake_case(name: str) -> str:
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _filter_known(cls, data: dict) -> dict:
    known = {f.name for f in fields(cls)}
    result = {}
    for key, value in data.items():
        name = _snake_case(key)
        if name in known:
            result[name] = value
    return result


class _Unset:
    """Marks an optional error field that was never set, as opposed to a JSON null."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass
class ComparisonSettings:
    """Options that steer a single comparison (and the formatter)."""
    indentation: int = 2
    sort_keys: bool = False
    ignore_order: bool = True
    fuzzy_match: bool = True
    ignore_case: bool = False
    # JSONPath expressions removed from both documents before comparing
    ignore_paths: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ComparisonSettings":
        return cls(**_filter_known(cls, data or {}))

    def to_dict(self) -> dict:
        return {
            "indentation": self.indentation,
            "sortKeys": self.sort_keys,
            "ignoreOrder": self.ignore_order,
            "fuzzyMatch": self.fuzzy_match,
            "ignoreCase": self.ignore_case,
            "ignorePaths": list(self.ignore_paths),
        }


@dataclass
class Difference:
    """A single addition, deletion or modification between two documents."""
    type: DiffType
    path: str
    old_value: Any = None
    new_value: Any = None
    left_line: Optional[int] = None
    right_line: Optional[int] = None

    def to_dict(self) -> dict:
        result = {"type": self.type.value, "path": self.path}
        if self.type != DiffType.ADDITION:
            result["oldValue"] = self.old_value
            result["leftLine"] = self.left_line
        if self.type != DiffType.DELETION:
            result["newValue"] = self.new_value
            result["rightLine"] = self.right_line
        return result


@dataclass
class ComparisonSummary:
    additions: int = 0
    deletions: int = 0
    modifications: int = 0
    unchanged: int = 0

    def to_dict(self) -> dict:
        return {
            "additions": self.additions,
            "deletions": self.deletions,
            "modifications": self.modifications,
            "unchanged": self.unchanged,
        }


@dataclass
class ComparisonResult:
    """Complete comparison report."""
    differences: list[Difference] = field(default_factory=list)
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)

    def to_dict(self) -> dict:
        return {
            "differences": [d.to_dict() for d in self.differences],
            "summary": self.summary.to_dict(),
        }


@dataclass
class ValidatorOptions:
    """Configuration bag for the schema validator."""
    draft: SchemaDraft = SchemaDraft.AUTO
    strict: bool = False
    all_errors: bool = True
    verbose: bool = True
    validate_formats: bool = True
    resolve_external_refs: bool = False
    max_depth: int = 100
    # Milliseconds. Only honoured by validate_async, never inside the engine.
    timeout: int = 5000
    external_schemas: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.draft, str):
            self.draft = SchemaDraft(self.draft)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ValidatorOptions":
        return cls(**_filter_known(cls, data or {}))

    def merged(self, overrides: Optional[dict]) -> "ValidatorOptions":
        """Return a copy with the given keys (camelCase or snake_case) replaced."""
        if not overrides:
            return replace(self)
        return replace(self, **_filter_known(type(self), overrides))

    def to_dict(self) -> dict:
        return {
            _camel_case(f.name): (
                getattr(self, f.name).value
                if isinstance(getattr(self, f.name), Enum)
                else getattr(self, f.name)
            )
            for f in fields(self)
        }


@dataclass
class ValidationError:
    """A single error or warning produced while evaluating a schema."""
    instance_path: str
    schema_path: str
    keyword: str
    message: str
    category: ErrorCategory
    severity: Severity = Severity.ERROR
    params: dict = field(default_factory=dict)
    line_number: Optional[int] = None
    column_number: Optional[int] = None
    suggestion: Optional[str] = None
    affected_value: Any = UNSET
    expected_value: Any = UNSET
    schema_location: Optional[str] = None
    data_location: Optional[str] = None

    def to_dict(self) -> dict:
        result = {
            "instancePath": self.instance_path,
            "schemaPath": self.schema_path,
            "keyword": self.keyword,
            "params": self.params,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
        }
        optional = {
            "lineNumber": self.line_number,
            "columnNumber": self.column_number,
            "suggestion": self.suggestion,
            "schemaLocation": self.schema_location,
            "dataLocation": self.data_location,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        if self.affected_value is not UNSET:
            result["affectedValue"] = self.affected_value
        if self.expected_value is not UNSET:
            result["expectedValue"] = self.expected_value
        return result


@dataclass
class ValidationSummary:
    total_errors: int = 0
    total_warnings: int = 0
    errors_by_category: dict[str, int] = field(default_factory=dict)
    validation_time: float = 0.0
    schema_complexity: int = 0
    data_size: int = 0
    total_properties: int = 0
    required_properties: int = 0
    validated_properties: int = 0

    def to_dict(self) -> dict:
        return {
            "totalErrors": self.total_errors,
            "totalWarnings": self.total_warnings,
            "errorsByCategory": dict(self.errors_by_category),
            "validationTime": self.validation_time,
            "schemaComplexity": self.schema_complexity,
            "dataSize": self.data_size,
            "totalProperties": self.total_properties,
            "requiredProperties": self.required_properties,
            "validatedProperties": self.validated_properties,
        }


@dataclass
class SchemaInfo:
    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    properties: int = 0
    required_fields: int = 0
    has_external_refs: bool = False

    def to_dict(self) -> dict:
        result = {
            "properties": self.properties,
            "requiredFields": self.required_fields,
            "hasExternalRefs": self.has_external_refs,
        }
        for key in ("title", "description", "version"):
            if getattr(self, key) is not None:
                result[key] = getattr(self, key)
        return result


@dataclass
class ValidationResult:
    """Outcome of validating one document against one schema."""
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)
    detected_draft: Optional[SchemaDraft] = None
    schema_info: Optional[SchemaInfo] = None

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict:
        result = {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "summary": self.summary.to_dict(),
        }
        if self.detected_draft is not None:
            result["detectedDraft"] = self.detected_draft.value
        if self.schema_info is not None:
            result["schemaInfo"] = self.schema_info.to_dict()
        return result


@dataclass
class BatchFile:
    """One named document submitted to a batch validation."""
    name: str
    content: str


@dataclass
class BatchValidationResult:
    file_name: str
    result: ValidationResult
    processing_time: float

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "result": self.result.to_dict(),
            "processingTime": self.processing_time,
        }


@dataclass
class SchemaVisualization:
    """Display-oriented tree mirroring a schema's structure."""
    type: Any = "object"
    title: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[dict[str, "SchemaVisualization"]] = None
    items: Optional["SchemaVisualization"] = None
    required: Optional[list[str]] = None
    format: Optional[str] = None
    enum: Optional[list] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    additional_properties: Any = None
    examples: Optional[list] = None
    default: Any = None
    ref: Optional[str] = None
    circular: bool = False

    def to_dict(self, include_ref: bool = True) -> dict:
        result = {"type": self.type}
        scalars = {
            "title": self.title,
            "description": self.description,
            "required": self.required,
            "format": self.format,
            "enum": self.enum,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "pattern": self.pattern,
            "examples": self.examples,
            "default": self.default,
        }
        result.update({k: v for k, v in scalars.items() if v is not None})
        if self.properties is not None:
            result["properties"] = {
                name: child.to_dict(include_ref)
                for name, child in self.properties.items()
            }
        if self.items is not None:
            result["items"] = self.items.to_dict(include_ref)
        if isinstance(self.additional_properties, SchemaVisualization):
            result["additionalProperties"] = self.additional_properties.to_dict(include_ref)
        elif self.additional_properties is not None:
            result["additionalProperties"] = self.additional_properties
        if include_ref and self.ref is not None:
            result["$ref"] = self.ref
        if self.circular:
            result["circular"] = True
        return result

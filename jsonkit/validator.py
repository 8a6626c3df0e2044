"""Recursive JSON Schema validation engine."""

from __future__ import annotations

import asyncio
import logging
import math
import re
import time
from dataclasses import dataclass, field, replace
from fractions import Fraction
from typing import Any, Iterable, Mapping, Optional, Union

from .models import (
    BatchFile,
    BatchValidationResult,
    ErrorCategory,
    SchemaDraft,
    SchemaVisualization,
    Severity,
    ValidationError,
    ValidationResult,
    ValidationSummary,
    ValidatorOptions,
    UNSET,
)
from .exceptions import InputParseError, UnresolvedRefError
from .formats import check_format, format_suggestion
from .parsing import parse_input
from .schema import (
    SchemaCollector,
    SchemaResolver,
    calculate_schema_complexity,
    detect_schema_draft,
    generate_schema_info,
)
from .source_map import SourceLocator
from .utils import (
    build_path,
    escape_pointer_token,
    format_location,
    get_json_type,
    is_numeric,
    json_equal,
    to_compact_json,
)
from .visualization import generate_schema_visualization

logger = logging.getLogger(__name__)

OptionsLike = Union[ValidatorOptions, Mapping[str, Any], None]


@dataclass
class ValidationContext:
    """
    Everything one validate() call needs, passed explicitly down the recursion.

    fork() gives the same context with empty error/warning buffers, used to
    evaluate anyOf/oneOf/not branches in isolation.
    """
    root_schema: Any
    resolver: SchemaResolver
    options: ValidatorOptions
    locator: SourceLocator
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)
    validated_properties: set[str] = field(default_factory=set)
    # (ref, instance path) pairs currently being expanded
    active_refs: frozenset = frozenset()

    def fork(self) -> "ValidationContext":
        return replace(self, errors=[], warnings=[])

    @property
    def stopped(self) -> bool:
        return not self.options.all_errors and bool(self.errors)

    def report(
        self,
        keyword: str,
        data_path: str,
        schema_path: str,
        message: str,
        category: ErrorCategory,
        severity: Severity = Severity.ERROR,
        params: Optional[dict] = None,
        suggestion: Optional[str] = None,
        affected_value: Any = UNSET,
        expected_value: Any = UNSET,
    ) -> ValidationError:
        location = self.locator.locate(data_path)
        verbose = self.options.verbose
        error = ValidationError(
            instance_path=data_path,
            schema_path=schema_path,
            keyword=keyword,
            message=message,
            category=category,
            severity=severity,
            params=params or {},
            line_number=location.line,
            column_number=location.column,
            suggestion=suggestion if verbose else None,
            affected_value=affected_value if verbose else UNSET,
            expected_value=expected_value if verbose else UNSET,
            schema_location=format_location(schema_path),
            data_location=format_location(data_path),
        )
        if severity == Severity.ERROR:
            self.errors.append(error)
        else:
            self.warnings.append(error)
        return error


def _where(data_path: str) -> str:
    return data_path or "root"


def _is_multiple_of(value: float, divisor: float) -> bool:
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    try:
        result = value / divisor
    except OverflowError:
        # int beyond float range
        return Fraction(value) % Fraction(divisor) == 0
    if not math.isfinite(result):
        return False
    remainder = result - math.floor(result)
    # Floating point tolerance
    return remainder < 1e-10 or remainder > 0.9999999999


def _type_matches(actual: str, expected_types: list) -> bool:
    if actual in expected_types:
        return True
    return actual == "integer" and "number" in expected_types


class EnhancedJsonSchemaValidator:
    """
    Validates JSON (or YAML) documents against JSON Schema drafts 04 to 2020-12.

    Never raises from validate(): parse failures, schema evaluation failures
    and unexpected exceptions all come back as a ValidationResult holding a
    single synthetic error. The instance only stores default options, so it
    is safe to share between calls.
    """

    def __init__(self, options: Optional[ValidatorOptions] = None):
        self.options = options or ValidatorOptions()

    def detect_schema_draft(self, schema: Any) -> SchemaDraft:
        return detect_schema_draft(schema)

    def parse_input(self, text: str, fmt: str = "auto") -> Any:
        return parse_input(text, fmt)

    def validate(
        self,
        json_text: str,
        schema_text: str,
        options: OptionsLike = None,
    ) -> ValidationResult:
        """
        Validate a document against a schema.

        Args:
            json_text: The data, JSON or YAML
            schema_text: The schema, JSON or YAML
            options: A ValidatorOptions, or a mapping of overrides merged
                over this validator's defaults

        Returns:
            ValidationResult (never raises)
        """
        start_time = time.perf_counter()
        try:
            opts = self._merge_options(options)
        except (AttributeError, TypeError, ValueError) as e:
            return self._options_error_result(e, start_time)

        try:
            try:
                data = parse_input(json_text)
            except InputParseError as e:
                return self._parse_error_result("JSON data", e, start_time)

            try:
                schema = parse_input(schema_text)
            except InputParseError as e:
                return self._parse_error_result("JSON schema", e, start_time)

            external = opts.external_schemas if opts.resolve_external_refs else {}
            resolver = SchemaResolver(schema, external)

            draft = opts.draft if opts.draft != SchemaDraft.AUTO else detect_schema_draft(schema)
            if draft == SchemaDraft.AUTO:
                draft = SchemaDraft.DRAFT_07

            ctx = ValidationContext(
                root_schema=schema,
                resolver=resolver,
                options=opts,
                locator=SourceLocator(json_text),
            )
            collector = SchemaCollector(resolver)

            try:
                collector.collect(schema)
                self._validate_node(data, schema, "", "#", ctx)
                self._check_missing_required(data, schema, "", "#", ctx)
            except Exception as e:
                logger.warning("Schema evaluation failed: %s", e)
                return self._failure_result(
                    "validation",
                    f"Validation failed: {e}",
                    "Please check both JSON data and schema for any syntax issues",
                    start_time,
                )

            errors_by_category: dict[str, int] = {}
            for issue in ctx.errors + ctx.warnings:
                key = issue.category.value
                errors_by_category[key] = errors_by_category.get(key, 0) + 1

            summary = ValidationSummary(
                total_errors=len(ctx.errors),
                total_warnings=len(ctx.warnings),
                errors_by_category=errors_by_category,
                validation_time=(time.perf_counter() - start_time) * 1000,
                schema_complexity=calculate_schema_complexity(schema, resolver),
                data_size=len(to_compact_json(data)),
                total_properties=len(collector.total_properties),
                required_properties=len(collector.required_properties),
                validated_properties=len(ctx.validated_properties),
            )

            logger.debug(
                "Validated document (%s): %d errors, %d warnings",
                draft.value, summary.total_errors, summary.total_warnings,
            )

            return ValidationResult(
                errors=ctx.errors,
                warnings=ctx.warnings,
                summary=summary,
                detected_draft=draft,
                schema_info=generate_schema_info(schema, resolver),
            )

        except Exception as e:
            logger.exception("Unexpected validation error")
            return self._failure_result(
                "unexpected",
                f"Unexpected validation error: {e}",
                "Please check both JSON data and schema for any syntax issues",
                start_time,
            )

    async def validate_async(
        self,
        json_text: str,
        schema_text: str,
        options: OptionsLike = None,
    ) -> ValidationResult:
        """
        Run validate() in a worker thread bounded by options.timeout (ms).

        On expiry a failure result with keyword "timeout" is returned; the
        worker itself cannot be interrupted and finishes in the background.
        """
        start_time = time.perf_counter()
        try:
            opts = self._merge_options(options)
        except (AttributeError, TypeError, ValueError) as e:
            return self._options_error_result(e, start_time)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.validate, json_text, schema_text, opts),
                timeout=opts.timeout / 1000,
            )
        except asyncio.TimeoutError:
            return self._failure_result(
                "timeout",
                f"Validation did not finish within {opts.timeout} ms",
                "Simplify the schema or data, or raise the timeout option",
                start_time,
            )

    def validate_batch(
        self,
        files: Iterable[Union[BatchFile, Mapping[str, str], tuple]],
        schema_text: str,
        options: OptionsLike = None,
    ) -> list[BatchValidationResult]:
        """
        Validate several documents against one schema, sequentially.

        A failure on one file becomes that file's result; the batch goes on.
        """
        results = []

        for entry in files:
            start_time = time.perf_counter()
            name = "<unknown>"
            try:
                batch_file = self._as_batch_file(entry)
                name = batch_file.name
                result = self.validate(batch_file.content, schema_text, options)
            except Exception as e:
                logger.exception("Batch entry %s failed", name)
                result = self._failure_result(
                    "unexpected",
                    f"Unexpected validation error: {e}",
                    "Please check both JSON data and schema for any syntax issues",
                    start_time,
                )
            results.append(BatchValidationResult(
                file_name=name,
                result=result,
                processing_time=(time.perf_counter() - start_time) * 1000,
            ))

        logger.debug("Validated batch of %d files", len(results))
        return results

    def generate_schema_visualization(
        self,
        schema: Any,
        root_schema: Any = None,
    ) -> SchemaVisualization:
        """
        Build a display tree for a parsed schema (or schema text).

        Args:
            schema: The schema node to render
            root_schema: Document that local $refs point into (defaults to schema)
        """
        if isinstance(schema, str):
            schema = parse_input(schema)
        root = schema if root_schema is None else root_schema
        external = self.options.external_schemas if self.options.resolve_external_refs else {}
        return generate_schema_visualization(schema, SchemaResolver(root, external))

    def _merge_options(self, options: OptionsLike) -> ValidatorOptions:
        if isinstance(options, ValidatorOptions):
            return options
        return self.options.merged(options)

    @staticmethod
    def _as_batch_file(entry) -> BatchFile:
        if isinstance(entry, BatchFile):
            return entry
        if isinstance(entry, Mapping):
            return BatchFile(name=entry["name"], content=entry["content"])
        name, content = entry
        return BatchFile(name=name, content=content)

    # Recursive evaluation

    def _validate_node(
        self,
        data: Any,
        schema: Any,
        data_path: str,
        schema_path: str,
        ctx: ValidationContext,
        depth: int = 0,
    ):
        if ctx.stopped:
            return

        if depth > ctx.options.max_depth:
            ctx.report(
                "maxDepth", data_path, schema_path,
                "Maximum recursion depth exceeded (possible circular reference)",
                ErrorCategory.CUSTOM,
                severity=Severity.WARNING,
                params={"maxDepth": ctx.options.max_depth},
                suggestion="Your schema might have circular references",
            )
            return

        if not isinstance(schema, dict):
            return

        if "$ref" in schema:
            self._validate_ref(data, schema["$ref"], data_path, schema_path, ctx, depth)
            return

        if "type" in schema and not self._validate_type(data, schema, data_path, schema_path, ctx):
            # Deeper checks on a value of the wrong type are meaningless
            return

        if isinstance(data, dict):
            self._validate_object(data, schema, data_path, schema_path, ctx, depth)
        elif isinstance(data, list):
            self._validate_array(data, schema, data_path, schema_path, ctx, depth)
        elif isinstance(data, str):
            self._validate_string(data, schema, data_path, schema_path, ctx)
        elif is_numeric(data):
            self._validate_number(data, schema, data_path, schema_path, ctx)

        self._validate_enum_const(data, schema, data_path, schema_path, ctx)
        self._validate_composition(data, schema, data_path, schema_path, ctx, depth)

    def _validate_ref(self, data, ref, data_path, schema_path, ctx, depth):
        key = (str(ref), data_path)
        if key in ctx.active_refs:
            ctx.report(
                "$ref", data_path, schema_path,
                f"Circular reference detected: {ref} re-enters itself at {_where(data_path)}",
                ErrorCategory.REFERENCE,
                params={"ref": ref},
                suggestion="Break the cycle so that every $ref loop passes through a property or item",
            )
            return

        try:
            resolved = ctx.resolver.resolve(ref)
        except UnresolvedRefError as e:
            ctx.report(
                "$ref", data_path, schema_path,
                f"Could not resolve reference: {ref}",
                ErrorCategory.REFERENCE,
                params={"ref": ref, "reason": e.reason},
                suggestion="Check that the reference is correct and points to a valid schema definition",
            )
            return

        self._validate_node(
            data, resolved, data_path, str(ref),
            replace(ctx, active_refs=ctx.active_refs | {key}),
            depth + 1,
        )

    def _validate_type(self, data, schema, data_path, schema_path, ctx) -> bool:
        expected = schema["type"]
        expected_types = expected if isinstance(expected, list) else [expected]
        actual = get_json_type(data)

        if _type_matches(actual, expected_types):
            return True

        expected_text = " or ".join(str(t) for t in expected_types)
        ctx.report(
            "type", data_path, f"{schema_path}/type",
            f"Expected type {expected_text} but got {actual} at {_where(data_path)}",
            ErrorCategory.TYPE,
            params={"type": expected_text, "data": data},
            suggestion=(
                f"Change the value to type '{expected_types[0]}' "
                f"or update the schema to allow '{actual}'"
            ),
            affected_value=data,
            expected_value=f"type: {expected_text}",
        )
        return False

    def _validate_object(self, data: dict, schema, data_path, schema_path, ctx, depth):
        where = _where(data_path)

        required = schema.get("required")
        if isinstance(required, list):
            for name in required:
                if name not in data:
                    ctx.report(
                        "required", build_path(data_path, name), f"{schema_path}/required",
                        f"Required property '{name}' is missing at {where}",
                        ErrorCategory.REQUIRED,
                        params={"missingProperty": name},
                        suggestion=f"Add the required field '{name}' to your JSON data",
                    )

        properties = schema.get("properties") or {}
        for name, prop_schema in properties.items():
            if name in data:
                prop_path = build_path(data_path, name)
                ctx.validated_properties.add(prop_path)
                self._validate_node(
                    data[name], prop_schema, prop_path,
                    f"{schema_path}/properties/{escape_pointer_token(name)}",
                    ctx, depth + 1,
                )

        pattern_matched = set()
        for pattern, pattern_schema in (schema.get("patternProperties") or {}).items():
            try:
                regex = re.compile(pattern)
            except re.error:
                ctx.report(
                    "patternProperties", data_path, f"{schema_path}/patternProperties",
                    f"Invalid regex pattern in schema: {pattern}",
                    ErrorCategory.CUSTOM,
                    severity=Severity.WARNING,
                    params={"pattern": pattern},
                    suggestion="Fix the regex pattern in the schema",
                )
                continue
            for name in data:
                if regex.search(name):
                    pattern_matched.add(name)
                    self._validate_node(
                        data[name], pattern_schema, build_path(data_path, name),
                        f"{schema_path}/patternProperties/{escape_pointer_token(pattern)}",
                        ctx, depth + 1,
                    )

        additional = schema.get("additionalProperties")
        if additional is False or isinstance(additional, dict):
            extras = [name for name in data if name not in properties and name not in pattern_matched]
            for name in extras:
                prop_path = build_path(data_path, name)
                if additional is False:
                    ctx.report(
                        "additionalProperties", prop_path, f"{schema_path}/additionalProperties",
                        f"Additional property '{name}' is not allowed at {where}",
                        ErrorCategory.CONSTRAINT,
                        severity=Severity.ERROR if ctx.options.strict else Severity.WARNING,
                        params={"additionalProperty": name},
                        suggestion=(
                            f"Remove the '{name}' property or update the schema "
                            f"to allow additional properties"
                        ),
                    )
                else:
                    self._validate_node(
                        data[name], additional, prop_path,
                        f"{schema_path}/additionalProperties", ctx, depth + 1,
                    )

        count = len(data)
        min_props = schema.get("minProperties")
        if min_props is not None and count < min_props:
            ctx.report(
                "minProperties", data_path, f"{schema_path}/minProperties",
                f"Object at '{where}' must have at least {min_props} properties but has {count}",
                ErrorCategory.CONSTRAINT,
                params={"limit": min_props, "data": count},
                suggestion=f"Add properties to reach the minimum of {min_props}",
            )
        max_props = schema.get("maxProperties")
        if max_props is not None and count > max_props:
            ctx.report(
                "maxProperties", data_path, f"{schema_path}/maxProperties",
                f"Object at '{where}' must have at most {max_props} properties but has {count}",
                ErrorCategory.CONSTRAINT,
                params={"limit": max_props, "data": count},
                suggestion=f"Remove properties to stay within the maximum of {max_props}",
            )

        self._validate_dependencies(data, schema, data_path, schema_path, ctx, depth)

    def _validate_dependencies(self, data: dict, schema, data_path, schema_path, ctx, depth):
        """dependencies (draft-04 style) plus its 2019-09 split forms."""
        dependencies = dict(schema.get("dependencies") or {})
        dependencies.update(schema.get("dependentRequired") or {})
        dependencies.update(schema.get("dependentSchemas") or {})

        for prop, dependency in dependencies.items():
            if prop not in data:
                continue
            if isinstance(dependency, list):
                for dep_prop in dependency:
                    if dep_prop not in data:
                        ctx.report(
                            "dependencies", data_path, f"{schema_path}/dependencies",
                            f"Property '{prop}' at '{_where(data_path)}' requires "
                            f"property '{dep_prop}' to be present",
                            ErrorCategory.REQUIRED,
                            params={"property": prop, "dependency": dep_prop},
                            suggestion=f"Add the required property '{dep_prop}' when '{prop}' is present",
                        )
            elif isinstance(dependency, dict):
                self._validate_node(
                    data, dependency, data_path,
                    f"{schema_path}/dependencies/{escape_pointer_token(prop)}",
                    ctx, depth + 1,
                )

    def _validate_array(self, data: list, schema, data_path, schema_path, ctx, depth):
        where = _where(data_path)
        items = schema.get("items")

        if isinstance(items, list):
            for i in range(min(len(data), len(items))):
                self._validate_node(
                    data[i], items[i], build_path(data_path, i),
                    f"{schema_path}/items/{i}", ctx, depth + 1,
                )

            additional = schema.get("additionalItems")
            if len(data) > len(items):
                if additional is False:
                    ctx.report(
                        "additionalItems", data_path, f"{schema_path}/additionalItems",
                        f"Array at '{where}' has more items than allowed",
                        ErrorCategory.CONSTRAINT,
                        params={"limit": len(items)},
                        suggestion="Remove additional items to match the schema definition",
                    )
                elif isinstance(additional, dict):
                    for i in range(len(items), len(data)):
                        self._validate_node(
                            data[i], additional, build_path(data_path, i),
                            f"{schema_path}/additionalItems", ctx, depth + 1,
                        )
        elif isinstance(items, dict):
            for i, item in enumerate(data):
                self._validate_node(
                    item, items, build_path(data_path, i),
                    f"{schema_path}/items", ctx, depth + 1,
                )

        min_items = schema.get("minItems")
        if min_items is not None and len(data) < min_items:
            ctx.report(
                "minItems", data_path, f"{schema_path}/minItems",
                f"Array at '{where}' must have at least {min_items} items but has {len(data)}",
                ErrorCategory.CONSTRAINT,
                params={"limit": min_items, "data": len(data)},
                suggestion=f"Add more items to reach the minimum of {min_items}",
            )

        max_items = schema.get("maxItems")
        if max_items is not None and len(data) > max_items:
            ctx.report(
                "maxItems", data_path, f"{schema_path}/maxItems",
                f"Array at '{where}' must have at most {max_items} items but has {len(data)}",
                ErrorCategory.CONSTRAINT,
                params={"limit": max_items, "data": len(data)},
                suggestion=f"Remove items to stay within the maximum of {max_items}",
            )

        if schema.get("uniqueItems") is True:
            seen = set()
            for item in data:
                serialized = to_compact_json(item)
                if serialized in seen:
                    ctx.report(
                        "uniqueItems", data_path, f"{schema_path}/uniqueItems",
                        f"Array at '{where}' must have unique items",
                        ErrorCategory.CONSTRAINT,
                        suggestion="Remove duplicate items from the array",
                    )
                    break
                seen.add(serialized)

    def _validate_string(self, data: str, schema, data_path, schema_path, ctx):
        where = _where(data_path)

        min_length = schema.get("minLength")
        if min_length is not None and len(data) < min_length:
            ctx.report(
                "minLength", data_path, f"{schema_path}/minLength",
                f"String at '{where}' must be at least {min_length} characters long "
                f"but is {len(data)}",
                ErrorCategory.CONSTRAINT,
                params={"limit": min_length, "data": len(data)},
                suggestion=f"Add more characters to reach the minimum length of {min_length}",
            )

        max_length = schema.get("maxLength")
        if max_length is not None and len(data) > max_length:
            ctx.report(
                "maxLength", data_path, f"{schema_path}/maxLength",
                f"String at '{where}' must be at most {max_length} characters long "
                f"but is {len(data)}",
                ErrorCategory.CONSTRAINT,
                params={"limit": max_length, "data": len(data)},
                suggestion=f"Remove characters to stay within the maximum length of {max_length}",
            )

        pattern = schema.get("pattern")
        if pattern:
            try:
                matched = re.search(pattern, data) is not None
            except re.error:
                ctx.report(
                    "pattern", data_path, f"{schema_path}/pattern",
                    f"Invalid regex pattern in schema: {pattern}",
                    ErrorCategory.CUSTOM,
                    severity=Severity.WARNING,
                    params={"pattern": pattern},
                    suggestion="Fix the regex pattern in the schema",
                )
            else:
                if not matched:
                    ctx.report(
                        "pattern", data_path, f"{schema_path}/pattern",
                        f"String at '{where}' does not match the required pattern: {pattern}",
                        ErrorCategory.PATTERN,
                        params={"pattern": pattern},
                        suggestion="Ensure the value matches the specified regular expression pattern",
                        affected_value=data,
                    )

        fmt = schema.get("format")
        if isinstance(fmt, str) and ctx.options.validate_formats and not check_format(data, fmt):
            ctx.report(
                "format", data_path, f"{schema_path}/format",
                f"Value at '{where}' does not match format '{fmt}'",
                ErrorCategory.FORMAT,
                params={"format": fmt},
                suggestion=format_suggestion(fmt),
                affected_value=data,
            )

    def _validate_number(self, data, schema, data_path, schema_path, ctx):
        where = _where(data_path)

        minimum = schema.get("minimum")
        if is_numeric(minimum):
            exclusive = schema.get("exclusiveMinimum") is True
            if data < minimum or (exclusive and data == minimum):
                ctx.report(
                    "minimum", data_path, f"{schema_path}/minimum",
                    f"Value at '{where}' must be {'>' if exclusive else '>='} {minimum} but is {data}",
                    ErrorCategory.CONSTRAINT,
                    params={"limit": minimum, "data": data, "exclusive": exclusive},
                    suggestion=(
                        f"Increase the value to be {'greater than' if exclusive else 'at least'} {minimum}"
                    ),
                )

        maximum = schema.get("maximum")
        if is_numeric(maximum):
            exclusive = schema.get("exclusiveMaximum") is True
            if data > maximum or (exclusive and data == maximum):
                ctx.report(
                    "maximum", data_path, f"{schema_path}/maximum",
                    f"Value at '{where}' must be {'<' if exclusive else '<='} {maximum} but is {data}",
                    ErrorCategory.CONSTRAINT,
                    params={"limit": maximum, "data": data, "exclusive": exclusive},
                    suggestion=(
                        f"Decrease the value to be {'less than' if exclusive else 'at most'} {maximum}"
                    ),
                )

        # draft-06+ numeric forms
        exclusive_min = schema.get("exclusiveMinimum")
        if is_numeric(exclusive_min) and data <= exclusive_min:
            ctx.report(
                "exclusiveMinimum", data_path, f"{schema_path}/exclusiveMinimum",
                f"Value at '{where}' must be > {exclusive_min} but is {data}",
                ErrorCategory.CONSTRAINT,
                params={"limit": exclusive_min, "data": data, "exclusive": True},
                suggestion=f"Increase the value to be greater than {exclusive_min}",
            )
        exclusive_max = schema.get("exclusiveMaximum")
        if is_numeric(exclusive_max) and data >= exclusive_max:
            ctx.report(
                "exclusiveMaximum", data_path, f"{schema_path}/exclusiveMaximum",
                f"Value at '{where}' must be < {exclusive_max} but is {data}",
                ErrorCategory.CONSTRAINT,
                params={"limit": exclusive_max, "data": data, "exclusive": True},
                suggestion=f"Decrease the value to be less than {exclusive_max}",
            )

        multiple_of = schema.get("multipleOf")
        if is_numeric(multiple_of) and multiple_of != 0 and not _is_multiple_of(data, multiple_of):
            ctx.report(
                "multipleOf", data_path, f"{schema_path}/multipleOf",
                f"Value at '{where}' must be a multiple of {multiple_of}",
                ErrorCategory.CONSTRAINT,
                params={"multipleOf": multiple_of, "data": data},
                suggestion=f"Adjust the value to be a multiple of {multiple_of}",
            )

    def _validate_enum_const(self, data, schema, data_path, schema_path, ctx):
        where = _where(data_path)

        enum = schema.get("enum")
        if isinstance(enum, list) and not any(json_equal(data, option) for option in enum):
            listed = ", ".join(to_compact_json(option) for option in enum)
            ctx.report(
                "enum", data_path, f"{schema_path}/enum",
                f"Value at '{where}' must be one of: {listed}",
                ErrorCategory.ENUM,
                params={"allowedValues": enum},
                suggestion=f"Use one of these values: {listed}",
                affected_value=data,
                expected_value=enum,
            )

        if "const" in schema and not json_equal(data, schema["const"]):
            expected = to_compact_json(schema["const"])
            ctx.report(
                "const", data_path, f"{schema_path}/const",
                f"Value at '{where}' must be exactly: {expected}",
                ErrorCategory.ENUM,
                params={"allowedValue": schema["const"]},
                suggestion=f"Use the exact value: {expected}",
                affected_value=data,
                expected_value=schema["const"],
            )

    def _evaluate_branch(self, data, branch, data_path, branch_path, ctx, depth) -> dict:
        branch_ctx = ctx.fork()
        self._validate_node(data, branch, data_path, branch_path, branch_ctx, depth + 1)
        return {
            "valid": not branch_ctx.errors,
            "errors": [e.to_dict() for e in branch_ctx.errors],
        }

    def _validate_composition(self, data, schema, data_path, schema_path, ctx, depth):
        where = _where(data_path)

        all_of = schema.get("allOf")
        if isinstance(all_of, list):
            for i, branch in enumerate(all_of):
                self._validate_node(
                    data, branch, data_path, f"{schema_path}/allOf/{i}", ctx, depth + 1,
                )

        any_of = schema.get("anyOf")
        if isinstance(any_of, list):
            branches = []
            for i, branch in enumerate(any_of):
                outcome = self._evaluate_branch(
                    data, branch, data_path, f"{schema_path}/anyOf/{i}", ctx, depth,
                )
                branches.append({"index": i, **outcome})
                if outcome["valid"]:
                    break

            if not any(b["valid"] for b in branches):
                ctx.report(
                    "anyOf", data_path, f"{schema_path}/anyOf",
                    f"Value at '{where}' does not match any of the required schemas",
                    ErrorCategory.CUSTOM,
                    params={"schemas": len(any_of), "branches": branches},
                    suggestion="Ensure the value matches at least one of the required schemas",
                )

        one_of = schema.get("oneOf")
        if isinstance(one_of, list):
            branches = [
                {"index": i, **self._evaluate_branch(
                    data, branch, data_path, f"{schema_path}/oneOf/{i}", ctx, depth,
                )}
                for i, branch in enumerate(one_of)
            ]
            valid_count = sum(1 for b in branches if b["valid"])

            if valid_count != 1:
                ctx.report(
                    "oneOf", data_path, f"{schema_path}/oneOf",
                    f"Value at '{where}' must match exactly one schema but matched {valid_count}",
                    ErrorCategory.CUSTOM,
                    params={"matched": valid_count, "required": 1, "branches": branches},
                    suggestion="Ensure the value matches exactly one of the required schemas",
                )

        if isinstance(schema.get("not"), dict):
            outcome = self._evaluate_branch(
                data, schema["not"], data_path, f"{schema_path}/not", ctx, depth,
            )
            if outcome["valid"]:
                ctx.report(
                    "not", data_path, f"{schema_path}/not",
                    f"Value at '{where}' must not match the schema",
                    ErrorCategory.CUSTOM,
                    suggestion="Ensure the value does not match the forbidden schema",
                )

    def _check_missing_required(
        self,
        data: Any,
        schema: Any,
        data_path: str,
        schema_path: str,
        ctx: ValidationContext,
        depth: int = 0,
        active: frozenset = frozenset(),
    ):
        """
        Second walk that reports missing required properties the main pass
        did not already report. anyOf/oneOf branches are not entered.
        """
        if depth > ctx.options.max_depth or ctx.stopped or not isinstance(schema, dict):
            return

        if "$ref" in schema:
            ref = schema["$ref"]
            key = (str(ref), data_path)
            if key in active:
                return
            resolved = ctx.resolver.try_resolve(ref)
            if resolved is not None:
                self._check_missing_required(
                    data, resolved, data_path, str(ref), ctx, depth + 1, active | {key},
                )
            return

        if "type" in schema:
            expected = schema["type"]
            expected_types = expected if isinstance(expected, list) else [expected]
            if not _type_matches(get_json_type(data), expected_types):
                return

        if isinstance(data, dict):
            reported = {
                e.instance_path for e in ctx.errors if e.keyword == "required"
            }
            required = schema.get("required")
            if isinstance(required, list):
                for name in required:
                    prop_path = build_path(data_path, name)
                    if name not in data and prop_path not in reported:
                        ctx.report(
                            "required", prop_path, f"{schema_path}/required",
                            f"Required property '{name}' is missing at {_where(data_path)}",
                            ErrorCategory.REQUIRED,
                            params={"missingProperty": name},
                            suggestion=f"Add the required field '{name}' to your JSON data",
                        )

            for name, prop_schema in (schema.get("properties") or {}).items():
                if name in data:
                    self._check_missing_required(
                        data[name], prop_schema, build_path(data_path, name),
                        f"{schema_path}/properties/{escape_pointer_token(name)}",
                        ctx, depth + 1, active,
                    )

        elif isinstance(data, list):
            items = schema.get("items")
            if isinstance(items, list):
                for i in range(min(len(data), len(items))):
                    self._check_missing_required(
                        data[i], items[i], build_path(data_path, i),
                        f"{schema_path}/items/{i}", ctx, depth + 1, active,
                    )
            elif isinstance(items, dict):
                for i, item in enumerate(data):
                    self._check_missing_required(
                        item, items, build_path(data_path, i),
                        f"{schema_path}/items", ctx, depth + 1, active,
                    )

        for i, branch in enumerate(schema.get("allOf") or []):
            self._check_missing_required(
                data, branch, data_path, f"{schema_path}/allOf/{i}", ctx, depth + 1, active,
            )

    # Failure results

    def _parse_error_result(self, what: str, error: InputParseError, start_time: float) -> ValidationResult:
        result = self._failure_result(
            "parse",
            f"Failed to parse {what}: {error.message}",
            f"Please check the {what} syntax and ensure it's valid JSON or YAML",
            start_time,
        )
        result.errors[0].line_number = error.line
        result.errors[0].column_number = error.column
        return result

    def _options_error_result(self, error: Exception, start_time: float) -> ValidationResult:
        logger.warning("Rejected validator options: %s", error)
        return self._failure_result(
            "validation",
            f"Validation failed: {error}",
            "Check the validator options (draft, timeout, maxDepth)",
            start_time,
        )

    @staticmethod
    def _failure_result(keyword: str, message: str, suggestion: str, start_time: float) -> ValidationResult:
        error = ValidationError(
            instance_path="",
            schema_path="",
            keyword=keyword,
            message=message,
            category=ErrorCategory.CUSTOM,
            suggestion=suggestion,
        )
        return ValidationResult(
            errors=[error],
            warnings=[],
            summary=ValidationSummary(
                total_errors=1,
                errors_by_category={ErrorCategory.CUSTOM.value: 1},
                validation_time=(time.perf_counter() - start_time) * 1000,
            ),
        )

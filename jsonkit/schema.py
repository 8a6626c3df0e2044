"""Schema reference resolution, draft detection and schema metrics."""

from __future__ import annotations

from typing import Any, Optional

from .models import SchemaDraft, SchemaInfo
from .exceptions import UnresolvedRefError
from .utils import build_path, unescape_pointer_token


_DRAFT_MARKERS = [
    ("draft-03", SchemaDraft.DRAFT_03),
    ("draft-04", SchemaDraft.DRAFT_04),
    ("draft-06", SchemaDraft.DRAFT_06),
    ("draft-07", SchemaDraft.DRAFT_07),
    ("2019-09", SchemaDraft.DRAFT_2019_09),
    ("2020-12", SchemaDraft.DRAFT_2020_12),
]

COMPOSITION_KEYWORDS = ("allOf", "anyOf", "oneOf")


def detect_schema_draft(schema: Any) -> SchemaDraft:
    """
    Detect the draft from the $schema URL.

    Returns AUTO when the schema declares no $schema and DRAFT_07 when the
    declared URL is not recognised.
    """
    if not isinstance(schema, dict):
        return SchemaDraft.DRAFT_07

    schema_url = schema.get("$schema")
    if not schema_url:
        return SchemaDraft.AUTO

    for marker, draft in _DRAFT_MARKERS:
        if marker in str(schema_url):
            return draft

    return SchemaDraft.DRAFT_07


class SchemaResolver:
    """Resolves $ref references against a root schema and an external cache."""

    def __init__(self, schema: Any, external_schemas: Optional[dict] = None):
        self.schema = schema
        self.external_schemas: dict[str, Any] = dict(external_schemas or {})

    def resolve(self, ref: str) -> Any:
        """
        Resolve a $ref.

        Args:
            ref: Local pointer ('#', '#/definitions/x') or a cached external URI,
                optionally with a '#/...' fragment

        Returns:
            The referenced schema node

        Raises:
            UnresolvedRefError: if the reference cannot be found
        """
        if not isinstance(ref, str):
            raise UnresolvedRefError(str(ref), "Reference must be a string")

        if ref.startswith("#"):
            return self._walk_pointer(self.schema, ref[1:], ref)

        base, _, fragment = ref.partition("#")
        if base not in self.external_schemas:
            raise UnresolvedRefError(ref, "External schema is not loaded")
        return self._walk_pointer(self.external_schemas[base], fragment, ref)

    def try_resolve(self, ref: str) -> Optional[Any]:
        try:
            return self.resolve(ref)
        except UnresolvedRefError:
            return None

    def _walk_pointer(self, document: Any, pointer: str, ref: str) -> Any:
        if pointer in ("", "/"):
            return document
        if not pointer.startswith("/"):
            raise UnresolvedRefError(ref, "Only JSON Pointer fragments are supported")

        resolved = document
        for part in pointer[1:].split("/"):
            part = unescape_pointer_token(part)
            if isinstance(resolved, dict) and part in resolved:
                resolved = resolved[part]
            elif isinstance(resolved, list) and part.isdigit() and int(part) < len(resolved):
                resolved = resolved[int(part)]
            else:
                raise UnresolvedRefError(ref, f"Path component '{part}' not found")
        return resolved


def _is_external(ref: Any) -> bool:
    return isinstance(ref, str) and not ref.startswith("#")


class SchemaCollector:
    """
    Collects every addressable property path a schema declares and the
    subset of paths it requires. Feeds the summary counters.
    """

    def __init__(self, resolver: SchemaResolver):
        self.resolver = resolver
        self.total_properties: set[str] = set()
        self.required_properties: set[str] = set()

    def collect(self, schema: Any, path: str = "", active: frozenset = frozenset()):
        if not isinstance(schema, dict):
            return

        if "$ref" in schema:
            ref = schema["$ref"]
            if not isinstance(ref, str) or ref in active:
                return
            resolved = self.resolver.try_resolve(ref)
            if resolved is not None:
                self.collect(resolved, path, active | {ref})
            return

        properties = schema.get("properties")
        if isinstance(properties, dict):
            for name, prop_schema in properties.items():
                prop_path = build_path(path, name)
                self.total_properties.add(prop_path)
                self.collect(prop_schema, prop_path, active)

        required = schema.get("required")
        if isinstance(required, list):
            for name in required:
                self.required_properties.add(build_path(path, str(name)))

        items = schema.get("items")
        if isinstance(items, list):
            for index, item in enumerate(items):
                self.collect(item, f"{path}[{index}]", active)
        elif isinstance(items, dict):
            self.collect(items, f"{path}[]", active)

        for keyword in COMPOSITION_KEYWORDS:
            branches = schema.get(keyword)
            if isinstance(branches, list):
                for index, branch in enumerate(branches):
                    self.collect(branch, f"{path}{keyword}[{index}]", active)


def calculate_schema_complexity(
    schema: Any,
    resolver: SchemaResolver,
    active: frozenset = frozenset()
) -> int:
    """Recursive node count: 1 per schema, plus 1 per declared property."""
    if not isinstance(schema, dict):
        return 1

    if "$ref" in schema:
        ref = schema["$ref"]
        resolved = resolver.try_resolve(ref) if isinstance(ref, str) and ref not in active else None
        if resolved is None:
            return 1
        return calculate_schema_complexity(resolved, resolver, active | {ref}) + 1

    complexity = 1

    properties = schema.get("properties")
    if isinstance(properties, dict):
        complexity += len(properties)
        for prop_schema in properties.values():
            complexity += calculate_schema_complexity(prop_schema, resolver, active)

    items = schema.get("items")
    if isinstance(items, list):
        for item in items:
            complexity += calculate_schema_complexity(item, resolver, active)
    elif items is not None:
        complexity += calculate_schema_complexity(items, resolver, active)

    for keyword in COMPOSITION_KEYWORDS:
        branches = schema.get(keyword)
        if isinstance(branches, list):
            for branch in branches:
                complexity += calculate_schema_complexity(branch, resolver, active)

    return complexity


def generate_schema_info(schema: Any, resolver: SchemaResolver) -> SchemaInfo:
    """Title, description, version and property/required counts of a schema."""
    if not isinstance(schema, dict):
        return SchemaInfo()

    info = SchemaInfo(
        title=schema.get("title"),
        description=schema.get("description"),
        version=schema.get("version"),
    )

    def count(node: Any, active: frozenset):
        if not isinstance(node, dict):
            return

        if "$ref" in node:
            ref = node["$ref"]
            if _is_external(ref):
                info.has_external_refs = True
            elif isinstance(ref, str) and ref not in active:
                resolved = resolver.try_resolve(ref)
                if resolved is not None:
                    count(resolved, active | {ref})
            return

        properties = node.get("properties")
        if isinstance(properties, dict):
            info.properties += len(properties)
            for prop_schema in properties.values():
                count(prop_schema, active)

        required = node.get("required")
        if isinstance(required, list):
            info.required_fields += len(required)

        for key in ("items", "additionalProperties", "allOf", "anyOf", "oneOf", "not"):
            child = node.get(key)
            if isinstance(child, list):
                for entry in child:
                    count(entry, active)
            elif child:
                count(child, active)

    count(schema, frozenset())
    return info

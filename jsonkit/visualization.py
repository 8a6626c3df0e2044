"""Display-oriented schema trees for UI rendering."""

from __future__ import annotations

from typing import Any

from .models import SchemaVisualization
from .schema import SchemaResolver


def generate_schema_visualization(
    schema: Any,
    resolver: SchemaResolver,
    active: frozenset = frozenset()
) -> SchemaVisualization:
    """
    Walk a schema and mirror its structure.

    $refs are followed through the resolver; the resulting node keeps the
    reference in `ref`. A reference that is already being expanded further
    up the tree yields a leaf marked `circular` instead of recursing.
    Tuple-form `items` shows only the first item schema.
    """
    if not isinstance(schema, dict):
        return SchemaVisualization(type="unknown")

    if "$ref" in schema:
        ref = schema["$ref"]
        if isinstance(ref, str) and ref in active:
            return SchemaVisualization(type="unknown", ref=ref, circular=True)
        resolved = resolver.try_resolve(ref)
        if resolved is None:
            return SchemaVisualization(type="unknown", ref=ref)
        visualization = generate_schema_visualization(resolved, resolver, active | {ref})
        visualization.ref = ref
        return visualization

    visualization = SchemaVisualization(
        type=schema.get("type") or "object",
        title=schema.get("title"),
        description=schema.get("description"),
        examples=schema.get("examples"),
        default=schema.get("default"),
        required=schema.get("required"),
        format=schema.get("format"),
        enum=schema.get("enum"),
        minimum=schema.get("minimum"),
        maximum=schema.get("maximum"),
        min_length=schema.get("minLength"),
        max_length=schema.get("maxLength"),
        pattern=schema.get("pattern") or None,
    )

    properties = schema.get("properties")
    if isinstance(properties, dict):
        visualization.properties = {
            name: generate_schema_visualization(prop_schema, resolver, active)
            for name, prop_schema in properties.items()
        }

    items = schema.get("items")
    if isinstance(items, list):
        if items:
            visualization.items = generate_schema_visualization(items[0], resolver, active)
    elif items:
        visualization.items = generate_schema_visualization(items, resolver, active)

    additional = schema.get("additionalProperties")
    if isinstance(additional, bool):
        visualization.additional_properties = additional
    elif additional is not None:
        visualization.additional_properties = generate_schema_visualization(
            additional, resolver, active
        )

    return visualization

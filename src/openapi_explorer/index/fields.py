"""Enumerate the field names reachable from a schema tree.

A *field* is a property name. Starting from a schema, the walk visits the
direct property map, then every property value (so nested objects contribute
their own properties, flat and without namespacing), then the array item
schema, then each ``allOf``, ``oneOf`` and ``anyOf`` member.

The walk does not follow ``$ref`` pointers; run it on trees that went
through :mod:`openapi_explorer.parser.resolver`, otherwise a referenced but
unexpanded sub-schema contributes no fields.
"""

from __future__ import annotations

from typing import Iterator, Optional

from openapi_explorer.models import SchemaNode


def fields_of(schema: SchemaNode) -> list[str]:
    """Return every field name reachable from *schema*.

    The result is a multiset: a name reachable along several routes appears
    once per route. Callers that need unique names must deduplicate, and no
    caller should rely on the order.

    Example::

        schema = SchemaNode.model_validate({
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "owner": {"type": "object", "properties": {"email": {"type": "string"}}},
            },
        })
        sorted(fields_of(schema))  # ['email', 'id', 'owner']
    """
    fields: list[str] = []
    properties = schema.properties or {}
    fields.extend(properties)
    for sub_schema in _nested(schema):
        fields.extend(fields_of(sub_schema))
    return fields


def find_property(schema: SchemaNode, field_name: str) -> Optional[SchemaNode]:
    """Return the first definition of *field_name* reachable from *schema*.

    Uses the same traversal order as :func:`fields_of`, checking the direct
    property map of each node before descending.
    """
    properties = schema.properties or {}
    if field_name in properties:
        return properties[field_name]
    for sub_schema in _nested(schema):
        found = find_property(sub_schema, field_name)
        if found is not None:
            return found
    return None


def _nested(schema: SchemaNode) -> Iterator[SchemaNode]:
    yield from (schema.properties or {}).values()
    if schema.items is not None:
        yield schema.items
    for members in (schema.all_of, schema.one_of, schema.any_of):
        yield from members or ()

"""Build the field/schema/endpoint cross-reference index.

:func:`build_index` resolves a copy of the document and makes two passes over
it:

1. **Schema pass** -- every named component schema is stored and its fields
   are enumerated. The first schema (in document order) to reach a field
   creates its :class:`~openapi_explorer.models.FieldData`, taking type and
   description from the first reachable definition of that field; later
   schemas only add themselves to the owning-schema list.
2. **Endpoint pass** -- for every path and method, the fields of every
   parameter schema, request-body schema and response schema are appended
   to that endpoint's field list (duplicates kept), and the endpoint key is
   added to each field that the schema pass already knows.

A field that only ever appears in endpoint payloads is listed under its
endpoint in ``endpoint_fields`` but gets no ``FieldData`` entry.
"""

from __future__ import annotations

import logging

from openapi_explorer.index.fields import fields_of, find_property
from openapi_explorer.models import (
    CrossReferenceIndex,
    FieldData,
    OpenAPIDocument,
    SchemaNode,
)
from openapi_explorer.parser.resolver import resolve_document

logger = logging.getLogger(__name__)


def endpoint_key(method: str, path: str) -> str:
    """Render the canonical ``"METHOD /path"`` key of an operation."""
    return f"{method.upper()} {path}"


def split_endpoint_key(key: str) -> tuple[str, str]:
    """Split an endpoint key into ``(method, path)`` on the first space only.

    Example::

        >>> split_endpoint_key("GET /files/my report")
        ('GET', '/files/my report')
    """
    method, _, path = key.partition(" ")
    return method, path


def build_index(document: OpenAPIDocument) -> CrossReferenceIndex:
    """Build a :class:`~openapi_explorer.models.CrossReferenceIndex` from *document*.

    The document itself is not modified; resolution happens on a copy.

    Args:
        document: A validated OpenAPI document.

    Returns:
        A frozen index snapshot.
    """
    resolved = resolve_document(document)

    fields: dict[str, FieldData] = {}
    schemas: dict[str, SchemaNode] = {}
    endpoint_fields: dict[str, list[str]] = {}

    named = resolved.schemas
    if not named:
        logger.debug("No component schemas in document")

    for schema_name, schema in named.items():
        schemas[schema_name] = schema
        field_names = fields_of(schema)
        logger.debug("Schema %r has %d fields", schema_name, len(field_names))

        for field_name in field_names:
            data = fields.get(field_name)
            if data is None:
                data = _new_field_data(schema, field_name)
                fields[field_name] = data
            if schema_name not in data.schemas:
                data.schemas.append(schema_name)

    for path, method, operation in resolved.iter_operations():
        key = endpoint_key(method, path)
        collected: list[str] = []
        for payload in operation.iter_schemas():
            for field_name in fields_of(payload):
                collected.append(field_name)
                data = fields.get(field_name)
                if data is not None:
                    data.endpoints.add(key)
        endpoint_fields[key] = collected

    logger.debug(
        "Indexed %d fields across %d schemas and %d endpoints",
        len(fields),
        len(schemas),
        len(endpoint_fields),
    )
    return CrossReferenceIndex(
        fields=fields,
        schemas=schemas,
        endpoint_fields=endpoint_fields,
    )


def _new_field_data(schema: SchemaNode, field_name: str) -> FieldData:
    definition = find_property(schema, field_name)
    if definition is None:
        return FieldData()
    return FieldData(
        field_type=definition.schema_type or "unknown",
        description=definition.description,
    )


def is_critical(field_name: str, index: CrossReferenceIndex) -> bool:
    """Whether *field_name* is referenced by an endpoint whose key contains ``post`` or ``put``.

    Case-insensitive substring test on the full key, so ``GET /posts`` counts
    as well. Unknown fields are never critical.
    """
    return index.is_critical(field_name)

"""Derived views over a built index: field relationships and summary statistics."""

from __future__ import annotations

from openapi_explorer.models import CrossReferenceIndex, IndexStats


def field_relationships(index: CrossReferenceIndex) -> dict[str, list[str]]:
    """Map each field to the other fields that share at least one owning schema.

    Returns:
        Field name -> sorted, duplicate-free list of related field names.
    """
    relationships: dict[str, list[str]] = {}
    for field_name, data in index.fields.items():
        related: set[str] = set()
        for schema_name in data.schemas:
            related.update(index.schema_fields(schema_name))
        related.discard(field_name)
        relationships[field_name] = sorted(related)
    return relationships


def most_connected_field(index: CrossReferenceIndex) -> str | None:
    """The field owned by the most schemas; ties go to the smallest name."""
    if not index.fields:
        return None
    return min(index.fields, key=lambda name: (-len(index.fields[name].schemas), name))


def graph_density(index: CrossReferenceIndex) -> float:
    """Field-to-schema links as a percentage of the possible field pairs.

    Zero when fewer than two fields are indexed.
    """
    total = len(index.fields)
    max_connections = total * (total - 1) // 2
    if max_connections == 0:
        return 0.0
    connections = sum(len(data.schemas) for data in index.fields.values())
    return connections / max_connections * 100.0


def compute_stats(index: CrossReferenceIndex) -> IndexStats:
    """Collect the summary figures of *index*."""
    return IndexStats(
        total_fields=len(index.fields),
        total_schemas=len(index.schemas),
        total_endpoints=len(index.endpoint_fields),
        critical_fields=sum(1 for name in index.fields if index.is_critical(name)),
        most_connected_field=most_connected_field(index),
        graph_density=graph_density(index),
    )

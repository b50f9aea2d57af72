"""Cross-reference index -- fields, schemas and endpoints.

Sub-modules:

* :mod:`~openapi_explorer.index.fields` -- Field-name enumeration over a
  resolved schema tree.
* :mod:`~openapi_explorer.index.indexer` -- The two-pass index builder,
  endpoint keys and the critical-field predicate.
* :mod:`~openapi_explorer.index.analysis` -- Relationships and statistics
  derived from a built index.
"""

from openapi_explorer.index.analysis import compute_stats, field_relationships
from openapi_explorer.index.fields import fields_of, find_property
from openapi_explorer.index.indexer import (
    build_index,
    endpoint_key,
    is_critical,
    split_endpoint_key,
)

__all__ = [
    "build_index",
    "compute_stats",
    "endpoint_key",
    "field_relationships",
    "fields_of",
    "find_property",
    "is_critical",
    "split_endpoint_key",
]

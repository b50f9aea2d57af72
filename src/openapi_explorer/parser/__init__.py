"""Document parser -- load OpenAPI documents and resolve ``$ref`` pointers.

This sub-package turns a document source (local file, URL or stdin) into a
validated, fully resolved :class:`~openapi_explorer.models.OpenAPIDocument`
that the indexer can walk.

Typical usage::

    from openapi_explorer.parser import fetch_document, resolve_document

    document = fetch_document("petstore.json")
    resolved = resolve_document(document)

Sub-modules:

* :mod:`~openapi_explorer.parser.loader` -- I/O layer (URL, file, stdin),
  format detection, version validation and model validation.
* :mod:`~openapi_explorer.parser.resolver` -- Schema reference resolution
  with local-override merging and cycle guarding, plus inlining of
  parameter/request-body/response component references.
"""

from openapi_explorer.parser.loader import (
    fetch_document,
    load_document,
    parse_document,
    validate_openapi_version,
)
from openapi_explorer.parser.resolver import (
    resolve_document,
    resolve_operations,
    resolve_schemas,
    schema_name_from_ref,
)

__all__ = [
    "fetch_document",
    "load_document",
    "parse_document",
    "validate_openapi_version",
    "resolve_document",
    "resolve_operations",
    "resolve_schemas",
    "schema_name_from_ref",
]

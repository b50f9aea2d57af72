"""Post-build sanity checks on a document and its index.

:func:`validate` returns human-readable warnings; it never raises and an empty
list is a valid result. The checks run in a fixed order:

1. the component-schemas section is missing or empty;
2. the document defines no paths;
3. one warning per indexed field whose type is ``"unknown"`` (sorted by name,
   can be switched off with ``ValidationConfig.warn_unknown_types``);
4. one warning per path without operations (sorted by path);
5. one aggregate count of operations missing both summary and description;
6. one aggregate count of schemas none of whose fields is used by an endpoint.
"""

from __future__ import annotations

import logging
from typing import Optional

from openapi_explorer.models import CrossReferenceIndex, OpenAPIDocument, ValidationConfig

logger = logging.getLogger(__name__)


def validate(
    document: OpenAPIDocument,
    index: CrossReferenceIndex,
    config: Optional[ValidationConfig] = None,
) -> list[str]:
    """Check *document* and *index* and return warnings in check order.

    Args:
        document: The document the index was built from.
        index: The cross-reference index.
        config: Optional switches; defaults to :class:`ValidationConfig`.

    Returns:
        Warning strings, possibly empty.
    """
    config = config or ValidationConfig()
    warnings: list[str] = []

    if not document.schemas:
        warnings.append("No component schemas defined")

    if not document.paths:
        warnings.append("No paths defined")

    if config.warn_unknown_types:
        for name in sorted(index.fields):
            if index.fields[name].field_type == "unknown":
                warnings.append(f"Field '{name}' has unknown type")

    for path in sorted(document.paths):
        if not document.paths[path]:
            warnings.append(f"Path '{path}' has no operations")

    undocumented = sum(
        1
        for _path, _method, operation in document.iter_operations()
        if not operation.summary and not operation.description
    )
    if undocumented:
        warnings.append(f"{undocumented} operation(s) missing both summary and description")

    unlinked = _count_unlinked_schemas(index)
    if unlinked:
        warnings.append(f"{unlinked} schema(s) have no fields used by any endpoint")

    logger.debug("Validation produced %d warning(s)", len(warnings))
    return warnings


def _count_unlinked_schemas(index: CrossReferenceIndex) -> int:
    count = 0
    for schema_name in index.schemas:
        field_names = index.schema_fields(schema_name)
        if not field_names:
            continue
        if not any(
            index.fields[name].endpoints for name in field_names if name in index.fields
        ):
            count += 1
    return count

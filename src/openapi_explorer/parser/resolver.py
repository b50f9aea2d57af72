"""Resolve internal ``$ref`` pointers in OpenAPI documents.

Two kinds of references are handled here:

* **Schema references** (``#/components/schemas/<Name>``) inside the schema
  tree. :func:`resolve_schemas` rewrites every named schema in place: a node
  carrying a reference receives the target's attributes *only where it left
  them unset*, so local overrides win over inherited values.
  :func:`resolve_operations` replaces a reference found in an operation
  payload (parameter, request body or response schema) outright with a deep
  copy of the resolved target. :func:`resolve_document` runs both on a copy.

* **Component references** to ``parameters``, ``requestBodies`` and
  ``responses``. These are inlined on the raw dict by
  :func:`inline_component_refs` before the document is validated, since a
  ``{"$ref": ...}`` parameter has none of the fields a parameter needs.

Resolution is total: a reference with an unknown prefix or a missing target
is cleared (schemas) or dropped (components) and never raises. Logical cycles
between named schemas (``A -> B -> A``) are cut with a frozenset of the
schema names currently being expanded; a reference back into that set only
copies the scalar attributes and stops expanding, so the resolved tree is
always finite and never aliases another node.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from openapi_explorer.models import HTTPMethod, OpenAPIDocument, SchemaNode

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

# Attributes inherited from a referenced schema when the referencing node
# leaves them unset.
_MERGED_ATTRIBUTES = (
    "schema_type",
    "format",
    "description",
    "properties",
    "required",
    "items",
    "all_of",
    "one_of",
    "any_of",
    "enum_values",
)

# Inherited when the target is already being expanded higher up the tree.
_SCALAR_ATTRIBUTES = ("schema_type", "format", "description")


def schema_name_from_ref(ref: str) -> Optional[str]:
    """Return the schema name of a ``#/components/schemas/<Name>`` reference.

    Any other form, including the bare prefix, yields ``None``.

    Example::

        >>> schema_name_from_ref("#/components/schemas/Pet")
        'Pet'
        >>> schema_name_from_ref("#/definitions/Pet") is None
        True
    """
    if not ref.startswith(SCHEMA_REF_PREFIX):
        return None
    return ref[len(SCHEMA_REF_PREFIX):] or None


# ---------------------------------------------------------------------------
# Named schemas
# ---------------------------------------------------------------------------


def resolve_schemas(schemas: dict[str, SchemaNode]) -> None:
    """Resolve every schema reference in a name -> schema map, in place.

    Targets are read from a deep copy of the map taken before any node is
    touched, so the outcome does not depend on the order in which schemas
    are visited. After this call no node reachable from the map carries a
    reference string.

    Args:
        schemas: The component schemas to rewrite.
    """
    pristine = {name: schema.model_copy(deep=True) for name, schema in schemas.items()}
    for name, schema in schemas.items():
        _resolve_node(schema, pristine, frozenset({name}))


def _resolve_node(
    node: SchemaNode,
    pristine: dict[str, SchemaNode],
    expanding: frozenset[str],
) -> None:
    # A target may itself be a bare reference (an alias), hence the loop.
    while node.ref is not None:
        ref = node.ref
        node.ref = None
        target_name = schema_name_from_ref(ref)
        target = pristine.get(target_name) if target_name is not None else None

        if target is None:
            logger.debug("Unresolved schema reference %r left empty", ref)
            break

        if target_name in expanding:
            logger.debug("Reference cycle through %r, not expanding further", target_name)
            _merge_unset(node, target, _SCALAR_ATTRIBUTES)
            break

        _merge_unset(node, target, _MERGED_ATTRIBUTES)
        expanding = expanding | {target_name}
        node.ref = target.ref

    for child in _children(node):
        _resolve_node(child, pristine, expanding)


def _merge_unset(node: SchemaNode, target: SchemaNode, attributes: tuple[str, ...]) -> None:
    for attribute in attributes:
        if getattr(node, attribute) is None:
            value = getattr(target, attribute)
            if value is not None:
                setattr(node, attribute, copy.deepcopy(value))


def _children(node: SchemaNode) -> list[SchemaNode]:
    """Direct sub-schemas: properties, items, composition, then the rest."""
    children: list[SchemaNode] = list((node.properties or {}).values())
    if node.items is not None:
        children.append(node.items)
    for members in (node.all_of, node.one_of, node.any_of):
        if members:
            children.extend(members)
    if node.not_ is not None:
        children.append(node.not_)
    if node.additional_properties is not None:
        children.append(node.additional_properties)
    return children


# ---------------------------------------------------------------------------
# Operation payloads
# ---------------------------------------------------------------------------


def resolve_operations(document: OpenAPIDocument, schemas: dict[str, SchemaNode]) -> None:
    """Resolve references inside every operation payload of *document*, in place.

    Args:
        document: The document whose parameters, request bodies and
            responses are rewritten.
        schemas: Already-resolved named schemas used as replacement targets.
    """
    for _path, _method, operation in document.iter_operations():
        for schema in operation.iter_schemas():
            _replace_refs(schema, schemas)


def _replace_refs(node: SchemaNode, schemas: dict[str, SchemaNode]) -> None:
    if node.ref is not None:
        target_name = schema_name_from_ref(node.ref)
        target = schemas.get(target_name) if target_name is not None else None
        if target is None:
            logger.debug("Unresolved payload reference %r left empty", node.ref)
            node.ref = None
        else:
            # Resolved targets carry no references, nothing left to walk.
            _overwrite(node, copy.deepcopy(target))
            return

    for child in _children(node):
        _replace_refs(child, schemas)


def _overwrite(node: SchemaNode, replacement: SchemaNode) -> None:
    for name in type(node).model_fields:
        setattr(node, name, getattr(replacement, name))


def resolve_document(document: OpenAPIDocument) -> OpenAPIDocument:
    """Return a fully resolved deep copy of *document*.

    Named schemas are resolved first, then every operation payload is
    resolved against them. The input document is left untouched.
    """
    resolved = document.model_copy(deep=True)
    schemas = resolved.schemas
    resolve_schemas(schemas)
    resolve_operations(resolved, schemas)
    return resolved


# ---------------------------------------------------------------------------
# Component references on the raw document
# ---------------------------------------------------------------------------


def inline_component_refs(raw: dict[str, Any]) -> dict[str, Any]:
    """Inline ``$ref`` parameters, request bodies and responses in a raw document.

    Creates a deep copy of *raw* and replaces each parameter, request body
    and response that is a ``{"$ref": "#/..."}`` dict with a copy of its
    target. References that cannot be followed are dropped. Schema
    references are left for :func:`resolve_schemas`.

    Args:
        raw: The raw document as returned by
            :func:`~openapi_explorer.parser.loader.load_document`.

    Returns:
        A new dictionary with component references inlined.
    """
    root = copy.deepcopy(raw)
    paths = root.get("paths")
    if not isinstance(paths, dict):
        return root

    for path_item in paths.values():
        if not isinstance(path_item, dict):
            continue

        if isinstance(path_item.get("parameters"), list):
            path_item["parameters"] = _inline_list(path_item["parameters"], root)

        for method, operation in path_item.items():
            if str(method).lower() not in _HTTP_METHODS or not isinstance(operation, dict):
                continue

            if isinstance(operation.get("parameters"), list):
                operation["parameters"] = _inline_list(operation["parameters"], root)

            body = operation.get("requestBody")
            if _is_ref(body):
                target = _follow(body, root)
                if target is None:
                    del operation["requestBody"]
                else:
                    operation["requestBody"] = target

            responses = operation.get("responses")
            if isinstance(responses, dict):
                for code, response in list(responses.items()):
                    if not _is_ref(response):
                        continue
                    target = _follow(response, root)
                    if target is None:
                        del responses[code]
                    else:
                        responses[code] = target

    return root


def _is_ref(obj: Any) -> bool:
    return isinstance(obj, dict) and isinstance(obj.get("$ref"), str)


def _inline_list(entries: list[Any], root: dict[str, Any]) -> list[Any]:
    inlined: list[Any] = []
    for entry in entries:
        if _is_ref(entry):
            target = _follow(entry, root)
            if target is None:
                continue
            entry = target
        inlined.append(entry)
    return inlined


def _follow(obj: dict[str, Any], root: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Follow a chain of ``$ref`` dicts to a concrete dict, or ``None``."""
    seen: set[str] = set()
    current: Any = obj
    while _is_ref(current):
        ref = current["$ref"]
        if ref in seen:
            logger.debug("Circular component reference %r dropped", ref)
            return None
        seen.add(ref)
        current = _lookup_pointer(ref, root)
    if not isinstance(current, dict):
        return None
    return copy.deepcopy(current)


def _lookup_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Navigate an internal JSON Pointer (``#/a/b``); ``None`` if it does not resolve.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).
    """
    if not ref.startswith("#/"):
        logger.debug("External reference %r not followed", ref)
        return None

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            logger.debug("Reference %r does not resolve", ref)
            return None
    return current

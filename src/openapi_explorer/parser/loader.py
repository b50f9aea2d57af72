"""Load OpenAPI documents from a URL, local file, or stdin.

This module is the document-retrieval collaborator of the explorer: it handles
all I/O for fetching a raw document, turns the text into a Python dictionary,
and hands the core a validated :class:`~openapi_explorer.models.OpenAPIDocument`.

Public functions:

* :func:`load_document` -- Load and parse a raw dict from any supported source.
* :func:`validate_openapi_version` -- Reject Swagger 2.x and non-3.x documents.
* :func:`parse_document` -- Inline non-schema component references and
  validate the dict into an :class:`~openapi_explorer.models.OpenAPIDocument`.
* :func:`fetch_document` -- ``load_document`` followed by ``parse_document``.

Failures are split in two: a location that does not resolve raises
:class:`~openapi_explorer.exceptions.SourceNotFoundError`, content that cannot
be read as an OpenAPI 3.x document raises
:class:`~openapi_explorer.exceptions.MalformedDocumentError`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from openapi_explorer.exceptions import MalformedDocumentError, SourceNotFoundError
from openapi_explorer.models import OpenAPIDocument
from openapi_explorer.parser.resolver import inline_component_refs

logger = logging.getLogger(__name__)


def load_document(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin ('-').

    Supports JSON and YAML; the format is detected from the extension,
    the response content type, or the content itself.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SourceNotFoundError: If the location does not resolve.
        MalformedDocumentError: If the content cannot be parsed.
    """
    logger.debug("Loading document from %s", source)
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SourceNotFoundError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise MalformedDocumentError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL.

    A 404 and network-level failures mean the location does not resolve;
    other HTTP errors are reported the same way since no document came back.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceNotFoundError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceNotFoundError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local ``.json``, ``.yaml`` or ``.yml`` file."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceNotFoundError(f"OpenAPI file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceNotFoundError(f"Failed to read OpenAPI file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(f"OpenAPI file {path} is not UTF-8 text: {exc}") from exc

    if not content.strip():
        raise MalformedDocumentError(f"OpenAPI file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML. A
    ``.json`` hint disables the YAML fallback.

    Raises:
        MalformedDocumentError: If the content cannot be parsed as either
            format or is not a mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise MalformedDocumentError(f"Failed to parse OpenAPI JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_mapping(result)

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise MalformedDocumentError(msg)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise MalformedDocumentError(f"Document must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_version(raw: dict[str, Any]) -> str:
    """Validate and return the ``openapi`` version string.

    Args:
        raw: The parsed document dictionary.

    Returns:
        The version string (e.g., ``'3.0.3'``).

    Raises:
        MalformedDocumentError: If the version is missing, a Swagger 2.x
            marker is present, or the major version is not 3.
    """
    if "swagger" in raw:
        raise MalformedDocumentError(
            f"Swagger {raw['swagger']} is not supported. "
            "Only OpenAPI 3.x documents can be explored."
        )

    version = raw.get("openapi")
    if version is None:
        raise MalformedDocumentError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise MalformedDocumentError(
            f"Unsupported OpenAPI version: {version_str}. Only 3.x is supported."
        )
    return version_str


def parse_document(raw: dict[str, Any]) -> OpenAPIDocument:
    """Turn a raw document dict into an :class:`~openapi_explorer.models.OpenAPIDocument`.

    The input dict is not mutated.

    Raises:
        MalformedDocumentError: If the version is unsupported or the
            structure does not validate.
    """
    validate_openapi_version(raw)
    inlined = inline_component_refs(raw)
    try:
        return OpenAPIDocument.model_validate(inlined)
    except ValidationError as exc:
        raise MalformedDocumentError(f"Invalid OpenAPI document structure: {exc}") from exc


def fetch_document(source: str) -> OpenAPIDocument:
    """Load *source* and parse it into an :class:`~openapi_explorer.models.OpenAPIDocument`."""
    return parse_document(load_document(source))

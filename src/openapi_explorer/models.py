"""Canonical Pydantic models shared across all openapi-explorer modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Document models** -- the deserialised OpenAPI document handed to the core
by :func:`~openapi_explorer.parser.loader.parse_document`:
    :class:`HTTPMethod`, :class:`SchemaNode`, :class:`Parameter`,
    :class:`MediaType`, :class:`RequestBody`, :class:`Response`,
    :class:`Operation`, :class:`Info`, :class:`Components` and
    :class:`OpenAPIDocument`.

**Index models** -- produced by the cross-reference indexer:
    :class:`FieldData`, :class:`FieldInfo`, :class:`CrossReferenceIndex` and
    :class:`IndexStats`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`ValidationConfig` and
    :class:`ExplorerConfig`.

Document models accept the OpenAPI key names (``allOf``, ``$ref``,
``requestBody`` ...) through aliases and the Python attribute names through
``populate_by_name``, so tests can build trees either way.
"""

from __future__ import annotations

import enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Document models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operations on an OpenAPI path item."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


class SchemaNode(BaseModel):
    """One node of a JSON Schema tree as used by OpenAPI.

    The tree is self-similar: properties, array items, composition members,
    ``not`` and ``additionalProperties`` are all ``SchemaNode`` instances
    owned by their parent. ``ref`` carries an internal reference of the form
    ``#/components/schemas/<Name>`` until the resolver replaces it.

    Two input shapes are normalised before validation:

    * an OpenAPI 3.1 type array (``["string", "null"]``) becomes its first
      non-null member and marks the node ``nullable``;
    * a boolean ``additionalProperties`` becomes ``None``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_type: Optional[str] = Field(default=None, alias="type")
    format: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[dict[str, SchemaNode]] = None
    items: Optional[SchemaNode] = None
    required: Optional[list[str]] = None
    all_of: Optional[list[SchemaNode]] = Field(default=None, alias="allOf")
    one_of: Optional[list[SchemaNode]] = Field(default=None, alias="oneOf")
    any_of: Optional[list[SchemaNode]] = Field(default=None, alias="anyOf")
    not_: Optional[SchemaNode] = Field(default=None, alias="not")
    additional_properties: Optional[SchemaNode] = Field(
        default=None, alias="additionalProperties"
    )
    nullable: Optional[bool] = None
    read_only: Optional[bool] = Field(default=None, alias="readOnly")
    write_only: Optional[bool] = Field(default=None, alias="writeOnly")
    example: Any = None
    default: Any = None
    enum_values: Optional[list[Any]] = Field(default=None, alias="enum")
    ref: Optional[str] = Field(default=None, alias="$ref")

    @model_validator(mode="before")
    @classmethod
    def _normalise_openapi_shapes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        type_value = data.get("type")
        if isinstance(type_value, list):
            data = dict(data)
            non_null = [t for t in type_value if t != "null"]
            data["type"] = non_null[0] if non_null else "null"
            if "null" in type_value:
                data.setdefault("nullable", True)

        if isinstance(data.get("additionalProperties"), bool):
            data = dict(data)
            data["additionalProperties"] = None

        return data


class Parameter(BaseModel):
    """An OpenAPI *Parameter Object* (path, query, header or cookie)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    location: str = Field(alias="in")
    description: Optional[str] = None
    required: bool = False
    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")


class MediaType(BaseModel):
    """One entry of a ``content`` map (e.g. ``application/json``)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_: Optional[SchemaNode] = Field(default=None, alias="schema")


class RequestBody(BaseModel):
    """An OpenAPI *Request Body Object*."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: Optional[str] = None
    required: bool = False
    content: dict[str, MediaType] = Field(default_factory=dict)


class Response(BaseModel):
    """An OpenAPI *Response Object* for a single status code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: Optional[str] = None
    content: Optional[dict[str, MediaType]] = None


class Operation(BaseModel):
    """A single operation (one HTTP method on one path)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    operation_id: Optional[str] = Field(default=None, alias="operationId")
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    responses: dict[str, Response]
    deprecated: bool = False

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # YAML turns unquoted status codes into ints.
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value

    def iter_schemas(self) -> Iterator[SchemaNode]:
        """Yield every payload schema: parameters, then request body, then responses."""
        for parameter in self.parameters:
            if parameter.schema_ is not None:
                yield parameter.schema_
        if self.request_body is not None:
            for media in self.request_body.content.values():
                if media.schema_ is not None:
                    yield media.schema_
        for response in self.responses.values():
            for media in (response.content or {}).values():
                if media.schema_ is not None:
                    yield media.schema_


class Info(BaseModel):
    """API metadata from the document's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


class Components(BaseModel):
    """The ``components`` section; only named schemas are modelled."""

    model_config = ConfigDict(extra="ignore")

    schemas: Optional[dict[str, SchemaNode]] = None


class OpenAPIDocument(BaseModel):
    """A deserialised OpenAPI 3.x document.

    ``paths`` maps each path to its operations keyed by lowercase HTTP
    method. Path-item keys that are not HTTP methods are dropped, and
    path-level parameters are merged into every operation of the path
    (an operation-level parameter with the same ``name`` and ``in``
    overrides the path-level one).
    """

    model_config = ConfigDict(extra="ignore")

    openapi: str
    info: Info
    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    components: Optional[Components] = None

    @field_validator("openapi", mode="before")
    @classmethod
    def _coerce_openapi(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("paths", mode="before")
    @classmethod
    def _normalise_paths(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value

        normalised: dict[str, Any] = {}
        for path, path_item in value.items():
            if path_item is None:
                normalised[path] = {}
                continue
            if not isinstance(path_item, dict):
                normalised[path] = path_item
                continue

            path_params = path_item.get("parameters") or []
            operations: dict[str, Any] = {}
            for method, operation in path_item.items():
                method_lower = str(method).lower()
                if method_lower not in _HTTP_METHODS:
                    continue
                if path_params and isinstance(operation, dict):
                    operation = dict(operation)
                    operation["parameters"] = _merge_parameters(
                        path_params, operation.get("parameters") or []
                    )
                operations[method_lower] = operation
            normalised[path] = operations
        return normalised

    @property
    def schemas(self) -> dict[str, SchemaNode]:
        """Named component schemas (empty when the section is absent)."""
        if self.components is None or self.components.schemas is None:
            return {}
        return self.components.schemas

    def iter_operations(self) -> Iterator[tuple[str, str, Operation]]:
        """Yield ``(path, method, operation)`` in document order."""
        for path, operations in self.paths.items():
            for method, operation in operations.items():
                yield path, method, operation


def _merge_parameters(
    path_params: list[Any],
    op_params: list[Any],
) -> list[Any]:
    """Merge path-level parameters under operation-level ones.

    Parameters are matched on ``(name, in)``; the operation-level entry wins.
    """
    op_keys = {
        (param.get("name", ""), param.get("in", ""))
        for param in op_params
        if isinstance(param, dict)
    }

    merged: list[Any] = []
    for param in path_params:
        if isinstance(param, dict):
            key = (param.get("name", ""), param.get("in", ""))
            if key in op_keys:
                continue
        merged.append(param)

    merged.extend(op_params)
    return merged


# --- Index models ---


class FieldData(BaseModel):
    """Everything the index knows about one field name.

    ``field_type`` and ``description`` are fixed by the first schema that
    defines the field and are never overwritten. ``schemas`` (ordered,
    unique) and ``endpoints`` (a set of endpoint keys) accumulate across
    every encounter.
    """

    field_type: str = "unknown"
    description: Optional[str] = None
    schemas: list[str] = Field(default_factory=list)
    endpoints: set[str] = Field(default_factory=set)


class FieldInfo(BaseModel):
    """A display-ready view of one field, used by the CLI and the browser."""

    name: str
    field_type: str
    description: Optional[str] = None
    schemas: list[str] = Field(default_factory=list)
    endpoints: list[str] = Field(default_factory=list)
    is_critical: bool = False


class CrossReferenceIndex(BaseModel):
    """Immutable snapshot of the field/schema/endpoint cross-reference.

    Built once by :func:`~openapi_explorer.index.indexer.build_index` and
    replaced wholesale on reload; the model is frozen so readers can never
    observe a half-updated index.

    Attributes:
        fields: Field name -> :class:`FieldData`.
        schemas: Schema name -> resolved :class:`SchemaNode`.
        endpoint_fields: Endpoint key (``"METHOD /path"``) -> field names in
            order of occurrence, duplicates included.
    """

    model_config = ConfigDict(frozen=True)

    fields: dict[str, FieldData] = Field(default_factory=dict)
    schemas: dict[str, SchemaNode] = Field(default_factory=dict)
    endpoint_fields: dict[str, list[str]] = Field(default_factory=dict)

    def field_names(self) -> list[str]:
        """All indexed field names, sorted."""
        return sorted(self.fields)

    def schema_names(self) -> list[str]:
        """All indexed schema names, sorted."""
        return sorted(self.schemas)

    def endpoint_keys(self) -> list[str]:
        """All endpoint keys, sorted."""
        return sorted(self.endpoint_fields)

    def endpoints_for_field(self, field_name: str) -> list[str]:
        """Sorted endpoint keys referencing *field_name* (empty if unknown)."""
        data = self.fields.get(field_name)
        if data is None:
            return []
        return sorted(data.endpoints)

    def schema_fields(self, schema_name: str) -> list[str]:
        """Field names reachable from a named schema (empty if unknown)."""
        from openapi_explorer.index.fields import fields_of

        schema = self.schemas.get(schema_name)
        if schema is None:
            return []
        return fields_of(schema)

    def is_critical(self, field_name: str) -> bool:
        """Whether any endpoint key of the field contains ``post`` or ``put``.

        The test is a case-insensitive substring match on the whole key, so a
        path such as ``/posts`` also counts regardless of its method.
        """
        data = self.fields.get(field_name)
        if data is None:
            return False
        return any(
            "post" in endpoint.lower() or "put" in endpoint.lower()
            for endpoint in data.endpoints
        )

    def field_info(self, field_name: str) -> Optional[FieldInfo]:
        """Return a :class:`FieldInfo` for *field_name*, or ``None``."""
        data = self.fields.get(field_name)
        if data is None:
            return None
        return FieldInfo(
            name=field_name,
            field_type=data.field_type,
            description=data.description,
            schemas=list(data.schemas),
            endpoints=self.endpoints_for_field(field_name),
            is_critical=self.is_critical(field_name),
        )


class IndexStats(BaseModel):
    """Summary figures shown by the ``stats`` command and the stats view."""

    total_fields: int = 0
    total_schemas: int = 0
    total_endpoints: int = 0
    critical_fields: int = 0
    most_connected_field: Optional[str] = None
    graph_density: float = 0.0


# --- Configuration models ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`ExplorerConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )

    @field_validator("format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        if value not in ("auto", "json", "plain", "rich"):
            raise ValueError(f"unknown output format {value!r}")
        return value



class ValidationConfig(BaseModel):
    """Switches for the validation pass."""

    warn_unknown_types: bool = Field(
        default=True, description="Emit one warning per field whose type is unknown"
    )


class ExplorerConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/openapi-explorer/config.json``.

    Loaded and saved by :func:`~openapi_explorer.config.load_config` and
    :func:`~openapi_explorer.config.save_config`. ``default_spec`` has the
    lowest precedence of all document sources; see
    :func:`~openapi_explorer.config.resolve_source`.
    """

    default_spec: Optional[str] = Field(
        default=None, description="File path or URL opened when --spec is not given"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

"""Inspect commands -- query the cross-reference index from the shell.

Every command resolves the document source (``--spec``, environment,
project or user config), builds a snapshot and prints one view of the
index as a table or structured output.
"""

from __future__ import annotations

from typing import Optional

import typer

from openapi_explorer.output import error, format_response, get_output, info, warning


def load_context_snapshot(ctx: typer.Context):  # noqa: ANN201
    """Resolve the document source for this invocation and build a snapshot.

    Raises:
        typer.Exit: With the error's exit code when no source is configured
            or the document cannot be loaded.
    """
    from openapi_explorer.config import load_config, resolve_source
    from openapi_explorer.exceptions import ExplorerError
    from openapi_explorer.session import load_snapshot

    obj = ctx.obj or {}
    try:
        config = obj.get("config") or load_config()
        source = resolve_source(obj.get("spec"), config)
        return load_snapshot(source, validation=config.validation)
    except ExplorerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _joined(values: list[str], limit: int = 5) -> str:
    shown = ", ".join(values[:limit])
    if len(values) > limit:
        shown += f", ... (+{len(values) - limit})"
    return shown or "-"


def fields_command(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Fuzzy filter on field names."),
    critical: bool = typer.Option(
        False, "--critical", "-c", help="Only fields used by POST/PUT endpoints."
    ),
) -> None:
    """List indexed fields with their type, schemas and endpoint count.

    Example::

        openapi-explorer fields
        openapi-explorer fields usr --critical
    """
    from openapi_explorer.navigation import rank

    snapshot = load_context_snapshot(ctx)
    index = snapshot.index

    rows: list[list[str]] = []
    for name in rank(index.fields, query or ""):
        data = index.fields[name]
        is_critical = index.is_critical(name)
        if critical and not is_critical:
            continue
        rows.append([
            name,
            data.field_type,
            _joined(data.schemas),
            str(len(data.endpoints)),
            "yes" if is_critical else "",
        ])

    if not rows:
        info("No matching fields.")
        return

    get_output().print_table(
        ["Field", "Type", "Schemas", "Endpoints", "Critical"],
        rows,
        title=f"Fields ({len(rows)})",
    )


def field_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Exact field name."),
) -> None:
    """Show everything known about one field.

    Includes the owning schemas, the endpoints that carry it and the fields
    it shares a schema with.

    Example::

        openapi-explorer field id --json
    """
    from openapi_explorer.exit_codes import EXIT_INVALID_USAGE
    from openapi_explorer.index import field_relationships

    snapshot = load_context_snapshot(ctx)
    field_info = snapshot.index.field_info(name)
    if field_info is None:
        error(f"Unknown field: {name}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    data = field_info.model_dump(mode="json")
    data["related"] = field_relationships(snapshot.index).get(name, [])
    format_response(data)


def schemas_command(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Fuzzy filter on schema names."),
) -> None:
    """List component schemas with their type and reachable fields."""
    from openapi_explorer.navigation import rank

    snapshot = load_context_snapshot(ctx)
    index = snapshot.index

    if not index.schemas:
        info("No schemas defined in this document.")
        return

    rows: list[list[str]] = []
    for name in rank(index.schemas, query or ""):
        schema = index.schemas[name]
        field_names = list(dict.fromkeys(index.schema_fields(name)))
        rows.append([name, schema.schema_type or "-", _joined(field_names)])

    get_output().print_table(
        ["Schema", "Type", "Fields"], rows, title=f"Schemas ({len(rows)})"
    )


def endpoints_command(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None, help="Fuzzy filter on endpoint keys."),
) -> None:
    """List endpoints with the fields found in their payloads."""
    from openapi_explorer.navigation import rank

    snapshot = load_context_snapshot(ctx)
    index = snapshot.index

    rows: list[list[str]] = []
    for key in rank(index.endpoint_fields, query or ""):
        field_names = list(dict.fromkeys(index.endpoint_fields[key]))
        rows.append([key, _joined(field_names)])

    if not rows:
        info("No matching endpoints.")
        return

    get_output().print_table(
        ["Endpoint", "Fields"], rows, title=f"Endpoints ({len(rows)})"
    )


def stats_command(ctx: typer.Context) -> None:
    """Show index totals, the most connected field and the graph density."""
    from openapi_explorer.index import compute_stats

    snapshot = load_context_snapshot(ctx)
    stats = compute_stats(snapshot.index)

    data = stats.model_dump(mode="json")
    data["graph_density"] = round(stats.graph_density, 2)
    data["title"] = snapshot.document.info.title
    data["version"] = snapshot.document.info.version
    format_response(data)


def validate_command(
    ctx: typer.Context,
    strict: bool = typer.Option(
        False, "--strict", help="Exit with status 1 when there are warnings."
    ),
) -> None:
    """Run the validation pass and print its warnings.

    Example::

        openapi-explorer --spec api.yaml validate --strict
    """
    from openapi_explorer.exit_codes import EXIT_GENERIC_FAILURE

    snapshot = load_context_snapshot(ctx)
    if not snapshot.warnings:
        info("No warnings.")
        return

    get_output().print_table(
        ["Warning"],
        [[message] for message in snapshot.warnings],
        title=f"Validation ({len(snapshot.warnings)})",
    )
    if strict:
        warning(f"{len(snapshot.warnings)} warning(s) reported")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)

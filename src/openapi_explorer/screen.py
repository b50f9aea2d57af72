"""Render a browsing session as Rich renderables.

The screen is a search bar, a three-column body (30/40/30) that depends on
the active view, and a status bar. The active panel gets a highlighted
border. :func:`render_screen` is pure: it reads the session and returns a
renderable, so the browse loop can print it and tests can capture it.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel as RichPanel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from openapi_explorer.index import compute_stats, field_relationships, split_endpoint_key
from openapi_explorer.navigation.state import Category, Panel, View
from openapi_explorer.session import Session

# Items shown per list panel; the window follows the cursor.
LIST_HEIGHT = 15

_HELP_LINES = [
    ("q / ctrl+c", "Quit"),
    ("tab / shift+tab", "Change panel"),
    ("/", "Search mode (enter keeps the query, esc leaves it)"),
    ("enter", "Select"),
    ("esc", "Back / close overlays"),
    ("1-5", "Fields, Schemas, Endpoints, Graph, Stats"),
    ("up / down", "Navigate"),
    ("d", "Toggle endpoint details"),
    ("r", "Reload the document"),
    ("x", "Dismiss the error message"),
    ("h / ?", "Toggle help"),
]


def _block(body: RenderableType, title: str, active: bool) -> RichPanel:
    return RichPanel(
        body,
        title=title,
        border_style="bold yellow" if active else "dim",
        title_align="left",
    )


def _window(items: list[str], cursor: int, height: int = LIST_HEIGHT) -> tuple[int, list[str]]:
    """Return ``(offset, visible)`` so that *cursor* is always visible."""
    if len(items) <= height:
        return 0, items
    start = min(max(cursor - height // 2, 0), len(items) - height)
    return start, items[start:start + height]


def render_list(
    items: list[str],
    cursor: int,
    selected: Optional[str] = None,
    marked: Optional[set[str]] = None,
) -> Text:
    """Render a cursor list; the selected name is bold, marked names are red."""
    if not items:
        return Text("(empty)", style="dim")

    offset, visible = _window(items, cursor)
    text = Text()
    for position, item in enumerate(visible, start=offset):
        style = ""
        if marked and item in marked:
            style = "red"
        if item == selected:
            style = f"{style} bold".strip()
        if position == cursor:
            style = f"{style} reverse".strip()
        text.append("> " if position == cursor else "  ")
        text.append(item, style=style)
        text.append("\n")
    if len(items) > len(visible):
        text.append(f"({len(items)} total)", style="dim")
    return text


def _details(rows: list[tuple[str, str]]) -> Table:
    table = Table.grid(padding=(0, 1))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()
    for label, value in rows:
        table.add_row(f"{label}:", Text(value))
    return table


# --------------------------------------------------------------------------- #
# Views
# --------------------------------------------------------------------------- #


def _fields_view(session: Session) -> list[RenderableType]:
    nav = session.nav
    index = session.index
    critical = {name for name in nav.filtered_fields if index.is_critical(name)}

    left = render_list(
        nav.filtered_fields,
        nav.cursor(Category.FIELD),
        nav.selected_field,
        marked=critical,
    )

    name = nav.focused(Category.FIELD)
    info = index.field_info(name) if name else None
    if info is None:
        center: RenderableType = Text("No field selected", style="dim")
        endpoints: list[str] = []
    else:
        center = _details([
            ("Field", info.name),
            ("Type", info.field_type),
            ("Description", info.description or "-"),
            ("Used in schemas", ", ".join(info.schemas) or "-"),
            ("Critical", "yes" if info.is_critical else "no"),
        ])
        endpoints = nav.detail_items()

    right = render_list(endpoints, nav.detail_cursor, nav.selected_endpoint)

    return [
        _block(left, f"Fields ({len(nav.filtered_fields)})", nav.panel is Panel.LEFT),
        _block(center, "Field Details", nav.panel is Panel.CENTER),
        _block(right, f"Endpoints ({len(endpoints)})", nav.panel is Panel.RIGHT),
    ]


def _schemas_view(session: Session) -> list[RenderableType]:
    nav = session.nav
    index = session.index

    left = render_list(nav.filtered_schemas, nav.cursor(Category.SCHEMA), nav.selected_schema)

    name = nav.focused(Category.SCHEMA)
    schema = index.schemas.get(name) if name else None
    if schema is None:
        center: RenderableType = Text("No schema selected", style="dim")
        right: RenderableType = Text("")
    else:
        field_names = nav.detail_items()
        center = _details([
            ("Schema", name),
            ("Type", schema.schema_type or "object"),
            ("Fields", f"{len(field_names)} fields"),
            ("Description", schema.description or "-"),
        ])
        required = set(schema.required or [])
        offset, visible = _window(field_names, nav.detail_cursor)
        listing = Text()
        for position, field_name in enumerate(visible, start=offset):
            data = index.fields.get(field_name)
            listing.append("> " if position == nav.detail_cursor else "  ")
            listing.append("* " if field_name in required else "  ", style="red")
            style = "bold reverse" if position == nav.detail_cursor else "bold"
            listing.append(field_name, style=style)
            listing.append(f" ({data.field_type if data else 'unknown'})\n", style="dim")
        if len(field_names) > len(visible):
            listing.append(f"({len(field_names)} total)", style="dim")
        right = listing

    return [
        _block(left, f"Schemas ({len(nav.filtered_schemas)})", nav.panel is Panel.LEFT),
        _block(center, "Schema Details", nav.panel is Panel.CENTER),
        _block(right, "Field List", nav.panel is Panel.RIGHT),
    ]


def _endpoints_view(session: Session) -> list[RenderableType]:
    nav = session.nav
    index = session.index

    left = render_list(
        nav.filtered_endpoints, nav.cursor(Category.ENDPOINT), nav.selected_endpoint
    )

    key = nav.focused(Category.ENDPOINT)
    if key is None:
        center: RenderableType = Text("No endpoint selected", style="dim")
        right: RenderableType = Text("")
    else:
        method, path = split_endpoint_key(key)
        rows = [("Endpoint", key), ("Method", method), ("Path", path)]
        operation = session.snapshot.document.paths.get(path, {}).get(method.lower())
        if operation is not None:
            if operation.summary:
                rows.append(("Summary", operation.summary))
            if nav.show_endpoint_details:
                rows.append(("Description", operation.description or "-"))
                rows.append(("Operation ID", operation.operation_id or "-"))
                rows.append(("Tags", ", ".join(operation.tags) or "-"))
                rows.append(("Responses", ", ".join(operation.responses) or "-"))
                if operation.deprecated:
                    rows.append(("Deprecated", "yes"))
        center = _details(rows)

        field_names = nav.detail_items()
        right = (
            render_list(field_names, nav.detail_cursor, nav.selected_field)
            if field_names
            else Text("(no fields)", style="dim")
        )

    return [
        _block(left, f"Endpoints ({len(nav.filtered_endpoints)})", nav.panel is Panel.LEFT),
        _block(center, "Endpoint Details", nav.panel is Panel.CENTER),
        _block(right, "Fields", nav.panel is Panel.RIGHT),
    ]


def _stats_rows(session: Session) -> list[tuple[str, str]]:
    stats = compute_stats(session.index)
    return [
        ("Total fields", str(stats.total_fields)),
        ("Total schemas", str(stats.total_schemas)),
        ("Total endpoints", str(stats.total_endpoints)),
        ("Critical fields", str(stats.critical_fields)),
        ("Most connected", stats.most_connected_field or "-"),
        ("Graph density", f"{stats.graph_density:.2f}%"),
    ]


def _graph_view(session: Session) -> list[RenderableType]:
    nav = session.nav
    relationships = field_relationships(session.index)

    tree = Tree("Field relationships", guide_style="dim")
    shown = [name for name in nav.filtered_fields if name in relationships][:LIST_HEIGHT]
    for name in shown:
        branch = tree.add(Text(name, style="bold"))
        for related in relationships[name][:5]:
            branch.add(related)
    if not shown:
        tree.add(Text("No fields to display", style="dim"))

    legend = Text.assemble(
        ("Fields sharing a schema are linked.\n", ""),
        ("Critical fields are shown in red in the fields view.", "dim"),
    )

    return [
        _block(legend, "Options", nav.panel is Panel.LEFT),
        _block(tree, "Field Relationship Graph", nav.panel is Panel.CENTER),
        _block(_details(_stats_rows(session)), "Statistics", nav.panel is Panel.RIGHT),
    ]


def _stats_view(session: Session) -> list[RenderableType]:
    nav = session.nav
    document = session.snapshot.document

    about = _details([
        ("Title", document.info.title),
        ("Version", document.info.version),
        ("OpenAPI", document.openapi),
        ("Source", session.snapshot.source or "-"),
        ("Generation", str(session.snapshot.generation)),
    ])

    warnings = session.snapshot.warnings
    if warnings:
        warning_text = Text("\n".join(warnings), style="yellow")
    else:
        warning_text = Text("No warnings", style="green")

    return [
        _block(about, "Document", nav.panel is Panel.LEFT),
        _block(_details(_stats_rows(session)), "Statistics", nav.panel is Panel.CENTER),
        _block(warning_text, f"Warnings ({len(warnings)})", nav.panel is Panel.RIGHT),
    ]


_VIEWS = {
    View.FIELDS: _fields_view,
    View.SCHEMAS: _schemas_view,
    View.ENDPOINTS: _endpoints_view,
    View.GRAPH: _graph_view,
    View.STATS: _stats_view,
}


# --------------------------------------------------------------------------- #
# Screen
# --------------------------------------------------------------------------- #


def render_help() -> RichPanel:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()
    for keys, description in _HELP_LINES:
        table.add_row(keys, description)
    return RichPanel(table, title="Keyboard Shortcuts", border_style="white")


def render_status(session: Session) -> Text:
    nav = session.nav
    status = Text()
    if session.error_message:
        status.append(session.error_message, style="bold red")
        status.append("  (x to dismiss)", style="dim")
    elif session.status_message:
        status.append(session.status_message, style="green")
    else:
        status.append("h:Help  r:Reload  4:Graph  ", style="cyan")
        status.append("q:Quit", style="red")
    status.append(f"  View: {nav.view.value}  Panel: {nav.panel.value}", style="green")
    return status


def render_screen(session: Session) -> RenderableType:
    """Build the full screen for the current session state."""
    nav = session.nav

    prompt = "Search (typing): " if nav.searching else "Search: "
    search = RichPanel(Text(prompt + nav.query, style="yellow"), border_style="cyan")

    body = Table.grid(expand=True)
    body.add_column(ratio=3)
    body.add_column(ratio=4)
    body.add_column(ratio=3)
    body.add_row(*_VIEWS[nav.view](session))

    parts: list[RenderableType] = [search, body]
    if nav.show_help:
        parts.append(render_help())
    parts.append(RichPanel(render_status(session), border_style="dim"))
    return Group(*parts)

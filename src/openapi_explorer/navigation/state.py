"""Filter and navigation state for browsing an index.

:class:`NavigationState` owns the query string, one ranked list per category
(fields, schemas, endpoints) recomputed from the bound
:class:`~openapi_explorer.models.CrossReferenceIndex` whenever the query or
the index changes, one selection cursor per list, and the name selected in
each category.

The left panel of the fields, schemas and endpoints views browses that
view's ranked list. The other two panels browse the *detail list*: the
names related to the focused left item (a field's endpoints, a schema's
fields, an endpoint's fields), with a cursor of its own.

Invariants maintained after every recomputation:

* a cursor is ``0`` when its list is empty and never exceeds ``len - 1``
  otherwise, and the same holds for the detail cursor;
* cursor movement saturates at the list bounds and never wraps;
* selected names are only set by :meth:`NavigationState.select` and are
  cleared by :meth:`NavigationState.set_view`.
"""

from __future__ import annotations

import enum
from typing import Optional

from openapi_explorer.models import CrossReferenceIndex
from openapi_explorer.navigation.matching import rank


class View(str, enum.Enum):
    """Top-level views of the browser."""

    FIELDS = "fields"
    SCHEMAS = "schemas"
    ENDPOINTS = "endpoints"
    GRAPH = "graph"
    STATS = "stats"


class Panel(str, enum.Enum):
    """Focusable panels, cycled with Tab / Shift+Tab."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Category(str, enum.Enum):
    """The three name lists kept by the navigation state."""

    FIELD = "field"
    SCHEMA = "schema"
    ENDPOINT = "endpoint"


_PANELS = list(Panel)

# Category of the left list and of the detail list, per view.
_VIEW_CATEGORIES: dict[View, tuple[Category, Category]] = {
    View.FIELDS: (Category.FIELD, Category.ENDPOINT),
    View.SCHEMAS: (Category.SCHEMA, Category.FIELD),
    View.ENDPOINTS: (Category.ENDPOINT, Category.FIELD),
}


class NavigationState:
    """Query, filtered lists, cursors and selections over one index.

    Args:
        index: The index snapshot to browse. Replace it with :meth:`rebind`.
    """

    def __init__(self, index: CrossReferenceIndex) -> None:
        self._index = index
        self.query = ""
        self.view = View.FIELDS
        self.panel = Panel.LEFT
        self.searching = False
        self.show_help = False
        self.show_endpoint_details = False
        self._filtered: dict[Category, list[str]] = {category: [] for category in Category}
        self._cursors: dict[Category, int] = {category: 0 for category in Category}
        self._selected: dict[Category, Optional[str]] = {category: None for category in Category}
        self._detail_cursor = 0
        self.refresh()

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #

    @property
    def index(self) -> CrossReferenceIndex:
        """The index snapshot the lists are computed from."""
        return self._index

    @property
    def filtered_fields(self) -> list[str]:
        return list(self._filtered[Category.FIELD])

    @property
    def filtered_schemas(self) -> list[str]:
        return list(self._filtered[Category.SCHEMA])

    @property
    def filtered_endpoints(self) -> list[str]:
        return list(self._filtered[Category.ENDPOINT])

    @property
    def selected_field(self) -> Optional[str]:
        return self._selected[Category.FIELD]

    @property
    def selected_schema(self) -> Optional[str]:
        return self._selected[Category.SCHEMA]

    @property
    def selected_endpoint(self) -> Optional[str]:
        return self._selected[Category.ENDPOINT]

    def filtered(self, category: Category) -> list[str]:
        """The ranked list for *category* (a copy)."""
        return list(self._filtered[category])

    def cursor(self, category: Category) -> int:
        return self._cursors[category]

    def selected(self, category: Category) -> Optional[str]:
        return self._selected[category]

    def active_category(self) -> Optional[Category]:
        """The list the arrow keys move in the current view and panel.

        ``None`` for the graph and stats views, where navigation is a no-op.
        """
        categories = _VIEW_CATEGORIES.get(self.view)
        if categories is None:
            return None
        left, other = categories
        return left if self.panel is Panel.LEFT else other

    def current_item(self, category: Optional[Category] = None) -> Optional[str]:
        """The name under the cursor.

        With *category*, the cursor of that ranked list. Without it, the
        cursor of the active panel: the left list or the detail list.
        """
        if category is None:
            if self.active_category() is None:
                return None
            if self.panel is not Panel.LEFT:
                items = self.detail_items()
                return items[self.detail_cursor] if items else None
            category = self._left_category()
        items = self._filtered[category]
        if not items:
            return None
        return items[self._cursors[category]]

    def focused(self, category: Category) -> Optional[str]:
        """The selected name of *category*, else the one under its cursor."""
        return self._selected[category] or self.current_item(category)

    def detail_items(self) -> list[str]:
        """Names related to the focused left item of the current view.

        The selected field's endpoints, the selected schema's fields or the
        selected endpoint's fields (duplicates removed, first occurrence
        kept). Empty for the graph and stats views.
        """
        left = self._left_category()
        if left is None:
            return []
        name = self.focused(left)
        if name is None:
            return []
        if left is Category.FIELD:
            return self._index.endpoints_for_field(name)
        if left is Category.SCHEMA:
            return list(dict.fromkeys(self._index.schema_fields(name)))
        return list(dict.fromkeys(self._index.endpoint_fields.get(name, [])))

    @property
    def detail_cursor(self) -> int:
        return self._detail_cursor

    def _left_category(self) -> Optional[Category]:
        categories = _VIEW_CATEGORIES.get(self.view)
        return categories[0] if categories is not None else None

    def _clamp_detail(self) -> None:
        count = len(self.detail_items())
        self._detail_cursor = min(self._detail_cursor, max(count - 1, 0))

    # ------------------------------------------------------------------ #
    # Filtering
    # ------------------------------------------------------------------ #

    def _candidates(self, category: Category) -> list[str]:
        if category is Category.FIELD:
            return list(self._index.fields)
        if category is Category.SCHEMA:
            return list(self._index.schemas)
        return list(self._index.endpoint_fields)

    def refresh(self) -> None:
        """Recompute all three lists for the current query and clamp the cursors."""
        for category in Category:
            self._filtered[category] = rank(self._candidates(category), self.query)
        for category, items in self._filtered.items():
            if items:
                self._cursors[category] = min(self._cursors[category], len(items) - 1)
            else:
                self._cursors[category] = 0
        self._clamp_detail()

    def rebind(self, index: CrossReferenceIndex) -> None:
        """Swap in a new index snapshot, keeping query and cursors where possible.

        Selections whose names no longer exist in the new index are cleared.
        """
        self._index = index
        for category in Category:
            name = self._selected[category]
            if name is not None and name not in self._candidates(category):
                self._selected[category] = None
        self.refresh()

    def set_query(self, query: str) -> None:
        self.query = query
        self.refresh()

    def append_query(self, text: str) -> None:
        self.set_query(self.query + text)

    def backspace_query(self) -> None:
        if self.query:
            self.set_query(self.query[:-1])

    def clear_query(self) -> None:
        self.set_query("")

    def start_search(self) -> None:
        """Enter search mode with an empty query."""
        self.searching = True
        self.clear_query()

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    def move_up(self) -> None:
        category = self.active_category()
        if category is None:
            return
        if self.panel is not Panel.LEFT:
            if self._detail_cursor > 0:
                self._detail_cursor -= 1
        elif self._cursors[category] > 0:
            self._cursors[category] -= 1
            self._detail_cursor = 0

    def move_down(self) -> None:
        category = self.active_category()
        if category is None:
            return
        if self.panel is not Panel.LEFT:
            if self._detail_cursor < len(self.detail_items()) - 1:
                self._detail_cursor += 1
        elif self._cursors[category] < len(self._filtered[category]) - 1:
            self._cursors[category] += 1
            self._detail_cursor = 0

    def select(self) -> Optional[str]:
        """Select the item under the active cursor and return its name.

        In the left panel this also restarts the detail list at its top; in
        the other panels the selected detail item is stored under its own
        category (e.g. an endpoint of the selected field).
        """
        category = self.active_category()
        if category is None:
            return None
        item = self.current_item()
        if item is None:
            return None
        self._selected[category] = item
        if self.panel is Panel.LEFT:
            self._detail_cursor = 0
        return item

    def set_view(self, view: View) -> None:
        """Switch the top-level view; lists and cursors are kept, selections cleared."""
        self.view = view
        for category in Category:
            self._selected[category] = None
        self._detail_cursor = 0

    def next_panel(self) -> None:
        self.panel = _PANELS[(_PANELS.index(self.panel) + 1) % len(_PANELS)]

    def previous_panel(self) -> None:
        self.panel = _PANELS[(_PANELS.index(self.panel) - 1) % len(_PANELS)]

    def toggle_help(self) -> None:
        self.show_help = not self.show_help

    def toggle_endpoint_details(self) -> None:
        self.show_endpoint_details = not self.show_endpoint_details

    def back(self) -> None:
        """Close overlays and leave search mode; the query itself is kept."""
        self.show_help = False
        self.show_endpoint_details = False
        self.searching = False

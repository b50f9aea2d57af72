"""Decode key presses into actions.

:func:`decode_key` is a pure mapping from a key name, as produced by the
browser's input layer (``"q"``, ``"enter"``, ``"shift+tab"``, ``"up"`` ...),
to an :class:`Action`. Applying an action to the running state is the job of
:meth:`openapi_explorer.session.Session.apply`, so the two halves can be
tested separately.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from openapi_explorer.navigation.state import View


class ActionKind(str, enum.Enum):
    QUIT = "quit"
    NEXT_PANEL = "next_panel"
    PREVIOUS_PANEL = "previous_panel"
    START_SEARCH = "start_search"
    SEARCH_INPUT = "search_input"
    SEARCH_BACKSPACE = "search_backspace"
    COMMIT_SEARCH = "commit_search"
    SELECT = "select"
    BACK = "back"
    CHANGE_VIEW = "change_view"
    RELOAD = "reload"
    TOGGLE_HELP = "toggle_help"
    TOGGLE_ENDPOINT_DETAILS = "toggle_endpoint_details"
    DISMISS_ERROR = "dismiss_error"
    NAVIGATE_UP = "navigate_up"
    NAVIGATE_DOWN = "navigate_down"
    NAVIGATE_LEFT = "navigate_left"
    NAVIGATE_RIGHT = "navigate_right"


@dataclass(frozen=True)
class Action:
    """A decoded user intent.

    Attributes:
        kind: What to do.
        text: Characters typed, for :attr:`ActionKind.SEARCH_INPUT`.
        view: Target view, for :attr:`ActionKind.CHANGE_VIEW`.
    """

    kind: ActionKind
    text: str = ""
    view: Optional[View] = None


_VIEW_KEYS: dict[str, View] = {
    "1": View.FIELDS,
    "2": View.SCHEMAS,
    "3": View.ENDPOINTS,
    "4": View.GRAPH,
    "5": View.STATS,
}

# Keys that keep their meaning while typing a search query.
_SEARCH_KEYS: dict[str, ActionKind] = {
    "ctrl+c": ActionKind.QUIT,
    "tab": ActionKind.NEXT_PANEL,
    "shift+tab": ActionKind.PREVIOUS_PANEL,
    "backtab": ActionKind.PREVIOUS_PANEL,
    "enter": ActionKind.COMMIT_SEARCH,
    "esc": ActionKind.BACK,
    "escape": ActionKind.BACK,
    "backspace": ActionKind.SEARCH_BACKSPACE,
    "up": ActionKind.NAVIGATE_UP,
    "down": ActionKind.NAVIGATE_DOWN,
}

_COMMAND_KEYS: dict[str, ActionKind] = {
    "q": ActionKind.QUIT,
    "ctrl+c": ActionKind.QUIT,
    "tab": ActionKind.NEXT_PANEL,
    "shift+tab": ActionKind.PREVIOUS_PANEL,
    "backtab": ActionKind.PREVIOUS_PANEL,
    "/": ActionKind.START_SEARCH,
    "enter": ActionKind.SELECT,
    "esc": ActionKind.BACK,
    "escape": ActionKind.BACK,
    "h": ActionKind.TOGGLE_HELP,
    "?": ActionKind.TOGGLE_HELP,
    "r": ActionKind.RELOAD,
    "d": ActionKind.TOGGLE_ENDPOINT_DETAILS,
    "x": ActionKind.DISMISS_ERROR,
    "backspace": ActionKind.SEARCH_BACKSPACE,
    "up": ActionKind.NAVIGATE_UP,
    "down": ActionKind.NAVIGATE_DOWN,
    "left": ActionKind.NAVIGATE_LEFT,
    "right": ActionKind.NAVIGATE_RIGHT,
}


def decode_key(key: str, searching: bool = False) -> Optional[Action]:
    """Map a key name to an :class:`Action`, or ``None`` when the key is unbound.

    Single characters are matched as typed; named keys (``"Enter"``,
    ``"Shift+Tab"``) are matched case-insensitively. In search mode every
    printable character becomes :attr:`ActionKind.SEARCH_INPUT`, so ``q``
    and the digit keys can be part of a query.

    Example::

        >>> decode_key("2")
        Action(kind=<ActionKind.CHANGE_VIEW: 'change_view'>, text='', view=<View.SCHEMAS: 'schemas'>)
        >>> decode_key("q", searching=True).kind
        <ActionKind.SEARCH_INPUT: 'search_input'>
    """
    if not key:
        return None
    name = key if len(key) == 1 else key.lower()

    if searching:
        kind = _SEARCH_KEYS.get(name)
        if kind is not None:
            return Action(kind)
        if len(key) == 1 and key.isprintable():
            return Action(ActionKind.SEARCH_INPUT, text=key)
        return None

    view = _VIEW_KEYS.get(name)
    if view is not None:
        return Action(ActionKind.CHANGE_VIEW, view=view)

    kind = _COMMAND_KEYS.get(name)
    if kind is None:
        return None
    return Action(kind)

"""Tests for openapi_explorer.navigation.events."""

from __future__ import annotations

import pytest

from openapi_explorer.navigation.events import Action, ActionKind, decode_key
from openapi_explorer.navigation.state import View


class TestDecodeKey:
    """Key decoding outside search mode."""

    @pytest.mark.parametrize(
        ("key", "kind"),
        [
            ("q", ActionKind.QUIT),
            ("ctrl+c", ActionKind.QUIT),
            ("tab", ActionKind.NEXT_PANEL),
            ("shift+tab", ActionKind.PREVIOUS_PANEL),
            ("/", ActionKind.START_SEARCH),
            ("enter", ActionKind.SELECT),
            ("esc", ActionKind.BACK),
            ("h", ActionKind.TOGGLE_HELP),
            ("r", ActionKind.RELOAD),
            ("d", ActionKind.TOGGLE_ENDPOINT_DETAILS),
            ("x", ActionKind.DISMISS_ERROR),
            ("up", ActionKind.NAVIGATE_UP),
            ("down", ActionKind.NAVIGATE_DOWN),
            ("left", ActionKind.NAVIGATE_LEFT),
            ("right", ActionKind.NAVIGATE_RIGHT),
            ("backspace", ActionKind.SEARCH_BACKSPACE),
        ],
    )
    def test_command_keys(self, key: str, kind: ActionKind) -> None:
        assert decode_key(key) == Action(kind)

    @pytest.mark.parametrize(
        ("key", "view"),
        [
            ("1", View.FIELDS),
            ("2", View.SCHEMAS),
            ("3", View.ENDPOINTS),
            ("4", View.GRAPH),
            ("5", View.STATS),
        ],
    )
    def test_view_keys(self, key: str, view: View) -> None:
        assert decode_key(key) == Action(ActionKind.CHANGE_VIEW, view=view)

    def test_named_keys_are_case_insensitive(self) -> None:
        assert decode_key("Enter") == Action(ActionKind.SELECT)
        assert decode_key("Shift+Tab") == Action(ActionKind.PREVIOUS_PANEL)

    def test_single_characters_are_case_sensitive(self) -> None:
        assert decode_key("Q") is None

    @pytest.mark.parametrize("key", ["", "z", "9", "f13"])
    def test_unbound_keys(self, key: str) -> None:
        assert decode_key(key) is None


class TestDecodeKeySearching:
    """Key decoding while a search query is being typed."""

    @pytest.mark.parametrize("key", ["q", "1", "r", "/", " ", "Z"])
    def test_printable_keys_become_input(self, key: str) -> None:
        assert decode_key(key, searching=True) == Action(ActionKind.SEARCH_INPUT, text=key)

    def test_enter_commits(self) -> None:
        assert decode_key("enter", searching=True) == Action(ActionKind.COMMIT_SEARCH)

    def test_esc_and_backspace(self) -> None:
        assert decode_key("esc", searching=True) == Action(ActionKind.BACK)
        assert decode_key("backspace", searching=True) == Action(ActionKind.SEARCH_BACKSPACE)

    def test_ctrl_c_still_quits(self) -> None:
        assert decode_key("ctrl+c", searching=True) == Action(ActionKind.QUIT)

    def test_unprintable_key_ignored(self) -> None:
        assert decode_key("f5", searching=True) is None
        assert decode_key("\x07", searching=True) is None

"""Filtering, cursor navigation and key decoding for the interactive browser."""

from openapi_explorer.navigation.events import Action, ActionKind, decode_key
from openapi_explorer.navigation.matching import fuzzy_score, rank
from openapi_explorer.navigation.state import Category, NavigationState, Panel, View

__all__ = [
    "Action",
    "ActionKind",
    "Category",
    "NavigationState",
    "Panel",
    "View",
    "decode_key",
    "fuzzy_score",
    "rank",
]

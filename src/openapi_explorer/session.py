"""Loading, reloading and the single-writer browsing session.

A :class:`Snapshot` is one fully built, immutable result of retrieving a
document, indexing it and validating it. Nothing ever mutates a snapshot;
a reload builds a brand-new one and :class:`Session` swaps it in only once it
is complete, so a reader never sees a half-built index.

:class:`Session` is the only writer of the current snapshot and of the
:class:`~openapi_explorer.navigation.state.NavigationState`. The browse loop
feeds it decoded actions through :meth:`Session.apply`, then calls
:meth:`Session.run_pending_reload` before rendering.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from openapi_explorer.exceptions import (
    MalformedDocumentError,
    ReloadError,
    SourceNotFoundError,
)
from openapi_explorer.index import build_index
from openapi_explorer.models import CrossReferenceIndex, OpenAPIDocument, ValidationConfig
from openapi_explorer.navigation.events import Action, ActionKind
from openapi_explorer.navigation.state import NavigationState
from openapi_explorer.parser import fetch_document
from openapi_explorer.validation import validate

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """A document together with its index and validation warnings.

    Attributes:
        document: The document as loaded (unresolved).
        index: The cross-reference index built from it.
        warnings: Output of :func:`~openapi_explorer.validation.validate`.
        source: Where the document came from; ``None`` for in-memory documents,
            which cannot be reloaded.
        generation: ``0`` for the initial load, incremented by each reload.
    """

    model_config = ConfigDict(frozen=True)

    document: OpenAPIDocument
    index: CrossReferenceIndex
    warnings: list[str] = Field(default_factory=list)
    source: Optional[str] = None
    generation: int = 0


def build_snapshot(
    document: OpenAPIDocument,
    source: Optional[str] = None,
    generation: int = 0,
    validation: Optional[ValidationConfig] = None,
) -> Snapshot:
    """Index and validate an already parsed *document*."""
    index = build_index(document)
    return Snapshot(
        document=document,
        index=index,
        warnings=validate(document, index, validation),
        source=source,
        generation=generation,
    )


def load_snapshot(
    source: str,
    generation: int = 0,
    validation: Optional[ValidationConfig] = None,
) -> Snapshot:
    """Retrieve *source* and build a snapshot from it.

    Raises:
        SourceNotFoundError: If the location does not resolve.
        MalformedDocumentError: If the content is not an OpenAPI 3.x document.
    """
    logger.debug("Building snapshot %d from %s", generation, source)
    return build_snapshot(fetch_document(source), source, generation, validation)


def reload_snapshot(
    snapshot: Snapshot,
    validation: Optional[ValidationConfig] = None,
) -> Snapshot:
    """Re-retrieve the source of *snapshot* and build its successor.

    Raises:
        ReloadError: If the snapshot has no source, or retrieval or parsing
            failed. The cause is chained.
    """
    if snapshot.source is None:
        raise ReloadError("Cannot reload: no document source is associated with this view")
    try:
        return load_snapshot(snapshot.source, snapshot.generation + 1, validation)
    except (SourceNotFoundError, MalformedDocumentError) as exc:
        raise ReloadError(f"Reload failed: {exc}") from exc


class Session:
    """The running state of an interactive browse.

    Args:
        snapshot: The initial snapshot.
        validation: Validation switches reused on every reload.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        validation: Optional[ValidationConfig] = None,
    ) -> None:
        self.snapshot = snapshot
        self.nav = NavigationState(snapshot.index)
        self.validation = validation
        self.error_message: Optional[str] = None
        self.status_message: Optional[str] = None
        self.should_quit = False
        self._reloading = False
        self._reload_requested = False

    @classmethod
    def from_source(
        cls,
        source: str,
        validation: Optional[ValidationConfig] = None,
    ) -> Session:
        """Load *source* and start a session on it (startup errors propagate)."""
        return cls(load_snapshot(source, validation=validation), validation)

    @property
    def index(self) -> CrossReferenceIndex:
        return self.snapshot.index

    @property
    def reload_pending(self) -> bool:
        return self._reload_requested

    def request_reload(self) -> None:
        """Ask for a reload at the next :meth:`run_pending_reload`.

        Requests made while one is already pending or running are ignored.
        """
        if self._reloading or self._reload_requested:
            logger.debug("Reload already pending, request ignored")
            return
        self._reload_requested = True

    def run_pending_reload(self) -> bool:
        """Perform a requested reload, if any. Returns ``True`` on a successful swap."""
        if not self._reload_requested:
            return False
        self._reload_requested = False
        return self.reload()

    def reload(self) -> bool:
        """Rebuild from the current source and swap the result in.

        On failure the current snapshot and navigation state are left as
        they were and :attr:`error_message` is set.

        Returns:
            ``True`` if a new snapshot was swapped in.
        """
        if self._reloading:
            logger.debug("Reload already in progress, request ignored")
            return False

        self._reloading = True
        try:
            new_snapshot = reload_snapshot(self.snapshot, self.validation)
        except ReloadError as exc:
            logger.warning("%s", exc)
            self.error_message = str(exc)
            return False
        finally:
            self._reloading = False

        self.snapshot = new_snapshot
        self.nav.rebind(new_snapshot.index)
        self.error_message = None
        self.status_message = (
            f"Reloaded {new_snapshot.source} (generation {new_snapshot.generation})"
        )
        logger.debug(self.status_message)
        return True

    def dismiss_error(self) -> None:
        self.error_message = None

    def apply(self, action: Action) -> None:
        """Apply one decoded action to the session."""
        nav = self.nav
        kind = action.kind

        if kind is ActionKind.QUIT:
            self.should_quit = True
        elif kind is ActionKind.NEXT_PANEL or kind is ActionKind.NAVIGATE_RIGHT:
            nav.next_panel()
        elif kind is ActionKind.PREVIOUS_PANEL or kind is ActionKind.NAVIGATE_LEFT:
            nav.previous_panel()
        elif kind is ActionKind.START_SEARCH:
            nav.start_search()
        elif kind is ActionKind.SEARCH_INPUT:
            nav.append_query(action.text)
        elif kind is ActionKind.SEARCH_BACKSPACE:
            nav.backspace_query()
        elif kind is ActionKind.COMMIT_SEARCH:
            nav.searching = False
        elif kind is ActionKind.SELECT:
            nav.select()
        elif kind is ActionKind.BACK:
            nav.back()
        elif kind is ActionKind.CHANGE_VIEW:
            if action.view is not None:
                nav.set_view(action.view)
        elif kind is ActionKind.RELOAD:
            self.request_reload()
        elif kind is ActionKind.TOGGLE_HELP:
            nav.toggle_help()
        elif kind is ActionKind.TOGGLE_ENDPOINT_DETAILS:
            nav.toggle_endpoint_details()
        elif kind is ActionKind.DISMISS_ERROR:
            self.dismiss_error()
        elif kind is ActionKind.NAVIGATE_UP:
            nav.move_up()
        elif kind is ActionKind.NAVIGATE_DOWN:
            nav.move_down()

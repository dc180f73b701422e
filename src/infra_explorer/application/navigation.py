"""View and selection state machine of the explorer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from infra_explorer.domain.models import CollectionKind, CollectionView

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_HEIGHT = 20


class StatusPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class ViewStatus:
    """Transient status of the active view."""

    phase: StatusPhase
    message: str | None = None

    @classmethod
    def idle(cls) -> ViewStatus:
        return cls(StatusPhase.IDLE)

    @classmethod
    def loading(cls) -> ViewStatus:
        return cls(StatusPhase.LOADING)

    @classmethod
    def error(cls, message: str) -> ViewStatus:
        return cls(StatusPhase.ERROR, message)

    @classmethod
    def of(cls, collection: CollectionView) -> ViewStatus:
        """Status matching a collection snapshot."""
        if collection.in_flight:
            return cls.loading()
        if collection.error is not None:
            return cls.error(collection.error.message)
        return cls.idle()


@dataclass(frozen=True)
class Cursor:
    """Selection within one view, by position and by record identifier."""

    index: int | None = None
    item_id: str | None = None
    offset: int = 0


EMPTY_CURSOR = Cursor()


class NavigationState:
    """Which collection is shown, what is selected and what the status is.

    The view and the status are independent axes. Each view keeps its own
    cursor, so leaving a view and coming back restores its selection. The
    state holds positions and identifiers only; the records stay in the
    cache and are passed in as snapshots.

    Once exit is requested every further transition is ignored.
    """

    def __init__(
        self,
        view: CollectionKind = CollectionKind.STATIONS,
        viewport_height: int = DEFAULT_VIEWPORT_HEIGHT,
    ) -> None:
        self.view = view
        # The startup fetch of the initial view is dispatched right away
        self.status = ViewStatus.loading()
        self.exit_requested = False
        self.show_map = False
        self.viewport_height = max(1, viewport_height)
        self._cursors: dict[CollectionKind, Cursor] = {}

    def cursor(self, kind: CollectionKind | None = None) -> Cursor:
        return self._cursors.get(kind or self.view, EMPTY_CURSOR)

    @property
    def selected_index(self) -> int | None:
        return self.cursor().index

    @property
    def selected_id(self) -> str | None:
        return self.cursor().item_id

    @property
    def scroll_offset(self) -> int:
        return self.cursor().offset

    def visible_range(self, length: int) -> range:
        """Indices of the active view shown in the viewport."""
        start = self.scroll_offset
        return range(start, min(start + self.viewport_height, length))

    def select_view(self, kind: CollectionKind, collection: CollectionView) -> None:
        """Make ``kind`` the active view.

        Args:
            kind: The view to show.
            collection: Current snapshot of that view's collection.
        """
        if self.exit_requested:
            return
        self.view = kind
        self._cursors[kind] = self._reconcile(self.cursor(kind), collection)
        self.status = ViewStatus.of(collection)
        logger.debug(f"Switched to {kind.value} view ({self.status.phase.value})")

    def move_selection(self, delta: int, collection: CollectionView) -> None:
        """Move the selection of the active view by ``delta`` rows, clamped."""
        if self.exit_requested or collection.is_empty:
            return
        cursor = self._reconcile(self.cursor(), collection)
        target = 0 if cursor.index is None else cursor.index + delta
        self._cursors[self.view] = self._cursor_at(target, collection, cursor.offset)

    def move_page(self, pages: int, collection: CollectionView) -> None:
        self.move_selection(pages * self.viewport_height, collection)

    def move_to_start(self, collection: CollectionView) -> None:
        if self.exit_requested or collection.is_empty:
            return
        self._cursors[self.view] = self._cursor_at(0, collection, 0)

    def move_to_end(self, collection: CollectionView) -> None:
        if self.exit_requested or collection.is_empty:
            return
        self._cursors[self.view] = self._cursor_at(
            len(collection) - 1, collection, self.scroll_offset
        )

    def begin_refresh(self, collection: CollectionView) -> None:
        """Reflect a manual refresh of the active view in the status."""
        if self.exit_requested:
            return
        self.status = ViewStatus.of(collection)

    def fetch_completed(self, kind: CollectionKind, collection: CollectionView) -> None:
        """Apply a finished fetch.

        The cursor of ``kind`` is reconciled with the new items. The status
        only changes when ``kind`` is the active view.

        Args:
            kind: The collection the fetch was for.
            collection: Snapshot after the cache applied the outcome.
        """
        if self.exit_requested:
            return
        self._cursors[kind] = self._reconcile(self.cursor(kind), collection)
        if kind is self.view:
            if collection.error is None:
                self.status = ViewStatus.idle()
            else:
                self.status = ViewStatus.error(collection.error.message)

    def set_viewport_height(self, rows: int, collection: CollectionView) -> None:
        """Resize the list viewport and keep the selection visible."""
        self.viewport_height = max(1, rows)
        if self.view in self._cursors:
            self._cursors[self.view] = self._reconcile(self.cursor(), collection)

    def toggle_map(self) -> None:
        """Show or hide the station map below the list."""
        if self.exit_requested:
            return
        self.show_map = not self.show_map

    def request_exit(self) -> None:
        self.exit_requested = True

    def _reconcile(self, cursor: Cursor, collection: CollectionView) -> Cursor:
        """Fit a cursor to a possibly changed collection.

        The selected record is followed by identifier; if it is gone the same
        position is kept, clamped to the new length.
        """
        if collection.is_empty:
            return EMPTY_CURSOR

        index = None if cursor.item_id is None else collection.index_of(cursor.item_id)
        if index is None:
            index = 0 if cursor.index is None else cursor.index
        return self._cursor_at(index, collection, cursor.offset)

    def _cursor_at(self, index: int, collection: CollectionView, offset: int) -> Cursor:
        length = len(collection)
        index = max(0, min(index, length - 1))
        height = self.viewport_height

        offset = min(offset, index)
        if index >= offset + height:
            offset = index - height + 1
        offset = max(0, min(offset, length - height))

        return Cursor(index=index, item_id=collection.items[index].id, offset=offset)

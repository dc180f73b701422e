"""Maps key presses to navigation transitions and cache refreshes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING

from infra_explorer.domain.models import CollectionKind

if TYPE_CHECKING:
    from infra_explorer.application.navigation import NavigationState
    from infra_explorer.domain.contracts.collection_cache import CollectionCacheProtocol

logger = logging.getLogger(__name__)


class Action(Enum):
    QUIT = "quit"
    SHOW_STATIONS = "show_stations"
    SHOW_SEGMENTS = "show_segments"
    REFRESH = "refresh"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    MOVE_HOME = "move_home"
    MOVE_END = "move_end"
    TOGGLE_MAP = "toggle_map"


# "b" for Betriebsstellen, "s" for Streckensegmente
DEFAULT_KEY_BINDINGS: dict[str, Action] = {
    "q": Action.QUIT,
    "Q": Action.QUIT,
    "b": Action.SHOW_STATIONS,
    "1": Action.SHOW_STATIONS,
    "s": Action.SHOW_SEGMENTS,
    "2": Action.SHOW_SEGMENTS,
    "r": Action.REFRESH,
    "up": Action.MOVE_UP,
    "k": Action.MOVE_UP,
    "down": Action.MOVE_DOWN,
    "j": Action.MOVE_DOWN,
    "page_up": Action.PAGE_UP,
    "page_down": Action.PAGE_DOWN,
    "home": Action.MOVE_HOME,
    "g": Action.MOVE_HOME,
    "end": Action.MOVE_END,
    "G": Action.MOVE_END,
    "m": Action.TOGGLE_MAP,
}


class InputDispatcher:
    """Applies key presses to the navigation state.

    Every key either triggers a transition or is ignored; unbound keys never
    change any state.
    """

    def __init__(
        self,
        state: NavigationState,
        cache: CollectionCacheProtocol,
        key_bindings: Mapping[str, Action] | None = None,
    ) -> None:
        self._state = state
        self._cache = cache
        self._bindings = dict(DEFAULT_KEY_BINDINGS if key_bindings is None else key_bindings)

    def dispatch(self, key: str) -> Action | None:
        """Apply the action bound to ``key``.

        Returns:
            The applied action, or None if the key was ignored.
        """
        if self._state.exit_requested:
            return None

        action = self._bindings.get(key)
        if action is None:
            logger.debug(f"Ignoring unbound key {key!r}")
            return None

        self._apply(action)
        return action

    def _apply(self, action: Action) -> None:
        state = self._state
        if action is Action.QUIT:
            state.request_exit()
        elif action is Action.SHOW_STATIONS:
            self._select_view(CollectionKind.STATIONS)
        elif action is Action.SHOW_SEGMENTS:
            self._select_view(CollectionKind.SEGMENTS)
        elif action is Action.REFRESH:
            self._cache.refresh(state.view)
            state.begin_refresh(self._cache.get(state.view))
        elif action is Action.MOVE_UP:
            state.move_selection(-1, self._cache.get(state.view))
        elif action is Action.MOVE_DOWN:
            state.move_selection(1, self._cache.get(state.view))
        elif action is Action.PAGE_UP:
            state.move_page(-1, self._cache.get(state.view))
        elif action is Action.PAGE_DOWN:
            state.move_page(1, self._cache.get(state.view))
        elif action is Action.MOVE_HOME:
            state.move_to_start(self._cache.get(state.view))
        elif action is Action.MOVE_END:
            state.move_to_end(self._cache.get(state.view))
        elif action is Action.TOGGLE_MAP:
            state.toggle_map()

    def _select_view(self, kind: CollectionKind) -> None:
        # Also retries a collection whose earlier fetch failed
        self._cache.ensure_loaded(kind)
        self._state.select_view(kind, self._cache.get(kind))

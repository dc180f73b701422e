"""Event loop driving input, fetch completions and rendering."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from infra_explorer.application.collection_cache import CollectionCache
from infra_explorer.application.input_dispatcher import InputDispatcher
from infra_explorer.application.navigation import NavigationState
from infra_explorer.application.renderer import DEFAULT_COLUMNS, render, reserved_rows
from infra_explorer.domain.models import (
    CollectionKind,
    FetchCompleted,
    FetchError,
    FetchOutcome,
    KeyPressed,
)

if TYPE_CHECKING:
    from infra_explorer.domain.models import Event, Frame
    from infra_explorer.domain.ports import InfrastructureRepository, Terminal

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.25


class ExplorerApp:
    """Runs the explorer until the operator quits.

    Key presses and fetch completions arrive as events on one queue. Fetches
    run as tasks that only post their outcome; the cache and the navigation
    state are changed by this loop alone, so no locking is needed.
    """

    def __init__(
        self,
        repository: InfrastructureRepository,
        terminal: Terminal,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the app.

        Args:
            repository: Source of station and segment collections.
            terminal: Screen to draw on and source of key presses.
            poll_interval_seconds: Longest wait for an event before redrawing.
        """
        self._repository = repository
        self._terminal = terminal
        self._poll_interval = poll_interval_seconds
        self._events: asyncio.Queue[Event] = asyncio.Queue()
        self._fetch_tasks: set[asyncio.Task[None]] = set()
        self._last_frame: Frame | None = None
        self._last_size: tuple[int, int] | None = None
        self._last_layout: tuple[tuple[int, int], bool] | None = None

        self.cache = CollectionCache(dispatch=self._start_fetch)
        self.state = NavigationState()
        self.dispatcher = InputDispatcher(self.state, self.cache)

    @property
    def pending_fetches(self) -> int:
        return len(self._fetch_tasks)

    def post_key(self, key: str) -> None:
        """Queue a key press for the loop."""
        self._events.put_nowait(KeyPressed(key))

    async def run(self) -> None:
        """Process events until exit is requested.

        Pending fetches are cancelled and input is detached on every exit path.
        """
        loop = asyncio.get_running_loop()
        self._terminal.attach_input(loop, self.post_key)
        logger.info("Explorer started")
        try:
            self._sync_viewport()
            # First access of the initial view dispatches the startup fetch
            self.cache.get(self.state.view)
            self._redraw()
            while not self.state.exit_requested:
                event = await self._next_event()
                if event is None:
                    self._sync_viewport()
                else:
                    self.handle_event(event)
                if not self.state.exit_requested:
                    self._redraw()
        finally:
            self._terminal.detach_input(loop)
            await self._cancel_fetches()
            logger.info("Explorer stopped")

    def handle_event(self, event: Event) -> None:
        """Apply one event to the cache and the navigation state."""
        if isinstance(event, KeyPressed):
            if event.key == "resize":
                self._sync_viewport()
            else:
                self.dispatcher.dispatch(event.key)
                # Showing or hiding the map changes the rows left for the list
                self._sync_viewport()
        elif isinstance(event, FetchCompleted):
            self.cache.on_fetch_complete(event.kind, event.outcome)
            self.state.fetch_completed(event.kind, self.cache.peek(event.kind))

    def frame(self) -> Frame:
        """Render the current state."""
        collection = self.cache.peek(self.state.view)
        columns = DEFAULT_COLUMNS if self._last_size is None else self._last_size[1]
        return render(
            self.state,
            collection,
            stations=self.cache.peek(CollectionKind.STATIONS),
            columns=columns,
        )

    async def _next_event(self) -> Event | None:
        try:
            return await asyncio.wait_for(self._events.get(), timeout=self._poll_interval)
        except TimeoutError:
            return None

    def _sync_viewport(self) -> None:
        size = self._terminal.size()
        layout = (size, self.state.show_map)
        if layout == self._last_layout:
            return
        if size != self._last_size:
            # A resized screen needs a full redraw even if the frame is unchanged
            self._last_frame = None
        self._last_size = size
        self._last_layout = layout
        rows, _ = size
        self.state.set_viewport_height(
            rows - reserved_rows(self.state), self.cache.peek(self.state.view)
        )

    def _redraw(self) -> None:
        frame = self.frame()
        if frame == self._last_frame:
            return
        self._terminal.draw(frame)
        self._last_frame = frame

    def _start_fetch(self, kind: CollectionKind) -> None:
        task = asyncio.get_running_loop().create_task(self._fetch(kind), name=f"fetch-{kind.value}")
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_tasks.discard)

    async def _fetch(self, kind: CollectionKind) -> None:
        try:
            items = await self._repository.fetch(kind)
            outcome = FetchOutcome.succeeded(items)
        except FetchError as e:
            outcome = FetchOutcome.failed(e)
        except Exception as e:
            logger.error(f"Unexpected error while fetching {kind.value}: {e}", exc_info=True)
            outcome = FetchOutcome.failed(FetchError.network(str(e) or type(e).__name__))
        self._events.put_nowait(FetchCompleted(kind, outcome))

    async def _cancel_fetches(self) -> None:
        tasks = list(self._fetch_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug(f"Cancelled {len(tasks)} pending fetch(es)")

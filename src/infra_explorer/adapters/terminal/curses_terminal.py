"""Curses terminal adapter.

Owns the terminal mode for the lifetime of the explorer: ``curses_terminal``
acquires the screen, yields a ``CursesTerminal`` and restores the terminal on
every exit path.
"""

import asyncio
import curses
import locale
import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from infra_explorer.adapters.terminal.console_logging import buffered_console_logging
from infra_explorer.domain.models import Frame, LineStyle

logger = logging.getLogger(__name__)

SPECIAL_KEYS: dict[int, str] = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_PPAGE: "page_up",
    curses.KEY_NPAGE: "page_down",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_RESIZE: "resize",
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    10: "enter",
    13: "enter",
    27: "escape",
}

# Color pair numbers registered in _init_colors
_PAIR_HEADER = 1
_PAIR_ERROR = 2
_PAIR_HINT = 3
_PAIR_MAP = 4


class TerminalUnavailableError(RuntimeError):
    """The interactive terminal could not be acquired."""


def normalize_key(code: int) -> str | None:
    """Translate a curses key code into a key name.

    Returns None when no key was available. Unknown codes get a stable
    ``key_<code>`` name so that every input maps to something.
    """
    if code < 0:
        return None
    if code in SPECIAL_KEYS:
        return SPECIAL_KEYS[code]
    if 32 <= code < 127:
        return chr(code)
    return f"key_{code}"


def _init_colors() -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    try:
        curses.use_default_colors()
        background = -1
    except curses.error:
        background = curses.COLOR_BLACK
    curses.init_pair(_PAIR_HEADER, curses.COLOR_CYAN, background)
    curses.init_pair(_PAIR_ERROR, curses.COLOR_RED, background)
    curses.init_pair(_PAIR_HINT, curses.COLOR_YELLOW, background)
    curses.init_pair(_PAIR_MAP, curses.COLOR_BLUE, background)


def style_attributes(has_colors: bool) -> dict[LineStyle, int]:
    """Map frame line styles to curses attributes."""

    def pair(number: int) -> int:
        return curses.color_pair(number) if has_colors else 0

    return {
        LineStyle.HEADER: curses.A_BOLD | pair(_PAIR_HEADER),
        LineStyle.NORMAL: curses.A_NORMAL,
        LineStyle.SELECTED: curses.A_REVERSE | curses.A_BOLD,
        LineStyle.ERROR: curses.A_BOLD | pair(_PAIR_ERROR),
        LineStyle.DETAIL: curses.A_DIM,
        LineStyle.HINT: pair(_PAIR_HINT),
        LineStyle.MAP: pair(_PAIR_MAP),
    }


class CursesTerminal:
    """Draws frames on a curses window and reports key presses."""

    def __init__(self, stdscr: "curses.window", attributes: dict[LineStyle, int]) -> None:
        self._stdscr = stdscr
        self._attributes = attributes
        self._input_fd: int | None = None

    def size(self) -> tuple[int, int]:
        rows, columns = self._stdscr.getmaxyx()
        return rows, columns

    def draw(self, frame: Frame) -> None:
        rows, columns = self.size()
        self._stdscr.erase()
        for row, line in enumerate(frame.lines[:rows]):
            try:
                # Leave the last column free, writing into it can fail at the bottom right
                self._stdscr.addnstr(
                    row, 0, line.text, max(columns - 1, 0), self._attributes[line.style]
                )
            except curses.error:
                logger.debug(f"Could not draw line {row} ({columns} columns available)")
        self._stdscr.refresh()

    def read_keys(self) -> list[str]:
        """Drain all pending key presses without blocking."""
        keys: list[str] = []
        while True:
            key = normalize_key(self._stdscr.getch())
            if key is None:
                return keys
            keys.append(key)

    def attach_input(
        self, loop: asyncio.AbstractEventLoop, on_key: Callable[[str], None]
    ) -> None:
        def on_readable() -> None:
            for key in self.read_keys():
                on_key(key)

        self._input_fd = sys.stdin.fileno()
        loop.add_reader(self._input_fd, on_readable)

    def detach_input(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._input_fd is not None:
            loop.remove_reader(self._input_fd)
            self._input_fd = None


def _acquire_screen() -> "curses.window":
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalUnavailableError("standard input and output must be a terminal")

    locale.setlocale(locale.LC_ALL, "")
    try:
        stdscr = curses.initscr()
    except curses.error as e:
        raise TerminalUnavailableError(f"cannot initialise the terminal: {e}") from e
    return stdscr


def _configure_screen(stdscr: "curses.window") -> None:
    curses.noecho()
    curses.cbreak()
    stdscr.keypad(True)
    stdscr.nodelay(True)
    try:
        curses.curs_set(0)
    except curses.error:
        logger.debug("Terminal does not support hiding the cursor")
    _init_colors()


def _release_screen(stdscr: "curses.window") -> None:
    stdscr.keypad(False)
    curses.nocbreak()
    curses.echo()
    curses.endwin()


@contextmanager
def curses_terminal() -> Iterator[CursesTerminal]:
    """Acquire the terminal for the explorer and release it on exit.

    Console log output is held back while the screen is active and written
    once the terminal is restored.

    Raises:
        TerminalUnavailableError: If the terminal cannot be acquired.
    """
    with buffered_console_logging():
        stdscr = _acquire_screen()
        try:
            _configure_screen(stdscr)
            yield CursesTerminal(stdscr, style_attributes(curses.has_colors()))
        finally:
            _release_screen(stdscr)

"""Terminal adapters."""

from infra_explorer.adapters.terminal.console_logging import buffered_console_logging
from infra_explorer.adapters.terminal.curses_terminal import (
    CursesTerminal,
    TerminalUnavailableError,
    curses_terminal,
    normalize_key,
)

__all__ = [
    "CursesTerminal",
    "TerminalUnavailableError",
    "buffered_console_logging",
    "curses_terminal",
    "normalize_key",
]

"""Hold back console log output while the full-screen UI owns the terminal."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import MemoryHandler

# Records kept per console handler before they are forced out
DEFAULT_CAPACITY = 10_000


def _is_console_handler(handler: logging.Handler) -> bool:
    """Whether the handler writes to the process console or another terminal."""
    if not isinstance(handler, logging.StreamHandler) or isinstance(handler, logging.FileHandler):
        return False

    stream = handler.stream
    consoles = (sys.stderr, sys.stdout, sys.__stderr__, sys.__stdout__)
    if any(stream is console for console in consoles):
        return True
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


@contextmanager
def buffered_console_logging(
    logger: logging.Logger | None = None, capacity: int = DEFAULT_CAPACITY
) -> Iterator[None]:
    """Buffer records of console handlers and flush them on exit.

    File handlers keep writing immediately.
    """
    target_logger = logger or logging.getLogger()
    swapped: list[tuple[logging.Handler, MemoryHandler]] = []

    for handler in list(target_logger.handlers):
        if not _is_console_handler(handler):
            continue
        buffer = MemoryHandler(
            capacity, flushLevel=logging.CRITICAL + 1, target=handler, flushOnClose=True
        )
        buffer.setLevel(handler.level)
        target_logger.removeHandler(handler)
        target_logger.addHandler(buffer)
        swapped.append((handler, buffer))

    try:
        yield
    finally:
        for handler, buffer in swapped:
            target_logger.removeHandler(buffer)
            buffer.close()
            target_logger.addHandler(handler)

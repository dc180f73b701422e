"""Terminal port."""

import asyncio
from collections.abc import Callable
from typing import Protocol

from infra_explorer.domain.models.frame import Frame


class Terminal(Protocol):
    """Port for the interactive screen the explorer draws on."""

    def size(self) -> tuple[int, int]:
        """Return the screen size as ``(rows, columns)``."""
        ...

    def draw(self, frame: Frame) -> None:
        """Replace the screen contents with the frame."""
        ...

    def attach_input(
        self, loop: asyncio.AbstractEventLoop, on_key: Callable[[str], None]
    ) -> None:
        """Start delivering normalised key names to ``on_key`` from the loop."""
        ...

    def detach_input(self, loop: asyncio.AbstractEventLoop) -> None:
        """Stop delivering key events."""
        ...

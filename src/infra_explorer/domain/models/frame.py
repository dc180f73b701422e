"""Terminal frame description produced by the renderer."""

from dataclasses import dataclass
from enum import Enum


class LineStyle(Enum):
    """Visual role of a frame line; terminals map these to attributes."""

    HEADER = "header"
    NORMAL = "normal"
    SELECTED = "selected"
    ERROR = "error"
    DETAIL = "detail"
    HINT = "hint"
    MAP = "map"


@dataclass(frozen=True)
class FrameLine:
    text: str
    style: LineStyle = LineStyle.NORMAL


@dataclass(frozen=True)
class Frame:
    """Ordered display lines, top to bottom."""

    lines: tuple[FrameLine, ...]

    def to_text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    @property
    def texts(self) -> list[str]:
        return [line.text for line in self.lines]

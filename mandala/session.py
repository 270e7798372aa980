from dataclasses import dataclass
from pathlib import Path
from typing import Final, Literal

from .colors import WHITE
from .draw import RasterBuffer

Tool = Literal["brush", "pen", "eraser", "bucket"]

TOOLS: Final[tuple[Tool, ...]] = ("brush", "pen", "eraser", "bucket")

MIN_BRUSH_SIZE: Final = 1
MAX_BRUSH_SIZE: Final = 50

CURSORS: Final[dict[Tool, str]] = {
    "brush": "cursor-brush",
    "pen": "cursor-pen",
    "eraser": "cursor-eraser",
    "bucket": "cursor-bucket",
}


@dataclass
class Session:
    """Everything the painting tools act on: current tool, color, size and canvas."""

    buffer: RasterBuffer
    tool: Tool = "brush"
    color: str = "#FF6B6B"
    brush_size: int = 3

    original: bytes | None = None
    """Snapshot of the canvas right after the mandala was loaded"""

    current_mandala: Path | None = None
    is_drawing: bool = False
    last_point: tuple[int, int] | None = None

    @classmethod
    def blank(cls, width: int, height: int, **kwargs) -> "Session":
        buffer = RasterBuffer(width, height)
        buffer.clear(WHITE)
        return cls(buffer, **kwargs)

    def stroke_style(self) -> tuple[int, bool]:
        """Return (line_width, erase) for the current tool."""
        match self.tool:
            case "pen":
                return max(1, self.brush_size // 2), False
            case "eraser":
                return self.brush_size * 2, True
            case _:
                return self.brush_size, False

    def cursor(self) -> str:
        return CURSORS[self.tool]

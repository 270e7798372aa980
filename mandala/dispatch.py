"""
Explicit action dispatch for the painter.

Input layers (window events, touch events, text scripts) translate what the
user did into one of the action dataclasses below, and `Dispatcher` applies
it to a `Session`. Nothing in here knows about a particular event API, so the
whole flow can be driven directly from tests.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import Literal, cast

from .colors import WHITE, hex_to_color, to_rgba
from .flood_fill import FloodFillEngine
from .mandala_io import load_mandala, save_image
from .session import MAX_BRUSH_SIZE, MIN_BRUSH_SIZE, TOOLS, Session, Tool

logger = getLogger(__name__)


@dataclass
class SelectTool:
    tool: Tool


@dataclass
class SelectColor:
    color: str


@dataclass
class SetBrushSize:
    size: int


@dataclass
class PointerDown:
    x: float
    y: float


@dataclass
class PointerMove:
    x: float
    y: float


@dataclass
class PointerUp:
    pass


@dataclass
class Click:
    x: float
    y: float


@dataclass
class ClearCanvas:
    pass


@dataclass
class ResetToOriginal:
    pass


@dataclass
class LoadMandala:
    path: Path


@dataclass
class SaveImage:
    path: Path | None = None


Action = (
    SelectTool
    | SelectColor
    | SetBrushSize
    | PointerDown
    | PointerMove
    | PointerUp
    | Click
    | ClearCanvas
    | ResetToOriginal
    | LoadMandala
    | SaveImage
)

Command = Literal[
    "tool", "color", "size", "down", "move", "up", "click", "clear", "reset", "load", "save"
]

TouchKind = Literal["touchstart", "touchmove", "touchend"]


class CommandError(ValueError):
    pass


def parse_command(line: str) -> Action:
    """Parse one text command, like `tool bucket` or `click 10 20`, into an action."""
    parts = line.split()
    if not parts:
        raise CommandError("Empty command")
    cmd, args = cast("Command", parts[0].lower()), parts[1:]

    try:
        match cmd:
            case "tool" if len(args) == 1 and args[0] in TOOLS:
                return SelectTool(cast("Tool", args[0]))
            case "color" if len(args) == 1:
                return SelectColor(args[0])
            case "size" if len(args) == 1:
                return SetBrushSize(int(args[0]))
            case "down" if len(args) == 2:
                return PointerDown(float(args[0]), float(args[1]))
            case "move" if len(args) == 2:
                return PointerMove(float(args[0]), float(args[1]))
            case "up" if not args:
                return PointerUp()
            case "click" if len(args) == 2:
                return Click(float(args[0]), float(args[1]))
            case "clear" if not args:
                return ClearCanvas()
            case "reset" if not args:
                return ResetToOriginal()
            case "load" if len(args) == 1:
                return LoadMandala(Path(args[0]))
            case "save" if len(args) <= 1:
                return SaveImage(Path(args[0]) if args else None)
            case _:
                pass
    except ValueError as e:
        raise CommandError(f"Bad arguments in '{line}'") from e
    raise CommandError(f"Unknown command '{line}'")


def touch_to_pointer(kind: TouchKind, x: float, y: float) -> Action:
    """Translate a touch event into the equivalent pointer action."""
    match kind:
        case "touchstart":
            return PointerDown(x, y)
        case "touchmove":
            return PointerMove(x, y)
        case "touchend":
            return PointerUp()


class Dispatcher:
    def __init__(
        self,
        session: Session,
        engine: FloodFillEngine,
        on_change: Callable[[], None] | None = None,
    ):
        self.session = session
        self.engine = engine
        self.on_change = on_change

    def _changed(self):
        if self.on_change:
            self.on_change()

    def dispatch(self, action: Action) -> None:
        s = self.session
        match action:
            case SelectTool(tool):
                if tool not in TOOLS:
                    raise CommandError(f"Unknown tool '{tool}'")
                s.tool = tool
                s.is_drawing = False
                logger.info(f"Tool {tool} ({s.cursor()})")
            case SelectColor(color):
                _ = hex_to_color(color)
                s.color = color
                logger.info(f"Color {color}")
            case SetBrushSize(size):
                s.brush_size = min(MAX_BRUSH_SIZE, max(MIN_BRUSH_SIZE, size))
            case PointerDown(x, y):
                if s.tool == "bucket":
                    return
                s.is_drawing = True
                s.last_point = (math.floor(x), math.floor(y))
            case PointerMove(x, y):
                if not s.is_drawing or s.tool == "bucket" or s.last_point is None:
                    return
                point = (math.floor(x), math.floor(y))
                line_width, erase = s.stroke_style()
                s.buffer.draw_line(
                    *s.last_point,
                    *point,
                    to_rgba(hex_to_color(s.color)),
                    line_width=line_width,
                    erase=erase,
                )
                s.last_point = point
                self._changed()
            case PointerUp():
                s.is_drawing = False
                s.last_point = None
            case Click(x, y):
                if s.tool != "bucket":
                    return
                if self.engine.fill(s.buffer, math.floor(x), math.floor(y), s.color):
                    self._changed()
            case ClearCanvas():
                s.buffer.clear(WHITE)
                self._changed()
            case ResetToOriginal():
                self._reset()
            case LoadMandala(path):
                self._load(path)
            case SaveImage(path):
                _ = save_image(s.buffer, path)

    def run_script(self, lines: list[str]) -> int:
        """Dispatch every command in `lines`, skipping blanks and `#` comments."""
        count = 0
        for line in lines:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            self.dispatch(parse_command(line))
            count += 1
        return count

    def _load(self, path: Path):
        s = self.session
        if s.buffer.is_empty:
            logger.warning(f"No canvas to load {path} into")
            return
        buffer = load_mandala(path, s.buffer.width, s.buffer.height)
        s.buffer.put_image_data(buffer.get_image_data())
        s.original = bytes(s.buffer.data)
        s.current_mandala = path
        self._changed()

    def _reset(self):
        s = self.session
        if s.original is not None:
            s.buffer.put_image_data(s.original)
            self._changed()
        elif s.current_mandala is not None:
            self._load(s.current_mandala)

import array
import math
import sys
from logging import getLogger
from typing import Final

import pixpy as pix

from .colors import InvalidColorFormat, hex_to_color
from .dispatch import (
    Action,
    ClearCanvas,
    Click,
    Dispatcher,
    PointerDown,
    PointerMove,
    PointerUp,
    ResetToOriginal,
    SaveImage,
    SelectColor,
    SelectTool,
    SetBrushSize,
)
from .draw import RasterBuffer
from .mandala_io import MandalaLoadError
from .painter_config import PainterConfig
from .session import Session

logger = getLogger(__name__)

SWATCH_SIZE: Final = 48
BACKGROUND: Final = 0x303030FF


def buffer_to_colors(buffer: RasterBuffer) -> list[int]:
    """Pack RGBA bytes into 0xRRGGBBAA ints, as pixpy images want them."""
    colors = array.array("I")
    colors.frombytes(bytes(buffer.data))
    if sys.byteorder == "little":
        colors.byteswap()
    return colors.tolist()


class Painter:
    def __init__(
        self,
        screen: pix.Screen,
        config: PainterConfig,
        session: Session,
        dispatcher: Dispatcher,
    ):
        self.screen: Final = screen
        self.config: Final = config
        self.session: Final = session
        self.dispatcher: Final = dispatcher
        self.dispatcher.on_change = self.invalidate

        self.palette: list[str] = config.palette or [config.color]
        self.image: pix.Image | None = None
        self.dirty: bool = True
        self.pointer_down: bool = False

    def invalidate(self):
        self.dirty = True

    def _canvas_area(self) -> tuple[pix.Float2, float]:
        """Top left corner and scale of the canvas on screen."""
        buffer = self.session.buffer
        avail = self.screen.size - (0, SWATCH_SIZE)
        scale = min(avail.x / buffer.width, avail.y / buffer.height)
        size = pix.Float2(buffer.width, buffer.height) * scale
        return (avail - size) / 2, scale

    def _swatch_at(self, pos: pix.Float2) -> int | None:
        if pos.y < self.screen.size.y - SWATCH_SIZE:
            return None
        index = int(pos.x // SWATCH_SIZE)
        return index if index < len(self.palette) else None

    def send(self, action: Action):
        try:
            self.dispatcher.dispatch(action)
        except (InvalidColorFormat, MandalaLoadError, OSError) as e:
            logger.error(f"{type(action).__name__} failed: {e}")

    def update(self):
        self.screen.clear(BACKGROUND)
        if self.session.buffer.is_empty:
            return

        xy, scale = self._canvas_area()
        buffer = self.session.buffer
        if self.dirty or self.image is None:
            self.image = pix.Image(buffer.width, buffer_to_colors(buffer))
            self.dirty = False

        size = pix.Float2(buffer.width, buffer.height) * scale
        self.screen.draw_color = pix.color.WHITE
        self.screen.filled_rect(top_left=xy, size=size)
        self.screen.draw(self.image, top_left=xy, size=size)

        # Palette along the bottom edge
        y = self.screen.size.y - SWATCH_SIZE
        for i, color in enumerate(self.palette):
            r, g, b = hex_to_color(color)
            self.screen.draw_color = (r << 24) | (g << 16) | (b << 8) | 0xFF
            self.screen.filled_rect(
                top_left=(i * SWATCH_SIZE, y), size=(SWATCH_SIZE, SWATCH_SIZE)
            )
            if color.upper() == self.session.color.upper():
                self.screen.draw_color = pix.color.WHITE
                self.screen.rect(
                    (i * SWATCH_SIZE + 2, y + 2), (SWATCH_SIZE - 4, SWATCH_SIZE - 4)
                )

        self._update_pointer(xy, scale)

    def _update_pointer(self, xy: pix.Float2, scale: float):
        pos = pix.get_pointer()
        pressed = pix.is_pressed(pix.key.LEFT_MOUSE)
        canvas_pos = (pos - xy) / scale
        cx, cy = canvas_pos.x, canvas_pos.y
        inside = self.session.buffer.in_bounds(math.floor(cx), math.floor(cy))

        if pressed and not self.pointer_down:
            swatch = self._swatch_at(pos)
            if swatch is not None:
                self.send(SelectColor(self.palette[swatch]))
            elif inside:
                self.send(PointerDown(cx, cy))
                self.send(Click(cx, cy))
        elif pressed and self.pointer_down:
            if inside:
                self.send(PointerMove(cx, cy))
            else:
                # Leaving the canvas ends the stroke
                self.send(PointerUp())
        elif self.pointer_down:
            self.send(PointerUp())
        self.pointer_down = pressed

    def update_events(self, events: list[pix.event.AnyEvent]):
        for e in events:
            if not isinstance(e, pix.event.Key) or e.key >= 0x1000:
                continue
            key = chr(e.key)
            match key:
                case "b":
                    self.send(SelectTool("brush"))
                case "p":
                    self.send(SelectTool("pen"))
                case "e":
                    self.send(SelectTool("eraser"))
                case "f":
                    self.send(SelectTool("bucket"))
                case "+" | "=":
                    self.send(SetBrushSize(self.session.brush_size + 1))
                case "-":
                    self.send(SetBrushSize(self.session.brush_size - 1))
                case "c":
                    self.send(ClearCanvas())
                case "r":
                    self.send(ResetToOriginal())
                case "s":
                    self.send(SaveImage(self.config.output))
                case _ if key.isdigit():
                    index = (int(key) - 1) % 10
                    if index < len(self.palette):
                        self.send(SelectColor(self.palette[index]))
                case _:
                    pass

"""
RGBA raster drawing on a flat pixel buffer.

`RasterBuffer` stores a `width` by `height` bitmap in row-major order, four
bytes (r, g, b, a) per pixel. Pixel (x, y) starts at byte `(y * width + x) * 4`.
"""

from typing import Final

from PIL import Image

from .colors import TRANSPARENT, Rgba


class RasterBuffer:
    """A fixed size RGBA bitmap backed by a `bytearray`.

    - Coordinates are 0-based, with origin at top-left.
    - A buffer with zero width or height is empty; drawing on it does nothing.
    """

    def __init__(self, w: int, h: int) -> None:
        if w < 0 or h < 0:
            raise ValueError(f"Invalid buffer size {w}x{h}")
        if w == 0 or h == 0:
            w = h = 0
        self.width: Final = w
        self.height: Final = h
        self.data: bytearray = bytearray(w * h * 4)

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterBuffer":
        rgba = image.convert("RGBA")
        buffer = cls(rgba.width, rgba.height)
        buffer.put_image_data(rgba.tobytes())
        return buffer

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    @property
    def is_empty(self) -> bool:
        return self.width == 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _offset(self, x: int, y: int) -> int:
        return (y * self.width + x) * 4

    def get_image_data(self) -> bytearray:
        """Return a copy of the whole pixel grid."""
        return bytearray(self.data)

    def put_image_data(self, data: bytes | bytearray) -> None:
        """Replace the whole pixel grid in one write."""
        if len(data) != len(self.data):
            raise ValueError(
                f"Expected {len(self.data)} bytes for {self.width}x{self.height}, got {len(data)}"
            )
        self.data[:] = data

    def get_pixel(self, x: int, y: int) -> Rgba:
        o = self._offset(x, y)
        r, g, b, a = self.data[o : o + 4]
        return (r, g, b, a)

    def set_pixel(self, x: int, y: int, color: Rgba) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel {x},{y} outside {self.width}x{self.height} buffer")
        o = self._offset(x, y)
        self.data[o : o + 4] = _rgba_bytes(color)

    def clear(self, color: Rgba) -> None:
        self.data[:] = _rgba_bytes(color) * (self.width * self.height)

    def draw_line(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        color: Rgba,
        line_width: int = 1,
        erase: bool = False,
    ) -> None:
        """Draw a line from (x0, y0) to (x1, y1) using Bresenham's algorithm.

        - Every point on the line is stamped with a round pen of diameter
          `line_width`, which gives round caps and joins.
        - With `erase` set, touched pixels become fully transparent.
        - Writes only to in-bounds pixels.
        """

        if self.is_empty:
            return
        value = _rgba_bytes(TRANSPARENT if erase else color)
        stamp = _round_stamp(line_width)

        dx = abs(x1 - x0)
        sx = 1 if x0 < x1 else -1
        dy = -abs(y1 - y0)
        sy = 1 if y0 < y1 else -1
        err = dx + dy  # error term

        while True:
            for ox, oy in stamp:
                px, py = x0 + ox, y0 + oy
                if self.in_bounds(px, py):
                    o = self._offset(px, py)
                    self.data[o : o + 4] = value
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy


def _round_stamp(line_width: int) -> list[tuple[int, int]]:
    """Offsets covered by a round pen of the given diameter."""
    radius = max(1, line_width) / 2
    extent = int(radius)
    return [
        (ox, oy)
        for oy in range(-extent, extent + 1)
        for ox in range(-extent, extent + 1)
        if ox * ox + oy * oy <= radius * radius
    ]


def _rgba_bytes(color: Rgba) -> bytes:
    if len(color) != 4:
        raise ValueError(f"Expected an (r, g, b, a) color, got {color}")
    return bytes(color)

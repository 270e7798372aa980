from logging import getLogger
from typing import Final

from .colors import Color, Rgba, hex_to_color
from .draw import RasterBuffer

logger = getLogger(__name__)

DEFAULT_TOLERANCE: Final = 30


class FloodFillEngine:
    """Paint bucket fill with per-channel color tolerance.

    The tolerance absorbs anti-aliased stroke edges, so a fill does not leave
    a thin ring of unfilled pixels along the line art.
    """

    def __init__(self, tolerance: int = DEFAULT_TOLERANCE):
        self.tolerance: int = _check_tolerance(tolerance)

    def fill(
        self,
        buffer: RasterBuffer,
        x: int,
        y: int,
        fill_color: Color | Rgba | str,
        tolerance: int | None = None,
    ) -> bool:
        """Fill the 4-connected region around (x, y) with `fill_color`.

        - Pixels match when all four channels (alpha included) are within
          `tolerance` of the seed pixel, sampled once before any writes.
        - Filled pixels are always written fully opaque.
        - Seeds outside the buffer and empty buffers are ignored.
        - The buffer is read and written back as a whole, so it is either
          fully updated or left as it was.

        Returns True if any pixel changed.

        Raises:
            InvalidColorFormat: if `fill_color` is a malformed hex string
        """
        if isinstance(fill_color, str):
            fill_color = hex_to_color(fill_color)
        tol = self.tolerance if tolerance is None else _check_tolerance(tolerance)

        if buffer.is_empty or not buffer.in_bounds(x, y):
            return False

        w, h = buffer.width, buffer.height
        data = buffer.get_image_data()

        pos = (y * w + x) * 4
        r0, g0, b0, a0 = data[pos : pos + 4]
        # Fills are always opaque, so any alpha given is ignored
        fr, fg, fb = fill_color[:3]

        if (r0, g0, b0, a0) == (fr, fg, fb, 255):
            return False

        logger.info(f"Flood fill at {x},{y} tolerance {tol}")

        stack: list[tuple[int, int]] = [(x, y)]
        visited: set[tuple[int, int]] = set()

        while stack:
            cx, cy = stack.pop()

            if not (0 <= cx < w and 0 <= cy < h):
                continue
            if (cx, cy) in visited:
                continue
            visited.add((cx, cy))

            pos = (cy * w + cx) * 4
            if not (
                abs(data[pos] - r0) <= tol
                and abs(data[pos + 1] - g0) <= tol
                and abs(data[pos + 2] - b0) <= tol
                and abs(data[pos + 3] - a0) <= tol
            ):
                continue

            data[pos] = fr
            data[pos + 1] = fg
            data[pos + 2] = fb
            data[pos + 3] = 255

            stack.append((cx + 1, cy))
            stack.append((cx - 1, cy))
            stack.append((cx, cy + 1))
            stack.append((cx, cy - 1))

        buffer.put_image_data(data)
        logger.info(f"Fill complete, {len(visited)} pixels visited")
        return True


def _check_tolerance(tolerance: int) -> int:
    if tolerance < 0:
        raise ValueError(f"Tolerance must be >= 0, got {tolerance}")
    return tolerance

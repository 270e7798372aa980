"""Color values used by the painter.

Colors enter the program as `#RRGGBB` strings (palette, config, scripts) and
are handled internally as plain channel tuples.
"""

import re
from typing import Final

Color = tuple[int, int, int]
Rgba = tuple[int, int, int, int]

WHITE: Final[Rgba] = (255, 255, 255, 255)
TRANSPARENT: Final[Rgba] = (0, 0, 0, 0)

_HEX_COLOR: Final = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


class InvalidColorFormat(ValueError):
    """Raised when a color string is not six hex digits."""

    def __init__(self, text: object):
        super().__init__(f"Invalid color '{text}', expected #RRGGBB")
        self.text = text


def hex_to_color(text: str) -> Color:
    """Parse `#RRGGBB` (leading '#' optional, any case) into an (r, g, b) tuple.

    Raises:
        InvalidColorFormat: on wrong length or non-hex characters
    """
    if not isinstance(text, str):
        raise InvalidColorFormat(text)
    m = _HEX_COLOR.fullmatch(text)
    if m is None:
        raise InvalidColorFormat(text)
    r, g, b = (int(part, 16) for part in m.groups())
    return (r, g, b)


def color_to_hex(color: Color) -> str:
    r, g, b = color[:3]
    return f"#{r:02X}{g:02X}{b:02X}"


def to_rgba(color: Color, alpha: int = 255) -> Rgba:
    return (color[0], color[1], color[2], alpha)

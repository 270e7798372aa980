from dataclasses import dataclass, field
from pathlib import Path

from .flood_fill import DEFAULT_TOLERANCE
from .mandala_io import DEFAULT_SAVE_NAME


@dataclass
class PainterConfig:
    mandala: Path | None = None
    """Line art image to color. Starts with a blank canvas if not given"""

    canvas_width: int = 800
    canvas_height: int = 800

    tolerance: int = DEFAULT_TOLERANCE
    """Max per channel difference for the bucket fill to treat a pixel as the same color"""

    brush_size: int = 3
    color: str = "#FF6B6B"
    """Starting paint color, #RRGGBB"""

    palette_file: Path | None = None
    """yaml file with the color palette"""

    palette: list[str] = field(default_factory=list[str])

    script: Path | None = None
    """Run painter commands from this file without opening a window"""

    output: Path = Path(DEFAULT_SAVE_NAME)
    """Where 'save' writes the image"""

    full_screen: bool = False
    window_width: int = 1024
    window_height: int = 900

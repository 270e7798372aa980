from logging import getLogger
from pathlib import Path
from typing import Final

from PIL import Image, UnidentifiedImageError

from .colors import WHITE
from .draw import RasterBuffer

logger = getLogger(__name__)

DEFAULT_SAVE_NAME: Final = "my-mandala-coloring.png"
FIT_SCALE: Final = 0.9


class MandalaLoadError(RuntimeError):
    pass


def load_mandala(
    path: Path, width: int, height: int, scale: float = FIT_SCALE
) -> RasterBuffer:
    """Load a line art image onto a new white canvas of the given size.

    The image keeps its aspect ratio, is scaled to `scale` of the canvas and
    centered.

    Raises:
        MandalaLoadError: if the file is missing or not an image
    """
    try:
        with Image.open(path) as img:
            art = img.convert("RGBA")
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        logger.warning(f"Could not load {path}: {e}")
        raise MandalaLoadError(
            f"Error loading mandala '{path}'. Please check if the image file exists."
        ) from e

    fit = min(width / art.width, height / art.height) * scale
    size = (max(1, round(art.width * fit)), max(1, round(art.height * fit)))
    art = art.resize(size, Image.Resampling.LANCZOS)

    canvas = Image.new("RGBA", (width, height), WHITE)
    x = (width - size[0]) // 2
    y = (height - size[1]) // 2
    canvas.alpha_composite(art, (x, y))
    logger.info(f"Loaded {path} at {size[0]}x{size[1]}")
    return RasterBuffer.from_image(canvas)


def save_image(buffer: RasterBuffer, path: Path | None = None) -> Path:
    path = path or Path(DEFAULT_SAVE_NAME)
    buffer.to_image().save(path, format="PNG")
    logger.info(f"Saved {path}")
    return path

from pathlib import Path

import pytest
from PIL import Image

from mandala.draw import RasterBuffer
from mandala.mandala_io import DEFAULT_SAVE_NAME, MandalaLoadError, load_mandala, save_image


def test_load_scales_and_centers(tmp_path: Path):
    path = tmp_path / "black.png"
    Image.new("RGB", (50, 100), (0, 0, 0)).save(path)

    buffer = load_mandala(path, 200, 100)

    # Fits 90% of the height: 45x90, centered
    assert (buffer.width, buffer.height) == (200, 100)
    assert buffer.get_pixel(100, 50) == (0, 0, 0, 255)
    assert buffer.get_pixel(0, 0) == (255, 255, 255, 255)
    assert buffer.get_pixel(100, 2) == (255, 255, 255, 255)
    assert buffer.get_pixel(70, 50) == (255, 255, 255, 255)


def test_transparent_art_shows_white_background(tmp_path: Path):
    path = tmp_path / "clear.png"
    Image.new("RGBA", (10, 10), (0, 0, 0, 0)).save(path)

    buffer = load_mandala(path, 20, 20)

    assert buffer.get_pixel(10, 10) == (255, 255, 255, 255)


def test_load_missing_file(tmp_path: Path):
    with pytest.raises(MandalaLoadError, match="Error loading mandala"):
        load_mandala(tmp_path / "nope.png", 10, 10)


def test_load_not_an_image(tmp_path: Path):
    path = tmp_path / "notes.png"
    path.write_text("not a png")

    with pytest.raises(MandalaLoadError):
        load_mandala(path, 10, 10)


def test_save_image(tmp_path: Path):
    buffer = RasterBuffer(3, 3)
    buffer.set_pixel(1, 1, (10, 20, 30, 255))
    out = tmp_path / "painted.png"

    assert save_image(buffer, out) == out
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.getpixel((1, 1)) == (10, 20, 30, 255)


def test_save_image_default_name(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    assert save_image(RasterBuffer(1, 1)) == Path(DEFAULT_SAVE_NAME)
    assert (tmp_path / "my-mandala-coloring.png").exists()


def test_load_oversized_image(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "huge.png"
    Image.new("RGB", (20, 20), (0, 0, 0)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    with pytest.raises(MandalaLoadError):
        load_mandala(path, 10, 10)

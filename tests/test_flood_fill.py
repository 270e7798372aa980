import pytest

from mandala.colors import InvalidColorFormat
from mandala.draw import RasterBuffer
from mandala.flood_fill import DEFAULT_TOLERANCE, FloodFillEngine

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


def make_buffer(w: int, h: int, color=WHITE) -> RasterBuffer:
    buffer = RasterBuffer(w, h)
    buffer.clear(color)
    return buffer


def pixels(buffer: RasterBuffer) -> dict[tuple[int, int], tuple[int, int, int, int]]:
    return {
        (x, y): buffer.get_pixel(x, y)
        for y in range(buffer.height)
        for x in range(buffer.width)
    }


def test_default_tolerance():
    assert DEFAULT_TOLERANCE == 30
    assert FloodFillEngine().tolerance == 30


def test_fills_whole_buffer():
    buffer = make_buffer(4, 4)

    changed = FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0))

    assert changed
    assert all(p == RED for p in pixels(buffer).values())


def test_accepts_hex_color():
    buffer = make_buffer(3, 3)

    FloodFillEngine().fill(buffer, 1, 1, "#ff0000")

    assert all(p == RED for p in pixels(buffer).values())


def test_no_op_when_seed_already_has_fill_color():
    buffer = make_buffer(4, 4, RED)
    buffer.set_pixel(2, 2, (250, 0, 0, 255))
    before = buffer.get_image_data()

    changed = FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0))

    assert not changed
    assert buffer.get_image_data() == before


def test_same_rgb_with_partial_alpha_is_filled():
    # Fills are opaque, so a translucent seed of the same RGB is not "already filled"
    buffer = make_buffer(2, 2, (255, 0, 0, 200))

    assert FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0))
    # alpha 200 vs reference 200 matches, result is opaque
    assert all(p == RED for p in pixels(buffer).values())


def test_idempotent():
    buffer = make_buffer(6, 6)
    buffer.draw_line(3, 0, 3, 5, BLACK)
    engine = FloodFillEngine()

    engine.fill(buffer, 0, 0, "#00FF00")
    first = buffer.get_image_data()
    changed = engine.fill(buffer, 0, 0, "#00FF00")

    assert not changed
    assert buffer.get_image_data() == first


def test_wall_separates_regions():
    buffer = make_buffer(5, 3)
    buffer.draw_line(2, 0, 2, 2, BLACK)

    FloodFillEngine().fill(buffer, 0, 1, (255, 0, 0))

    for (x, y), p in pixels(buffer).items():
        if x < 2:
            assert p == RED
        elif x == 2:
            assert p == BLACK
        else:
            assert p == WHITE


def test_no_diagonal_propagation():
    # Two white pixels touching only at a corner
    buffer = make_buffer(2, 2, BLACK)
    buffer.set_pixel(0, 0, WHITE)
    buffer.set_pixel(1, 1, WHITE)

    FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0))

    assert buffer.get_pixel(0, 0) == RED
    assert buffer.get_pixel(1, 1) == WHITE
    assert buffer.get_pixel(1, 0) == BLACK
    assert buffer.get_pixel(0, 1) == BLACK


def test_enclosed_area():
    w = h = 5
    buffer = make_buffer(w, h)

    # 3x3 box border from (1,1) to (3,3)
    buffer.draw_line(1, 1, 3, 1, BLACK)
    buffer.draw_line(1, 3, 3, 3, BLACK)
    buffer.draw_line(1, 1, 1, 3, BLACK)
    buffer.draw_line(3, 1, 3, 3, BLACK)

    FloodFillEngine().fill(buffer, 2, 2, (0, 0, 255))

    assert buffer.get_pixel(2, 2) == (0, 0, 255, 255)
    for (x, y), p in pixels(buffer).items():
        if (x, y) == (2, 2):
            continue
        on_border = 1 <= x <= 3 and 1 <= y <= 3
        assert p == (BLACK if on_border else WHITE)


@pytest.mark.parametrize(("red", "filled"), [(130, True), (131, False), (70, True), (69, False)])
def test_tolerance_boundary(red: int, filled: bool):
    buffer = make_buffer(2, 1, (100, 0, 0, 255))
    buffer.set_pixel(1, 0, (red, 0, 0, 255))

    FloodFillEngine(tolerance=30).fill(buffer, 0, 0, (0, 0, 255))

    assert buffer.get_pixel(0, 0) == (0, 0, 255, 255)
    expected = (0, 0, 255, 255) if filled else (red, 0, 0, 255)
    assert buffer.get_pixel(1, 0) == expected


def test_alpha_uses_same_tolerance():
    buffer = make_buffer(3, 1, (255, 255, 255, 0))
    buffer.set_pixel(1, 0, (255, 255, 255, 30))
    buffer.set_pixel(2, 0, (255, 255, 255, 255))

    FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0))

    assert buffer.get_pixel(0, 0) == RED
    assert buffer.get_pixel(1, 0) == RED
    assert buffer.get_pixel(2, 0) == WHITE


def test_reference_color_does_not_drift():
    # Each step is within tolerance of its neighbour, but not of the seed
    buffer = make_buffer(5, 1)
    for x, value in enumerate([100, 120, 140, 160, 180]):
        buffer.set_pixel(x, 0, (value, value, value, 255))

    FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0))

    assert buffer.get_pixel(0, 0) == RED
    assert buffer.get_pixel(1, 0) == RED
    assert buffer.get_pixel(2, 0) == (140, 140, 140, 255)
    assert buffer.get_pixel(3, 0) == (160, 160, 160, 255)


def test_tolerance_override_per_call():
    buffer = make_buffer(2, 1)
    buffer.set_pixel(1, 0, (250, 250, 250, 255))
    engine = FloodFillEngine()

    engine.fill(buffer, 0, 0, (255, 0, 0), tolerance=0)

    assert buffer.get_pixel(0, 0) == RED
    assert buffer.get_pixel(1, 0) == (250, 250, 250, 255)


def test_negative_tolerance_rejected():
    with pytest.raises(ValueError):
        FloodFillEngine(tolerance=-1)
    with pytest.raises(ValueError):
        FloodFillEngine().fill(make_buffer(1, 1), 0, 0, (0, 0, 0), tolerance=-5)


@pytest.mark.parametrize(("x", "y"), [(-1, 0), (0, -1), (4, 0), (0, 4), (100, 100)])
def test_out_of_bounds_seed_is_ignored(x: int, y: int):
    buffer = make_buffer(4, 4)
    before = buffer.get_image_data()

    assert not FloodFillEngine().fill(buffer, x, y, "#000000")
    assert buffer.get_image_data() == before


def test_empty_buffer_is_ignored():
    buffer = RasterBuffer(0, 0)

    assert not FloodFillEngine().fill(buffer, 0, 0, "#000000")


@pytest.mark.parametrize("color", ["xyz123", "#12345", "", "#1234567"])
def test_invalid_color_leaves_buffer_untouched(color: str):
    buffer = make_buffer(3, 3)
    before = buffer.get_image_data()

    with pytest.raises(InvalidColorFormat):
        FloodFillEngine().fill(buffer, 0, 0, color)
    assert buffer.get_image_data() == before


def test_large_region_does_not_recurse():
    buffer = make_buffer(400, 400)

    FloodFillEngine().fill(buffer, 200, 200, (1, 2, 3))

    assert buffer.get_pixel(0, 0) == (1, 2, 3, 255)
    assert buffer.get_pixel(399, 399) == (1, 2, 3, 255)


def test_rgba_fill_color_is_written_opaque():
    buffer = make_buffer(2, 2)

    assert FloodFillEngine().fill(buffer, 0, 0, (255, 0, 0, 10))
    assert all(p == RED for p in pixels(buffer).values())

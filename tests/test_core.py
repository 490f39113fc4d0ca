"""
Tests for the core blending logic.

Run with: python -m pytest tests/test_core.py -v
"""

import struct
import sys
import zlib
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from PIL import Image

from blendmark.core import (
    BlendEngine, BlendParameters, Pixel, PixelGrid,
    Single, Tiled, AlphaChannel, ColorKey, NoTransparency,
    DimensionMismatch, ImageNotFound, InvalidParameter, UnsupportedFormat,
    blend, check_output_filename, load_image, save_image
)
from blendmark.core.placement import check_offset_bounds, resolve, resolve_grid
from blendmark.core.transparency import is_opaque_at, opacity_mask

RED = Pixel(255, 0, 0)
BLUE = Pixel(0, 0, 255)
BLACK = Pixel(0, 0, 0)


def create_test_image(width: int = 8, height: int = 6, alpha: bool = False) -> PixelGrid:
    """Create a small gradient grid, optionally with a varying alpha channel."""
    arr = np.zeros((height, width, 4 if alpha else 3), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            arr[y, x, :3] = [
                int(255 * x / width),
                int(255 * y / height),
                128
            ]
            if alpha:
                arr[y, x, 3] = 255 if (x + y) % 2 == 0 else 128
    return PixelGrid(arr)


# ===== Color blending =====

def test_blend_endpoints():
    a = Pixel(10, 200, 30)
    b = Pixel(250, 5, 99)
    assert blend(0, a, b) == b
    assert blend(100, a, b) == a


def test_blend_identical_colors():
    a = Pixel(17, 128, 254)
    for weight in (0, 1, 33, 50, 99, 100):
        assert blend(weight, a, a) == a


def test_blend_truncates():
    assert blend(50, RED, BLACK) == Pixel(127, 0, 0)
    assert blend(1, Pixel(255, 255, 255), BLACK) == Pixel(2, 2, 2)


def test_blend_output_is_opaque():
    assert blend(50, Pixel(0, 0, 0, 0), Pixel(0, 0, 0, 10)).a == 255


@pytest.mark.parametrize("weight", [-1, 101, 50.0, True, "50"])
def test_blend_rejects_bad_weight(weight):
    with pytest.raises(InvalidParameter):
        blend(weight, RED, BLACK)


# ===== Data model =====

def test_pixel_channel_range():
    with pytest.raises(InvalidParameter):
        Pixel(256, 0, 0)
    with pytest.raises(InvalidParameter):
        Pixel(0, 0, 0, -1)


def test_pixel_grid_is_read_only_copy():
    arr = np.zeros((2, 3, 3), dtype=np.uint8)
    grid = PixelGrid(arr)
    arr[0, 0] = [9, 9, 9]

    assert grid.pixel(0, 0) == Pixel(0, 0, 0)
    assert grid.size == (3, 2)
    with pytest.raises(ValueError):
        grid.data[0, 0, 0] = 1


def test_pixel_grid_shape_checks():
    with pytest.raises(UnsupportedFormat):
        PixelGrid(np.zeros((2, 2), dtype=np.uint8))
    with pytest.raises(UnsupportedFormat):
        PixelGrid(np.zeros((2, 2, 2), dtype=np.uint8))
    with pytest.raises(UnsupportedFormat):
        PixelGrid(np.zeros((0, 2, 3), dtype=np.uint8))
    with pytest.raises(InvalidParameter):
        PixelGrid([[[300, 0, 0]]])


def test_pixel_grid_alpha():
    rgb = PixelGrid.filled(2, 2, RED)
    rgba = PixelGrid.filled(2, 2, Pixel(1, 2, 3, 40), alpha=True)

    assert not rgb.has_alpha and rgb.bit_depth == 24
    assert rgb.pixel(1, 1).a == 255
    assert rgba.has_alpha and rgba.bit_depth == 32
    assert rgba.pixel(1, 1) == Pixel(1, 2, 3, 40)
    with pytest.raises(IndexError):
        rgb.pixel(2, 0)


def test_blend_parameters_validation():
    with pytest.raises(InvalidParameter):
        BlendParameters(opacity_weight=101)
    with pytest.raises(InvalidParameter):
        BlendParameters(opacity_weight=50, placement="grid")
    with pytest.raises(InvalidParameter):
        BlendParameters(opacity_weight=50, transparency=(1, 2, 3))
    with pytest.raises(InvalidParameter):
        ColorKey(0, 256, 0)

    params = BlendParameters(opacity_weight=50)
    assert params.placement == Tiled()
    assert params.transparency == NoTransparency()


@pytest.mark.parametrize("build", [
    lambda: Single(1.0, 1),
    lambda: Single(0, True),
    lambda: Pixel(1.5, 0, 0),
    lambda: Pixel(0, 0, 0, False),
    lambda: ColorKey(0, 255.0, 0),
])
def test_non_integer_values_rejected(build):
    with pytest.raises(InvalidParameter):
        build()


def test_numpy_integers_accepted():
    assert Single(np.int64(1), np.uint8(2)) == Single(1, 2)
    assert ColorKey(np.uint8(1), 2, 3).rgb == (1, 2, 3)


# ===== Placement =====

def test_resolve_single():
    placement = Single(1, 2)
    assert resolve(placement, (2, 2), 1, 2) == (0, 0)
    assert resolve(placement, (2, 2), 2, 3) == (1, 1)
    assert resolve(placement, (2, 2), 0, 2) is None
    assert resolve(placement, (2, 2), 3, 2) is None
    assert resolve(placement, (2, 2), 1, 4) is None


def test_resolve_tiled_always_in_bounds():
    size = (3, 2)
    for y in range(7):
        for x in range(10):
            coord = resolve(Tiled(), size, x, y)
            assert coord is not None
            wx, wy = coord
            assert 0 <= wx < 3 and 0 <= wy < 2
    assert resolve(Tiled(), size, 4, 5) == (1, 1)


def test_resolve_grid_matches_resolve():
    for placement in (Tiled(), Single(0, 0), Single(2, 1)):
        wx, wy, covered = resolve_grid(placement, (3, 2), (6, 4))
        for y in range(4):
            for x in range(6):
                coord = resolve(placement, (3, 2), x, y)
                assert covered[y, x] == (coord is not None)
                if coord is not None:
                    assert (wx[x], wy[y]) == coord


def test_check_offset_bounds():
    check_offset_bounds(Single(2, 2), (4, 4), (2, 2))
    check_offset_bounds(Tiled(), (4, 4), (2, 2))
    with pytest.raises(InvalidParameter):
        check_offset_bounds(Single(3, 0), (4, 4), (2, 2))
    with pytest.raises(InvalidParameter):
        check_offset_bounds(Single(0, -1), (4, 4), (2, 2))


# ===== Transparency =====

def test_alpha_channel_policy():
    assert is_opaque_at(AlphaChannel(), Pixel(1, 2, 3, 255))
    assert not is_opaque_at(AlphaChannel(), Pixel(1, 2, 3, 254))
    assert not is_opaque_at(AlphaChannel(), Pixel(1, 2, 3, 0))


def test_color_key_policy():
    key = ColorKey(0, 255, 0)
    assert not is_opaque_at(key, Pixel(0, 255, 0))
    assert is_opaque_at(key, Pixel(0, 254, 0))
    assert not is_opaque_at(key, Pixel(0, 254, 0, 200))


def test_no_transparency_policy():
    assert is_opaque_at(NoTransparency(), Pixel(0, 0, 0, 0))


def test_opacity_mask_matches_is_opaque_at():
    grid = create_test_image(5, 4, alpha=True)
    modes = (AlphaChannel(), ColorKey(*grid.pixel(2, 1).rgb), NoTransparency())
    for mode in modes:
        mask = opacity_mask(mode, grid.rgb, grid.alpha)
        for y in range(grid.height):
            for x in range(grid.width):
                assert mask[y, x] == is_opaque_at(mode, grid.pixel(x, y))


# ===== Engine =====

def test_single_placement_scenario():
    base = PixelGrid.filled(4, 4, RED)
    watermark = PixelGrid.filled(2, 2, BLUE)
    params = BlendParameters(50, Single(1, 1), NoTransparency())

    output = BlendEngine().run(base, watermark, params)

    assert output.size == (4, 4)
    assert output.pixel(1, 1) == Pixel(127, 0, 127)
    assert output.pixel(2, 2) == Pixel(127, 0, 127)
    assert output.pixel(0, 0) == Pixel(255, 0, 0)
    assert output.pixel(3, 3) == Pixel(255, 0, 0)
    assert output.pixel(3, 1) == Pixel(255, 0, 0)


def test_full_cover_reproduces_inputs():
    base = create_test_image(5, 4)
    watermark = PixelGrid(np.flip(create_test_image(5, 4).data, axis=1))
    engine = BlendEngine()

    top = engine.run(base, watermark, BlendParameters(100, Single(0, 0)))
    bottom = engine.run(base, watermark, BlendParameters(0, Single(0, 0)))

    assert top == watermark
    assert bottom == base


def test_tiled_covers_every_pixel():
    base = PixelGrid.filled(5, 3, BLACK)
    watermark = PixelGrid.filled(2, 2, Pixel(200, 100, 50))
    output = BlendEngine().run(base, watermark, BlendParameters(100, Tiled()))
    assert np.all(output.rgb == [200, 100, 50])


def test_color_key_leaves_base_unchanged():
    base = PixelGrid.filled(3, 3, RED)
    arr = np.full((3, 3, 3), [0, 0, 255], dtype=np.uint8)
    arr[1, 1] = [0, 255, 0]
    watermark = PixelGrid(arr)

    output = BlendEngine().run(base, watermark, BlendParameters(100, Single(0, 0), ColorKey(0, 255, 0)))

    assert output.pixel(1, 1) == RED
    assert output.pixel(0, 0) == BLUE


def test_alpha_channel_threshold():
    base = PixelGrid.filled(2, 1, RED)
    watermark = PixelGrid([[[0, 0, 255, 255], [0, 0, 255, 254]]])

    output = BlendEngine().run(base, watermark, BlendParameters(100, Tiled(), AlphaChannel()))
    assert output.pixel(0, 0) == BLUE
    assert output.pixel(1, 0) == RED

    ignored = BlendEngine().run(base, watermark, BlendParameters(100, Tiled(), NoTransparency()))
    assert ignored.pixel(1, 0) == BLUE


def test_output_is_rgb_and_inputs_untouched():
    base = create_test_image(6, 5, alpha=True)
    watermark = create_test_image(3, 2, alpha=True)
    base_before = base.data.copy()
    watermark_before = watermark.data.copy()

    output = BlendEngine().run(base, watermark, BlendParameters(40, Tiled(), AlphaChannel()))

    assert not output.has_alpha
    assert output.bit_depth == 24
    assert np.array_equal(base.data, base_before)
    assert np.array_equal(watermark.data, watermark_before)


def test_dimension_mismatch():
    base = PixelGrid.filled(2, 2, RED)
    watermark = PixelGrid.filled(3, 3, BLUE)
    with pytest.raises(DimensionMismatch):
        BlendEngine().run(base, watermark, BlendParameters(50, Tiled()))

    tall = PixelGrid.filled(2, 3, BLUE)
    with pytest.raises(DimensionMismatch):
        BlendEngine().run(PixelGrid.filled(4, 2, RED), tall, BlendParameters(50, Tiled()))


def test_engine_rejects_out_of_range_offset():
    base = PixelGrid.filled(4, 4, RED)
    watermark = PixelGrid.filled(2, 2, BLUE)
    with pytest.raises(InvalidParameter):
        BlendEngine().run(base, watermark, BlendParameters(50, Single(3, 0)))


def test_run_matches_blend_pixel():
    rng = np.random.default_rng(7)
    base = PixelGrid(rng.integers(0, 256, (5, 7, 4), dtype=np.uint8))
    wm_arr = rng.integers(0, 256, (2, 3, 4), dtype=np.uint8)
    wm_arr[..., 3] = np.where(rng.random((2, 3)) < 0.6, 255, wm_arr[..., 3])
    watermark = PixelGrid(wm_arr)
    key = ColorKey(*watermark.pixel(1, 0).rgb)
    engine = BlendEngine()

    for placement in (Tiled(), Single(0, 0), Single(4, 3), Single(2, 1)):
        for transparency in (AlphaChannel(), key, NoTransparency()):
            for weight in (0, 37, 100):
                params = BlendParameters(weight, placement, transparency)
                output = engine.run(base, watermark, params)
                for y in range(base.height):
                    for x in range(base.width):
                        expected = engine.blend_pixel(base, watermark, params, x, y)
                        assert output.pixel(x, y) == expected, (params, x, y)


# ===== Codec =====

def test_load_rgb_and_rgba(tmp_path):
    rgb_path = tmp_path / "base.png"
    rgba_path = tmp_path / "mark.png"
    Image.new("RGB", (4, 3), (10, 20, 30)).save(rgb_path)
    Image.new("RGBA", (2, 2), (1, 2, 3, 128)).save(rgba_path)

    base = load_image(rgb_path)
    mark = load_image(rgba_path, role="watermark")

    assert base.size == (4, 3) and not base.has_alpha
    assert base.pixel(3, 2) == Pixel(10, 20, 30)
    assert mark.has_alpha and mark.pixel(0, 0) == Pixel(1, 2, 3, 128)


def test_load_missing_file(tmp_path):
    with pytest.raises(ImageNotFound, match="doesn't exist"):
        load_image(tmp_path / "nope.png")


def test_load_rejects_unsupported_images(tmp_path):
    gray = tmp_path / "gray.png"
    palette = tmp_path / "palette.png"
    junk = tmp_path / "junk.png"
    Image.new("L", (2, 2)).save(gray)
    Image.new("P", (2, 2)).save(palette)
    junk.write_bytes(b"not an image")

    with pytest.raises(UnsupportedFormat, match="watermark color components isn't 3"):
        load_image(gray, role="watermark")
    with pytest.raises(UnsupportedFormat, match="isn't 24 or 32-bit"):
        load_image(palette)
    with pytest.raises(UnsupportedFormat):
        load_image(junk)


def write_png_16bit(path: Path, color_type: int, channels: int) -> Path:
    """Write a 1x1 PNG with 16 bits per channel (Pillow cannot save these)."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", 1, 1, 16, color_type, 0, 0, 0)
    scanline = b"\x00" + b"\x12\x34" * channels
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(scanline))
        + chunk(b"IEND", b"")
    )
    return path


def test_load_rejects_16_bit_channels(tmp_path):
    rgb48 = write_png_16bit(tmp_path / "rgb48.png", color_type=2, channels=3)
    rgba64 = write_png_16bit(tmp_path / "rgba64.png", color_type=6, channels=4)

    with pytest.raises(UnsupportedFormat, match="The watermark isn't 24 or 32-bit."):
        load_image(rgb48, role="watermark")
    with pytest.raises(UnsupportedFormat, match="isn't 24 or 32-bit"):
        load_image(rgba64)


def test_load_truncated_file(tmp_path):
    rng = np.random.default_rng(3)
    full = tmp_path / "full.png"
    truncated = tmp_path / "truncated.png"
    Image.fromarray(rng.integers(0, 256, (64, 64, 3), dtype=np.uint8)).save(full)
    truncated.write_bytes(full.read_bytes()[:200])

    with pytest.raises(UnsupportedFormat, match="not a readable image"):
        load_image(truncated)


def test_save_png_drops_alpha(tmp_path):
    grid = create_test_image(4, 4, alpha=True)
    path = save_image(grid, tmp_path / "out" / "result.png")

    with Image.open(path) as img:
        assert img.mode == "RGB"
        assert np.array_equal(np.asarray(img), grid.rgb)


def test_save_jpg(tmp_path):
    path = save_image(create_test_image(8, 8), tmp_path / "result.jpg")
    with Image.open(path) as img:
        assert img.format == "JPEG"
        assert img.size == (8, 8)


def test_output_filename_check(tmp_path):
    assert check_output_filename("a.png") == "png"
    assert check_output_filename("dir/a.jpg") == "jpg"
    for name in ("a.jpeg", "a.PNG", "a.gif", "png"):
        with pytest.raises(InvalidParameter):
            check_output_filename(name)
    with pytest.raises(InvalidParameter):
        save_image(create_test_image(), tmp_path / "a.bmp")
    assert not (tmp_path / "a.bmp").exists()

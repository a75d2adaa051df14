from __future__ import annotations

import os
import sys

import pytest
from PIL import Image
from rich.console import Console

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from base_classes import RenderError
from core.models import ResizeMode, ScalingFilter
from utils.image_utils import UPPER_HALF_BLOCK, HalfBlockImage, PillowRenderer, fit_image


def _save(tmp_path, name, size, color=(200, 10, 10), mode="RGB"):
    path = tmp_path / name
    Image.new(mode, size, color).save(path)
    return str(path)


def test_fit_mode_never_enlarges():
    small = Image.new("RGB", (10, 6))
    assert fit_image(small, 30, 15, resize_mode=ResizeMode.FIT).size == (10, 6)


def test_scale_mode_grows_to_fit_preserving_aspect():
    small = Image.new("RGB", (10, 5))
    assert fit_image(small, 30, 15, resize_mode=ResizeMode.SCALE).size == (30, 15)


def test_fit_mode_shrinks_large_images_into_the_pixel_box():
    wide = Image.new("RGB", (400, 100))
    out = fit_image(wide, 40, 10, ScalingFilter.LANCZOS, ResizeMode.FIT)
    assert out.size == (40, 10)
    assert out.width <= 40 and out.height <= 20


def test_crop_mode_fills_the_whole_area():
    tall = Image.new("RGB", (50, 300))
    assert fit_image(tall, 20, 10, ScalingFilter.NEAREST, ResizeMode.CROP).size == (20, 20)


def test_fit_image_rejects_empty_area():
    with pytest.raises(ValueError):
        fit_image(Image.new("RGB", (4, 4)), 0, 3)


def test_half_block_image_packs_two_rows_per_line():
    img = Image.new("RGB", (3, 5), (0, 0, 255))
    img.putpixel((0, 0), (255, 0, 0))
    rendered = HalfBlockImage(img)
    assert (rendered.width, rendered.height) == (3, 3)

    console = Console(width=20, color_system="truecolor", force_terminal=True)
    segments = [s for s in console.render(rendered) if s.text == UPPER_HALF_BLOCK]
    assert len(segments) == 9
    first = segments[0].style
    assert first.color.triplet.hex == "#ff0000"
    assert first.bgcolor.triplet.hex == "#0000ff"
    # The last line has no pixel row underneath
    assert segments[-1].style.bgcolor is None


def test_renderer_decodes_and_sizes(tmp_path):
    path = _save(tmp_path, "pic.png", (120, 120), mode="RGBA", color=(0, 255, 0, 128))
    renderer = PillowRenderer()
    rendered = renderer.render(path, 20, 10, ScalingFilter.BILINEAR, ResizeMode.FIT)
    assert rendered.pixel_size == (20, 20)
    assert rendered.height == 10


def test_renderer_caches_results(tmp_path):
    path = _save(tmp_path, "pic.png", (8, 8))
    renderer = PillowRenderer()
    first = renderer.render(path, 4, 2)
    assert renderer.render(path, 4, 2) is first
    os.remove(path)
    # Decoded image survives the file going away
    assert renderer.render(path, 8, 4).pixel_size == (8, 8)
    with pytest.raises(RenderError):
        PillowRenderer().render(path, 4, 2)


@pytest.mark.parametrize("size", [(1000, 4), (4, 1000), (5000, 1)])
def test_extreme_aspect_ratios_keep_at_least_one_pixel(size):
    out = fit_image(Image.new("RGB", size), 30, 15)
    assert out.width >= 1 and out.height >= 1
    assert out.width <= 30 and out.height <= 30


def test_renderer_handles_a_wide_banner(tmp_path):
    path = _save(tmp_path, "banner.png", (1000, 4))
    rendered = PillowRenderer().render(path, 30, 15)
    assert rendered.pixel_size == (30, 1)
    assert rendered.height == 1


def test_resize_failure_is_a_render_error(tmp_path, monkeypatch):
    import utils.image_utils as image_utils

    def broken_fit(*args, **kwargs):
        raise ValueError("height and width must be > 0")

    monkeypatch.setattr(image_utils, "fit_image", broken_fit)
    path = _save(tmp_path, "pic.png", (8, 8))
    with pytest.raises(RenderError) as ei:
        PillowRenderer().render(path, 4, 2)
    assert ei.value.message.startswith("could not resize image")


def test_missing_file_is_a_render_error(tmp_path):
    with pytest.raises(RenderError) as ei:
        PillowRenderer().render(str(tmp_path / "nope.png"), 10, 5)
    assert "not found" in ei.value.message
    assert ei.value.path.endswith("nope.png")


def test_undecodable_file_is_a_render_error(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(RenderError) as ei:
        PillowRenderer().render(str(path), 10, 5)
    assert "not a recognized image format" in ei.value.message


def test_bundled_sample_images_decode():
    assets = os.path.join(ROOT, "assets")
    renderer = PillowRenderer()
    for name in sorted(os.listdir(assets)):
        rendered = renderer.render(os.path.join(assets, name), 30, 15)
        assert rendered.width <= 30 and rendered.height <= 15

from __future__ import annotations

import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from base_classes import ImageRenderer, RenderError
from core.models import ColorRole, DisplaySettings, Palette, QuoteEntry, ResizeMode, ScalingFilter
from core.navigator import NavigatorState
from core.slide_builder import PLACEHOLDER_TEXT, SlideBuilder, resolve_image_path


class FakeRenderer(ImageRenderer):
    def __init__(self, missing=()):
        self.calls = []
        self.missing = set(missing)

    def render(self, path, width, height, scaling_filter, resize_mode):
        self.calls.append((path, width, height, scaling_filter, resize_mode))
        if os.path.basename(path) in self.missing:
            raise RenderError(path, "image file not found")
        return f"<image {os.path.basename(path)}>"


def _settings(tmp_path, **kwargs):
    kwargs.setdefault('assets_dir', str(tmp_path))
    return DisplaySettings(**kwargs)


def test_build_hands_configured_dimensions_to_the_renderer(tmp_path):
    renderer = FakeRenderer()
    settings = _settings(
        tmp_path,
        target_width=40,
        target_height=12,
        scaling_filter=ScalingFilter.NEAREST,
        resize_mode=ResizeMode.CROP,
    )
    builder = SlideBuilder(settings, renderer)
    state = NavigatorState((QuoteEntry(text="a", image="a.png"), QuoteEntry(text="b", image="b.png")), 1)

    slide = builder.build(state)

    assert renderer.calls == [(os.path.join(str(tmp_path), "b.png"), 40, 12, ScalingFilter.NEAREST, ResizeMode.CROP)]
    assert slide.image == "<image b.png>"
    assert slide.error is None
    assert slide.counter == "(2/2)"


def test_caption_includes_optional_fields_only_when_present(tmp_path):
    builder = SlideBuilder(_settings(tmp_path), FakeRenderer())
    full = QuoteEntry(
        text="諦めるな",
        image="x.png",
        romaji="Akirameru na",
        translation="Don't give up",
        anime="Show",
        character="Hero",
    )
    caption = builder.caption(full, 0, 3).plain
    assert "Anime: Show" in caption
    assert "Character: Hero" in caption
    assert "諦めるな" in caption
    assert "Akirameru na" in caption
    assert '"Don\'t give up"' in caption
    assert caption.endswith("(1/3)")

    bare = builder.caption(QuoteEntry(text="only text", image="x.png"), 2, 3).plain
    assert bare.splitlines() == ["only text", "", "(3/3)"]


def test_caption_uses_palette_colors(tmp_path):
    palette = Palette({ColorRole.ROMAJI: "#123456"})
    builder = SlideBuilder(_settings(tmp_path, palette=palette), FakeRenderer())
    caption = builder.caption(QuoteEntry(text="t", image="x.png", romaji="r"), 0, 1)
    romaji_spans = [span for span in caption.spans if caption.plain[span.start:span.end] == "r"]
    assert romaji_spans
    assert str(romaji_spans[0].style.color.triplet.hex) == "#123456"


def test_render_error_yields_placeholder_and_keeps_going(tmp_path):
    renderer = FakeRenderer(missing={"gone.png"})
    builder = SlideBuilder(_settings(tmp_path), renderer)
    state = NavigatorState((QuoteEntry(text="t", image="gone.png", source="q1"),))

    slide = builder.build(state)

    assert slide.image is None
    assert isinstance(slide.error, RenderError)
    placeholder = builder.placeholder(slide).plain
    assert PLACEHOLDER_TEXT in placeholder
    assert "image file not found" in placeholder
    assert "t" in slide.caption.plain


class _RecordingLogger:
    def __init__(self):
        self.events = []

    def render_event(self, kind, details, component='core.slides', severity='info'):
        self.events.append((kind, severity, details))


def test_render_errors_are_logged(tmp_path):
    logger = _RecordingLogger()
    builder = SlideBuilder(_settings(tmp_path), FakeRenderer(missing={"gone.png"}), logger=logger)
    builder.build(NavigatorState((QuoteEntry(text="t", image="gone.png", source="q1"),)))
    kind, severity, details = logger.events[-1]
    assert kind == 'render_error'
    assert severity == 'error'
    assert details['quote'] == 'q1'
    assert details['path'].endswith('gone.png')


def test_resolve_image_path_keeps_absolute_paths(tmp_path):
    absolute = str(tmp_path / "abs.png")
    assert resolve_image_path(QuoteEntry(text="t", image=absolute), "/elsewhere") == absolute
    assert resolve_image_path(QuoteEntry(text="t", image="rel.png"), "/assets") == os.path.join("/assets", "rel.png")


def test_wide_banner_image_builds_with_the_pillow_renderer(tmp_path):
    from PIL import Image
    from utils.image_utils import PillowRenderer

    Image.new("RGB", (1000, 4), (10, 20, 30)).save(tmp_path / "banner.png")
    builder = SlideBuilder(_settings(tmp_path), PillowRenderer())
    slide = builder.build(NavigatorState((QuoteEntry(text="t", image="banner.png"),)))
    assert slide.error is None
    assert slide.image is not None
    assert slide.image.width == 30

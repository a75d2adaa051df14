"""Pillow-backed image rendering for the terminal.

Images are decoded once per path, resized to the target cell area and drawn
with the upper half block character: each terminal cell shows two vertically
stacked pixels, the top one as foreground color and the bottom one as
background color.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError
from rich.color import Color
from rich.console import Console, ConsoleOptions, RenderResult
from rich.measure import Measurement
from rich.segment import Segment
from rich.style import Style

from base_classes import ImageRenderer, RenderError
from core.models import ResizeMode, ScalingFilter

UPPER_HALF_BLOCK = "▀"

RESAMPLING_FILTERS: Dict[ScalingFilter, Image.Resampling] = {
    ScalingFilter.NEAREST: Image.Resampling.NEAREST,
    ScalingFilter.BOX: Image.Resampling.BOX,
    ScalingFilter.BILINEAR: Image.Resampling.BILINEAR,
    ScalingFilter.HAMMING: Image.Resampling.HAMMING,
    ScalingFilter.BICUBIC: Image.Resampling.BICUBIC,
    # Pillow's bicubic kernel is the Catmull-Rom spline (a = -0.5)
    ScalingFilter.CATMULLROM: Image.Resampling.BICUBIC,
    ScalingFilter.LANCZOS: Image.Resampling.LANCZOS,
}


class HalfBlockImage:
    """Rich renderable for an RGB image, two pixel rows per line."""

    def __init__(self, image: Image.Image) -> None:
        if image.mode != "RGB":
            image = image.convert("RGB")
        self.pixel_size: Tuple[int, int] = image.size
        self.width = image.width
        self.height = (image.height + 1) // 2
        self._lines = self._build_lines(image)

    @staticmethod
    def _build_lines(image: Image.Image) -> List[List[Segment]]:
        pixels = image.load()
        width, height = image.size
        lines: List[List[Segment]] = []
        for y in range(0, height, 2):
            row: List[Segment] = []
            for x in range(width):
                top = pixels[x, y]
                bottom = pixels[x, y + 1] if y + 1 < height else None
                style = Style(
                    color=Color.from_rgb(*top),
                    bgcolor=Color.from_rgb(*bottom) if bottom is not None else None,
                )
                row.append(Segment(UPPER_HALF_BLOCK, style))
            lines.append(row)
        return lines

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        for row in self._lines:
            yield from row
            yield Segment.line()

    def __rich_measure__(self, console: Console, options: ConsoleOptions) -> Measurement:
        return Measurement(self.width, self.width)


def fit_image(
    image: Image.Image,
    width: int,
    height: int,
    scaling_filter: ScalingFilter = ScalingFilter.CATMULLROM,
    resize_mode: ResizeMode = ResizeMode.FIT,
) -> Image.Image:
    """
    Resize an image for a target area measured in terminal cells
    :param width: target width in cells (one pixel per cell)
    :param height: target height in cells (two pixels per cell)
    :return: the resized RGB image, never larger than width x (2 * height) pixels
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"target area must be positive, got {width}x{height}")
    box = (width, height * 2)
    method = RESAMPLING_FILTERS[ScalingFilter(scaling_filter)]
    mode = ResizeMode(resize_mode)

    if image.mode != "RGB":
        image = image.convert("RGB")

    if mode is ResizeMode.CROP:
        # Scale first, then crop overflow to fill the area without distortion.
        return ImageOps.fit(image, box, method, centering=(0.5, 0.5))
    if mode is ResizeMode.FIT and image.width <= box[0] and image.height <= box[1]:
        return image.copy()
    return image.resize(contain_size(image.size, box), method)


def contain_size(size: Tuple[int, int], box: Tuple[int, int]) -> Tuple[int, int]:
    """Largest aspect-preserving size inside ``box``; neither side drops below one pixel."""
    ratio = min(box[0] / size[0], box[1] / size[1])
    return (
        min(box[0], max(1, round(size[0] * ratio))),
        min(box[1], max(1, round(size[1] * ratio))),
    )


class PillowRenderer(ImageRenderer):
    """Decodes images with Pillow and caches both the decoded and the sized result."""

    def __init__(self, logger=None) -> None:
        self._logger = logger
        self._decoded: Dict[str, Image.Image] = {}
        self._rendered: Dict[Tuple[str, int, int, str, str], HalfBlockImage] = {}

    def load(self, path: str) -> Image.Image:
        cached = self._decoded.get(path)
        if cached is not None:
            return cached
        try:
            with Image.open(path) as img:
                img.load()
                decoded = img.convert("RGB")
        except FileNotFoundError:
            raise RenderError(path, "image file not found") from None
        except UnidentifiedImageError:
            raise RenderError(path, "not a recognized image format") from None
        except Image.DecompressionBombError as exc:
            raise RenderError(path, f"image is too large: {exc}") from exc
        except (OSError, ValueError) as exc:
            raise RenderError(path, f"could not decode image: {exc}") from exc
        self._decoded[path] = decoded
        if self._logger:
            self._logger.render_detail('image_decoded', {'path': path, 'size': list(decoded.size)})
        return decoded

    def render(
        self,
        path: str,
        width: int,
        height: int,
        scaling_filter: ScalingFilter = ScalingFilter.CATMULLROM,
        resize_mode: ResizeMode = ResizeMode.FIT,
    ) -> HalfBlockImage:
        key = (path, width, height, ScalingFilter(scaling_filter).value, ResizeMode(resize_mode).value)
        cached = self._rendered.get(key)
        if cached is not None:
            return cached
        source = self.load(path)
        try:
            image = fit_image(source, width, height, scaling_filter, resize_mode)
        except (OSError, ValueError) as exc:
            raise RenderError(path, f"could not resize image: {exc}") from exc
        rendered = HalfBlockImage(image)
        self._rendered[key] = rendered
        return rendered

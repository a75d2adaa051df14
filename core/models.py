"""Records produced by the configuration loader and consumed by the slideshow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from rich.text import Text

from base_classes import RenderError


class ScalingFilter(str, Enum):
    NEAREST = "nearest"
    BOX = "box"
    BILINEAR = "bilinear"
    HAMMING = "hamming"
    BICUBIC = "bicubic"
    CATMULLROM = "catmullrom"
    LANCZOS = "lanczos"


class ResizeMode(str, Enum):
    """How an image is fitted into the target cell area."""

    FIT = "fit"  # shrink to fit, never enlarge
    SCALE = "scale"  # grow or shrink to fit
    CROP = "crop"  # fill the area, cropping overflow


class ColorRole(str, Enum):
    ANIME = "anime"
    CHARACTER = "character"
    TEXT = "text"
    ROMAJI = "romaji"
    TRANSLATION = "translation"
    COUNT = "count"
    INSTRUCTIONS = "instructions"
    BORDER = "border"
    TITLE = "title"
    ERROR = "error"


DEFAULT_COLORS: Dict[ColorRole, str] = {
    ColorRole.ANIME: "#cdcd00",
    ColorRole.CHARACTER: "#00cdcd",
    ColorRole.TEXT: "#00cd00",
    ColorRole.ROMAJI: "#cd00cd",
    ColorRole.TRANSLATION: "#ffffff",
    ColorRole.COUNT: "#c0c0c0",
    ColorRole.INSTRUCTIONS: "#5c5cff",
    ColorRole.BORDER: "#ffffff",
    ColorRole.TITLE: "#ffffff",
    ColorRole.ERROR: "#cd0000",
}


@dataclass(frozen=True)
class Palette:
    """Role to '#rrggbb' table. Roles missing from ``colors`` use DEFAULT_COLORS."""

    colors: Mapping[ColorRole, str] = field(default_factory=dict)

    def get(self, role: ColorRole) -> str:
        return self.colors.get(role) or DEFAULT_COLORS[role]

    def as_dict(self) -> Dict[str, str]:
        return {role.value: self.get(role) for role in ColorRole}


@dataclass(frozen=True)
class QuoteEntry:
    text: str
    image: str
    romaji: Optional[str] = None
    translation: Optional[str] = None
    anime: Optional[str] = None
    character: Optional[str] = None
    source: str = ""


@dataclass(frozen=True)
class DisplaySettings:
    target_width: int = 30
    target_height: int = 15
    scaling_filter: ScalingFilter = ScalingFilter.CATMULLROM
    resize_mode: ResizeMode = ResizeMode.FIT
    palette: Palette = field(default_factory=Palette)
    show_instructions: bool = True
    title: str = "Anime Quotes"
    wrap: bool = False
    assets_dir: str = "."

    def summary(self) -> Dict[str, Any]:
        return {
            'target_width': self.target_width,
            'target_height': self.target_height,
            'scaling_filter': self.scaling_filter.value,
            'resize_mode': self.resize_mode.value,
            'show_instructions': self.show_instructions,
            'title': self.title,
            'wrap': self.wrap,
            'assets_dir': self.assets_dir,
            'colors': self.palette.as_dict(),
        }


@dataclass
class Slide:
    """One rendered position: the image renderable (or None) plus the caption."""

    entry: QuoteEntry
    index: int
    total: int
    image: Optional[Any]
    caption: Text
    error: Optional[RenderError] = None

    @property
    def counter(self) -> str:
        return f"({self.index + 1}/{self.total})"

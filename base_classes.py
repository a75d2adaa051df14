"""
Abstract base classes and shared errors for quote-slides components.

These classes define the interfaces that interaction modes and image renderers
must implement to plug into the slideshow.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional


class InteractionMode(ABC):
    """
    Abstract class for interaction handlers
    """

    @abstractmethod
    def start(self) -> int:
        pass


class ImageRenderer(ABC):
    """
    Abstract class for anything that turns an image file into a terminal renderable
    """

    @abstractmethod
    def render(self, path: str, width: int, height: int, scaling_filter: Any, resize_mode: Any) -> Any:
        pass


# --- Errors ----------------------------------------------------------------


class SlideshowError(Exception):
    """Base class for all quote-slides errors."""


class ConfigError(SlideshowError):
    def __init__(self, file: str, field: Optional[str], message: str):
        self.file = file
        self.field = field
        self.message = message
        where = f"{file}: {field}" if field else file
        super().__init__(f"{where}: {message}")


class RenderError(SlideshowError):
    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

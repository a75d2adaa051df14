"""Widget holding the current slide's image."""

from __future__ import annotations

from rich.console import RenderableType

from textual.widgets import Static

from core.models import DisplaySettings


class ImagePane(Static):
    """Fixed-size area sized from [DISPLAY] target_width / target_height."""

    def apply_settings(self, settings: DisplaySettings) -> None:
        self.styles.width = settings.target_width
        self.styles.height = settings.target_height

    def show_image(self, renderable: RenderableType) -> None:
        self.remove_class("missing")
        self.update(renderable)

    def show_placeholder(self, renderable: RenderableType) -> None:
        self.add_class("missing")
        self.update(renderable)

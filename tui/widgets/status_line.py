"""One-line status area for per-slide render errors."""

from __future__ import annotations

from typing import Optional

from rich.style import Style
from rich.text import Text

from textual.widgets import Static

from base_classes import RenderError


class StatusLine(Static):
    def __init__(self, *args, error_color: str = "#cd0000", **kwargs) -> None:
        super().__init__("", *args, **kwargs)
        self.error_color = error_color
        self.message: Optional[str] = None

    def show_error(self, error: RenderError) -> None:
        self.message = str(error)
        self.add_class("error")
        self.update(Text(self.message, style=Style(color=self.error_color), overflow="ellipsis", no_wrap=True))

    def clear(self) -> None:
        self.message = None
        self.remove_class("error")
        self.update("")

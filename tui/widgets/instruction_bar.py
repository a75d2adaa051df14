"""Key hints shown at the bottom of the slide frame."""

from __future__ import annotations

from typing import Iterable, Tuple

from rich.style import Style
from rich.text import Text

from textual.widgets import Static

DEFAULT_HINTS: Tuple[Tuple[str, str], ...] = (
    ("Previous", "<Left>"),
    ("Next", "<Right>"),
    ("Quit", "<Q>"),
)


class InstructionBar(Static):
    def __init__(self, *args, key_color: str = "#5c5cff", hints: Iterable[Tuple[str, str]] = DEFAULT_HINTS, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.key_color = key_color
        self.hints = tuple(hints)

    def on_mount(self) -> None:
        self.update(self.build_text())

    def build_text(self) -> Text:
        key_style = Style(color=self.key_color, bold=True)
        text = Text(justify="center")
        for label, key in self.hints:
            text.append(f" {label} ")
            text.append(key, style=key_style)
        text.append(" ")
        return text

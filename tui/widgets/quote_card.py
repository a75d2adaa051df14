"""Widget displaying the caption below the image."""

from __future__ import annotations

from rich.text import Text

from textual.widgets import Static


class QuoteCard(Static):
    """Centered quote text, transliteration, translation and counter."""

    def show_caption(self, caption: Text) -> None:
        caption = caption.copy()
        caption.justify = "center"
        self.update(caption)

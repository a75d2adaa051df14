"""Turns the navigator's current entry into a renderable slide."""

from __future__ import annotations

import os
from typing import List, Optional

from rich.style import Style
from rich.text import Text

from base_classes import ImageRenderer, RenderError
from core.models import ColorRole, DisplaySettings, QuoteEntry, Slide
from core.navigator import NavigatorState

PLACEHOLDER_TEXT = "Image not available"


def resolve_image_path(entry: QuoteEntry, assets_dir: str) -> str:
    path = os.path.expanduser(entry.image)
    if os.path.isabs(path):
        return path
    return os.path.join(assets_dir, path)


class SlideBuilder:
    """
    Render step of the slideshow.

    A failed image load never stops the slideshow: the slide carries the
    RenderError and ``image`` is None, and the view shows a placeholder.
    """

    def __init__(self, settings: DisplaySettings, renderer: ImageRenderer, logger=None) -> None:
        self.settings = settings
        self.renderer = renderer
        self._logger = logger

    def build(self, state: NavigatorState) -> Slide:
        entry = state.current
        image = None
        error: Optional[RenderError] = None
        path = resolve_image_path(entry, self.settings.assets_dir)
        try:
            image = self.renderer.render(
                path,
                self.settings.target_width,
                self.settings.target_height,
                self.settings.scaling_filter,
                self.settings.resize_mode,
            )
        except RenderError as exc:
            error = exc
            if self._logger:
                self._logger.render_event(
                    'render_error',
                    {'quote': entry.source, 'path': exc.path, 'message': exc.message},
                    severity='error',
                )
        else:
            if self._logger:
                self._logger.render_event('render', {'quote': entry.source, 'path': path, 'index': state.current_index})

        return Slide(
            entry=entry,
            index=state.current_index,
            total=state.total,
            image=image,
            caption=self.caption(entry, state.current_index, state.total),
            error=error,
        )

    def caption(self, entry: QuoteEntry, index: int, total: int) -> Text:
        palette = self.settings.palette

        def style(role: ColorRole, **attrs) -> Style:
            return Style(color=palette.get(role), **attrs)

        lines: List[Text] = []
        if entry.anime:
            lines.append(Text.assemble("Anime: ", (entry.anime, style(ColorRole.ANIME, bold=True))))
        if entry.character:
            lines.append(Text.assemble("Character: ", (entry.character, style(ColorRole.CHARACTER, bold=True))))
        if lines:
            lines.append(Text(""))

        lines.append(Text(entry.text, style=style(ColorRole.TEXT, bold=True)))
        if entry.romaji:
            lines.append(Text(entry.romaji, style=style(ColorRole.ROMAJI)))

        if entry.translation:
            lines.append(Text(""))
            lines.append(Text.assemble('"', (entry.translation, style(ColorRole.TRANSLATION, italic=True)), '"'))

        lines.append(Text(""))
        lines.append(Text(f"({index + 1}/{total})", style=style(ColorRole.COUNT)))
        return Text("\n").join(lines)

    def placeholder(self, slide: Slide) -> Text:
        message = Text(PLACEHOLDER_TEXT, style=Style(color=self.settings.palette.get(ColorRole.COUNT)))
        if slide.error is not None:
            message.append("\n")
            message.append(slide.error.message, style=Style(color=self.settings.palette.get(ColorRole.ERROR)))
        return message

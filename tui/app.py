"""Textual application for the quote-slides TUI."""

from __future__ import annotations

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.color import Color
from textual.containers import Vertical

from core.models import ColorRole, DisplaySettings, Slide
from core.navigator import NavigatorState, SlideNavigator
from core.slide_builder import SlideBuilder
from tui.widgets.image_pane import ImagePane
from tui.widgets.instruction_bar import InstructionBar
from tui.widgets.quote_card import QuoteCard
from tui.widgets.status_line import StatusLine


class QuoteSlidesApp(App[None]):
    """Single view: bordered frame with the image on top and the quote below."""

    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("right", "advance", "Next"),
        Binding("down", "advance", "Next", show=False),
        Binding("l", "advance", "Next", show=False),
        Binding("j", "advance", "Next", show=False),
        Binding("space", "advance", "Next", show=False),
        Binding("left", "retreat", "Previous"),
        Binding("up", "retreat", "Previous", show=False),
        Binding("h", "retreat", "Previous", show=False),
        Binding("k", "retreat", "Previous", show=False),
        Binding("home", "first", "First", show=False),
        Binding("end", "last", "Last", show=False),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("ctrl+q", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(self, navigator: SlideNavigator, builder: SlideBuilder, settings: DisplaySettings, logger=None) -> None:
        super().__init__()
        self.navigator = navigator
        self.builder = builder
        self.settings = settings
        self._event_logger = logger
        self.current_slide: Optional[Slide] = None

        self.frame: Optional[Vertical] = None
        self.image_pane: Optional[ImagePane] = None
        self.quote_card: Optional[QuoteCard] = None
        self.status_line: Optional[StatusLine] = None

    # ----- layout --------------------------------------------------
    def compose(self) -> ComposeResult:
        palette = self.settings.palette
        with Vertical(id="slide_frame") as frame:
            self.frame = frame
            self.image_pane = ImagePane(id="image_pane")
            yield self.image_pane
            self.quote_card = QuoteCard(id="quote_card")
            yield self.quote_card
        self.status_line = StatusLine(id="status_line", error_color=palette.get(ColorRole.ERROR))
        yield self.status_line
        if self.settings.show_instructions:
            yield InstructionBar(id="instruction_bar", key_color=palette.get(ColorRole.INSTRUCTIONS))

    def on_mount(self) -> None:
        palette = self.settings.palette
        if self.frame:
            self.frame.border_title = f" {self.settings.title} "
            self.frame.styles.border = ("heavy", Color.parse(palette.get(ColorRole.BORDER)))
            self.frame.styles.border_title_color = Color.parse(palette.get(ColorRole.TITLE))
        if self.image_pane:
            self.image_pane.apply_settings(self.settings)

        self.navigator.subscribe(self._on_navigate)
        self._show_slide(self.navigator.state)
        if self._event_logger:
            self._event_logger.tui_event('start', {'entries': self.navigator.total, 'wrap': self.navigator.wrap})

    # ----- rendering -------------------------------------------------
    def _on_navigate(self, state: NavigatorState) -> None:
        self._show_slide(state)

    def _show_slide(self, state: NavigatorState) -> None:
        slide = self.builder.build(state)
        self.current_slide = slide
        if self.image_pane:
            if slide.image is not None:
                self.image_pane.show_image(slide.image)
            else:
                self.image_pane.show_placeholder(self.builder.placeholder(slide))
        if self.quote_card:
            self.quote_card.show_caption(slide.caption)
        if self.status_line:
            if slide.error is not None:
                self.status_line.show_error(slide.error)
            else:
                self.status_line.clear()
        if self.frame:
            self.frame.border_subtitle = f" {slide.counter} "

    # ----- actions ---------------------------------------------------
    def action_advance(self) -> None:
        self.navigator.advance()

    def action_retreat(self) -> None:
        self.navigator.retreat()

    def action_first(self) -> None:
        self.navigator.first()

    def action_last(self) -> None:
        self.navigator.last()

    def action_quit(self) -> None:
        self.navigator.quit()
        if self._event_logger:
            self._event_logger.tui_event('stop', {'index': self.navigator.index})
        self.exit(return_code=0)

"""
TextualMode - TUI implementation of InteractionMode for quote-slides.

Wires the navigator, the slide builder and the image renderer together and
hands them to the Textual app. Textual owns the terminal for the lifetime of
``start()`` and restores it on every exit path.
"""

from typing import Sequence

from base_classes import InteractionMode
from core.models import DisplaySettings, QuoteEntry
from core.navigator import SlideNavigator
from core.slide_builder import SlideBuilder
from utils.image_utils import PillowRenderer


class TextualMode(InteractionMode):
    """
    TUI mode using Textual for quote-slides.
    """

    def __init__(self, entries: Sequence[QuoteEntry], settings: DisplaySettings, logger=None):
        """
        Initialize the TextualMode.

        Args:
            entries: The loaded quote entries, at least one
            settings: Display settings shared read-only with the render step
            logger: Optional LoggingHandler
        """
        self.settings = settings
        self.logger = logger
        self.navigator = SlideNavigator(entries, wrap=settings.wrap, logger=logger)
        self.builder = SlideBuilder(settings, PillowRenderer(logger=logger), logger=logger)

    def create_app(self):
        from .app import QuoteSlidesApp
        return QuoteSlidesApp(self.navigator, self.builder, self.settings, logger=self.logger)

    def start(self) -> int:
        """
        Run the Textual app until the user quits; returns the process exit code.
        """
        app = self.create_app()
        try:
            app.run()
        except Exception as e:
            if self.logger:
                self.logger.error('tui.mode', e)
            raise
        return app.return_code or 0

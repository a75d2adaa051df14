"""Cursor over the fixed, ordered list of quote entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from core.models import QuoteEntry


@dataclass
class NavigatorState:
    entries: Tuple[QuoteEntry, ...]
    current_index: int = 0

    def __post_init__(self) -> None:
        self.entries = tuple(self.entries)
        if not self.entries:
            raise ValueError("navigator needs at least one entry")
        if not 0 <= self.current_index < len(self.entries):
            raise ValueError(f"current_index {self.current_index} outside [0, {len(self.entries) - 1}]")

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def current(self) -> QuoteEntry:
        return self.entries[self.current_index]


Listener = Callable[[NavigatorState], None]


class SlideNavigator:
    """
    Moves the cursor over the entries and notifies listeners on every change.

    Navigation clamps at both ends unless ``wrap`` is set, in which case
    it cycles. Calls that leave the index where it was notify nobody.
    """

    def __init__(self, entries: Sequence[QuoteEntry], *, wrap: bool = False, logger=None) -> None:
        self.state = NavigatorState(tuple(entries))
        self.wrap = wrap
        self.quit_requested = False
        self._listeners: List[Listener] = []
        self._logger = logger

    @property
    def current(self) -> QuoteEntry:
        return self.state.current

    @property
    def index(self) -> int:
        return self.state.current_index

    @property
    def total(self) -> int:
        return self.state.total

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def advance(self) -> bool:
        last = self.total - 1
        if self.wrap:
            target = (self.index + 1) % self.total
        else:
            target = min(self.index + 1, last)
        return self._move_to(target, 'advance')

    def retreat(self) -> bool:
        if self.wrap:
            target = (self.index - 1) % self.total
        else:
            target = max(self.index - 1, 0)
        return self._move_to(target, 'retreat')

    def first(self) -> bool:
        return self._move_to(0, 'first')

    def last(self) -> bool:
        return self._move_to(self.total - 1, 'last')

    def quit(self) -> None:
        self.quit_requested = True
        if self._logger:
            self._logger.navigation_event('quit', {'index': self.index})

    def _move_to(self, target: int, reason: str) -> bool:
        previous = self.index
        if target == previous:
            return False
        self.state.current_index = target
        if self._logger:
            self._logger.navigation_event(reason, {'from': previous, 'to': target, 'total': self.total})
        for listener in list(self._listeners):
            listener(self.state)
        return True

"""Keystroke debouncing for search input."""

from __future__ import annotations

import logging
from typing import Callable

from voucherview.shared.constants import QueryDefaults
from voucherview.shared.protocols import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class SearchDebouncer:
    """Collapse bursts of search keystrokes into one query.

    Every ``input`` re-arms a single-slot timer; only the value present when
    the timer fires is queried. ``confirm`` skips the wait and clearing the
    input reverts immediately.

    Args:
        scheduler: Timer facility of the running event loop.
        on_query: Called with the raw query value when a query should run.
        on_clear: Called when the input became empty.
        delay: Quiet period in seconds.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_query: Callable[[str], None],
        on_clear: Callable[[], None],
        delay: float = QueryDefaults.DEBOUNCE_DELAY,
    ) -> None:
        self.scheduler = scheduler
        self.on_query = on_query
        self.on_clear = on_clear
        self.delay = delay
        self._handle: TimerHandle | None = None
        self._value = ""

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def input(self, value: str) -> None:
        """Handle one keystroke worth of input."""
        self.cancel()
        if not value.strip():
            self.on_clear()
            return
        self._value = value
        self._handle = self.scheduler.call_later(self.delay, self._fire)

    def confirm(self, value: str) -> None:
        """Run the query for ``value`` now, dropping any pending timer."""
        self.cancel()
        if not value.strip():
            self.on_clear()
            return
        self.on_query(value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        logger.debug("Debounce elapsed, querying %r", self._value)
        self.on_query(self._value)

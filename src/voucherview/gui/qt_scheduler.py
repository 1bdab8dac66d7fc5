"""Qt timer based scheduler."""

from __future__ import annotations

import asyncio
from typing import Callable

from PySide6.QtCore import QObject, QTimer

from voucherview.core.scheduling import AsyncioScheduler


class QtTimerHandle:
    """Cancellable single-shot QTimer.

    The timer deletes itself once it has fired or been cancelled.
    """

    def __init__(self, timer: QTimer) -> None:
        self._timer = timer
        self._finished = False
        timer.timeout.connect(self._finish)

    def _finish(self) -> None:
        self._finished = True
        self._timer.deleteLater()

    def cancel(self) -> None:
        if self._finished:
            return
        self._timer.stop()
        self._finish()

    @property
    def active(self) -> bool:
        return not self._finished and self._timer.isActive()


class QtScheduler(AsyncioScheduler):
    """Timers on the Qt event loop, background tasks on the asyncio loop.

    Under ``QtAsyncio`` both run on the same thread, so debounce timers and
    query tasks interleave without locking.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, parent: QObject | None = None) -> None:
        super().__init__(loop)
        self._parent = parent

    def call_later(self, delay: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        handle = QtTimerHandle(timer)
        timer.start(int(delay * 1000))
        return handle

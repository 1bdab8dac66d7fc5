"""
Pytest configuration and shared fixtures for VoucherView tests.

Provides controllable fakes for the injected collaborators: a manual clock,
a scheduler whose timers fire on demand, an in-memory rendering surface and
a message sink that records what the user would see.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from typing import Any, Callable

import pytest

# Qt must not need a display in CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from voucherview.core.scheduling import AsyncioScheduler  # noqa: E402
from voucherview.services import InMemoryCollectionSource, MemoryDurableStore  # noqa: E402


class FakeClock:
    """Manually advanced time source in seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.fired = True
        self.callback()


class FakeScheduler(AsyncioScheduler):
    """Timers fire only when the test says so; tasks run on the real loop."""

    def __init__(self) -> None:
        super().__init__()
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:  # type: ignore[override]
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_pending(self) -> None:
        for timer in self.pending:
            timer.fire()


class MemorySurface:
    """Rendering surface that keeps mounted items as plain dicts.

    Scroll offsets are clamped like a real scroll container and every
    change notifies the registered listeners synchronously.
    """

    def __init__(self, viewport_height: float = 600.0) -> None:
        self._scroll_top = 0.0
        self._viewport_height = viewport_height
        self.content_height = 0.0
        self.block_offset = 0.0
        self.items: list[dict[str, Any]] = []
        self.created = 0
        self.scroll_listeners: list[Callable[[], None]] = []
        self.resize_listeners: list[Callable[[], None]] = []

    @property
    def scroll_top(self) -> float:
        return self._scroll_top

    def set_scroll_top(self, value: float) -> None:
        max_scroll = max(0.0, self.content_height - self._viewport_height)
        self._scroll_top = min(max(0.0, value), max_scroll)
        for listener in list(self.scroll_listeners):
            listener()

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    def resize(self, height: float) -> None:
        self._viewport_height = height
        for listener in list(self.resize_listeners):
            listener()

    def set_content_height(self, height: float) -> None:
        self.content_height = height

    def set_block_offset(self, offset: float) -> None:
        self.block_offset = offset

    def create_item(self, index: int, height: float) -> dict[str, Any]:
        item: dict[str, Any] = {"index": index, "height": height, "text": None}
        self.items.append(item)
        self.created += 1
        return item

    def set_item_text(self, item: dict[str, Any], text: str) -> None:
        item["text"] = text

    def clear_items(self) -> None:
        self.items = []

    @property
    def rendered_indices(self) -> list[int]:
        return [item["index"] for item in self.items]

    def add_scroll_listener(self, listener: Callable[[], None]) -> None:
        self.scroll_listeners.append(listener)

    def remove_scroll_listener(self, listener: Callable[[], None]) -> None:
        self.scroll_listeners.remove(listener)

    def add_resize_listener(self, listener: Callable[[], None]) -> None:
        self.resize_listeners.append(listener)

    def remove_resize_listener(self, listener: Callable[[], None]) -> None:
        self.resize_listeners.remove(listener)


class RecordingSink:
    """MessageSink that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, bool]] = []

    def show(self, message: str, is_error: bool = False) -> None:
        self.messages.append((message, is_error))

    @property
    def last(self) -> tuple[str, bool] | None:
        return self.messages[-1] if self.messages else None


def make_documents(count: int, start: int = 0) -> list[dict[str, Any]]:
    """Raw camelCase voucher documents as the remote store sends them."""
    return [
        {
            "id": f"doc-{i}",
            "voucherNumber": f"V-{i:04d}",
            "customerName": f"Customer {i}",
            "phoneModel": "Galaxy A52" if i % 2 else "iPhone 12",
            "phoneColor": "Black",
            "amount": 1000 * i,
            "date": "2024-05-01",
            "technicianName": "Ko Kyaw" if i % 2 else "Mg Mg",
            "takenByCustomer": False,
        }
        for i in range(start, start + count)
    ]


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Generator[None, None, None]:
    """CLI commands reconfigure the package logger; undo that for caplog."""
    yield
    package_logger = logging.getLogger("voucherview")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def surface() -> MemorySurface:
    return MemorySurface()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def durable() -> MemoryDurableStore:
    return MemoryDurableStore()


@pytest.fixture
def documents() -> list[dict[str, Any]]:
    return make_documents(20)


@pytest.fixture
def source(documents: list[dict[str, Any]]) -> InMemoryCollectionSource:
    return InMemoryCollectionSource({"vouchers": documents})


@pytest.fixture
def document_factory() -> Callable[..., list[dict[str, Any]]]:
    return make_documents


@pytest.fixture
def surface_factory() -> Callable[..., MemorySurface]:
    return MemorySurface

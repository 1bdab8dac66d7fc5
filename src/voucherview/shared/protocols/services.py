"""Collaborator protocols for dependency inversion.

The cache, the query engine and the viewport renderer only ever talk to
their collaborators through these interfaces. Concrete implementations are
injected by the orchestrating layer.
"""

from __future__ import annotations

from collections.abc import Coroutine, Mapping
from typing import Any, Callable, Protocol

RawDocument = dict[str, Any]
Listener = Callable[[], None]


class RemoteCollectionSource(Protocol):
    """Protocol for the remote document store.

    Example:
        >>> source: RemoteCollectionSource = InMemoryCollectionSource()
        >>> documents = await source.fetch_all("vouchers")
    """

    async def fetch_all(self, collection_id: str) -> list[RawDocument]:
        """Fetch every document of a collection in store order.

        Raises:
            RemoteSourceError: On network or permission failures
        """

    async def fetch_filtered(
        self,
        collection_id: str,
        predicate: Mapping[str, Any],
    ) -> list[RawDocument]:
        """Fetch documents whose fields equal every value in ``predicate``.

        Raises:
            RemoteSourceError: On network or permission failures
        """


class RecordMutationApi(Protocol):
    """Protocol for create/update/delete against the remote store."""

    async def create_record(self, collection_id: str, data: Mapping[str, Any]) -> str:
        """Create a document and return its identifier."""

    async def update_record(
        self,
        collection_id: str,
        record_id: str,
        patch: Mapping[str, Any],
    ) -> None:
        """Merge ``patch`` into an existing document."""

    async def delete_record(self, collection_id: str, record_id: str) -> None:
        """Delete a document."""


class DurableStore(Protocol):
    """Durable key-value backing store for the cache mirror.

    Implementations may raise ``DurableStoreError`` (or ``OSError``) from any
    method; the cache store treats every failure as non-fatal.
    """

    def put(self, key: str, blob: bytes) -> None: ...

    def get(self, key: str) -> bytes | None: ...

    def remove(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class RenderingSurface(Protocol):
    """Scrollable container the viewport renderer draws into.

    The surface owns a spacer sized to the full content height and a block
    of mounted items positioned with a single vertical offset.
    """

    @property
    def scroll_top(self) -> float: ...

    def set_scroll_top(self, value: float) -> None: ...

    @property
    def viewport_height(self) -> float: ...

    def set_content_height(self, height: float) -> None: ...

    def set_block_offset(self, offset: float) -> None: ...

    def create_item(self, index: int, height: float) -> Any:
        """Mount a fresh, empty item at the end of the rendered block."""

    def clear_items(self) -> None:
        """Unmount every rendered item."""

    def set_item_text(self, item: Any, text: str) -> None:
        """Plain-text content, used when no item renderer is supplied."""

    def add_scroll_listener(self, listener: Listener) -> None: ...

    def remove_scroll_listener(self, listener: Listener) -> None: ...


class ResizeNotifier(Protocol):
    """Source of container resize notifications."""

    def add_resize_listener(self, listener: Listener) -> None: ...

    def remove_resize_listener(self, listener: Listener) -> None: ...


class MessageSink(Protocol):
    """Where the orchestrating layer reports user-facing status."""

    def show(self, message: str, is_error: bool = False) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Single-threaded timer facility (event loop or GUI loop)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class TaskScheduler(Scheduler, Protocol):
    """Scheduler that can also run coroutines in the background."""

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> Any: ...

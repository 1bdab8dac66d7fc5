"""Composition helpers.

Build the cache, query engine, renderer and controller from one Settings
instance. Everything is constructed explicitly; nothing is global.
"""

from __future__ import annotations

from voucherview.config import Settings
from voucherview.core.query import QueryEngine
from voucherview.core.viewport import ItemRenderer, ViewportRenderer
from voucherview.services import CacheStore, FileDurableStore
from voucherview.shared.protocols import (
    DurableStore,
    MessageSink,
    RecordMutationApi,
    RemoteCollectionSource,
    RenderingSurface,
    ResizeNotifier,
    TaskScheduler,
)

from .controller import RecordListController


def build_cache_store(settings: Settings, durable: DurableStore | None = None) -> CacheStore:
    """Cache store with a file mirror when ``cache.durable_dir`` is configured."""
    if durable is None and settings.cache.durable_dir:
        durable = FileDurableStore(settings.cache.durable_dir)
    return CacheStore(settings.cache, durable=durable)


def build_controller(
    settings: Settings,
    source: RemoteCollectionSource,
    surface: RenderingSurface,
    messages: MessageSink,
    scheduler: TaskScheduler,
    *,
    mutations: RecordMutationApi | None = None,
    cache: CacheStore | None = None,
    render_item: ItemRenderer | None = None,
    resize_notifier: ResizeNotifier | None = None,
) -> RecordListController:
    """Wire a controller for ``surface``.

    Raises:
        ConfigurationError: If the surface or viewport geometry is invalid.
    """
    if cache is None:
        cache = build_cache_store(settings)
    engine = QueryEngine(cache, source, settings.query)
    renderer = ViewportRenderer(
        surface,
        render_item=render_item,
        item_height=settings.viewport.item_height,
        buffer_size=settings.viewport.buffer_size,
        resize_notifier=resize_notifier,
    )
    return RecordListController(
        engine,
        renderer,
        messages,
        scheduler,
        mutations=mutations,
        debounce_delay=settings.query.debounce_delay,
    )

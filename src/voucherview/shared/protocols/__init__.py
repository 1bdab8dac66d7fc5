"""Protocol interfaces for injected collaborators."""

from .services import (
    DurableStore,
    Listener,
    MessageSink,
    RawDocument,
    RecordMutationApi,
    RemoteCollectionSource,
    RenderingSurface,
    ResizeNotifier,
    Scheduler,
    TaskScheduler,
    TimerHandle,
)

__all__ = [
    "DurableStore",
    "Listener",
    "MessageSink",
    "RawDocument",
    "RecordMutationApi",
    "RemoteCollectionSource",
    "RenderingSurface",
    "ResizeNotifier",
    "Scheduler",
    "TaskScheduler",
    "TimerHandle",
]

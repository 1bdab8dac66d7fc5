"""PySide6 adapter for the record list."""

from .app import run_gui
from .qt_scheduler import QtScheduler, QtTimerHandle
from .record_list_view import RecordListView, StatusSink
from .scroll_surface import QtScrollSurface

__all__ = [
    "QtScheduler",
    "QtScrollSurface",
    "QtTimerHandle",
    "RecordListView",
    "StatusSink",
    "run_gui",
]

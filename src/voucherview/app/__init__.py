"""Application orchestration layer."""

from .controller import ActiveList, ListMode, RecordListController
from .factory import build_cache_store, build_controller

__all__ = [
    "ActiveList",
    "ListMode",
    "RecordListController",
    "build_cache_store",
    "build_controller",
]

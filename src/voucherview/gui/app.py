"""
GUI Application Entry Point

Runs the record list window on the Qt event loop with QtAsyncio providing
the asyncio loop, so cache loads and searches run as ordinary tasks.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from voucherview.app import build_controller
from voucherview.config import Settings
from voucherview.services import JsonFileCollectionSource
from voucherview.shared.constants import CLIDefaults

from .qt_scheduler import QtScheduler
from .record_list_view import RecordListView

logger = logging.getLogger(__name__)


def run_gui(settings: Settings, records_file: Path) -> int:
    """Show the record list for ``records_file`` until the window closes.

    Returns:
        Process exit code
    """
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(settings.app.name)
    app.setApplicationVersion(settings.app.version)

    view = RecordListView()
    view.resize(480, 720)
    view.show()

    async def _start() -> None:
        scheduler = QtScheduler(asyncio.get_running_loop(), parent=view)
        source = JsonFileCollectionSource({settings.query.collection_id: records_file})
        controller = build_controller(
            settings,
            source,
            view.surface,
            view.messages,
            scheduler,
        )
        view.bind(controller)
        await controller.load()

    logger.info("Starting GUI for %s", records_file)
    QtAsyncio.run(_start(), keep_running=True, quit_qapp=True)
    return CLIDefaults.EXIT_SUCCESS

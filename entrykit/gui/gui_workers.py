"""
gui_workers.py - GUI Worker Threads

Provides background execution of long tasks to avoid blocking UI
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QThread, Signal, QObject

from ..core import RenamePlan, execute_rename, load_source


class ScanWorker(QThread):
    """Listing load worker thread (directory scan or JSON listing)"""

    # Signals
    progress = Signal(str)          # Progress message
    finished = Signal(list)         # Complete, returns record list
    error = Signal(str)             # Error message

    def __init__(self, source: Path, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.source = source

    def run(self):
        try:
            self.progress.emit(f"Loading {self.source}...")
            records = load_source(self.source)
            self.finished.emit(records)
        except Exception as e:
            self.error.emit(str(e))


class RenameWorker(QThread):
    """Rename execution worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # RenameResult
    error = Signal(str)                 # Error message

    def __init__(
        self,
        directory: Path,
        plan: RenamePlan,
        dry_run: bool = False,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.directory = directory
        self.plan = plan
        self.dry_run = dry_run

    def run(self):
        try:
            def progress_callback(current: int, total: int, msg: str):
                self.progress.emit(current, total, msg)

            result = execute_rename(
                self.directory,
                self.plan,
                dry_run=self.dry_run,
                progress_callback=progress_callback,
            )

            self.finished.emit(result)
        except Exception as e:
            self.error.emit(str(e))

"""
gui_mainwindow.py - GUI Main Window

Contains two tabs sharing one listing session:
1. Entries (filter, sort, select)
2. Rename (rule editor with live preview)
"""

from pathlib import Path
from typing import Optional, List

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QTabWidget, QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox,
    QTableWidget, QTableWidgetItem, QProgressBar,
    QFileDialog, QMessageBox, QHeaderView, QGroupBox,
)
from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtGui import QColor

from ..core import (
    CaseTransform, EngineOptions, EntrySession, NamePreference, Record,
    RenameForm, RenamePlan, RenameResult, RenameScope, SortDirection, SortKey,
    format_relative,
)
from .gui_workers import ScanWorker, RenameWorker

COLUMN_KEYS = [SortKey.NAME, SortKey.SIZE, SortKey.MODIFIED, SortKey.REASON]
COLUMN_LABELS = ["Name", "Size", "Modified", "Reason"]

PREFERENCE_LABELS = {
    NamePreference.ROMAJI: "Romaji",
    NamePreference.NATIVE: "Native",
    NamePreference.ENGLISH: "English",
}

ERROR_STYLE = "QLineEdit { border: 1px solid #d32f2f; }"


class EntriesTab(QWidget):
    """Listing Tab: load, filter, sort and select entries"""

    selection_changed = Signal()
    loaded = Signal(object)     # source Path

    def __init__(self, session: EntrySession, parent=None):
        super().__init__(parent)
        self.session = session
        self.source: Optional[Path] = None
        self.scan_worker: Optional[ScanWorker] = None

        # Debounce filter input
        self.filter_timer = QTimer(self)
        self.filter_timer.setSingleShot(True)
        self.filter_timer.setInterval(session.options.debounce_ms)
        self.filter_timer.timeout.connect(self._apply_filter)

        self._init_ui()
        self.session.add_filter_listener(self._refresh_table)

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Source settings group
        source_group = QGroupBox("Source")
        source_layout = QGridLayout(source_group)

        source_layout.addWidget(QLabel("Directory:"), 0, 0)
        self.dir_edit = QLineEdit()
        self.dir_edit.setPlaceholderText("Select a directory or a JSON listing...")
        source_layout.addWidget(self.dir_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        source_layout.addWidget(self.browse_btn, 0, 2)

        self.load_btn = QPushButton("Load")
        self.load_btn.clicked.connect(self._do_load)
        source_layout.addWidget(self.load_btn, 1, 0, 1, 3)

        layout.addWidget(source_group)

        # Filter row
        filter_layout = QHBoxLayout()
        filter_layout.addWidget(QLabel("Filter:"))
        self.filter_edit = QLineEdit()
        self.filter_edit.setPlaceholderText("Title, AniList id/URL or TMDB URL")
        self.filter_edit.setClearButtonEnabled(True)
        self.filter_edit.textChanged.connect(lambda _: self.filter_timer.start())
        filter_layout.addWidget(self.filter_edit, 1)

        filter_layout.addWidget(QLabel("Titles:"))
        self.pref_combo = QComboBox()
        for pref, label in PREFERENCE_LABELS.items():
            self.pref_combo.addItem(label, pref)
        self.pref_combo.setCurrentIndex(list(PREFERENCE_LABELS).index(self.session.state.preference))
        self.pref_combo.currentIndexChanged.connect(self._on_preference_changed)
        filter_layout.addWidget(self.pref_combo)
        layout.addLayout(filter_layout)

        # Listing table
        self.table = QTableWidget()
        self.table.setColumnCount(len(COLUMN_LABELS))
        self.table.setHorizontalHeaderLabels(COLUMN_LABELS)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        for col in range(1, len(COLUMN_LABELS)):
            header.setSectionResizeMode(col, QHeaderView.ResizeMode.ResizeToContents)
        header.setSortIndicatorShown(True)
        header.setSectionsClickable(True)
        header.sectionClicked.connect(self._on_header_clicked)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.table, 1)

        # Selection buttons
        select_layout = QHBoxLayout()
        self.select_all_btn = QPushButton("Select Visible")
        self.select_all_btn.clicked.connect(self._select_all)
        select_layout.addWidget(self.select_all_btn)
        self.select_none_btn = QPushButton("Select None")
        self.select_none_btn.clicked.connect(self._select_none)
        select_layout.addWidget(self.select_none_btn)
        select_layout.addStretch()
        layout.addLayout(select_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Directory")
        if directory:
            self.dir_edit.setText(directory)

    def _do_load(self):
        """Load the listing in the background"""
        text = self.dir_edit.text().strip()
        if not text:
            QMessageBox.warning(self, "Warning", "Please select a directory first")
            return

        path = Path(text)
        if not path.exists():
            QMessageBox.warning(self, "Warning", f"Path does not exist: {text}")
            return
        self.reload(path)

    def reload(self, path: Path):
        """Reload the listing from path"""
        self.load_btn.setEnabled(False)
        self.load_btn.setText("Loading...")

        self.scan_worker = ScanWorker(path)
        self.scan_worker.progress.connect(self.status_label.setText)
        self.scan_worker.finished.connect(lambda records: self._on_load_finished(path, records))
        self.scan_worker.error.connect(self._on_load_error)
        self.scan_worker.start()

    def _on_load_finished(self, path: Path, records: List[Record]):
        """Load complete"""
        self.load_btn.setEnabled(True)
        self.load_btn.setText("Load")
        self.source = path

        self.session.load(records)
        query = self.filter_edit.text()
        if query:
            self.session.on_query_changed(query)
        else:
            self._refresh_table()

        self.loaded.emit(path)
        self.selection_changed.emit()

    @Slot(str)
    def _on_load_error(self, error: str):
        """Load error"""
        self.load_btn.setEnabled(True)
        self.load_btn.setText("Load")
        QMessageBox.critical(self, "Error", f"Load failed: {error}")

    def _apply_filter(self):
        self.session.on_query_changed(self.filter_edit.text())
        self.selection_changed.emit()

    @Slot(int)
    def _on_header_clicked(self, column: int):
        self.session.on_header_clicked(COLUMN_KEYS[column])
        self._refresh_table()

    @Slot(int)
    def _on_preference_changed(self, index: int):
        self.session.on_preference_changed(self.pref_combo.itemData(index))
        self._refresh_table()

    def _refresh_table(self):
        """Rebuild rows in display order; hidden records stay in the table as hidden rows"""
        state = self.session.state
        selected = set(self.session.selected_names())

        self.table.blockSignals(True)
        self.table.setRowCount(len(self.session.scored))
        for i, scored in enumerate(self.session.scored):
            r = scored.record
            name_item = QTableWidgetItem(r.display_name(state.preference))
            name_item.setData(Qt.ItemDataRole.UserRole, r.primary_name)
            name_item.setFlags(name_item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            name_item.setCheckState(
                Qt.CheckState.Checked if r.primary_name in selected else Qt.CheckState.Unchecked
            )
            if r.display_name(state.preference) != r.primary_name:
                name_item.setToolTip(r.primary_name)
            self.table.setItem(i, 0, name_item)

            size_item = QTableWidgetItem(f"{r.size / 1024:.1f} KB")
            size_item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            self.table.setItem(i, 1, size_item)

            modified_item = QTableWidgetItem(format_relative(r.modified_at))
            if r.modified_at is not None:
                modified_item.setToolTip(r.modified_at.isoformat())
            self.table.setItem(i, 2, modified_item)

            self.table.setItem(i, 3, QTableWidgetItem("" if r.reason is None else str(r.reason)))
            self.table.setRowHidden(i, not scored.visible)
        self.table.blockSignals(False)

        order = (Qt.SortOrder.AscendingOrder if state.direction == SortDirection.ASCENDING
                 else Qt.SortOrder.DescendingOrder)
        self.table.horizontalHeader().setSortIndicator(COLUMN_KEYS.index(state.sort_key), order)

        visible = len(self.session.visible)
        self.status_label.setText(f"Showing {visible}/{len(self.session.scored)} entries")

    @Slot(QTableWidgetItem)
    def _on_item_changed(self, item: QTableWidgetItem):
        if item.column() != 0:
            return
        name = item.data(Qt.ItemDataRole.UserRole)
        self.session.select([name], item.checkState() == Qt.CheckState.Checked)
        self.selection_changed.emit()

    def _select_all(self):
        self.session.select_all_visible()
        self._refresh_table()
        self.selection_changed.emit()

    def _select_none(self):
        self.session.clear_selection()
        self._refresh_table()
        self.selection_changed.emit()


class RenameTab(QWidget):
    """Rename Tab: edit a rule and preview it live against the selection"""

    renamed = Signal()

    def __init__(self, session: EntrySession, parent=None):
        super().__init__(parent)
        self.session = session
        self.directory: Optional[Path] = None
        self.rename_worker: Optional[RenameWorker] = None

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Rule settings group
        rule_group = QGroupBox("Rename Rule")
        rule_layout = QGridLayout(rule_group)

        rule_layout.addWidget(QLabel("Find:"), 0, 0)
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Text or pattern to find (leave empty to only change case)")
        rule_layout.addWidget(self.search_edit, 0, 1, 1, 3)

        rule_layout.addWidget(QLabel("Replace with:"), 1, 0)
        self.replace_edit = QLineEdit()
        self.replace_edit.setPlaceholderText("Replacement (leave empty to delete)")
        rule_layout.addWidget(self.replace_edit, 1, 1, 1, 3)

        options_layout = QHBoxLayout()
        self.regex_check = QCheckBox("Regular Expression")
        self.all_check = QCheckBox("Replace All")
        self.case_check = QCheckBox("Case Sensitive")
        options_layout.addWidget(self.regex_check)
        options_layout.addWidget(self.all_check)
        options_layout.addWidget(self.case_check)
        options_layout.addStretch()
        rule_layout.addLayout(options_layout, 2, 0, 1, 4)

        rule_layout.addWidget(QLabel("Apply to:"), 3, 0)
        self.scope_combo = QComboBox()
        self.scope_combo.addItem("Whole name", RenameScope.WHOLE)
        self.scope_combo.addItem("Base name", RenameScope.BASE)
        self.scope_combo.addItem("Extension", RenameScope.EXTENSION)
        rule_layout.addWidget(self.scope_combo, 3, 1)

        rule_layout.addWidget(QLabel("Case:"), 3, 2)
        self.case_combo = QComboBox()
        self.case_combo.addItem("Unchanged", CaseTransform.NONE)
        self.case_combo.addItem("lowercase", CaseTransform.LOWER)
        self.case_combo.addItem("UPPERCASE", CaseTransform.UPPER)
        rule_layout.addWidget(self.case_combo, 3, 3)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("QLabel { color: #d32f2f; }")
        self.error_label.setVisible(False)
        rule_layout.addWidget(self.error_label, 4, 0, 1, 4)

        layout.addWidget(rule_group)

        # Every edit regenerates the preview
        self.search_edit.textChanged.connect(self.update_preview)
        self.replace_edit.textChanged.connect(self.update_preview)
        self.regex_check.toggled.connect(self.update_preview)
        self.all_check.toggled.connect(self.update_preview)
        self.case_check.toggled.connect(self.update_preview)
        self.scope_combo.currentIndexChanged.connect(self.update_preview)
        self.case_combo.currentIndexChanged.connect(self.update_preview)

        # Preview table
        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Original Name", "New Name", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.execute_btn = QPushButton("Execute Rename")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def set_directory(self, source: Path):
        """Renaming is only possible when the listing is a real directory"""
        self.directory = source if source.is_dir() else None
        self.update_preview()

    def _form(self) -> RenameForm:
        return RenameForm(
            search=self.search_edit.text(),
            replacement=self.replace_edit.text(),
            is_regex=self.regex_check.isChecked(),
            match_all=self.all_check.isChecked(),
            case_sensitive=self.case_check.isChecked(),
            scope=self.scope_combo.currentData(),
            case_transform=self.case_combo.currentData(),
        )

    def update_preview(self, *_):
        """Recompile the rule; an invalid pattern keeps the previous preview"""
        plan = self.session.on_rule_edited(self._form())

        error = self.session.pattern_error
        if error is not None:
            target = self.replace_edit if error.field == "replacement" else self.search_edit
            target.setStyleSheet(ERROR_STYLE)
            self.error_label.setText(str(error))
            self.error_label.setVisible(True)
        else:
            self.search_edit.setStyleSheet("")
            self.replace_edit.setStyleSheet("")
            self.error_label.setVisible(False)

        self._update_table(plan)

    def _update_table(self, plan: Optional[RenamePlan]):
        entries = plan.entries if plan else []
        self.table.setRowCount(len(entries))
        for i, entry in enumerate(entries):
            self.table.setItem(i, 0, QTableWidgetItem(entry.original))
            self.table.setItem(i, 1, QTableWidgetItem(entry.renamed))
            if entry.changed:
                status_item = QTableWidgetItem("Will Rename")
                status_item.setForeground(QColor(0, 150, 0))
            else:
                status_item = QTableWidgetItem("No Change")
                status_item.setForeground(QColor(150, 150, 150))
            self.table.setItem(i, 2, status_item)

        if plan is None:
            self.status_label.setText("Select entries to preview a rename")
            self.execute_btn.setEnabled(False)
            return

        status = f"Will perform {plan.total_count} rename operations"
        if plan.warnings:
            status += f" ({len(plan.warnings)} warnings)"
            self.status_label.setToolTip("\n".join(plan.warnings))
        else:
            self.status_label.setToolTip("")
        if self.directory is None:
            status += " - load a directory to execute"
        self.status_label.setText(status)

        self.execute_btn.setEnabled(
            bool(plan.changes) and self.directory is not None and self.session.pattern_error is None
        )

    def _do_execute(self):
        """Execute rename"""
        plan = self.session.plan
        if not plan or not plan.changes or self.directory is None:
            return

        msg = f"Are you sure you want to execute {plan.total_count} rename operations?"
        if plan.warnings:
            msg += "\n\nWarnings:\n" + "\n".join(f"  {w}" for w in plan.warnings[:10])
        msg += "\n\nThis action cannot be undone!"

        # Confirm
        reply = QMessageBox.question(
            self, "Confirm", msg,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        self.execute_btn.setEnabled(False)
        self.execute_btn.setText("Executing...")
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, plan.total_count * 2)

        # Start execution thread
        self.rename_worker = RenameWorker(self.directory, plan)
        self.rename_worker.progress.connect(self._on_rename_progress)
        self.rename_worker.finished.connect(self._on_rename_finished)
        self.rename_worker.error.connect(self._on_rename_error)
        self.rename_worker.start()

    @Slot(int, int, str)
    def _on_rename_progress(self, current: int, total: int, msg: str):
        """Execution progress update"""
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    @Slot(object)
    def _on_rename_finished(self, result: RenameResult):
        """Execution complete"""
        self.execute_btn.setText("Execute Rename")
        self.progress_bar.setVisible(False)

        # Display results
        msg = f"Rename complete!\n\nSuccess: {result.success_count}\nFailed: {result.failed_count}"
        if result.failed_count > 0:
            msg += "\n\nFailure Details:\n"
            for entry, error in result.failed[:5]:
                msg += f"  {entry.original}: {error}\n"
            if len(result.failed) > 5:
                msg += f"  ... and {len(result.failed) - 5} more failures"

        QMessageBox.information(self, "Complete", msg)
        self.renamed.emit()

    @Slot(str)
    def _on_rename_error(self, error: str):
        """Execution error"""
        self.execute_btn.setEnabled(True)
        self.execute_btn.setText("Execute Rename")
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Execution failed: {error}")


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self, options: Optional[EngineOptions] = None):
        super().__init__()
        self.setWindowTitle("Entry Kit")
        self.setMinimumSize(900, 600)

        self.session = EntrySession(options or EngineOptions.from_env())

        # Create central widget
        central = QWidget()
        self.setCentralWidget(central)

        layout = QVBoxLayout(central)

        # Create tabs
        self.tabs = QTabWidget()
        self.entries_tab = EntriesTab(self.session)
        self.rename_tab = RenameTab(self.session)

        self.tabs.addTab(self.entries_tab, "Entries")
        self.tabs.addTab(self.rename_tab, "Rename")

        layout.addWidget(self.tabs)

        self.entries_tab.loaded.connect(self._on_loaded)
        self.entries_tab.selection_changed.connect(self.rename_tab.update_preview)
        self.rename_tab.renamed.connect(self._on_renamed)

        # Status bar
        self.statusBar().showMessage("Ready")

    @Slot(object)
    def _on_loaded(self, source: Path):
        self.rename_tab.set_directory(source)
        self.statusBar().showMessage(f"Loaded {len(self.session.records)} entries from {source}")

    @Slot()
    def _on_renamed(self):
        if self.entries_tab.source is not None:
            self.entries_tab.reload(self.entries_tab.source)

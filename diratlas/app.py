from __future__ import annotations

import os
import sys
from typing import Optional, List

from PySide6.QtCore import Qt, QThread, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QLabel, QFileDialog, QTreeWidget, QTreeWidgetItem, QSplitter, QListWidget,
    QMessageBox, QTableWidget, QTableWidgetItem, QHeaderView, QAbstractItemView,
)

from .config import ScanConfig
from .drives import list_root_directories
from .manifest import write_manifest
from .models import DirectoryNode, ManifestRecord, MANIFEST_COLUMNS
from .scanner import scan_paths
from .tree import build_directory_tree
from .utils import format_bytes

APP_NAME = "DirAtlas"
PICKER_TREE_DEPTH = 4
PREVIEW_SAMPLE_CHARS = 120

# -------------------- Style --------------------
DARK_QSS = r"""
* { font-family: "Segoe UI"; font-size: 12px; }

QMainWindow {
    background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
        stop:0 #0b0e14, stop:0.6 #0f1220, stop:1 #0b1020);
}

QWidget { color: #dbe6ff; }

QListWidget, QTreeWidget, QTableWidget {
    background: #121826;
    border: 1px solid #25314a;
    border-radius: 10px;
    padding: 6px;
    selection-background-color: rgba(47, 107, 255, 0.40);
    selection-color: #ffffff;
}

QPushButton {
    background: #16203a;
    border: 1px solid #2a3a5a;
    border-radius: 12px;
    padding: 8px 12px;
    color: #e7efff;
}
QPushButton:hover { background: #1a2a4c; border-color: #3a5aa8; }
QPushButton:disabled { background: #141a28; color: #6a7894; border-color: #1d2433; }

QHeaderView::section {
    background: #0e1320;
    color: #9fb6ea;
    padding: 7px 8px;
    border: none;
    border-right: 1px solid #1e2a40;
}

QTableWidget { gridline-color: #1e2a40; alternate-background-color: #0f1526; }

QSplitter::handle { background: #0f1526; }
"""


# -------------------- Worker threads --------------------
class TreeThread(QThread):
    done = Signal(object)   # DirectoryNode
    error = Signal(str)

    def __init__(self, path: str, max_depth: int = PICKER_TREE_DEPTH):
        super().__init__()
        self.path = path
        self.max_depth = max_depth

    def run(self):
        try:
            self.done.emit(build_directory_tree(self.path, self.max_depth))
        except Exception as e:
            self.error.emit(str(e))


class ManifestThread(QThread):
    progress = Signal(int)       # records so far
    done = Signal(list, object)  # records, manifest size in bytes
    error = Signal(str)

    def __init__(self, paths: List[str], out_path: str):
        super().__init__()
        self.paths = paths
        self.out_path = out_path

    def run(self):
        try:
            config = ScanConfig(directories=tuple(self.paths))
            records: List[ManifestRecord] = []
            for rec in scan_paths(config.directories, config):
                records.append(rec)
                self.progress.emit(len(records))
            size = write_manifest(records, self.out_path)
            self.done.emit(records, size)
        except Exception as e:
            self.error.emit(str(e))


# -------------------- Main window --------------------
class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} - directory manifest")
        self.resize(1200, 800)

        self.tree_thread: Optional[TreeThread] = None
        self.manifest_thread: Optional[ManifestThread] = None

        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        title = QLabel(APP_NAME)
        tf = QFont(); tf.setPointSize(16); tf.setBold(True)
        title.setFont(tf)
        root.addWidget(title)

        splitter = QSplitter(Qt.Horizontal)
        splitter.setHandleWidth(10)
        splitter.setChildrenCollapsible(False)
        root.addWidget(splitter, 1)

        # left: roots + tree
        left = QWidget()
        left_l = QVBoxLayout(left)
        left_l.setContentsMargins(0, 0, 0, 0)
        left_l.addWidget(QLabel("Roots"))
        self.roots = QListWidget()
        self.roots.itemSelectionChanged.connect(self.on_root_select)
        left_l.addWidget(self.roots, 1)

        btn_browse = QPushButton("Browse…")
        btn_browse.clicked.connect(self.pick_folder)
        left_l.addWidget(btn_browse)

        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Directory"])
        self.tree.setUniformRowHeights(True)
        self.tree.itemDoubleClicked.connect(lambda *_: self.add_selected())
        left_l.addWidget(self.tree, 3)
        splitter.addWidget(left)

        # right: selected directories + preview
        right = QWidget()
        right_l = QVBoxLayout(right)
        right_l.setContentsMargins(0, 0, 0, 0)
        right_l.addWidget(QLabel("Selected directories"))
        self.selected = QListWidget()
        right_l.addWidget(self.selected, 1)

        btn_row = QHBoxLayout()
        btn_add = QPushButton("＋ Add")
        btn_remove = QPushButton("✕ Remove")
        self.btn_generate = QPushButton("▶ Generate manifest")
        btn_add.clicked.connect(self.add_selected)
        btn_remove.clicked.connect(self.remove_selected)
        self.btn_generate.clicked.connect(self.start_manifest)
        btn_row.addWidget(btn_add)
        btn_row.addWidget(btn_remove)
        btn_row.addStretch(1)
        btn_row.addWidget(self.btn_generate)
        right_l.addLayout(btn_row)

        self.preview = QTableWidget(0, len(MANIFEST_COLUMNS))
        self.preview.setHorizontalHeaderLabels(list(MANIFEST_COLUMNS))
        self._init_table(self.preview)
        right_l.addWidget(self.preview, 3)
        splitter.addWidget(right)
        splitter.setSizes([420, 780])

        self.refresh_roots()
        self.statusBar().showMessage("Ready.")

    def _init_table(self, t: QTableWidget):
        t.verticalHeader().setVisible(False)
        t.setShowGrid(False)
        t.setAlternatingRowColors(True)
        t.setEditTriggers(QAbstractItemView.NoEditTriggers)
        t.setSelectionBehavior(QAbstractItemView.SelectRows)
        t.horizontalHeader().setSectionResizeMode(QHeaderView.Interactive)

    # ---------- Source selection
    def refresh_roots(self):
        self.roots.clear()
        for p in list_root_directories():
            self.roots.addItem(p)

    def pick_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Choose directory", os.path.expanduser("~"))
        if path:
            self.load_tree(path)

    def on_root_select(self):
        items = self.roots.selectedItems()
        if items:
            self.load_tree(items[0].text())

    def load_tree(self, path: str):
        self.tree.clear()
        self.statusBar().showMessage(f"Reading {path}…")
        self.tree_thread = TreeThread(path)
        self.tree_thread.done.connect(self.populate_tree)
        self.tree_thread.error.connect(lambda msg: QMessageBox.warning(self, "Directory", msg))
        self.tree_thread.start()

    def populate_tree(self, node: DirectoryNode):
        self.tree.setUpdatesEnabled(False)
        self.tree.clear()

        def add(parent_item: Optional[QTreeWidgetItem], n: DirectoryNode):
            it = QTreeWidgetItem([n.name])
            it.setData(0, Qt.UserRole, n.path)
            it.setToolTip(0, n.path)
            if parent_item is None:
                self.tree.addTopLevelItem(it)
            else:
                parent_item.addChild(it)
            for c in n.children:
                add(it, c)

        add(None, node)
        self.tree.expandToDepth(0)
        self.tree.setCurrentItem(self.tree.topLevelItem(0))
        self.tree.setUpdatesEnabled(True)
        self.statusBar().showMessage(node.path)

    def add_selected(self):
        items = self.tree.selectedItems()
        if not items:
            return
        path = items[0].data(0, Qt.UserRole)
        existing = [self.selected.item(i).text() for i in range(self.selected.count())]
        if path and path not in existing:
            self.selected.addItem(path)

    def remove_selected(self):
        for it in self.selected.selectedItems():
            self.selected.takeItem(self.selected.row(it))

    # ---------- Manifest
    def start_manifest(self):
        paths = [self.selected.item(i).text() for i in range(self.selected.count())]
        if not paths:
            QMessageBox.warning(self, "Directories", "Add at least one directory.")
            return
        out, _ = QFileDialog.getSaveFileName(self, "Save manifest", os.path.expanduser("~/manifest.csv"), "CSV (*.csv)")
        if not out:
            return
        self.btn_generate.setEnabled(False)
        self.preview.setRowCount(0)
        self.manifest_thread = ManifestThread(paths, out)
        self.manifest_thread.progress.connect(lambda n: self.statusBar().showMessage(f"Scanning… {n} files"))
        self.manifest_thread.done.connect(self.on_manifest_done)
        self.manifest_thread.error.connect(self.on_manifest_error)
        self.manifest_thread.start()

    def on_manifest_done(self, records: List[ManifestRecord], size):
        self.btn_generate.setEnabled(True)
        self.preview.setRowCount(0)
        for rec in records:
            r = self.preview.rowCount()
            self.preview.insertRow(r)
            for c, value in enumerate(rec.as_row()):
                text = str(value)
                if MANIFEST_COLUMNS[c] == "contentSample":
                    text = text[:PREVIEW_SAMPLE_CHARS].replace("\n", " ")
                self.preview.setItem(r, c, QTableWidgetItem(text))
        self.statusBar().showMessage(f"{len(records)} files, manifest {format_bytes(int(size))}")

    def on_manifest_error(self, msg: str):
        self.btn_generate.setEnabled(True)
        QMessageBox.critical(self, "Manifest", msg)
        self.statusBar().showMessage("Error.")


def run() -> int:
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setStyleSheet(DARK_QSS)
    w = MainWindow()
    w.show()
    return app.exec()

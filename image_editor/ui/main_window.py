from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from PySide6.QtCore import QSize, QTimer
from PySide6.QtGui import QAction, QDragEnterEvent, QDropEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)
import qtawesome as qta

from ..core.document import SUPPORTED_EXTENSIONS, Document, LoadError, SaveError
from ..core.editor import DocumentEditor
from ..core.operations import Operation, Redo, Undo
from ..core.settings import AppSettings
from ..core.transforms import TransformError
from .controllers.operation_controls import OperationControls
from .views.image_canvas import ImageCanvas

FILE_FILTER = "Bilder (*.png *.jpg *.jpeg *.webp *.bmp *.tiff *.tif *.gif)"


class MainWindow(QMainWindow):
    """
    Application shell around :class:`DocumentEditor`: widgets submit
    operations, a timer ticks the editor once per frame and the canvas redraws
    whenever the editor publishes a new document.
    """

    def __init__(self, settings: AppSettings, initial_path: Path | None = None) -> None:
        super().__init__()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings
        self.editor = DocumentEditor(settings, on_change=self._on_document_changed)
        self._initial_path = initial_path

        self.setWindowTitle("Image Editor")
        self.resize(1100, 760)
        self.setAcceptDrops(True)

        self._create_actions()
        self._create_menus()
        self._create_ui()

        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(settings.ui.tick_interval_ms)
        self.tick_timer.timeout.connect(self._on_tick)
        self.tick_timer.start()

        self._update_history_actions()
        if self._initial_path:
            QTimer.singleShot(0, lambda: self.open_path(self._initial_path))

    # --- UI creation helpers -------------------------------------------------
    def _create_actions(self) -> None:
        self.open_action = QAction("Bild öffnen …", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self.open_image_dialog)

        self.save_action = QAction("Ausgabe speichern", self)
        self.save_action.setShortcut("Ctrl+S")
        self.save_action.triggered.connect(self.save_output)

        self.save_as_action = QAction("Speichern unter …", self)
        self.save_as_action.setShortcut("Ctrl+Shift+S")
        self.save_as_action.triggered.connect(self.save_as_dialog)

        self.undo_action = QAction("Rückgängig", self)
        self.undo_action.setShortcut("Ctrl+Z")
        self.undo_action.triggered.connect(lambda: self.submit(Undo()))

        self.redo_action = QAction("Wiederholen", self)
        self.redo_action.setShortcut("Ctrl+Shift+Z")
        self.redo_action.triggered.connect(lambda: self.submit(Redo()))

        self.exit_action = QAction("Beenden", self)
        self.exit_action.setShortcut("Ctrl+Q")
        self.exit_action.triggered.connect(self.close)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&Datei")
        file_menu.addAction(self.open_action)
        file_menu.addAction(self.save_action)
        file_menu.addAction(self.save_as_action)
        file_menu.addSeparator()
        file_menu.addAction(self.exit_action)

        edit_menu = self.menuBar().addMenu("&Bearbeiten")
        edit_menu.addAction(self.undo_action)
        edit_menu.addAction(self.redo_action)

    def _create_ui(self) -> None:
        content = QWidget()
        root_layout = QHBoxLayout(content)
        root_layout.setContentsMargins(8, 8, 8, 8)
        root_layout.setSpacing(12)

        self.canvas = ImageCanvas()
        root_layout.addWidget(self.canvas, stretch=3)

        side = QWidget()
        side_layout = QVBoxLayout(side)
        side_layout.setContentsMargins(0, 0, 0, 0)

        history_row = QHBoxLayout()
        self.open_btn = self._icon_button("mdi6.folder-open", "Bild öffnen (Ctrl+O)", self.open_image_dialog)
        self.undo_btn = self._icon_button("mdi6.undo", "Rückgängig (Ctrl+Z)", lambda: self.submit(Undo()))
        self.redo_btn = self._icon_button("mdi6.redo", "Wiederholen (Ctrl+Shift+Z)", lambda: self.submit(Redo()))
        self.save_btn = self._icon_button("mdi6.content-save", "Ausgabe speichern (Ctrl+S)", self.save_output)
        for button in (self.open_btn, self.undo_btn, self.redo_btn, self.save_btn):
            history_row.addWidget(button)
        history_row.addStretch()
        side_layout.addLayout(history_row)

        self.controls = OperationControls(self.settings.controls, self.submit)
        side_layout.addWidget(self.controls.widget)

        self.info_label = QLabel("Kein Bild geladen.")
        self.info_label.setWordWrap(True)
        side_layout.addWidget(self.info_label)
        side_layout.addStretch()
        root_layout.addWidget(side, stretch=2)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.setCentralWidget(content)

    def _icon_button(self, icon: str, tooltip: str, slot) -> QPushButton:
        button = QPushButton()
        button.setIcon(qta.icon(icon))
        button.setIconSize(QSize(24, 24))
        button.setToolTip(tooltip)
        button.setFixedSize(40, 40)
        button.clicked.connect(slot)
        return button

    # --- Editor wiring -------------------------------------------------------
    def submit(self, op: Operation) -> None:
        self.editor.submit(op)

    def _on_tick(self) -> None:
        try:
            changed = self.editor.tick()
        except TransformError as exc:
            self.logger.exception("Transformation fehlgeschlagen")
            self._show_error(f"Transformation fehlgeschlagen:\n{exc}")
            return
        if changed:
            self._update_history_actions()

    def _on_document_changed(self, document: Document) -> None:
        self.canvas.display_pil_image(document.image)
        width, height = document.size
        name = document.path.name if document.path else "(unbenannt)"
        self.info_label.setText(
            f"{name}\n{width} × {height} px, {document.image.mode}\n"
            f"Undo: {self.editor.undo_depth}  Redo: {self.editor.redo_depth}"
        )

    def _update_history_actions(self) -> None:
        has_document = self.editor.has_document()
        has_undo = self.editor.can_undo()
        has_redo = self.editor.can_redo()

        self.undo_action.setEnabled(has_undo)
        self.redo_action.setEnabled(has_redo)
        self.undo_btn.setEnabled(has_undo)
        self.redo_btn.setEnabled(has_redo)
        self.save_action.setEnabled(has_document)
        self.save_as_action.setEnabled(has_document)
        self.save_btn.setEnabled(has_document)
        self.controls.set_enabled(has_document)

    # --- File handling -------------------------------------------------------
    def open_image_dialog(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Bild öffnen", str(Path.home()), FILE_FILTER)
        if file_path:
            self.open_path(Path(file_path))

    def open_path(self, path: Path) -> None:
        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            self._show_error("Das Dateiformat wird derzeit nicht unterstützt.")
            return
        try:
            self.editor.load(path)
        except LoadError as exc:
            self.logger.exception("Fehler beim Laden von %s", path)
            self._show_error(str(exc))
            return
        self._update_history_actions()
        self.status_bar.showMessage(f"Aktuelles Bild: {path.name}", 5000)

    def save_output(self) -> None:
        self._save(None)

    def save_as_dialog(self) -> None:
        if not self.editor.has_document():
            self._show_error("Bitte zuerst ein Bild laden.")
            return
        document = self.editor.document
        start = str(document.path.parent if document.path else Path.home())
        file_path, _ = QFileDialog.getSaveFileName(self, "Speichern unter", start, FILE_FILTER)
        if file_path:
            self._save(Path(file_path))

    def _save(self, path: Path | None) -> None:
        try:
            target = self.editor.save(path)
        except SaveError as exc:
            self.logger.exception("Fehler beim Speichern")
            self._show_error(str(exc))
            return
        self.status_bar.showMessage(f"Gespeichert: {target}", 5000)

    def _show_error(self, message: str) -> None:
        QMessageBox.critical(self, "Fehler", message)
        self.status_bar.showMessage(message, 5000)

    # --- Drag & drop events --------------------------------------------------
    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if self._has_supported_file(event.mimeData().urls()):
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        urls = event.mimeData().urls()
        if not urls:
            return
        self.open_path(Path(urls[0].toLocalFile()))
        event.acceptProposedAction()

    def _has_supported_file(self, urls: Iterable) -> bool:
        for url in urls or []:
            if Path(url.toLocalFile()).suffix.lower() in SUPPORTED_EXTENSIONS:
                return True
        return False

    def closeEvent(self, event) -> None:
        self.tick_timer.stop()
        super().closeEvent(event)

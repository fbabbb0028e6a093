from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from .document import (
    Document,
    DocumentError,
    SaveError,
    load_document,
    normalise_mode,
    preview_path_for,
    save_image,
)
from .history import HistoryStack
from .operations import EditOperation, Operation, Redo, Undo, is_edit
from .pending import PendingSlot
from .settings import AppSettings, default_settings
from .transforms import TransformError, apply_operation

ChangeListener = Callable[[Document], None]


class DocumentEditor:
    """
    Owns the current document, the pending request and the undo/redo stacks.

    The presentation layer submits operations and calls :meth:`tick` once per
    frame; each tick applies at most one transition and publishes the new
    document to the listener. Failed loads and transforms leave document and
    both stacks exactly as they were.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.settings = settings or default_settings()
        self._document: Optional[Document] = None
        self._undo: HistoryStack[Image.Image] = HistoryStack(self.settings.history.capacity, name="undo")
        self._redo: HistoryStack[Image.Image] = HistoryStack(self.settings.history.capacity, name="redo")
        self._pending = PendingSlot()
        self._listener = on_change

    # --- state access --------------------------------------------------------
    @property
    def document(self) -> Optional[Document]:
        return self._document

    def has_document(self) -> bool:
        return self._document is not None

    def current_image(self) -> Image.Image:
        if self._document is None:
            raise DocumentError("Kein Bild geladen.")
        return self._document.image.copy()

    def undo_snapshot(self) -> list[Image.Image]:
        """Copies of the undo entries, oldest first."""
        return [image.copy() for image in self._undo]

    def redo_snapshot(self) -> list[Image.Image]:
        """Copies of the redo entries, oldest first."""
        return [image.copy() for image in self._redo]

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return self._document is not None and bool(self._undo)

    def can_redo(self) -> bool:
        return self._document is not None and bool(self._redo)

    def set_listener(self, callback: ChangeListener) -> None:
        self._listener = callback

    # --- requests ------------------------------------------------------------
    def submit(self, op: Operation) -> None:
        self._pending.submit(op)

    def has_pending(self) -> bool:
        return self._pending.has_pending()

    def tick(self) -> bool:
        """
        Drain the pending request and apply it. Returns True if the document
        changed. A request drained while no document is loaded is dropped.
        """
        op = self._pending.take()
        if op is None:
            return False
        if self._document is None:
            self.logger.debug("Anfrage %r verworfen: kein Bild geladen", op)
            return False
        return self.apply(op)

    def apply(self, op: Operation) -> bool:
        if self._document is None:
            return False
        if isinstance(op, Undo):
            return self._undo_step()
        if isinstance(op, Redo):
            return self._redo_step()
        if is_edit(op):
            return self._edit(op)
        raise TypeError(f"Unbekannte Operation: {op!r}")

    # --- transitions ---------------------------------------------------------
    def _edit(self, op: EditOperation) -> bool:
        current = self._document.image
        try:
            result = apply_operation(current, op)
        except TransformError:
            self.logger.warning("Transformation %r fehlgeschlagen, Zustand unverändert", op)
            raise
        description = op.describe()
        self._undo.push(current)
        if self.settings.history.clear_redo_on_edit and self._redo:
            self.logger.debug("Redo-Verlauf verworfen (%d Einträge)", len(self._redo))
            self._redo.clear()
        self._replace_image(result)
        self.logger.info("%s angewendet (%dx%d)", description, result.width, result.height)
        return True

    def _undo_step(self) -> bool:
        previous = self._undo.pop()
        if previous is None:
            self.logger.debug("Nichts zum Rückgängig machen.")
            return False
        self._redo.push(self._document.image)
        self._replace_image(previous)
        self.logger.info("Rückgängig (Undo %d, Redo %d)", len(self._undo), len(self._redo))
        return True

    def _redo_step(self) -> bool:
        following = self._redo.pop()
        if following is None:
            self.logger.debug("Nichts zum Wiederholen.")
            return False
        self._replace_image(following)
        self.logger.info("Wiederholt (Undo %d, Redo %d)", len(self._undo), len(self._redo))
        return True

    def _replace_image(self, image: Image.Image) -> None:
        self._document = self._document.with_image(image)
        self._emit()

    # --- persistence ---------------------------------------------------------
    def load(self, path: Path) -> Document:
        document = load_document(path)
        self._set_document(document)
        self.logger.info("Bild geladen: %s", document.path)
        return document

    def load_image(self, image: Image.Image, path: Path | None = None) -> Document:
        """Start a new document from an in-memory image (copied, mode normalised)."""
        normalised = normalise_mode(image)
        if normalised is image:
            normalised = image.copy()
        document = Document(image=normalised, path=Path(path) if path else None)
        self._set_document(document)
        return document

    def _set_document(self, document: Document) -> None:
        self._document = document
        self._undo.clear()
        self._redo.clear()
        self._pending.clear()
        self._emit()

    def save(self, path: Path | None = None) -> Path:
        """
        Write the current image. Without ``path`` the configured preview file
        next to the source image is written. Editor state is not touched.
        """
        if self._document is None:
            raise SaveError("Kein Bild geladen.")
        if path is None:
            return self.save_preview()
        return save_image(self._document.image, Path(path))

    def save_preview(self) -> Path:
        """Write the preview file (configured name and format) next to the source image."""
        if self._document is None:
            raise SaveError("Kein Bild geladen.")
        if self._document.path is None:
            raise SaveError("Kein Zielpfad: Bild wurde nicht aus einer Datei geladen.")
        target = preview_path_for(self._document.path, self.settings.export.preview_name)
        return save_image(self._document.image, target, format=self.settings.export.format)

    def _emit(self) -> None:
        if self._listener and self._document is not None:
            self._listener(self._document)


__all__ = ["ChangeListener", "DocumentEditor"]

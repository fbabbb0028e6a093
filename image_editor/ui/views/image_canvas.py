from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainter, QPalette, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from PIL import Image, ImageQt

# ImageQt has no two-band conversion
_DISPLAY_MODES = {"LA": "RGBA"}


class ImageCanvas(QWidget):
    """
    Shows the current document image, shrunk to fit the widget with its aspect
    ratio kept. Never scales small images up.
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(320, 240)
        self.setObjectName("imageCanvas")
        self._pixmap: Optional[QPixmap] = None
        self._image_rect: QRectF = QRectF()

    def display_pil_image(self, image: Image.Image) -> None:
        mode = _DISPLAY_MODES.get(image.mode)
        if mode:
            image = image.convert(mode)
        self._pixmap = QPixmap.fromImage(ImageQt.ImageQt(image))
        self._update_scaling()

    def clear(self) -> None:
        self._pixmap = None
        self._image_rect = QRectF()
        self.update()

    def has_image(self) -> bool:
        return self._pixmap is not None

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self.palette().color(QPalette.Base))
        if not self._pixmap or self._image_rect.isNull():
            painter.setPen(self.palette().color(QPalette.PlaceholderText))
            painter.drawText(self.rect(), Qt.AlignCenter, "Kein Bild geladen.")
            return
        source = QRectF(0, 0, self._pixmap.width(), self._pixmap.height())
        painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
        painter.drawPixmap(self._image_rect, self._pixmap, source)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._update_scaling()

    def _update_scaling(self) -> None:
        if not self._pixmap or self._pixmap.width() <= 0 or self._pixmap.height() <= 0:
            self._image_rect = QRectF()
            self.update()
            return

        pixmap_w = self._pixmap.width()
        pixmap_h = self._pixmap.height()
        avail_w = max(1, self.width())
        avail_h = max(1, self.height())
        scale = min(1.0, avail_w / pixmap_w, avail_h / pixmap_h)
        scaled_w = pixmap_w * scale
        scaled_h = pixmap_h * scale
        offset_x = (avail_w - scaled_w) / 2
        offset_y = (avail_h - scaled_h) / 2
        self._image_rect = QRectF(offset_x, offset_y, scaled_w, scaled_h)
        self.update()

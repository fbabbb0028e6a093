from __future__ import annotations

from typing import Callable

from PySide6.QtWidgets import (
    QDoubleSpinBox,
    QGridLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QWidget,
)

from ...core.operations import (
    Blur,
    Brightness,
    Contrast,
    FlipHorizontal,
    FlipVertical,
    Grayscale,
    HueRotate,
    Operation,
    Resize,
)
from ...core.settings import ControlDefaults

MAX_DIMENSION = 20000


def _int_spin(minimum: int, maximum: int, value: int) -> QSpinBox:
    spin = QSpinBox()
    spin.setRange(minimum, maximum)
    spin.setValue(value)
    return spin


def _float_spin(minimum: float, maximum: float, value: float, step: float = 0.1) -> QDoubleSpinBox:
    spin = QDoubleSpinBox()
    spin.setDecimals(2)
    spin.setRange(minimum, maximum)
    spin.setSingleStep(step)
    spin.setValue(value)
    return spin


class OperationControls:
    """
    Parameter widgets and their apply buttons. Each click turns the current
    widget values into one operation and hands it to ``submit``; the widgets
    are the only place where parameter ranges are enforced.
    """

    def __init__(self, defaults: ControlDefaults, submit: Callable[[Operation], None]) -> None:
        self._submit = submit
        self.width_spin = _int_spin(1, MAX_DIMENSION, defaults.resize_width)
        self.height_spin = _int_spin(1, MAX_DIMENSION, defaults.resize_height)
        self.hue_spin = _int_spin(-360, 360, defaults.hue_rotation)
        self.blur_spin = _float_spin(0.0, 100.0, defaults.blur_sigma)
        self.brightness_spin = _int_spin(*defaults.brightness_range, defaults.brightness)
        self.contrast_spin = _float_spin(*defaults.contrast_range, defaults.contrast)
        self.buttons: list[QPushButton] = []
        self.widget = self._build()

    def resize_operation(self) -> Resize:
        return Resize(width=self.width_spin.value(), height=self.height_spin.value())

    def hue_operation(self) -> HueRotate:
        return HueRotate(degrees=self.hue_spin.value())

    def blur_operation(self) -> Blur:
        return Blur(sigma=self.blur_spin.value())

    def brightness_operation(self) -> Brightness:
        return Brightness(delta=self.brightness_spin.value())

    def contrast_operation(self) -> Contrast:
        return Contrast(factor=self.contrast_spin.value())

    def set_enabled(self, enabled: bool) -> None:
        self.widget.setEnabled(enabled)

    def _build(self) -> QWidget:
        panel = QWidget()
        grid = QGridLayout(panel)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setHorizontalSpacing(8)

        size_row = QWidget()
        size_layout = QGridLayout(size_row)
        size_layout.setContentsMargins(0, 0, 0, 0)
        size_layout.addWidget(QLabel("B:"), 0, 0)
        size_layout.addWidget(self.width_spin, 0, 1)
        size_layout.addWidget(QLabel("H:"), 0, 2)
        size_layout.addWidget(self.height_spin, 0, 3)

        rows = [
            ("Größe", size_row, "Skalieren", self.resize_operation),
            ("Farbton (°)", self.hue_spin, "Drehen", self.hue_operation),
            ("Weichzeichnen (σ)", self.blur_spin, "Anwenden", self.blur_operation),
            ("Helligkeit", self.brightness_spin, "Anwenden", self.brightness_operation),
            ("Kontrast", self.contrast_spin, "Anwenden", self.contrast_operation),
        ]
        for row, (label, editor, button_text, factory) in enumerate(rows):
            grid.addWidget(QLabel(label), row, 0)
            grid.addWidget(editor, row, 1)
            grid.addWidget(self._button(button_text, factory), row, 2)

        row = len(rows)
        grid.addWidget(self._button("Horizontal spiegeln", FlipHorizontal), row, 0)
        grid.addWidget(self._button("Vertikal spiegeln", FlipVertical), row, 1)
        grid.addWidget(self._button("Graustufen", Grayscale), row, 2)
        grid.setRowStretch(row + 1, 1)
        return panel

    def _button(self, text: str, factory: Callable[[], Operation]) -> QPushButton:
        button = QPushButton(text)
        button.clicked.connect(lambda _checked=False: self._submit(factory()))
        self.buttons.append(button)
        return button

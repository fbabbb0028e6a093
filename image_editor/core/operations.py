from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Resize:
    width: int
    height: int

    def describe(self) -> str:
        return f"Größe {self.width}×{self.height}"


@dataclass(frozen=True)
class HueRotate:
    degrees: int

    def describe(self) -> str:
        return f"Farbton {self.degrees}°"


@dataclass(frozen=True)
class Blur:
    sigma: float

    def describe(self) -> str:
        return f"Weichzeichnen σ={self.sigma:g}"


@dataclass(frozen=True)
class FlipHorizontal:
    def describe(self) -> str:
        return "Horizontal spiegeln"


@dataclass(frozen=True)
class FlipVertical:
    def describe(self) -> str:
        return "Vertikal spiegeln"


@dataclass(frozen=True)
class Grayscale:
    def describe(self) -> str:
        return "Graustufen"


@dataclass(frozen=True)
class Brightness:
    delta: int

    def describe(self) -> str:
        return f"Helligkeit {self.delta:+}"


@dataclass(frozen=True)
class Contrast:
    factor: float

    def describe(self) -> str:
        return f"Kontrast {self.factor:g}"


@dataclass(frozen=True)
class Undo:
    def describe(self) -> str:
        return "Rückgängig"


@dataclass(frozen=True)
class Redo:
    def describe(self) -> str:
        return "Wiederholen"


EditOperation = Union[
    Resize,
    HueRotate,
    Blur,
    FlipHorizontal,
    FlipVertical,
    Grayscale,
    Brightness,
    Contrast,
]
Operation = Union[EditOperation, Undo, Redo]

EDIT_OPERATION_TYPES = (
    Resize,
    HueRotate,
    Blur,
    FlipHorizontal,
    FlipVertical,
    Grayscale,
    Brightness,
    Contrast,
)


def is_edit(op: Operation) -> bool:
    """True for operations that transform pixels (everything except Undo/Redo)."""
    return isinstance(op, EDIT_OPERATION_TYPES)


__all__ = [
    "Blur",
    "Brightness",
    "Contrast",
    "EDIT_OPERATION_TYPES",
    "EditOperation",
    "FlipHorizontal",
    "FlipVertical",
    "Grayscale",
    "HueRotate",
    "Operation",
    "Redo",
    "Resize",
    "Undo",
    "is_edit",
]

from __future__ import annotations

import math

import numpy as np
from PIL import Image, ImageFilter, ImageOps

from .operations import (
    Blur,
    Brightness,
    Contrast,
    EditOperation,
    FlipHorizontal,
    FlipVertical,
    Grayscale,
    HueRotate,
    Resize,
)

SUPPORTED_MODES = ("L", "LA", "RGB", "RGBA")


class TransformError(Exception):
    pass


def _check_mode(image: Image.Image) -> None:
    if image.mode not in SUPPORTED_MODES:
        raise TransformError(f"Nicht unterstützter Bildmodus: {image.mode}")


def _split_alpha(image: Image.Image) -> tuple[np.ndarray, np.ndarray | None]:
    """Return color channels as float32 (H, W, C) and the untouched alpha band, if any."""
    arr = np.array(image)
    if arr.ndim == 2:
        arr = arr[..., np.newaxis]
    if image.mode in ("LA", "RGBA"):
        return arr[..., :-1].astype(np.float32), arr[..., -1:].copy()
    return arr.astype(np.float32), None


def _merge_alpha(color: np.ndarray, alpha: np.ndarray | None) -> Image.Image:
    color_u8 = np.clip(np.rint(color), 0, 255).astype(np.uint8)
    if alpha is not None:
        color_u8 = np.concatenate([color_u8, alpha], axis=-1)
    if color_u8.shape[-1] == 1:
        color_u8 = color_u8[..., 0]
    return Image.fromarray(color_u8)


def resize(
    image: Image.Image,
    width: int,
    height: int,
    *,
    resample_filter: int = Image.Resampling.LANCZOS,
) -> Image.Image:
    """
    Resize image to exactly ``width`` × ``height`` (aspect ratio is not kept).

    Raises:
        TransformError: if a target dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise TransformError("Zieldimensionen müssen größer als 0 sein.")
    _check_mode(image)
    return image.resize((int(width), int(height)), resample_filter)


def hue_rotate(image: Image.Image, degrees: int) -> Image.Image:
    """
    Rotate the hue of every pixel by ``degrees``.

    Uses the luminance-preserving rotation matrix from the SVG/CSS
    ``hue-rotate`` filter. Grayscale images carry no hue and come back as a copy.
    """
    _check_mode(image)
    if image.mode in ("L", "LA"):
        return image.copy()

    angle = math.radians(degrees)
    cosv = math.cos(angle)
    sinv = math.sin(angle)
    matrix = np.array(
        [
            [0.213 + cosv * 0.787 - sinv * 0.213, 0.715 - cosv * 0.715 - sinv * 0.715, 0.072 - cosv * 0.072 + sinv * 0.928],
            [0.213 - cosv * 0.213 + sinv * 0.143, 0.715 + cosv * 0.285 + sinv * 0.140, 0.072 - cosv * 0.072 - sinv * 0.283],
            [0.213 - cosv * 0.213 - sinv * 0.787, 0.715 - cosv * 0.715 + sinv * 0.715, 0.072 + cosv * 0.928 + sinv * 0.072],
        ],
        dtype=np.float32,
    )
    color, alpha = _split_alpha(image)
    rotated = color @ matrix.T
    return _merge_alpha(rotated, alpha)


def blur(image: Image.Image, sigma: float) -> Image.Image:
    """Gaussian blur with standard deviation ``sigma``."""
    if not math.isfinite(sigma) or sigma < 0:
        raise TransformError(f"Ungültiger Weichzeichner-Radius: {sigma}")
    _check_mode(image)
    if sigma == 0:
        return image.copy()
    return image.filter(ImageFilter.GaussianBlur(radius=sigma))


def flip_horizontal(image: Image.Image) -> Image.Image:
    _check_mode(image)
    return ImageOps.mirror(image)


def flip_vertical(image: Image.Image) -> Image.Image:
    _check_mode(image)
    return ImageOps.flip(image)


def grayscale(image: Image.Image) -> Image.Image:
    _check_mode(image)
    if image.mode in ("RGBA", "LA"):
        return image.convert("LA")
    return image.convert("L")


def brighten(image: Image.Image, delta: int) -> Image.Image:
    """Add ``delta`` to every color channel (alpha untouched), clamped to 0..255."""
    _check_mode(image)
    color, alpha = _split_alpha(image)
    return _merge_alpha(color + float(delta), alpha)


def adjust_contrast(image: Image.Image, factor: float) -> Image.Image:
    """
    Adjust contrast around mid-gray.

    ``factor`` is given in percent points: 0 keeps the image, positive values
    increase and negative values decrease contrast. Each channel value ``v``
    becomes ``((v / 255 - 0.5) * scale + 0.5) * 255`` with
    ``scale = ((100 + factor) / 100) ** 2``.
    """
    if not math.isfinite(factor):
        raise TransformError(f"Ungültiger Kontrastwert: {factor}")
    _check_mode(image)
    scale = ((100.0 + factor) / 100.0) ** 2
    color, alpha = _split_alpha(image)
    adjusted = ((color / 255.0 - 0.5) * scale + 0.5) * 255.0
    return _merge_alpha(adjusted, alpha)


def apply_operation(image: Image.Image, op: EditOperation) -> Image.Image:
    """Run the single transform an edit operation stands for."""
    if isinstance(op, Resize):
        return resize(image, op.width, op.height)
    if isinstance(op, HueRotate):
        return hue_rotate(image, op.degrees)
    if isinstance(op, Blur):
        return blur(image, op.sigma)
    if isinstance(op, FlipHorizontal):
        return flip_horizontal(image)
    if isinstance(op, FlipVertical):
        return flip_vertical(image)
    if isinstance(op, Grayscale):
        return grayscale(image)
    if isinstance(op, Brightness):
        return brighten(image, op.delta)
    if isinstance(op, Contrast):
        return adjust_contrast(image, op.factor)
    raise TypeError(f"Keine Transformation für {op!r}")


__all__ = [
    "SUPPORTED_MODES",
    "TransformError",
    "adjust_contrast",
    "apply_operation",
    "blur",
    "brighten",
    "flip_horizontal",
    "flip_vertical",
    "grayscale",
    "hue_rotate",
    "resize",
]

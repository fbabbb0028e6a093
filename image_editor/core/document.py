from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

from .transforms import SUPPORTED_MODES

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tiff", ".tif", ".gif"}
JPEG_QUALITY = 92


class DocumentError(RuntimeError):
    pass


class LoadError(DocumentError):
    pass


class SaveError(DocumentError):
    pass


@dataclass(frozen=True)
class Document:
    """The image currently being edited plus the file it came from."""

    image: Image.Image
    path: Optional[Path] = None

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def with_image(self, image: Image.Image) -> "Document":
        return Document(image=image, path=self.path)


def normalise_mode(image: Image.Image) -> Image.Image:
    """Convert ``image`` to one of the editable modes (L, LA, RGB, RGBA)."""
    if image.mode in SUPPORTED_MODES:
        return image
    if image.mode == "P" and "transparency" in image.info:
        return image.convert("RGBA")
    if "A" in image.getbands():
        return image.convert("RGBA")
    if image.mode in ("1", "I;16", "I;16B", "I;16L", "I", "F"):
        return image.convert("L")
    return image.convert("RGB")


def load_document(path: Path) -> Document:
    """
    Decode ``path`` into a new Document.

    The file is fully decoded before returning, so a truncated or corrupt file
    fails here and never reaches the editor.
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(f"Datei wurde nicht gefunden: {path}")
    try:
        with Image.open(path) as img:
            img.load()
            image = normalise_mode(img)
            if image is img:
                image = img.copy()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise LoadError(f"Bild konnte nicht geladen werden: {exc}") from exc
    logger.debug("Dokument geladen: %s (%dx%d, %s)", path, image.width, image.height, image.mode)
    return Document(image=image, path=path)


def save_image(image: Image.Image, path: Path, format: Optional[str] = None) -> Path:
    """
    Write ``image`` to ``path``. The format follows the suffix unless given.

    Pure export: the image itself is never modified.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    to_save = image
    save_kwargs: dict = {}
    if format:
        save_kwargs["format"] = format
    target_format = (format or "").upper()

    if suffix in {".jpg", ".jpeg"} or target_format == "JPEG":
        if to_save.mode in ("RGBA", "LA"):
            to_save = to_save.convert("RGB" if to_save.mode == "RGBA" else "L")
        save_kwargs["quality"] = JPEG_QUALITY
    elif suffix == ".webp" or target_format == "WEBP":
        save_kwargs.update(quality=JPEG_QUALITY, method=6)
    elif suffix == ".png" or target_format == "PNG":
        save_kwargs["compress_level"] = 6

    try:
        to_save.save(path, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise SaveError(f"Fehler beim Speichern von {path}: {exc}") from exc
    logger.info("Bild gespeichert: %s", path)
    return path


def preview_path_for(source: Path, preview_name: str) -> Path:
    """Path next to ``source`` under which a preview export is written."""
    return Path(source).with_name(preview_name)


__all__ = [
    "Document",
    "DocumentError",
    "LoadError",
    "SUPPORTED_EXTENSIONS",
    "SaveError",
    "load_document",
    "normalise_mode",
    "preview_path_for",
    "save_image",
]

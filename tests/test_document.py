import shutil
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from image_editor.core.document import (
    Document,
    LoadError,
    SaveError,
    load_document,
    preview_path_for,
    save_image,
)


def _make_image(size=(40, 30), color=(200, 160, 90)):
    return Image.new("RGB", size, color)


class LoadDocumentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_load_png(self) -> None:
        path = self.tmp_dir / "sample.png"
        _make_image().save(path)

        document = load_document(path)

        self.assertIsInstance(document, Document)
        self.assertEqual(document.path, path)
        self.assertEqual(document.size, (40, 30))
        self.assertEqual(document.image.mode, "RGB")
        self.assertEqual(document.image.getpixel((0, 0)), (200, 160, 90))

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(LoadError):
            load_document(self.tmp_dir / "missing.png")

    def test_undecodable_file_raises(self) -> None:
        path = self.tmp_dir / "broken.png"
        path.write_bytes(b"not an image at all")
        with self.assertRaises(LoadError):
            load_document(path)

    def test_directory_raises(self) -> None:
        with self.assertRaises(LoadError):
            load_document(self.tmp_dir)

    def test_palette_image_is_normalised(self) -> None:
        path = self.tmp_dir / "palette.png"
        _make_image().convert("P").save(path)
        self.assertEqual(load_document(path).image.mode, "RGB")

    def test_palette_with_transparency_keeps_alpha(self) -> None:
        path = self.tmp_dir / "transparent.png"
        palette = Image.new("P", (8, 8), 0)
        palette.putpalette([10, 20, 30] * 256)
        palette.save(path, transparency=0)
        self.assertEqual(load_document(path).image.mode, "RGBA")


class SaveImageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_png_round_trip_is_lossless(self) -> None:
        image = _make_image()
        path = save_image(image, self.tmp_dir / "out.png")
        with Image.open(path) as reloaded:
            self.assertEqual(reloaded.convert("RGB").tobytes(), image.tobytes())

    def test_jpeg_drops_alpha(self) -> None:
        image = Image.new("RGBA", (10, 10), (1, 2, 3, 100))
        path = save_image(image, self.tmp_dir / "out.jpg")
        self.assertTrue(path.exists())
        self.assertEqual(image.mode, "RGBA")

    def test_explicit_format_overrides_suffix(self) -> None:
        path = save_image(_make_image(), self.tmp_dir / "preview.data", format="PNG")
        with Image.open(path) as reloaded:
            self.assertEqual(reloaded.format, "PNG")

    def test_unknown_extension_raises(self) -> None:
        with self.assertRaises(SaveError):
            save_image(_make_image(), self.tmp_dir / "out.unknown")

    def test_missing_directory_raises(self) -> None:
        with self.assertRaises(SaveError):
            save_image(_make_image(), self.tmp_dir / "nope" / "out.png")

    def test_preview_path_sits_next_to_source(self) -> None:
        source = self.tmp_dir / "photo.jpg"
        self.assertEqual(
            preview_path_for(source, "output_preview.png"),
            self.tmp_dir / "output_preview.png",
        )


if __name__ == "__main__":
    unittest.main()

import unittest

import numpy as np
from PIL import Image

from image_editor.core import transforms
from image_editor.core.operations import (
    Blur,
    Brightness,
    Contrast,
    FlipHorizontal,
    FlipVertical,
    Grayscale,
    HueRotate,
    Redo,
    Resize,
    Undo,
)
from image_editor.core.transforms import TransformError


def _create_image(size=(100, 50), color=(50, 120, 200)):
    return Image.new("RGB", size, color)


def _gradient(size=(32, 16)) -> Image.Image:
    width, height = size
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[..., 0] = np.linspace(0, 255, width, dtype=np.uint8)[np.newaxis, :]
    arr[..., 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, np.newaxis]
    arr[..., 2] = 90
    return Image.fromarray(arr)


class ResizeTests(unittest.TestCase):
    def test_resize_is_exact(self) -> None:
        result = transforms.resize(_create_image((100, 50)), 30, 70)
        self.assertEqual(result.size, (30, 70))

    def test_non_positive_dimensions_raise(self) -> None:
        image = _create_image()
        for width, height in [(0, 10), (10, 0), (-5, 10)]:
            with self.subTest(width=width, height=height):
                with self.assertRaises(TransformError):
                    transforms.resize(image, width, height)


class HueRotateTests(unittest.TestCase):
    def test_zero_degrees_keeps_pixels(self) -> None:
        image = _gradient()
        self.assertEqual(transforms.hue_rotate(image, 0).tobytes(), image.tobytes())

    def test_rotation_changes_color_and_keeps_gray(self) -> None:
        red = transforms.hue_rotate(_create_image(color=(200, 30, 30)), 120)
        self.assertNotEqual(red.getpixel((0, 0)), (200, 30, 30))

        gray = transforms.hue_rotate(_create_image(color=(100, 100, 100)), 120)
        for channel in gray.getpixel((0, 0)):
            self.assertAlmostEqual(channel, 100, delta=1)

    def test_alpha_is_preserved(self) -> None:
        image = Image.new("RGBA", (8, 8), (200, 30, 30, 77))
        result = transforms.hue_rotate(image, 90)
        self.assertEqual(result.mode, "RGBA")
        self.assertEqual(result.getpixel((3, 3))[3], 77)

    def test_grayscale_input_returns_copy(self) -> None:
        image = Image.new("L", (8, 8), 40)
        result = transforms.hue_rotate(image, 45)
        self.assertIsNot(result, image)
        self.assertEqual(result.tobytes(), image.tobytes())


class BlurTests(unittest.TestCase):
    def test_uniform_image_is_unchanged(self) -> None:
        image = _create_image((20, 20))
        diff = np.abs(np.array(transforms.blur(image, 2.0), dtype=np.int16) - np.array(image, dtype=np.int16))
        self.assertLessEqual(int(diff.max()), 1)

    def test_blur_softens_edges(self) -> None:
        arr = np.zeros((20, 20), dtype=np.uint8)
        arr[:, 10:] = 255
        result = transforms.blur(Image.fromarray(arr), 2.0)
        self.assertTrue(0 < result.getpixel((10, 10)) < 255)

    def test_invalid_sigma_raises(self) -> None:
        for sigma in (-1.0, float("nan"), float("inf")):
            with self.subTest(sigma=sigma):
                with self.assertRaises(TransformError):
                    transforms.blur(_create_image(), sigma)


class FlipTests(unittest.TestCase):
    def setUp(self) -> None:
        self.image = Image.new("RGB", (4, 3), (0, 0, 0))
        self.image.putpixel((0, 0), (255, 0, 0))

    def test_flip_horizontal_mirrors_columns(self) -> None:
        result = transforms.flip_horizontal(self.image)
        self.assertEqual(result.getpixel((3, 0)), (255, 0, 0))
        self.assertEqual(result.getpixel((0, 0)), (0, 0, 0))

    def test_flip_vertical_mirrors_rows(self) -> None:
        result = transforms.flip_vertical(self.image)
        self.assertEqual(result.getpixel((0, 2)), (255, 0, 0))
        self.assertEqual(result.getpixel((0, 0)), (0, 0, 0))


class GrayscaleTests(unittest.TestCase):
    def test_rgb_becomes_luma(self) -> None:
        self.assertEqual(transforms.grayscale(_create_image()).mode, "L")

    def test_alpha_is_kept(self) -> None:
        result = transforms.grayscale(Image.new("RGBA", (4, 4), (10, 200, 30, 99)))
        self.assertEqual(result.mode, "LA")
        self.assertEqual(result.getpixel((0, 0))[1], 99)


class BrightnessContrastTests(unittest.TestCase):
    def test_brighten_adds_and_clamps(self) -> None:
        result = transforms.brighten(_create_image(color=(100, 150, 250)), 10)
        self.assertEqual(result.getpixel((0, 0)), (110, 160, 255))

    def test_darken_leaves_alpha_untouched(self) -> None:
        result = transforms.brighten(Image.new("RGBA", (2, 2), (10, 20, 30, 128)), -50)
        self.assertEqual(result.getpixel((0, 0)), (0, 0, 0, 128))

    def test_brighten_grayscale(self) -> None:
        result = transforms.brighten(Image.new("L", (2, 2), 200), 30)
        self.assertEqual(result.mode, "L")
        self.assertEqual(result.getpixel((1, 1)), 230)

    def test_zero_contrast_keeps_pixels(self) -> None:
        image = _gradient()
        self.assertEqual(transforms.adjust_contrast(image, 0).tobytes(), image.tobytes())

    def test_minus_hundred_collapses_to_mid_gray(self) -> None:
        result = transforms.adjust_contrast(_gradient(), -100)
        self.assertEqual(set(np.array(result).flatten().tolist()), {128})

    def test_positive_contrast_pushes_to_extremes(self) -> None:
        arr = np.array([[0, 64, 191, 255]], dtype=np.uint8)
        result = transforms.adjust_contrast(Image.fromarray(arr), 100)
        self.assertEqual(np.array(result).tolist(), [[0, 0, 255, 255]])

    def test_non_finite_contrast_raises(self) -> None:
        with self.assertRaises(TransformError):
            transforms.adjust_contrast(_create_image(), float("nan"))


class ApplyOperationTests(unittest.TestCase):
    def test_every_edit_operation_returns_new_image(self) -> None:
        image = _gradient()
        operations = [
            Resize(8, 8),
            HueRotate(90),
            Blur(1.0),
            FlipHorizontal(),
            FlipVertical(),
            Grayscale(),
            Brightness(20),
            Contrast(10.0),
        ]
        for op in operations:
            with self.subTest(op=op):
                result = transforms.apply_operation(image, op)
                self.assertIsInstance(result, Image.Image)
                self.assertIsNot(result, image)

    def test_source_image_is_not_modified(self) -> None:
        image = _gradient()
        before = image.tobytes()
        transforms.apply_operation(image, Brightness(40))
        transforms.apply_operation(image, HueRotate(180))
        self.assertEqual(image.tobytes(), before)

    def test_history_operations_are_rejected(self) -> None:
        for op in (Undo(), Redo()):
            with self.subTest(op=op):
                with self.assertRaises(TypeError):
                    transforms.apply_operation(_create_image(), op)

    def test_unsupported_mode_raises(self) -> None:
        with self.assertRaises(TransformError):
            transforms.flip_vertical(Image.new("CMYK", (4, 4)))


if __name__ == "__main__":
    unittest.main()

import unittest
import sys
import os
import tempfile

import cv2
import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polymaze.core.mask import Mask, TransparentMask, TriangleMask


class TestMask(unittest.TestCase):
    def test_transparent(self):
        mask = TransparentMask(3, 3)
        self.assertTrue(mask.contains(1, 1))
        self.assertTrue(mask[2, 0])

    def test_from_text(self):
        mask = Mask.from_text("""
            ....
            .XX.
            ....
        """.replace(" ", ""))
        self.assertEqual((mask.width, mask.height), (4, 3))
        self.assertTrue(mask.contains(0, 0))
        self.assertFalse(mask.contains(1, 1))
        self.assertFalse(mask[2, 1])
        self.assertTrue(mask[3, 1])
        # Outside the mask is never open
        self.assertFalse(mask.contains(4, 0))
        self.assertFalse(mask.contains(-1, 0))

    def test_ragged_rows_are_padded(self):
        mask = Mask([[True, True, True], [True]])
        self.assertEqual(mask.width, 3)
        self.assertTrue(mask.contains(0, 1))
        self.assertFalse(mask.contains(2, 1))

    def test_from_array(self):
        mask = Mask.from_array(np.array([[1, 0], [0, 1]]))
        self.assertEqual((mask.width, mask.height), (2, 2))
        self.assertTrue(mask.contains(0, 0))
        self.assertFalse(mask.contains(1, 0))

    def test_from_array_keeps_subclass(self):
        class Stencil(Mask):
            pass

        mask = Stencil.from_array([[True, False, True]])
        self.assertIs(type(mask), Stencil)
        self.assertEqual((mask.width, mask.height), (3, 1))
        self.assertTrue(mask[2, 0])

    def test_triangle(self):
        mask = TriangleMask(3)
        self.assertEqual((mask.width, mask.height), (7, 3))
        self.assertEqual([x for x in range(7) if mask.contains(x, 0)], [3])
        self.assertEqual([x for x in range(7) if mask.contains(x, 2)], [1, 2, 3, 4, 5])

    def test_from_image_brightness(self):
        image = np.zeros((4, 6), dtype=np.uint8)
        image[1, 2] = 255
        image[3, 5] = 200
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "mask.png")
            cv2.imwrite(path, image)
            mask = Mask.from_image(path)

        self.assertEqual((mask.width, mask.height), (6, 4))
        self.assertTrue(mask.contains(2, 1))
        self.assertTrue(mask.contains(5, 3))
        self.assertFalse(mask.contains(0, 0))

    def test_from_image_alpha(self):
        image = np.full((3, 3, 4), 255, dtype=np.uint8)
        image[0, 0, 3] = 0
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "mask.png")
            cv2.imwrite(path, image)
            mask = Mask.from_image(path)

        self.assertTrue(mask.contains(0, 0))
        self.assertFalse(mask.contains(1, 1))

    def test_from_image_missing(self):
        with self.assertRaises(FileNotFoundError):
            Mask.from_image("/nonexistent/mask.png")


if __name__ == '__main__':
    unittest.main()

import cv2
import numpy as np
from typing import Iterable, Sequence


class TransparentMask:
    """Default mask: every cell may hold passages."""

    def __init__(self, width: int = 0, height: int = 0):
        self.width = width
        self.height = height

    def contains(self, x: int, y: int) -> bool:
        return True

    def __getitem__(self, pos) -> bool:
        return self.contains(*pos)


class Mask:
    """
    A grid of True/False values matching the maze cells one-to-one.
    Cells that are False stay blank; the generators never enter them.

    Any object with 'width', 'height' and 'contains(x, y)' can stand in
    for a Mask.
    """

    def __init__(self, rows: Iterable[Sequence[bool]]):
        rows = [list(r) for r in rows]
        self.height = len(rows)
        self.width = max((len(r) for r in rows), default=0)
        # Ragged rows are padded with False
        self.cells = np.zeros((self.height, self.width), dtype=bool)
        for y, row in enumerate(rows):
            self.cells[y, :len(row)] = row

    @classmethod
    def from_text(cls, text: str, open_char: str = "."):
        """
        Each line is a row, each character a cell. Periods are open cells,
        anything else is masked out:

            ..........
            .X....XXX.
            ..........
        """
        lines = text.strip().splitlines()
        return cls([[c == open_char for c in line] for line in lines])

    @classmethod
    def from_array(cls, array) -> "Mask":
        mask = cls.__new__(cls)
        mask.cells = np.asarray(array, dtype=bool)
        mask.height, mask.width = mask.cells.shape
        return mask

    @classmethod
    def from_image(cls, filename: str, threshold: int = 128) -> "Mask":
        """
        Transparent pixels are open when the image has an alpha channel.
        Opaque images fall back to brightness: light pixels are open.
        """
        image = cv2.imread(filename, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise FileNotFoundError(f"Could not read mask image: {filename}")

        if image.ndim == 3 and image.shape[2] == 4:
            return cls.from_array(image[:, :, 3] == 0)

        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        return cls.from_array(image >= threshold)

    def contains(self, x: int, y: int) -> bool:
        if 0 <= x < self.width and 0 <= y < self.height:
            return bool(self.cells[y, x])
        return False

    def __getitem__(self, pos) -> bool:
        return self.contains(*pos)


class TriangleMask(Mask):
    """
    Triangular silhouette, mostly useful with delta mazes. The width is
    always 2 * height + 1.
    """

    def __init__(self, height: int):
        width = height * 2 + 1
        rows = []
        for y in range(height):
            start = height - y
            end = start + y * 2
            rows.append([start <= x <= end for x in range(width)])
        super().__init__(rows)

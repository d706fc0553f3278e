from collections import defaultdict
from typing import Any, Dict, Tuple

from polymaze.core import directions as dirs

Point = Tuple[int, int]


class Path:
    """
    A route (or any region) through a maze, kept separately from the grid so
    formatters can draw several of them over one finished maze.

    'paths' maps a point to the direction bits linked from it (under-plane
    bits when the link runs beneath the cell). 'cells' maps a point to
    plane bits: 1 = set on the primary plane, 2 = set on the under plane.
    """
    OVER = "over"
    UNDER = "under"

    _PLANE_BIT = {OVER: 1, UNDER: 2}

    def __init__(self, grid, **meta: Any):
        self.grid = grid
        self.paths: Dict[Point, int] = defaultdict(int)
        self.cells: Dict[Point, int] = defaultdict(int)
        self.meta = meta

    def __getitem__(self, key):
        return self.meta.get(key)

    def set(self, point: Point, how: str = OVER):
        self.cells[tuple(point)] |= self._PLANE_BIT[how]

    def is_set(self, point: Point, how: str = OVER) -> bool:
        return bool(self.cells.get(tuple(point), 0) & self._PLANE_BIT[how])

    def link(self, a: Point, b: Point) -> str:
        """
        Links two adjacent points. Returns UNDER when the maze passage dips
        under 'b' as it enters, OVER otherwise (also when the points are not
        adjacent, in which case nothing is linked).

            how = path.link(prev, point)
            path.set(point, how)
        """
        direction = self.grid.relative_direction(a, b)
        if direction is None:
            return self.OVER

        a, b = tuple(a), tuple(b)
        back = dirs.OPPOSITE[direction]

        if self.grid.valid(*a):
            cell = self.grid[self.grid.normalize(*a)]
            self.paths[a] |= direction if cell & direction else dirs.under(direction)

        if self.grid.valid(*b):
            cell = self.grid[self.grid.normalize(*b)]
            if not cell & back:
                back = dirs.under(back)
        self.paths[b] |= back

        return self.UNDER if back & dirs.UNDER else self.OVER

    def has_path(self, point: Point, direction: int) -> bool:
        return bool(self.paths.get(tuple(point), 0) & direction)

    def merge(self, other: "Path"):
        """Adds the other path's links and cells to this one (metadata is not copied)."""
        for pt, value in other.paths.items():
            self.paths[pt] |= value
        for pt, value in other.cells.items():
            self.cells[pt] |= value

    def __len__(self):
        return len(self.cells)

import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polymaze.core import directions as dirs
from polymaze.core.grid import Grid
from polymaze.core.path import Path


class TestPath(unittest.TestCase):
    def test_link_over(self):
        grid = Grid(3, 1)
        grid.link(0, 0, Grid.E)
        path = Path(grid, color="red")

        how = path.link((0, 0), (1, 0))
        path.set((1, 0), how)

        self.assertEqual(how, Path.OVER)
        self.assertTrue(path.has_path((0, 0), Grid.E))
        self.assertTrue(path.has_path((1, 0), Grid.W))
        self.assertTrue(path.is_set((1, 0)))
        self.assertFalse(path.is_set((1, 0), Path.UNDER))
        self.assertEqual(path["color"], "red")
        self.assertIsNone(path["missing"])

    def test_link_under(self):
        grid = Grid(3, 3)
        # Corridor N-S on top, tunnel E-W underneath
        grid[1, 1] = Grid.N | Grid.S | dirs.under(Grid.E | Grid.W)
        grid[0, 1] = Grid.E
        grid[2, 1] = Grid.W
        path = Path(grid)

        how = path.link((0, 1), (1, 1))
        self.assertEqual(how, Path.UNDER)
        path.set((1, 1), how)
        self.assertTrue(path.is_set((1, 1), Path.UNDER))
        self.assertTrue(path.has_path((1, 1), dirs.under(Grid.W)))

        how = path.link((1, 1), (2, 1))
        self.assertEqual(how, Path.OVER)
        self.assertTrue(path.has_path((1, 1), dirs.under(Grid.E)))

    def test_link_not_adjacent(self):
        grid = Grid(4, 1)
        path = Path(grid)
        self.assertEqual(path.link((0, 0), (3, 0)), Path.OVER)
        self.assertEqual(len(path.paths), 0)

    def test_link_from_outside(self):
        grid = Grid(2, 1)
        grid.link(0, 0, Grid.E)
        grid.add_opening_from(grid.entrance)
        path = Path(grid)
        path.link(grid.entrance, (0, 0))
        self.assertTrue(path.has_path((0, 0), Grid.W))
        self.assertFalse(path.has_path(grid.entrance, Grid.E))

    def test_merge(self):
        grid = Grid(3, 1)
        a = Path(grid)
        b = Path(grid)
        a.set((0, 0))
        b.set((0, 0), Path.UNDER)
        b.link((1, 0), (2, 0))
        a.merge(b)
        self.assertTrue(a.is_set((0, 0), Path.OVER))
        self.assertTrue(a.is_set((0, 0), Path.UNDER))
        self.assertTrue(a.has_path((1, 0), dirs.under(Grid.E)))
        self.assertEqual(len(a), 1)


if __name__ == '__main__':
    unittest.main()

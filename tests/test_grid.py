import unittest
import sys
import os

# Add project root to path so we can import polymaze
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polymaze.core.errors import ConfigurationError
from polymaze.core.grid import Grid


class TestGrid(unittest.TestCase):
    def test_initialization(self):
        w, h = 10, 10
        grid = Grid(w, h)
        self.assertEqual(len(grid.cells), w * h, f"Grid initialization size mismatch. Expected {w*h}, got {len(grid.cells)}")
        self.assertFalse(grid.generated)
        for val in grid.cells:
            self.assertEqual(val, 0)
        self.assertEqual(grid.entrance, (-1, 0))
        self.assertEqual(grid.exit, (10, 9))

    def test_coordinates(self):
        grid = Grid(5, 5)
        idx = grid.get_index(2, 2)
        self.assertEqual(idx, 12)  # 2 * 5 + 2

        with self.assertRaises(IndexError):
            grid.get_index(-1, 0)
        with self.assertRaises(IndexError):
            grid.get_index(0, 5)
        with self.assertRaises(IndexError):
            grid.cell(5, 0)

    def test_bad_dimensions(self):
        with self.assertRaises(ConfigurationError):
            Grid(0, 5)

    def test_set_and_get(self):
        grid = Grid(4, 4)
        grid[1, 2] = Grid.N | Grid.E
        self.assertEqual(grid.cell(1, 2), Grid.N | Grid.E)
        grid.set(3, 3, Grid.W)
        self.assertEqual(grid[3, 3], Grid.W)
        self.assertEqual(grid.direction_at(3, 3), Grid.W)

    def test_link(self):
        grid = Grid(2, 2)
        # Carve from (0,0) EAST to (1,0)
        self.assertEqual(grid.link(0, 0, Grid.E), (1, 0))
        self.assertEqual(grid[0, 0], Grid.E)
        self.assertEqual(grid[1, 0], Grid.W)
        self.assertEqual(grid[0, 1], 0)

    def test_apply_move_combines(self):
        grid = Grid(10, 10)
        grid[5, 5] = Grid.E
        grid.apply_move(5, 5, Grid.N)
        self.assertEqual(grid[5, 5], Grid.N | Grid.E)

    def test_apply_move_shift_under(self):
        grid = Grid(10, 10)
        grid[5, 5] = Grid.E
        grid.apply_move(5, 5, Grid.SHIFT_UNDER)
        self.assertEqual(grid[5, 5], Grid.E << Grid.UNDER_SHIFT)

    def test_x_symmetry_mirrors_writes(self):
        grid = Grid(10, 10, symmetry="x")
        grid.apply_move(1, 2, Grid.E)
        self.assertEqual(grid[8, 2], Grid.W)
        grid.apply_move(2, 1, Grid.NE)
        self.assertEqual(grid[7, 1], Grid.NW)
        grid.apply_move(2, 3, Grid.N)
        self.assertEqual(grid[7, 3], Grid.N)

    def test_y_symmetry_mirrors_writes(self):
        grid = Grid(10, 10, symmetry="y")
        grid.apply_move(1, 2, Grid.S)
        self.assertEqual(grid[1, 7], Grid.N)
        grid.apply_move(2, 1, Grid.SW)
        self.assertEqual(grid[2, 8], Grid.NW)
        grid.apply_move(2, 3, Grid.W)
        self.assertEqual(grid[2, 6], Grid.W)

    def test_xy_symmetry_mirrors_writes(self):
        grid = Grid(10, 10, symmetry="xy")
        grid.apply_move(1, 2, Grid.S)
        self.assertEqual(grid[1, 7], Grid.N)
        self.assertEqual(grid[8, 2], Grid.S)
        self.assertEqual(grid[8, 7], Grid.N)

        grid.apply_move(2, 1, Grid.SW)
        self.assertEqual(grid[2, 8], Grid.NW)
        self.assertEqual(grid[7, 1], Grid.SE)
        self.assertEqual(grid[7, 8], Grid.NE)

        grid.apply_move(2, 3, Grid.W)
        self.assertEqual(grid[2, 6], Grid.W)
        self.assertEqual(grid[7, 3], Grid.E)
        self.assertEqual(grid[7, 6], Grid.E)

    def test_radial_symmetry_rotates_writes(self):
        grid = Grid(10, 10, symmetry="radial")
        grid.apply_move(1, 2, Grid.S)
        self.assertEqual(grid[2, 8], Grid.E)
        self.assertEqual(grid[7, 1], Grid.W)
        self.assertEqual(grid[8, 7], Grid.N)

        grid.apply_move(2, 1, Grid.SW)
        self.assertEqual(grid[1, 7], Grid.SE)
        self.assertEqual(grid[8, 2], Grid.NW)
        self.assertEqual(grid[7, 8], Grid.NE)

        grid.apply_move(2, 3, Grid.W)
        self.assertEqual(grid[3, 7], Grid.S)
        self.assertEqual(grid[6, 2], Grid.N)
        self.assertEqual(grid[7, 6], Grid.E)

    def test_shift_under_once_on_self_mirrored_cell(self):
        grid = Grid(5, 5, symmetry="x")
        # Column 2 is its own mirror
        grid[2, 2] = Grid.N | Grid.S
        grid.apply_move(2, 2, Grid.SHIFT_UNDER)
        self.assertEqual(grid[2, 2], (Grid.N | Grid.S) << Grid.UNDER_SHIFT)

    def test_symmetry_domain(self):
        grid = Grid(9, 9, symmetry="radial")
        self.assertEqual((grid.available_width, grid.available_height), (5, 4))
        self.assertFalse(grid.in_domain(4, 4))
        self.assertTrue(grid.in_domain(4, 3))

        grid = Grid(10, 7, symmetry="xy")
        self.assertEqual((grid.available_width, grid.available_height), (5, 4))

    def test_bad_symmetry(self):
        with self.assertRaises(ConfigurationError):
            Grid(10, 8, symmetry="radial")
        with self.assertRaises(ConfigurationError):
            Grid(10, 10, symmetry="diagonal")
        with self.assertRaises(ConfigurationError):
            Grid(10, 10, symmetry="x", wrap="x")
        with self.assertRaises(ConfigurationError):
            Grid(10, 10, topology="sigma", symmetry="x")

    def test_wrap(self):
        grid = Grid(4, 3, wrap="x")
        self.assertTrue(grid.valid(-1, 0))
        self.assertFalse(grid.valid(0, -1))
        self.assertEqual(grid.move(0, 0, Grid.W), (3, 0))
        # Off the bottom edge, which does not wrap
        self.assertFalse(grid.valid(*grid.move(3, 2, Grid.SE)))

        grid = Grid(4, 3, wrap="xy")
        self.assertEqual(grid.move(3, 2, Grid.SE), (0, 0))

        with self.assertRaises(ConfigurationError):
            Grid(4, 3, wrap="z")

    def test_relative_direction(self):
        grid = Grid(5, 5)
        self.assertEqual(grid.relative_direction((1, 1), (2, 1)), Grid.E)
        self.assertEqual(grid.relative_direction((1, 1), (0, 0)), Grid.NW)
        self.assertIsNone(grid.relative_direction((1, 1), (3, 1)))

        wrapped = Grid(5, 5, wrap="x")
        self.assertEqual(wrapped.relative_direction((0, 2), (4, 2)), Grid.W)

    def test_dead_ends(self):
        grid = Grid(3, 1)
        grid.link(0, 0, Grid.E)
        grid.link(1, 0, Grid.E)
        self.assertTrue(Grid.dead(grid[0, 0]))
        self.assertFalse(Grid.dead(grid[1, 0]))
        self.assertEqual(grid.dead_ends(), [(0, 0), (2, 0)])
        # An under-plane passage does not count
        self.assertFalse(Grid.dead(Grid.N << Grid.UNDER_SHIFT))

    def test_passage_count_ignores_openings(self):
        grid = Grid(3, 1)
        grid.link(0, 0, Grid.E)
        grid.link(1, 0, Grid.E)
        self.assertEqual(grid.add_opening_from(grid.entrance), (0, 0))
        self.assertEqual(grid.add_opening_from(grid.exit), (2, 0))
        self.assertEqual(grid[0, 0], Grid.E | Grid.W)
        self.assertEqual(grid.passage_count(), 2)

    def test_start_and_finish(self):
        grid = Grid(6, 4)
        self.assertEqual(grid.start, (0, 0))
        self.assertEqual(grid.finish, (5, 3))

        grid = Grid(6, 4, entrance=(2, -1), exit=(3, 4))
        self.assertEqual(grid.start, (2, 0))
        self.assertEqual(grid.finish, (3, 3))


if __name__ == '__main__':
    unittest.main()

import math
from typing import Dict, List, Tuple

from polymaze.core import directions as dirs
from polymaze.core.directions import N, S, E, W, NW, NE, SW, SE, PRIMARY, UNDER
from polymaze.core.errors import ConfigurationError

# sqrt(3)/2, row pitch of triangle and hexagon tilings
ROW_PITCH = math.sqrt(3) / 2


class Topology:
    """
    Per-shape rules: which directions exist at a cell, how a straight line
    passes through a cell (for weaving) and where the cell sits on screen.

    Topologies are a closed set (see TOPOLOGIES); the grid holds one
    instance and delegates to it.
    """
    name = None
    DIRECTIONS: Tuple[int, ...] = ()
    supports_weave = False
    supports_symmetry = False

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        # Longest single step in grid coordinates; keeps the A* estimate admissible
        self.max_step = max(math.hypot(dirs.DX[d], dirs.DY[d]) for d in self.DIRECTIONS)

    def potential_exits(self, x: int, y: int) -> Tuple[int, ...]:
        return self.DIRECTIONS

    def weighted_exits(self, x: int, y: int) -> List[int]:
        """Exits as a list to shuffle; a direction may appear more than once."""
        return list(self.potential_exits(x, y))

    def dx(self, direction: int) -> int:
        return dirs.DX[direction]

    def dy(self, direction: int) -> int:
        return dirs.DY[direction]

    def axis_partner(self, x: int, y: int, direction: int) -> int:
        """The direction on the same straight line through (x, y)."""
        return dirs.OPPOSITE[direction]

    def pass_through(self, x: int, y: int, direction: int) -> int:
        """Exit side of a straight line entering (x, y) while moving 'direction'."""
        return direction

    def is_straight(self, x: int, y: int, field: int) -> bool:
        field &= PRIMARY
        for d in self.potential_exits(x, y):
            if field == d | self.axis_partner(x, y, d):
                return True
        return False

    def check_wrap(self, wrap_x: bool, wrap_y: bool):
        pass

    def weave_allowed(self, grid, from_x: int, from_y: int, thru_x: int, thru_y: int, direction: int) -> bool:
        """
        A new passage may cross (thru_x, thru_y) if that cell is a plain
        straight corridor with nothing underneath it yet, and the cell on
        the far side is blank.
        """
        if not self.supports_weave:
            return False

        cell = grid[thru_x, thru_y]
        if cell & UNDER or not self.is_straight(thru_x, thru_y, cell):
            return False

        entry = dirs.OPPOSITE[direction]
        exit_dir = self.pass_through(thru_x, thru_y, direction)
        exits = self.potential_exits(thru_x, thru_y)
        if entry not in exits or exit_dir not in exits:
            return False
        if cell & (entry | exit_dir):
            return False

        out_x, out_y = grid.move(thru_x, thru_y, exit_dir)
        return grid.in_domain(out_x, out_y) and grid[out_x, out_y] == 0

    def perform_weave(self, grid, from_x: int, from_y: int, thru_x: int, thru_y: int,
                      direction: int, under: bool) -> Tuple[int, int, int]:
        """
        Carves the crossing at (thru_x, thru_y) and returns the cell beyond it
        along with the direction of travel into that cell.
        """
        exit_dir = self.pass_through(thru_x, thru_y, direction)
        crossing = dirs.OPPOSITE[direction] | exit_dir

        if under:
            grid.apply_move(thru_x, thru_y, crossing << dirs.UNDER_SHIFT)
        else:
            # Existing corridor drops to the under plane, new one takes the top
            grid.apply_move(thru_x, thru_y, grid.SHIFT_UNDER)
            grid.apply_move(thru_x, thru_y, crossing)

        nx, ny = grid.move(thru_x, thru_y, exit_dir)
        return nx, ny, exit_dir

    def cell_center(self, x: int, y: int) -> Tuple[float, float]:
        return x + 0.5, y + 0.5

    def bounds(self) -> Tuple[float, float]:
        """Drawing extent of the whole grid, in cell units."""
        return float(self.width), float(self.height)


class OrthogonalTopology(Topology):
    name = "ortho"
    DIRECTIONS = (N, S, E, W)
    supports_weave = True
    supports_symmetry = True


class DeltaTopology(Topology):
    """
    Triangles. Each cell has E, W and one vertical exit, south for cells
    pointing up and north for cells pointing down.
    """
    name = "delta"
    DIRECTIONS = (N, S, E, W)

    def points_up(self, x: int, y: int) -> bool:
        return (x + y) % 2 == self.height % 2

    def potential_exits(self, x: int, y: int) -> Tuple[int, ...]:
        vertical = S if self.points_up(x, y) else N
        return (vertical, E, W)

    def weighted_exits(self, x: int, y: int) -> List[int]:
        # Vertical listed twice, otherwise E/W win 2 draws out of 3 and the
        # maze comes out with a horizontal grain.
        vertical = S if self.points_up(x, y) else N
        return [vertical, vertical, E, W]

    def check_wrap(self, wrap_x: bool, wrap_y: bool):
        if wrap_x and self.width % 2:
            raise ConfigurationError("delta mazes can only wrap in x with an even width")
        if wrap_y and self.height % 2:
            raise ConfigurationError("delta mazes can only wrap in y with an even height")

    def cell_center(self, x: int, y: int) -> Tuple[float, float]:
        offset = 2.0 / 3.0 if self.points_up(x, y) else 1.0 / 3.0
        return 0.5 + x * 0.5, (y + offset) * ROW_PITCH

    def bounds(self) -> Tuple[float, float]:
        return (self.width + 1) * 0.5, self.height * ROW_PITCH


class SigmaTopology(Topology):
    """
    Hexagons. Odd columns sit half a row lower than even ones, so E/W always
    point at the same row: for an even column they are the lower diagonals,
    for an odd column the upper ones.

         ____        ____
        / N  \\      /
       /NW  NE\\____/
       \\W    E/ N  \\
        \\_S__/W    E\\____
             \\SW  SE/
              \\_S__/
    """
    name = "sigma"
    DIRECTIONS = (N, S, E, W, NW, NE, SW, SE)
    supports_weave = True

    # Which sides share a straight line, keyed on "column is shifted"
    AXIS_MAP: Dict[bool, Dict[int, int]] = {
        False: {N: S, S: N, E: NW, NW: E, W: NE, NE: W},
        True: {N: S, S: N, W: SE, SE: W, E: SW, SW: E},
    }

    @staticmethod
    def shifted(x: int) -> bool:
        return x % 2 != 0

    def potential_exits(self, x: int, y: int) -> Tuple[int, ...]:
        if self.shifted(x):
            return (N, S, E, W, SW, SE)
        return (N, S, E, W, NW, NE)

    def axis_partner(self, x: int, y: int, direction: int) -> int:
        return self.AXIS_MAP[self.shifted(x)][direction]

    def pass_through(self, x: int, y: int, direction: int) -> int:
        # Entering while moving W means we came through the E wall; the line
        # leaves through whatever side shares an axis with that wall.
        entrance_wall = dirs.OPPOSITE[direction]
        return self.AXIS_MAP[self.shifted(x)][entrance_wall]

    def check_wrap(self, wrap_x: bool, wrap_y: bool):
        if wrap_x and self.width % 2:
            raise ConfigurationError("sigma mazes can only wrap in x with an even width")

    def cell_center(self, x: int, y: int) -> Tuple[float, float]:
        drop = 0.5 if self.shifted(x) else 0.0
        return 0.5 + x * 0.75, (y + 0.5 + drop) * ROW_PITCH

    def bounds(self) -> Tuple[float, float]:
        return 0.75 * self.width + 0.25, (self.height + 0.5) * ROW_PITCH


class UpsilonTopology(Topology):
    """Octagons with diagonal exits, alternating with squares that have none."""
    name = "upsilon"
    DIRECTIONS = (N, S, E, W, NW, NE, SW, SE)
    supports_weave = True

    def is_octagon(self, x: int, y: int) -> bool:
        return (x + y) % 2 == 0

    def potential_exits(self, x: int, y: int) -> Tuple[int, ...]:
        if self.is_octagon(x, y):
            return self.DIRECTIONS
        return (N, S, E, W)

    def check_wrap(self, wrap_x: bool, wrap_y: bool):
        if wrap_x and self.width % 2:
            raise ConfigurationError("upsilon mazes can only wrap in x with an even width")
        if wrap_y and self.height % 2:
            raise ConfigurationError("upsilon mazes can only wrap in y with an even height")


TOPOLOGIES = {
    "ortho": OrthogonalTopology,
    "delta": DeltaTopology,
    "sigma": SigmaTopology,
    "upsilon": UpsilonTopology,
}


def get_topology(name: str, width: int, height: int) -> Topology:
    try:
        cls = TOPOLOGIES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown topology '{name}' (expected one of {', '.join(TOPOLOGIES)})") from None
    return cls(width, height)

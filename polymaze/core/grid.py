from array import array
from typing import Iterator, List, Optional, Tuple

from polymaze.core import directions as dirs
from polymaze.core.errors import ConfigurationError
from polymaze.core.mask import Mask, TransparentMask
from polymaze.core.topology import Topology, get_topology

Point = Tuple[int, int]


class Grid:
    # Bitmask Constants
    N  = dirs.N
    S  = dirs.S
    E  = dirs.E
    W  = dirs.W
    NW = dirs.NW
    NE = dirs.NE
    SW = dirs.SW
    SE = dirs.SE

    PRIMARY = dirs.PRIMARY
    UNDER = dirs.UNDER
    UNDER_SHIFT = dirs.UNDER_SHIFT

    # Marker for apply_move: push the whole cell down into the under plane
    SHIFT_UNDER = "shift_under"

    SYMMETRIES = ("none", "x", "y", "xy", "radial")
    WRAPS = ("none", "x", "y", "xy")

    __slots__ = ('width', 'height', 'cells', 'mask', 'topology', 'symmetry', 'wrap',
                 'entrance', 'exit', 'generated', 'available_width', 'available_height')

    def __init__(self, width: int, height: int, topology="ortho", mask=None,
                 symmetry: str = "none", wrap: str = "none",
                 entrance: Optional[Point] = None, exit: Optional[Point] = None):
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.topology: Topology = get_topology(topology, width, height) if isinstance(topology, str) else topology
        self.mask = mask if mask is not None else TransparentMask(width, height)
        self.symmetry = symmetry
        self.wrap = wrap
        self.entrance = tuple(entrance) if entrance is not None else (-1, 0)
        self.exit = tuple(exit) if exit is not None else (width, height - 1)
        self.generated = False

        self._configure_wrap()
        self._configure_symmetry()

        # 'H' (unsigned short): 8 primary bits + 8 under bits per cell
        self.cells = array('H', [0] * (width * height))

    def _configure_wrap(self):
        if self.wrap not in self.WRAPS:
            raise ConfigurationError(f"Unknown wrap mode '{self.wrap}'")
        self.topology.check_wrap(self.wrap_x, self.wrap_y)

    def _configure_symmetry(self):
        if self.symmetry not in self.SYMMETRIES:
            raise ConfigurationError(f"Unknown symmetry '{self.symmetry}'")

        self.available_width = self.width
        self.available_height = self.height
        if self.symmetry == "none":
            return

        if not self.topology.supports_symmetry:
            raise ConfigurationError(f"{self.topology.name} mazes do not support symmetry")
        if self.wrap != "none":
            raise ConfigurationError("symmetric mazes cannot wrap")

        if self.symmetry in ("x", "xy"):
            self.available_width = (self.width + 1) // 2
        if self.symmetry in ("y", "xy"):
            self.available_height = (self.height + 1) // 2
        if self.symmetry == "radial":
            if self.width != self.height:
                raise ConfigurationError("radial symmetry is only possible for mazes where width == height")
            # Quarter that the other three are rotations of. For odd sizes the
            # centre cell is left out and joined up at the end.
            self.available_width = (self.width + 1) // 2
            self.available_height = self.height // 2

    @property
    def wrap_x(self) -> bool:
        return self.wrap in ("x", "xy")

    @property
    def wrap_y(self) -> bool:
        return self.wrap in ("y", "xy")

    def row_length(self, y: int) -> int:
        return self.width

    def get_index(self, x: int, y: int) -> int:
        if 0 <= y < self.height and 0 <= x < self.row_length(y):
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def cell(self, x: int, y: int) -> int:
        return self.cells[self.get_index(x, y)]

    direction_at = cell

    def set(self, x: int, y: int, value: int):
        self.cells[self.get_index(x, y)] = value

    def __getitem__(self, pos: Point) -> int:
        return self.cells[self.get_index(*pos)]

    def __setitem__(self, pos: Point, value: int):
        self.cells[self.get_index(*pos)] = value

    def normalize(self, x: int, y: int) -> Point:
        if self.wrap_y:
            y %= self.height
        if self.wrap_x and 0 <= y < self.height:
            x %= self.row_length(y)
        return x, y

    def valid(self, x: int, y: int) -> bool:
        """In bounds (after wrapping) and not masked out."""
        if self.wrap_y:
            y %= self.height
        elif not 0 <= y < self.height:
            return False

        length = self.row_length(y)
        if self.wrap_x:
            x %= length
        elif not 0 <= x < length:
            return False

        return self.mask.contains(x, y)

    def in_domain(self, x: int, y: int) -> bool:
        """
        Valid, and inside the part of the grid the generator walks. Symmetric
        grids only walk one region; apply_move writes the mirrored copies.
        """
        if not self.valid(x, y):
            return False
        x, y = self.normalize(x, y)
        return x < self.available_width and y < self.available_height

    def move(self, x: int, y: int, direction: int) -> Point:
        return self.normalize(x + dirs.DX[direction], y + dirs.DY[direction])

    # Topology / direction algebra passthroughs (the formatter-facing surface)

    def potential_exits(self, x: int, y: int) -> Tuple[int, ...]:
        return self.topology.potential_exits(x, y)

    def dx(self, direction: int) -> int:
        return self.topology.dx(direction)

    def dy(self, direction: int) -> int:
        return self.topology.dy(direction)

    opposite = staticmethod(dirs.opposite)
    hmirror = staticmethod(dirs.hmirror)
    vmirror = staticmethod(dirs.vmirror)
    clockwise = staticmethod(dirs.clockwise)
    counter_clockwise = staticmethod(dirs.counter_clockwise)

    def relative_direction(self, a: Point, b: Point) -> Optional[int]:
        """The direction leading from 'a' to the adjacent point 'b', if any."""
        target = self.normalize(*b)
        for d in dirs.ALL:
            if self.normalize(a[0] + dirs.DX[d], a[1] + dirs.DY[d]) == target:
                return d
        return None

    def apply_move(self, x: int, y: int, direction):
        """
        ORs 'direction' into the cell at (x, y), or shifts the cell into the
        under plane when given SHIFT_UNDER. The same write lands on every
        symmetric copy of the cell.
        """
        writes = [(x, y, direction)] + self._mirrored(x, y, direction)

        if direction == self.SHIFT_UNDER:
            # A cell can be its own mirror (centre row/column); shift it once.
            shifted = set()
            for tx, ty, _ in writes:
                idx = self.get_index(tx, ty)
                if idx not in shifted:
                    shifted.add(idx)
                    self.cells[idx] = (self.cells[idx] << self.UNDER_SHIFT) & 0xFFFF
        else:
            for tx, ty, d in writes:
                self.cells[self.get_index(tx, ty)] |= d

    def _mirrored(self, x: int, y: int, direction) -> List[Tuple[int, int, object]]:
        if self.symmetry == "none":
            return []

        def t(fn):
            return direction if direction == self.SHIFT_UNDER else fn(direction)

        mx = self.row_length(y) - x - 1
        my = self.height - y - 1

        if self.symmetry == "x":
            return [(mx, y, t(dirs.hmirror))]
        if self.symmetry == "y":
            return [(x, my, t(dirs.vmirror))]
        if self.symmetry == "xy":
            return [(mx, y, t(dirs.hmirror)),
                    (x, my, t(dirs.vmirror)),
                    (mx, my, t(dirs.opposite))]
        # radial (width == height)
        return [(y, mx, t(dirs.counter_clockwise)),
                (self.width - y - 1, x, t(dirs.clockwise)),
                (mx, my, t(dirs.opposite))]

    def link(self, x: int, y: int, direction: int) -> Point:
        """Carves a passage both ways between (x, y) and its neighbour."""
        nx, ny = self.move(x, y, direction)
        self.apply_move(x, y, direction)
        self.apply_move(nx, ny, dirs.opposite(direction))
        return nx, ny

    @staticmethod
    def dead(cell: int) -> bool:
        """Exactly one primary-plane passage."""
        return dirs.popcount(cell & dirs.PRIMARY) == 1

    def iter_valid(self) -> Iterator[Point]:
        for y in range(self.height):
            for x in range(self.row_length(y)):
                if self.mask.contains(x, y):
                    yield x, y

    def dead_ends(self) -> List[Point]:
        return [(x, y) for x, y in self.iter_valid() if self.dead(self[x, y])]

    def passage_count(self) -> int:
        """
        Undirected passages between valid cells. A tunnel under a cell counts
        once, between the two cells at its ends; boundary openings are ignored.
        """
        half_edges = 0
        for x, y in self.iter_valid():
            for d in dirs.bits(self[x, y] & dirs.PRIMARY):
                if self.valid(*self.move(x, y, d)):
                    half_edges += 1
        return half_edges // 2

    def sparsify(self, passes: int = 1) -> int:
        """
        Trims every dead end back by one cell, 'passes' times over, and
        returns how many dead ends were trimmed. Stops early once a pass
        finds nothing to trim.

        A dead end with a tunnel under it keeps the tunnel, which surfaces
        into the primary plane; a dead end that runs under its neighbour
        takes the whole tunnel with it. Boundary openings are left alone.
        """
        removed = 0
        for _ in range(passes):
            trimmed = 0
            for x, y in self.dead_ends():
                cell = self[x, y]
                # An earlier removal this pass may have emptied it already
                if not self.dead(cell):
                    continue
                d = cell & dirs.PRIMARY
                nx, ny = self.move(x, y, d)
                if not self.valid(nx, ny):
                    continue

                self[x, y] = cell >> self.UNDER_SHIFT

                while self[nx, ny] & dirs.under(dirs.OPPOSITE[d]):
                    ahead = self.topology.pass_through(nx, ny, d)
                    self[nx, ny] &= ~((dirs.OPPOSITE[d] | ahead) << self.UNDER_SHIFT)
                    d = ahead
                    nx, ny = self.move(nx, ny, d)

                self[nx, ny] &= ~dirs.OPPOSITE[d]
                # Nothing left on top of a tunnel: the tunnel becomes the corridor
                if not self[nx, ny] & dirs.PRIMARY:
                    self[nx, ny] >>= self.UNDER_SHIFT
                trimmed += 1

            removed += trimmed
            if not trimmed:
                break
        return removed

    def to_unicursal(self, entrance: Point = (-1, 0)) -> "Grid":
        """
        Doubles a finished orthogonal maze into a labyrinth with a single
        route: every cell becomes a 2x2 block and the route follows both
        walls of every corridor, so it walks the whole source maze. Tunnels
        become pairs of parallel tunnels.

        The source should be a perfect maze; loops give several separate
        circuits. Its own openings are ignored. The new entrance and exit
        sit side by side on the edge ('entrance' is the outside point) and
        the wall between them is closed, which cuts the circuit into a route.
        """
        if self.topology.name != "ortho":
            raise ConfigurationError(f"{self.topology.name} mazes cannot be made unicursal")
        if self.wrap != "none":
            raise ConfigurationError("wrapped mazes cannot be made unicursal")
        if not self.generated:
            raise ConfigurationError("the maze must be generated before it can be made unicursal")

        width, height = self.width * 2, self.height * 2
        ex, ey = entrance
        if 0 <= ex < width:
            exit_point = (ex + 1, ey)
        else:
            exit_point = (ex, ey + 1)

        mask = None
        if not isinstance(self.mask, TransparentMask):
            mask = Mask([[self.mask.contains(x // 2, y // 2) for x in range(width)] for y in range(height)])

        unicursal = Grid(width, height, mask=mask, entrance=entrance, exit=exit_point)
        N, S, E, W = dirs.N, dirs.S, dirs.E, dirs.W

        def carve(x, y, direction, both_ways=False):
            unicursal[x, y] |= direction
            if both_ways:
                unicursal[x + dirs.DX[direction], y + dirs.DY[direction]] |= dirs.OPPOSITE[direction]

        for x, y in self.iter_valid():
            cell = self[x, y]
            # Openings to the outside count as walls here
            field = 0
            for d in dirs.bits(cell & dirs.PRIMARY):
                if self.valid(*self.move(x, y, d)):
                    field |= d
            x2, y2 = x * 2, y * 2

            if field & N:
                carve(x2, y2, N)
                carve(x2 + 1, y2, N)
                if not field & W:
                    carve(x2, y2 + 1, N, True)
                if not field & E:
                    carve(x2 + 1, y2 + 1, N, True)
                if field == N:
                    carve(x2, y2 + 1, E, True)

            if field & S:
                carve(x2, y2 + 1, S)
                carve(x2 + 1, y2 + 1, S)
                if not field & W:
                    carve(x2, y2, S, True)
                if not field & E:
                    carve(x2 + 1, y2, S, True)
                if field == S:
                    carve(x2, y2, E, True)

            if field & W:
                carve(x2, y2, W)
                carve(x2, y2 + 1, W)
                if not field & N:
                    carve(x2 + 1, y2, W, True)
                if not field & S:
                    carve(x2 + 1, y2 + 1, W, True)
                if field == W:
                    carve(x2 + 1, y2, S, True)

            if field & E:
                carve(x2 + 1, y2, E)
                carve(x2 + 1, y2 + 1, E)
                if not field & N:
                    carve(x2, y2, E, True)
                if not field & S:
                    carve(x2, y2 + 1, E, True)
                if field == E:
                    carve(x2, y2, S, True)

            if cell & dirs.under(N):
                tunnel = dirs.under(N | S)
            elif cell & dirs.under(W):
                tunnel = dirs.under(E | W)
            else:
                tunnel = 0
            if tunnel:
                for bx, by in ((x2, y2), (x2 + 1, y2), (x2, y2 + 1), (x2 + 1, y2 + 1)):
                    unicursal[bx, by] |= tunnel

        enter_at = unicursal.add_opening_from(unicursal.entrance)
        exit_at = unicursal.add_opening_from(unicursal.exit)
        if enter_at is None or exit_at is None:
            raise ConfigurationError(f"unicursal entrance {entrance} must lie just outside the grid")

        between = unicursal.relative_direction(enter_at, exit_at)
        if between not in (N, S, E, W) or not unicursal[enter_at] & between:
            raise ConfigurationError(f"unicursal entrance {entrance} must face one side of a source cell")
        unicursal[enter_at] &= ~between
        unicursal[exit_at] &= ~dirs.OPPOSITE[between]

        unicursal.generated = True
        return unicursal

    def adjacent_point(self, point: Point) -> Optional[Point]:
        """Resolves an entrance/exit, possibly just outside the grid, to an interior cell."""
        x, y = point
        if self.valid(x, y):
            return self.normalize(x, y)
        for d in (dirs.W, dirs.E, dirs.N, dirs.S):
            nx, ny = self.move(x, y, d)
            if self.valid(nx, ny):
                return nx, ny
        return None

    def add_opening_from(self, point: Point) -> Optional[Point]:
        """Carves the boundary passage joining an outside point to the grid."""
        x, y = point
        if self.valid(x, y):
            return None
        for d in (dirs.W, dirs.E, dirs.N, dirs.S):
            nx, ny = self.move(x, y, d)
            back = dirs.OPPOSITE[d]
            if self.valid(nx, ny) and back in self.potential_exits(nx, ny):
                self.cells[self.get_index(nx, ny)] |= back
                return nx, ny
        return None

    @property
    def start(self) -> Optional[Point]:
        return self.adjacent_point(self.entrance)

    @property
    def finish(self) -> Optional[Point]:
        return self.adjacent_point(self.exit)

    def __repr__(self):
        state = "generated" if self.generated else "not generated"
        return f"<Grid {self.topology.name} {self.width}x{self.height} {state}>"

import logging
import math
import random
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Sequence, Tuple

from polymaze.core import directions as dirs
from polymaze.core.errors import ConfigurationError
from polymaze.core.grid import Grid

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class GenerationCursor:
    """
    Where a generator currently stands: position, the explicit DFS stack of
    (x, y, untried directions) frames, and the dead ends still to braid.
    """
    __slots__ = ('x', 'y', 'tries', 'stack', 'deadends')

    def __init__(self, x: int = 0, y: int = 0):
        self.x = x
        self.y = y
        self.tries: List[int] = []
        self.stack: List[Tuple[int, int, List[int]]] = []
        self.deadends: List[Point] = []


class Generator(ABC):
    """
    Step-wise maze generator. Each call to step() does one unit of work and
    returns whether there is more to do:

        running  -> the algorithm's own do_step() carves the spanning tree
        braiding -> one deferred dead end is joined to a neighbour per step
        done     -> grid.generated is True

    All randomness comes from self.rng, so one seed (or one shared Random
    passed as 'rng') replays the same maze.
    """
    RUNNING = "running"
    BRAIDING = "braiding"
    DONE = "done"

    name = None
    supports_weave = True
    supports_symmetry = True

    def __init__(self, grid: Grid, seed: int = None, rng: Optional[random.Random] = None,
                 randomness: int = 100, weave: int = 0, braid: int = 0):
        for label, value in (("randomness", randomness), ("weave", weave), ("braid", braid)):
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{label} must be between 0 and 100, got {value}")

        if weave > 0 and not self.supports_weave:
            raise ConfigurationError(f"weave mazes cannot be generated with {self.name}")
        if weave > 0 and not grid.topology.supports_weave:
            raise ConfigurationError(f"weaving is not supported for {grid.topology.name} mazes")
        if grid.symmetry != "none" and not self.supports_symmetry:
            raise ConfigurationError(f"symmetric mazes cannot be generated with {self.name}")
        if grid.generated:
            raise ConfigurationError("grid has already been generated")

        self.grid = grid
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.randomness = randomness
        self.weave = weave
        self.braid = braid

        self.state = self.RUNNING
        self.step_count = 0
        self.fully_connected = True
        self.cursor = GenerationCursor()

    @property
    def pending(self) -> bool:
        return self.state != self.DONE

    def domain_cells(self) -> List[Point]:
        cells = [(x, y) for x, y in self.grid.iter_valid() if self.grid.in_domain(x, y)]
        if not cells:
            raise ConfigurationError("mask leaves no cell to generate")
        return cells

    @abstractmethod
    def do_step(self) -> bool:
        """One unit of the spanning-tree algorithm. False once it has nothing left to do."""

    def step(self) -> bool:
        if self.state == self.DONE:
            return False

        self.step_count += 1

        if self.state == self.BRAIDING:
            x, y = self.cursor.deadends.pop()
            self.braid_cell(x, y)
            if not self.cursor.deadends:
                self._complete()
            return self.pending

        if self.do_step():
            return True

        self.finish()
        return self.pending

    def run(self) -> Iterator[str]:
        """
        Yields the state after every step so a caller can interleave
        generation with drawing.
        """
        while self.step():
            yield self.state
        yield "Done"

    def run_all(self) -> Grid:
        """Helper to run the generator to completion."""
        while self.step():
            pass
        return self.grid

    def finish(self):
        grid = self.grid
        grid.add_opening_from(grid.entrance)
        grid.add_opening_from(grid.exit)

        self.connect_symmetric_copies()

        if self.braid > 0:
            deadends = grid.dead_ends()
            self.rng.shuffle(deadends)
            count = max(1, math.ceil(len(deadends) * self.braid / 100))
            self.cursor.deadends = deadends[:count]

        if self.cursor.deadends:
            logger.debug(f"Spanning tree complete after {self.step_count} steps, braiding {len(self.cursor.deadends)} dead ends")
            self.state = self.BRAIDING
        else:
            self._complete()

    def _complete(self):
        self.state = self.DONE
        self.grid.generated = True
        logger.debug(f"Generated {self.grid!r} in {self.step_count} steps")

    def braid_cell(self, x: int, y: int) -> bool:
        """
        Joins the dead end at (x, y) to one more neighbour. Straight ahead
        (opposite the existing passage) is tried first, then the remaining
        exits in order.
        """
        grid = self.grid
        cell = grid[x, y]
        if not grid.dead(cell):
            return False

        existing = cell & dirs.PRIMARY
        exits = grid.potential_exits(x, y)
        ahead = dirs.opposite(existing)
        candidates = [ahead] + [d for d in exits if d != ahead]

        for d in candidates:
            if d == existing or d not in exits:
                continue
            nx, ny = grid.move(x, y, d)
            if not grid.valid(nx, ny):
                continue
            # Reciprocal side already taken by a tunnel running under the neighbour
            if grid[nx, ny] & dirs.under(dirs.opposite(d)):
                continue
            grid.link(x, y, d)
            return True

        return False

    def connect_symmetric_copies(self):
        """
        Mirrored halves only meet by themselves across an odd-sized axis (the
        middle row/column is shared). Across an even one, splice a passage
        over the seam; apply_move repeats it in every copy.
        """
        grid = self.grid
        aw, ah = grid.available_width, grid.available_height

        if grid.symmetry in ("x", "xy") and grid.width % 2 == 0:
            self._splice([(aw - 1, y) for y in range(ah)], dirs.E)
        if grid.symmetry in ("y", "xy") and grid.height % 2 == 0:
            self._splice([(x, ah - 1) for x in range(aw)], dirs.S)
        if grid.symmetry == "radial":
            if grid.width % 2 == 0:
                self._splice([(aw - 1, y) for y in range(ah)], dirs.E)
            else:
                # The centre cell belongs to no quarter; hang it off its
                # northern neighbour and the rotations do the rest.
                self._splice([(aw - 1, ah - 1)], dirs.S)

    def _splice(self, strip: Sequence[Point], direction: int) -> Optional[Point]:
        grid = self.grid
        offset = self.rng.randrange(len(strip))

        for i in range(len(strip)):
            x, y = strip[(offset + i) % len(strip)]
            nx, ny = grid.move(x, y, direction)
            if grid.valid(x, y) and grid[x, y] != 0 and grid.valid(nx, ny):
                grid.link(x, y, direction)
                return x, y

        logger.warning("maze cannot be fully connected")
        self.fully_connected = False
        return None

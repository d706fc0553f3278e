from typing import List, Optional

from polymaze.algo.base import Generator
from polymaze.core import directions as dirs
from polymaze.core.grid import Grid


class RecursiveBacktracker(Generator):
    """
    Depth-first carving with an explicit stack, one carve (or backtrack)
    per step. The only generator that weaves and mirrors.

    'randomness' is the chance of reshuffling at every new cell; below 100
    the walker tends to keep going in the direction it came from, which
    gives long straight corridors.
    """
    name = "backtracker"

    def __init__(self, grid: Grid, **kwargs):
        super().__init__(grid, **kwargs)

        # Start anywhere inside the region we actually walk
        x, y = self.rng.choice(self.domain_cells())
        self.cursor.x, self.cursor.y = x, y
        self.cursor.tries = self._shuffled_exits(x, y)

    def _shuffled_exits(self, x: int, y: int) -> List[int]:
        tries = self.grid.topology.weighted_exits(x, y)
        self.rng.shuffle(tries)
        return tries

    def _next_direction(self) -> Optional[int]:
        """
        Pops frames until a direction leads somewhere we may go: a blank
        cell, or (weave on) a straight corridor we can cross.
        """
        c = self.cursor
        grid = self.grid

        while True:
            while not c.tries:
                if not c.stack:
                    return None
                c.x, c.y, c.tries = c.stack.pop()

            direction = c.tries.pop()
            nx, ny = grid.move(c.x, c.y, direction)
            if not grid.in_domain(nx, ny):
                continue
            # Weighted exits can repeat a direction we've since carved
            if grid[c.x, c.y] & (direction | dirs.under(direction)):
                continue

            target = grid[nx, ny]
            if target == 0:
                return direction

            if (not grid.dead(target) and self.weave > 0 and self.rng.randrange(100) < self.weave
                    and grid.topology.weave_allowed(grid, c.x, c.y, nx, ny, direction)):
                return direction

    def do_step(self) -> bool:
        direction = self._next_direction()
        if direction is None:
            return False

        c = self.cursor
        grid = self.grid
        nx, ny = grid.move(c.x, c.y, direction)

        grid.apply_move(c.x, c.y, direction)

        if grid[nx, ny] != 0:
            # Crossing a corridor; we land on the cell beyond it
            go_under = self.rng.randrange(2) == 0
            nx, ny, direction = grid.topology.perform_weave(grid, c.x, c.y, nx, ny, direction, go_under)

        grid.apply_move(nx, ny, dirs.opposite(direction))

        c.stack.append((c.x, c.y, c.tries))
        c.tries = self._shuffled_exits(nx, ny)
        keep_heading = self.rng.randrange(100) >= self.randomness
        if keep_heading and direction in c.tries:
            c.tries.append(direction)
        c.x, c.y = nx, ny

        return True

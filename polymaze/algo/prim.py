from typing import List, Set

from polymaze.algo.base import Generator, Point
from polymaze.core.grid import Grid


class PrimsAlgorithm(Generator):
    """
    Randomized Prim: grow one tree from a random cell, each step joining a
    frontier cell to a random neighbour already in the tree.

    At randomness 100 the frontier cell is picked uniformly; otherwise the
    most recently added one is taken part of the time, which turns the
    result towards a depth-first look.
    """
    name = "prim"
    supports_weave = False
    supports_symmetry = False

    def __init__(self, grid: Grid, **kwargs):
        super().__init__(grid, **kwargs)

        self.in_tree: Set[Point] = set()
        # Frontier: list for ordered/random picks, set for O(1) membership
        self.frontier: List[Point] = []
        self.frontier_set: Set[Point] = set()

        self._mark(*self.rng.choice(self.domain_cells()))

    def _mark(self, x: int, y: int):
        grid = self.grid
        self.in_tree.add((x, y))
        for d in grid.potential_exits(x, y):
            nx, ny = grid.move(x, y, d)
            if not grid.valid(nx, ny):
                continue
            if (nx, ny) in self.in_tree or (nx, ny) in self.frontier_set:
                continue
            self.frontier_set.add((nx, ny))
            self.frontier.append((nx, ny))

    def do_step(self) -> bool:
        if not self.frontier:
            return False

        grid = self.grid
        if self.rng.randrange(100) < self.randomness:
            idx = self.rng.randrange(len(self.frontier))
        else:
            idx = len(self.frontier) - 1

        x, y = self.frontier.pop(idx)
        self.frontier_set.discard((x, y))

        # Carve towards one random neighbour that is already part of the maze
        joined = []
        for d in grid.potential_exits(x, y):
            if grid.move(x, y, d) in self.in_tree:
                joined.append(d)

        grid.link(x, y, self.rng.choice(joined))
        self._mark(x, y)
        return True

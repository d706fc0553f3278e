from typing import Dict, List, Tuple

from polymaze.algo.base import Generator, Point
from polymaze.core import directions as dirs
from polymaze.core.grid import Grid


class DisjointCell:
    """A single cell in a disjoint-set forest."""
    __slots__ = ("rank", "parent")

    def __init__(self):
        self.rank = 0
        self.parent = self

    def top(self) -> "DisjointCell":
        """Return the set this cell belongs to."""
        root = self
        while root.parent is not root:
            root = root.parent
        # Path compression
        node = self
        while node.parent is not root:
            node.parent, node = root, node.parent
        return root

    def union(self, other: "DisjointCell") -> bool:
        """Union the set of this cell with 'other'. False if they were already joined."""
        mine = self.top()
        other = other.top()
        if mine is other:
            return False
        if mine.rank < other.rank:
            mine, other = other, mine
        other.parent = mine
        if mine.rank == other.rank:
            mine.rank += 1
        return True


class Kruskal(Generator):
    """
    Randomized Kruskal: every adjacency between valid cells is an edge with a
    random weight, and edges are carved lightest first unless they would
    close a loop. One carve per step.

    At randomness < 100 some edges keep weight 1 and sink behind the random
    ones (which fall in 0.5..1.5), so they are carved in grid order.
    """
    name = "kruskal"
    supports_weave = False
    supports_symmetry = False

    def __init__(self, grid: Grid, **kwargs):
        super().__init__(grid, **kwargs)

        cells = self.domain_cells()
        self.sets: Dict[Point, DisjointCell] = {p: DisjointCell() for p in cells}

        # (weight, x, y, direction). Only W and N, so each adjacency shows up
        # once; diagonals are left out, N/S/E/W already reach every cell.
        edges: List[Tuple[float, int, int, int]] = []
        for x, y in cells:
            for d in grid.potential_exits(x, y):
                if d not in (dirs.W, dirs.N):
                    continue
                if not grid.valid(*grid.move(x, y, d)):
                    continue
                if self.rng.randrange(100) < self.randomness:
                    weight = 0.5 + self.rng.random()
                else:
                    weight = 1
                edges.append((weight, x, y, d))

        # Heaviest first so pop() hands out the lightest
        edges.sort(key=lambda e: e[0], reverse=True)
        self.edges = edges

    def do_step(self) -> bool:
        grid = self.grid
        while self.edges:
            _, x, y, d = self.edges.pop()
            nx, ny = grid.move(x, y, d)
            if self.sets[(x, y)].union(self.sets[(nx, ny)]):
                grid.link(x, y, d)
                return True
        return False

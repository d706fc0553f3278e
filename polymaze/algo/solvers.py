import math
from abc import ABC, abstractmethod
from array import array
from typing import Iterator, List, Optional, Tuple

from polymaze.core import directions as dirs
from polymaze.core.errors import ConfigurationError, GridNotGeneratedError, NoPathError
from polymaze.core.grid import Grid
from polymaze.core.path import Path

Point = Tuple[int, int]

# Visited-matrix bits: a woven cell can be passed once on each plane
OVER_PLANE = 1
UNDER_PLANE = 2


class Solver(ABC):
    """
    Steppable path search over a finished grid. Solvers only read the grid;
    their bookkeeping lives on the solver, so several can share one maze.
    """

    def __init__(self, grid: Grid, start: Optional[Point] = None, end: Optional[Point] = None):
        if not grid.generated:
            raise GridNotGeneratedError("the maze must be generated before it can be solved")

        self.grid = grid
        # Points just outside the grid (entrance/exit style) resolve to the cell they open onto
        self.start = grid.adjacent_point(start) if start is not None else grid.start
        self.end = grid.adjacent_point(end) if end is not None else grid.finish
        if self.start is None or self.end is None:
            raise ConfigurationError("entrance and exit must each touch a valid cell")

        self.solution: Optional[List[Point]] = None
        self.failed = False
        self.visited_count = 0
        self.step_count = 0

    @property
    def solved(self) -> bool:
        return self.solution is not None

    def index(self, point: Point) -> int:
        return self.grid.get_index(*point)

    @abstractmethod
    def step(self) -> bool:
        """Advances the search by one node. False once solved or failed."""

    @abstractmethod
    def current_solution(self) -> List[Point]:
        """The route being explored right now (the final one once solved)."""

    def solve(self) -> List[Point]:
        while self.step():
            pass
        if self.failed:
            raise NoPathError(self.start, self.end)
        return self.solution

    def run(self, every: int = 100) -> Iterator[str]:
        """Steps to the end, yielding a progress line every 'every' steps."""
        while self.step():
            self.step_count += 1
            if self.step_count % every == 0:
                yield f"Visited: {self.visited_count}"
        yield "Solved" if self.solved else "No Path"

    def to_path(self, **meta) -> Path:
        """
        The route as a Path overlay, stitched to the entrance and, once
        solved, to the exit.
        """
        path = Path(self.grid, **meta)
        prev = self.grid.entrance
        route = self.solution if self.solved else self.current_solution()

        for point in route:
            how = path.link(prev, point)
            path.set(point, how)
            prev = point

        if self.solved:
            path.link(prev, self.grid.exit)
            path.set(self.grid.exit)

        return path


class Backtracker(Solver):
    """
    Depth-first search. Finds *a* path (in a perfect maze, the path) and
    shows the search wandering into dead ends and backing out.
    """

    def __init__(self, grid: Grid, start: Optional[Point] = None, end: Optional[Point] = None):
        super().__init__(grid, start, end)
        self.visits = array('B', [0] * (grid.width * grid.height))
        self.stack: List[Tuple[Point, List[int]]] = []
        self._started = False

    def current_solution(self) -> List[Point]:
        if self.solved:
            return self.solution
        return [point for point, _ in self.stack]

    def _arrived(self) -> bool:
        point = self.stack[-1][0]
        if point == self.end:
            self.solution = self.current_solution()
            return False
        return True

    def step(self) -> bool:
        if self.solved or self.failed:
            return False

        grid = self.grid

        if not self._started:
            self._started = True
            self.visits[self.index(self.start)] |= OVER_PLANE
            self.visited_count = 1
            self.stack.append((self.start, list(grid.potential_exits(*self.start))))
            return self._arrived()

        (x, y), tries = self.stack[-1]
        cell = grid[x, y]

        while tries:
            attempt = tries.pop()
            if not cell & attempt:
                continue

            is_under = bool(attempt & dirs.UNDER)
            direction = attempt >> dirs.UNDER_SHIFT if is_under else attempt
            nx, ny = grid.move(x, y, direction)
            # Boundary openings lead off the grid
            if not grid.valid(nx, ny):
                continue

            back = dirs.OPPOSITE[direction]
            target = grid[nx, ny]
            going_under = bool(target & dirs.under(back))
            plane = UNDER_PLANE if going_under else OVER_PLANE

            idx = self.index((nx, ny))
            if self.visits[idx] & plane:
                continue
            self.visits[idx] |= plane
            self.visited_count += 1

            if going_under:
                # In a tunnel the only way on is out the other end
                tunnel = (target & dirs.UNDER) >> dirs.UNDER_SHIFT
                candidates = [dirs.under(tunnel & ~back)]
            else:
                candidates = [d for d in grid.potential_exits(nx, ny) if d != back]

            self.stack.append(((nx, ny), candidates))
            return self._arrived()

        # Dead end, back up
        self.stack.pop()
        if not self.stack:
            self.failed = True
            return False
        return True


class Node:
    """One A* search state: a point on one plane plus the route that led there."""
    __slots__ = ('point', 'under', 'path_cost', 'estimate', 'cost', 'history', 'next')

    def __init__(self, point: Point, under: bool, path_cost: int, estimate: float, history: List[Point]):
        self.point = point
        self.under = under
        self.path_cost = path_cost
        self.estimate = estimate
        self.cost = path_cost + estimate
        self.history = history
        self.next: Optional["Node"] = None

    def __lt__(self, other: "Node") -> bool:
        return self.cost < other.cost

    def __repr__(self):
        plane = "under" if self.under else "over"
        return f"<Node {self.point} {plane} cost={self.cost:.2f}>"


class AStar(Solver):
    """
    Shortest path. The open set is a linked list kept sorted by cost;
    'open' is its head, so a viewer can walk it to show the frontier.
    """

    def __init__(self, grid: Grid, start: Optional[Point] = None, end: Optional[Point] = None):
        super().__init__(grid, start, end)
        self.visits = array('B', [0] * (grid.width * grid.height))
        self.open: Optional[Node] = Node(self.start, False, 0, self.estimate(self.start), [])

    def estimate(self, point: Point) -> float:
        """
        Straight-line distance to the goal, the short way round on wrapped
        axes, in units of the longest single step so it never overshoots.
        """
        dx = abs(self.end[0] - point[0])
        dy = abs(self.end[1] - point[1])
        if self.grid.wrap_x:
            dx = min(dx, self.grid.width - dx)
        if self.grid.wrap_y:
            dy = min(dy, self.grid.height - dy)
        return math.hypot(dx, dy) / self.grid.topology.max_step

    def current_solution(self) -> List[Point]:
        if self.solved:
            return self.solution
        if self.open is None:
            return []
        return self.open.history + [self.open.point]

    def open_nodes(self) -> Iterator[Node]:
        node = self.open
        while node is not None:
            yield node
            node = node.next

    def _add_node(self, point: Point, under: bool, path_cost: int, history: List[Point]):
        plane = UNDER_PLANE if under else OVER_PLANE
        if self.visits[self.index(point)] & plane:
            return

        node = Node(point, under, path_cost, self.estimate(point), history)

        prev, n = None, self.open
        while n is not None and n < node:
            prev, n = n, n.next

        node.next = n
        if prev is None:
            self.open = node
        else:
            prev.next = node

        # Anything right behind us for the same state costs at least as much
        while node.next is not None and node.next.point == point and node.next.under == under:
            node.next = node.next.next

    def step(self) -> bool:
        if self.solved or self.failed:
            return False

        current = self.open
        if current is None:
            self.failed = True
            return False

        if current.point == self.end:
            self.solution = current.history + [current.point]
            self.open = None
            return False

        self.open = current.next

        plane = UNDER_PLANE if current.under else OVER_PLANE
        idx = self.index(current.point)
        if self.visits[idx] & plane:
            # Stale duplicate of a state already expanded
            return True
        self.visits[idx] |= plane
        self.visited_count += 1

        grid = self.grid
        x, y = current.point
        cell = grid[x, y]
        history = current.history + [current.point]

        for d in grid.potential_exits(x, y):
            wall = dirs.under(d) if current.under else d
            if not cell & wall:
                continue
            nx, ny = grid.move(x, y, d)
            if not grid.valid(nx, ny):
                continue
            going_under = bool(grid[nx, ny] & dirs.under(dirs.OPPOSITE[d]))
            self._add_node((nx, ny), going_under, current.path_cost + 1, history)

        if self.open is None:
            self.failed = True
            return False
        return True


SOLVERS = {
    "backtracker": Backtracker,
    "astar": AStar,
}

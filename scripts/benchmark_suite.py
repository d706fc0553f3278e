import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polymaze.algo.solvers import SOLVERS
from polymaze.core.complexity import MazeStats
from polymaze.core.config import GENERATORS, MazeConfig
from polymaze.core.errors import ConfigurationError
from polymaze.core.topology import TOPOLOGIES


def benchmark_generation(topology: str, algorithm: str, size: int, seed: int = 42):
    config = MazeConfig(width=size, height=size, topology=topology, algorithm=algorithm, seed=seed)
    try:
        grid, generator = config.build()
    except ConfigurationError as e:
        print(f"{topology:<8} | {algorithm:<12} | skipped ({e})")
        return None

    start = time.time()
    generator.run_all()
    duration = time.time() - start

    stats = MazeStats.calculate(grid)
    cells = stats["cells"]
    print(f"{topology:<8} | {algorithm:<12} | {duration:<10.4f} | {cells / duration:>12,.0f} | {stats['dead_end_percent']:>6.1f}%")
    return grid


def benchmark_solvers(grid):
    for name, cls in SOLVERS.items():
        solver = cls(grid)
        start = time.time()
        path = solver.solve()
        duration = time.time() - start
        print(f"    {name:<12} | {duration:<10.4f} | path {len(path):<6} | visited {solver.visited_count}")


def run_suite(size: int = 60):
    print(f"\n--- Generation ({size}x{size}) ---")
    print(f"{'TOPOLOGY':<8} | {'ALGORITHM':<12} | {'TIME (s)':<10} | {'CELLS/SEC':>12} | {'DEAD':>7}")
    print("-" * 62)

    grids = {}
    for topology in TOPOLOGIES:
        for algorithm in GENERATORS:
            grid = benchmark_generation(topology, algorithm, size)
            if grid is not None and algorithm == "backtracker":
                grids[topology] = grid

    print("\n--- Solvers (backtracker mazes) ---")
    for topology, grid in grids.items():
        print(topology)
        benchmark_solvers(grid)


if __name__ == "__main__":
    run_suite(int(sys.argv[1]) if len(sys.argv) > 1 else 60)

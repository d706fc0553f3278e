import argparse
import logging
import sys

from polymaze.algo.solvers import SOLVERS
from polymaze.core.complexity import MazeStats
from polymaze.core.config import GENERATORS, MazeConfig
from polymaze.core.errors import ConfigurationError, MazeError
from polymaze.core.grid import Grid
from polymaze.core.mask import Mask, TriangleMask
from polymaze.core.topology import TOPOLOGIES

logger = logging.getLogger("polymaze")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def load_mask(args):
    if args.triangle:
        return TriangleMask(args.height)
    if not args.mask:
        return None
    if args.mask.endswith(".txt"):
        with open(args.mask) as f:
            return Mask.from_text(f.read())
    return Mask.from_image(args.mask)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="polymaze: step-wise maze generator and solver")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate (and optionally solve) a maze")
    gen_parser.add_argument("--width", type=int, default=20, help="Maze Width")
    gen_parser.add_argument("--height", type=int, default=20, help="Maze Height")
    gen_parser.add_argument("--topology", type=str, default="ortho", choices=list(TOPOLOGIES), help="Cell shape")
    gen_parser.add_argument("--algo", type=str, default="backtracker", choices=list(GENERATORS), help="Generation Algorithm")
    gen_parser.add_argument("--mask", type=str, help="Mask image (transparent or light pixels are open) or .txt file")
    gen_parser.add_argument("--triangle", action="store_true", help="Triangular mask; width becomes 2*height+1")
    gen_parser.add_argument("--symmetry", type=str, default="none", choices=list(Grid.SYMMETRIES), help="Mirror mode")
    gen_parser.add_argument("--wrap", type=str, default="none", choices=list(Grid.WRAPS), help="Wrap-around axes")
    gen_parser.add_argument("--weave", type=int, default=0, help="Chance (0-100) of crossing a corridor")
    gen_parser.add_argument("--braid", type=int, default=0, help="Percent (0-100) of dead ends to remove")
    gen_parser.add_argument("--randomness", type=int, default=100, help="Percent (0-100); lower gives longer runs")
    gen_parser.add_argument("--sparse", type=int, default=0, help="Passes of dead-end trimming after generation")
    gen_parser.add_argument("--unicursal", action="store_true", help="Turn an ortho maze into a single-route labyrinth (doubles the size)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--solve", type=str, choices=list(SOLVERS), help="Solve the maze afterwards")
    gen_parser.add_argument("--visual", action="store_true", help="Show visualization")
    gen_parser.add_argument("--record", action="store_true", help="Record video")

    return parser


def generate(args):
    mask = load_mask(args)
    width = mask.width if mask is not None else args.width
    height = mask.height if mask is not None else args.height

    config = MazeConfig(width=width, height=height, topology=args.topology, algorithm=args.algo,
                        mask=mask, symmetry=args.symmetry, wrap=args.wrap, weave=args.weave,
                        braid=args.braid, randomness=args.randomness, seed=args.seed)
    grid, generator = config.build()

    if args.sparse < 0:
        raise ConfigurationError(f"sparse must not be negative, got {args.sparse}")
    if args.unicursal and args.topology != "ortho":
        raise ConfigurationError(f"{args.topology} mazes do not support the unicursal option")
    if (args.visual or args.record) and (args.sparse or args.unicursal):
        raise ConfigurationError("sparse and unicursal mazes cannot be shown while generating")

    logger.info(f"Generating {width}x{height} {args.topology} maze with {args.algo}...")

    if args.visual or args.record:
        from polymaze.viz.renderer import Renderer

        logger.info("Visual mode enabled - Opening window...")
        renderer = Renderer(grid, generator=generator, solver_name=args.solve, record=args.record)
        renderer.init_window()
        renderer.run_loop()
        solver = renderer.solver
    else:
        generator.run_all()
        if args.sparse:
            trimmed = grid.sparsify(args.sparse)
            logger.info(f"Sparsified: {trimmed} dead-end cells removed")
        if args.unicursal:
            grid = grid.to_unicursal()
            logger.info(f"Unicursal: {grid.width}x{grid.height}")
        solver = None
        if args.solve:
            solver = SOLVERS[args.solve](grid)
            solver.solve()

    if not grid.generated:
        logger.info("Window closed before the maze was finished.")
        return

    if not generator.fully_connected:
        logger.warning("Some mirrored sections could not be joined up")

    logger.info(f"Stats: {MazeStats.calculate(grid)}")

    if solver is not None:
        if solver.solved:
            logger.info(f"Solution length: {len(solver.solution)} ({solver.visited_count} cells visited)")
        elif solver.failed:
            logger.info("No solution found.")


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    try:
        if args.command == "generate":
            generate(args)
    except (MazeError, OSError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

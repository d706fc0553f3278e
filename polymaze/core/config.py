import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from polymaze.algo.backtracker import RecursiveBacktracker
from polymaze.algo.base import Generator
from polymaze.algo.kruskal import Kruskal
from polymaze.algo.prim import PrimsAlgorithm
from polymaze.core.errors import ConfigurationError
from polymaze.core.grid import Grid
from polymaze.core.topology import TOPOLOGIES

GENERATORS = {
    "backtracker": RecursiveBacktracker,
    "kruskal": Kruskal,
    "prim": PrimsAlgorithm,
}


@dataclass
class MazeConfig:
    """
    Every knob for one maze. build() checks the combination and hands back
    a blank grid with a generator ready to step over it.

        grid, gen = MazeConfig(width=20, height=20, weave=40).build()
        gen.run_all()
    """
    width: int = 10
    height: int = 10
    topology: str = "ortho"
    algorithm: str = "backtracker"
    mask: object = None
    symmetry: str = "none"
    wrap: str = "none"
    weave: int = 0
    braid: int = 0
    randomness: int = 100
    seed: Optional[int] = None
    entrance: Optional[Tuple[int, int]] = None
    exit: Optional[Tuple[int, int]] = None
    rng: Optional[random.Random] = field(default=None, repr=False)

    def validate(self):
        if self.topology not in TOPOLOGIES:
            raise ConfigurationError(f"Unknown topology '{self.topology}' (expected one of {', '.join(TOPOLOGIES)})")
        if self.algorithm not in GENERATORS:
            raise ConfigurationError(f"Unknown algorithm '{self.algorithm}' (expected one of {', '.join(GENERATORS)})")
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        for label in ("weave", "braid", "randomness"):
            value = getattr(self, label)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{label} must be between 0 and 100, got {value}")
        if self.mask is not None and (self.mask.width, self.mask.height) != (self.width, self.height):
            raise ConfigurationError(
                f"mask is {self.mask.width}x{self.mask.height} but the maze is {self.width}x{self.height}")

    def build(self) -> Tuple[Grid, Generator]:
        self.validate()
        grid = Grid(self.width, self.height, topology=self.topology, mask=self.mask,
                    symmetry=self.symmetry, wrap=self.wrap,
                    entrance=self.entrance, exit=self.exit)
        generator = GENERATORS[self.algorithm](grid, seed=self.seed, rng=self.rng,
                                               randomness=self.randomness,
                                               weave=self.weave, braid=self.braid)
        return grid, generator

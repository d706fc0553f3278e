class MazeError(Exception):
    """Base class for everything polymaze raises on purpose."""


class ConfigurationError(MazeError, ValueError):
    """
    Raised at construction time when an option (or combination of options)
    is not supported, e.g. weaving with Kruskal's algorithm or radial
    symmetry on a non-square grid.
    """


class NoPathError(MazeError):
    """The solver exhausted every route without reaching its target."""

    def __init__(self, start, end):
        super().__init__(f"No path from {start} to {end}")
        self.start = start
        self.end = end


class GridNotGeneratedError(MazeError, RuntimeError):
    """A solver was pointed at a grid whose generation has not finished."""

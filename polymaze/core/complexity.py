from polymaze.core import directions as dirs
from polymaze.core.grid import Grid


class MazeStats:
    @staticmethod
    def calculate(grid: Grid):
        dead_ends = 0
        corridors = 0  # 2 exits
        junctions = 0  # 3+ exits
        crossings = 0  # cells with a passage underneath
        cells = 0

        for x, y in grid.iter_valid():
            val = grid[x, y]
            cells += 1
            exits = dirs.popcount(val & Grid.PRIMARY)
            if exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            elif exits >= 3: junctions += 1
            if val & Grid.UNDER:
                crossings += 1

        return {
            "cells": cells,
            "passages": grid.passage_count(),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "crossings": crossings,
            "dead_end_percent": (dead_ends / cells) * 100 if cells > 0 else 0
        }

"""Grass stage: covers the surface and exposed cliff faces."""

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

from .cell_types import CellType
from .grid import Grid


def grow_grass(grid: Grid, elevations: NDArray[np.int32]) -> int:
    """Turn the top ground cell of each interior column into grass.

    Grass continues downward while a horizontal neighbour at that height is
    air, so the sides of steps in the terrain are covered too. The outermost
    columns are skipped.

    Args:
        grid: World grid, modified in place.
        elevations: Surface boundary per column.

    Returns:
        Number of cells turned into grass.
    """
    width = grid.shape[1]
    grown = 0

    for x in range(width - 2, 0, -1):
        y = int(elevations[x]) - 1
        while y >= 0:
            grid[y, x] = CellType.GRASS
            grown += 1
            left = grid[y, x - 1]
            right = grid[y, x + 1]
            y -= 1
            if left != CellType.AIR and right != CellType.AIR:
                break

    return grown


def iter_grass(grid: Grid, elevations: NDArray[np.int32]) -> Iterator[float]:
    """Grass stage runner.

    Yields:
        Stage progress in [0, 1].
    """
    grow_grass(grid, elevations)
    yield 1.0

"""World grid helpers shared by the generation stages.

The grid is a uint8 array of shape (height, width) indexed ``grid[y, x]``,
with row 0 at the bottom of the world.
"""

from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from .cell_types import CellType
from .config import WorldSize

Grid = NDArray[np.uint8]


class Section(NamedTuple):
    """A run of one cell type down to an inclusive lower bound."""

    lower_bound: int
    cell_type: CellType


def new_grid(world_size: WorldSize) -> Grid:
    """Create an all-air grid for the world."""
    return np.full(
        (world_size.height, world_size.width), CellType.AIR, dtype=np.uint8
    )


def new_elevations(world_size: WorldSize) -> NDArray[np.int32]:
    """Create a zeroed elevation profile for the world."""
    return np.zeros(world_size.width, dtype=np.int32)


def in_bounds(grid: Grid, x: int, y: int) -> bool:
    """Whether (x, y) addresses a cell of the grid."""
    height, width = grid.shape
    return 0 <= x < width and 0 <= y < height


def fill_column(grid: Grid, x: int, top: int, *sections: Section) -> int:
    """Fill a column downward from ``top`` with consecutive sections.

    Each section writes its type from the current y down to its lower bound
    (inclusive). Bounds are clamped to the grid; a section whose bound lies
    above the current y writes nothing.

    Args:
        grid: World grid.
        x: Column to fill.
        top: First y written (inclusive).
        *sections: Sections in top-to-bottom order.

    Returns:
        The y below the last written cell.
    """
    height = grid.shape[0]
    y = min(top, height - 1)
    for section in sections:
        lower = max(section.lower_bound, 0)
        if y >= lower:
            grid[lower : y + 1, x] = section.cell_type
            y = lower - 1
    return y


def stamp_rock_down(grid: Grid, x: int, top: int) -> int:
    """Write rock from ``top`` downward until a cell is already rock.

    Returns:
        Number of cells converted.
    """
    converted = 0
    for y in range(min(top, grid.shape[0] - 1), -1, -1):
        if grid[y, x] == CellType.ROCK:
            break
        grid[y, x] = CellType.ROCK
        converted += 1
    return converted

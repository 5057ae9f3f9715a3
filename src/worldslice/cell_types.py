"""Grid cell types and the cave wall transition table."""

from enum import IntEnum

import numpy as np


class CellType(IntEnum):
    """Cell types stored in the world grid as uint8 values."""

    AIR = 0
    ROCK = 1
    DIRT = 2
    GRASS = 3
    SAND = 4
    WATER = 5
    ROCK_WALL = 6
    DIRT_WALL = 7
    SAND_WALL = 8

    @property
    def breaks_caves(self) -> bool:
        """Whether a cave walk stops on contact with this type."""
        return self in CAVE_BREAKING_TYPES

    @property
    def wall_variant(self) -> "CellType":
        """Type this cell becomes when a tunnel is carved through it."""
        return WALL_TRANSITIONS.get(self, self)


# Cell types not listed here are left untouched by carving
WALL_TRANSITIONS: dict[CellType, CellType] = {
    CellType.ROCK: CellType.ROCK_WALL,
    CellType.DIRT: CellType.DIRT_WALL,
    CellType.GRASS: CellType.AIR,
    CellType.SAND: CellType.SAND_WALL,
}

CAVE_BREAKING_TYPES = frozenset({
    CellType.WATER,
    CellType.SAND,
    CellType.SAND_WALL,
})

# Indexed by cell value for O(1) lookups inside the rasterizer
WALL_TABLE = np.array(
    [cell.wall_variant for cell in CellType], dtype=np.uint8
)

BREAKING_VALUES = frozenset(int(cell) for cell in CellType if cell.breaks_caves)

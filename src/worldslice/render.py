"""Map cell types to colours and export worlds as images."""

import logging
from collections.abc import Mapping
from pathlib import Path

import numpy as np
from PIL import Image

from .cell_types import CellType
from .grid import Grid

logger = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

# RGBA per cell type; None draws nothing (transparent)
DEFAULT_PALETTE: dict[CellType, Color | None] = {
    CellType.AIR: None,
    CellType.ROCK: (110, 110, 115, 255),       # Gray
    CellType.DIRT: (135, 95, 55, 255),         # Brown
    CellType.GRASS: (70, 150, 60, 255),        # Green
    CellType.SAND: (230, 210, 140, 255),       # Sandy yellow
    CellType.WATER: (40, 90, 170, 220),        # Blue
    CellType.ROCK_WALL: (60, 60, 65, 255),     # Dark gray
    CellType.DIRT_WALL: (80, 55, 35, 255),     # Dark brown
    CellType.SAND_WALL: (160, 140, 90, 255),   # Dark sand
}

_TRANSPARENT: Color = (0, 0, 0, 0)


def build_color_table(palette: Mapping[CellType, Color | None]) -> np.ndarray:
    """Build a (len(CellType), 4) uint8 lookup table from a palette.

    Cell types missing from the palette are logged as errors and drawn
    transparent.
    """
    table = np.zeros((len(CellType), 4), dtype=np.uint8)
    for cell_type in CellType:
        if cell_type not in palette:
            logger.error(f"{cell_type.name} has no matching color")
            continue
        color = palette[cell_type]
        table[cell_type] = color if color is not None else _TRANSPARENT
    return table


def grid_to_image(
    grid: Grid,
    palette: Mapping[CellType, Color | None] = DEFAULT_PALETTE,
) -> Image.Image:
    """Render the grid one pixel per cell, with y pointing up.

    Args:
        grid: World grid.
        palette: Colour per cell type.

    Returns:
        RGBA image of size (width, height).
    """
    table = build_color_table(palette)
    # Image rows run top to bottom; grid row 0 is the bottom of the world
    pixels = table[np.flipud(grid)]
    return Image.fromarray(np.ascontiguousarray(pixels))


def save_image(
    path: Path,
    grid: Grid,
    palette: Mapping[CellType, Color | None] = DEFAULT_PALETTE,
) -> None:
    """Save the grid as a PNG image."""
    path.parent.mkdir(parents=True, exist_ok=True)
    grid_to_image(grid, palette).save(path)
    logger.info(f"Saved image to {path}")

"""Ocean and beach carving at both horizontal edges of the world."""

import logging
import math
from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

from .cell_types import CellType
from .config import OceanStageConfig, WorldSize
from .grid import Grid, Section, fill_column, stamp_rock_down

logger = logging.getLogger(__name__)

LEFT = -1
RIGHT = +1
QUARTER_TURN = math.pi / 2


def edge_column(world_size: WorldSize, side: int, offset: int) -> int:
    """Column ``offset`` cells in from the outer edge on ``side``."""
    if side == LEFT:
        return offset
    return world_size.width - 1 - offset


def water_bottom(sea_level: int, water_depth: int, water_width: int, offset: int) -> int:
    """Top of the sea floor ``offset`` columns in from the outer edge.

    The depth follows a quarter sine sweep: zero at the outer edge, growing
    toward ``water_depth`` at the shoreline.
    """
    angle = offset * QUARTER_TURN / water_width
    return sea_level - int(water_depth * math.sin(angle))


def carve_ocean(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    config: OceanStageConfig,
    side: int,
) -> None:
    """Reshape one edge of the world into beach and ocean.

    The beach slopes linearly from the pre-existing terrain height at its
    inland boundary toward sea level. Dirt left under the beach or sea bed is
    re-based as rock.

    Args:
        grid: World grid, modified in place.
        elevations: Surface boundary per column, updated for touched columns.
        world_size: World bounds.
        config: Ocean stage parameters.
        side: LEFT or RIGHT.
    """
    width, height = world_size.width, world_size.height
    sea_level = world_size.sea_level
    top = height - 1

    water_width, beach_width = config.extent(width)
    beach_width_float = config.beach_width_fraction * width
    water_depth = int(water_width * config.depth_per_width)

    inland = water_width + beach_width
    if inland < width:
        reference = int(elevations[edge_column(world_size, side, inland)])
    else:
        reference = sea_level

    # Beach
    for offset in range(water_width, inland):
        x = edge_column(world_size, side, offset)
        closeness_to_water = (inland - 1 - offset) / beach_width_float
        surface = int(
            sea_level * closeness_to_water + reference * (1 - closeness_to_water)
        )
        surface = min(max(surface, 0), top)

        y = fill_column(
            grid,
            x,
            top,
            Section(surface, CellType.AIR),
            Section(surface - config.beach_depth, CellType.SAND),
        )
        stamp_rock_down(grid, x, y)
        elevations[x] = surface

    # Ocean
    for offset in range(water_width):
        x = edge_column(world_size, side, offset)
        bottom = water_bottom(sea_level, water_depth, water_width, offset)
        sea_bed_bottom = min(bottom - config.sea_bed_thickness, sea_level - config.beach_depth)

        y = fill_column(
            grid,
            x,
            top,
            Section(sea_level, CellType.AIR),
            Section(bottom, CellType.WATER),
            Section(sea_bed_bottom, CellType.SAND),
        )
        stamp_rock_down(grid, x, y)
        elevations[x] = min(max(bottom, 0), top)


def iter_oceans(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    config: OceanStageConfig,
) -> Iterator[float]:
    """Ocean stage runner: left edge, then right edge.

    Yields:
        Stage progress in [0, 1].
    """
    water_width, beach_width = config.extent(world_size.width)
    logger.debug(f"Ocean width {water_width}, beach width {beach_width} per side")

    carve_ocean(grid, elevations, world_size, config, LEFT)
    yield 0.5
    carve_ocean(grid, elevations, world_size, config, RIGHT)
    yield 1.0

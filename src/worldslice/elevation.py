"""Elevation field generation and base terrain fill."""

import logging
from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

from .cell_types import CellType
from .config import TerrainStageConfig, WorldSize
from .grid import Grid
from .noise import noise_row
from .seed import Seed

logger = logging.getLogger(__name__)


def make_elevations(
    world_size: WorldSize,
    seed: Seed,
    config: TerrainStageConfig,
) -> NDArray[np.int32]:
    """Generate the surface elevation of every column.

    The base layer is squared noise, which biases most columns toward sea
    level and leaves few peaks. Each modification curve draws from a freshly
    incremented seed and is added on top.

    Args:
        world_size: World bounds.
        seed: Shared seed counter; advanced once per modification curve.
        config: Terrain stage parameters.

    Returns:
        1D int32 array of elevations clamped into [0, height - 1].
    """
    width, height = world_size.width, world_size.height
    above_sea = height - world_size.sea_level
    max_height = above_sea * config.max_height_fraction
    xs = np.arange(width, dtype=np.float64)

    base = (1.0 + noise_row(int(seed), xs, config.noise_roughness / above_sea)) / 2.0
    elevations = world_size.sea_level + np.trunc(max_height * base * base).astype(np.int64)

    for curve in config.modification_curves:
        seed.increment()
        offsets = curve.max_block_difference * noise_row(int(seed), xs, curve.noise_roughness)
        elevations += np.trunc(offsets).astype(np.int64)

    return np.clip(elevations, 0, height - 1).astype(np.int32)


def fill_terrain(
    grid: Grid,
    elevations: NDArray[np.int32],
    dirt_thickness: int,
) -> None:
    """Fill every column: air at and above the surface, dirt, then rock.

    Args:
        grid: World grid, modified in place.
        elevations: Surface boundary per column.
        dirt_thickness: Dirt cells directly below the surface.
    """
    height = grid.shape[0]
    ys = np.arange(height)[:, np.newaxis]
    surface = elevations[np.newaxis, :]
    dirt_floor = np.maximum(surface - dirt_thickness, 0)

    grid[:] = np.where(
        ys >= surface,
        CellType.AIR,
        np.where(ys >= dirt_floor, CellType.DIRT, CellType.ROCK),
    ).astype(np.uint8)


def iter_terrain(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    seed: Seed,
    config: TerrainStageConfig,
) -> Iterator[float]:
    """Terrain stage: compute the elevation profile, then fill the grid.

    Yields:
        Stage progress in [0, 1].
    """
    elevations[:] = make_elevations(world_size, seed, config)
    logger.debug(
        f"Elevation range {int(elevations.min())}..{int(elevations.max())} "
        f"({len(config.modification_curves)} modification curves)"
    )
    yield 0.5

    fill_terrain(grid, elevations, config.dirt_thickness)
    yield 1.0

"""Shared test fixtures for world generation tests."""

import numpy as np
import pytest
from numpy.typing import NDArray

from worldslice.cell_types import CellType
from worldslice.config import (
    CaveStageConfig,
    FloatRange,
    GenerationConfig,
    GrassStageConfig,
    ModificationCurve,
    OceanStageConfig,
    TerrainStageConfig,
    WorldConfig,
    WorldSize,
)
from worldslice.elevation import fill_terrain
from worldslice.grid import Grid


def flat_world(
    width: int,
    height: int,
    sea_level: int,
    surface: int | None = None,
    dirt_thickness: int = 3,
) -> tuple[Grid, NDArray[np.int32], WorldSize]:
    """Build a filled world with the same elevation in every column."""
    world_size = WorldSize(
        width=width,
        height=height,
        sea_level=sea_level,
        left_beach_edge=0,
        right_beach_edge=width,
    )
    elevations = np.full(width, sea_level if surface is None else surface, dtype=np.int32)
    grid = np.zeros((height, width), dtype=np.uint8)
    fill_terrain(grid, elevations, dirt_thickness)
    return grid, elevations, world_size


def steady_cave_config(**overrides) -> CaveStageConfig:
    """Cave config with a fixed radius that never turns or branches."""
    values = dict(
        average_radius=3.0,
        max_radius_variance=0.0,
        keep_direction_weight=1.0,
        keep_sideways_direction_weight=1.0,
        max_air_cells=None,
        do_branch=False,
    )
    values.update(overrides)
    return CaveStageConfig(**values)


@pytest.fixture
def rock_grid() -> Grid:
    """60x40 grid of solid rock."""
    return np.full((40, 60), CellType.ROCK, dtype=np.uint8)


@pytest.fixture
def air_grid() -> Grid:
    """60x40 grid of air."""
    return np.full((40, 60), CellType.AIR, dtype=np.uint8)


@pytest.fixture
def small_config() -> GenerationConfig:
    """120x80 world with every stage enabled."""
    return GenerationConfig(
        seed=3,
        world=WorldConfig(width=120, height=80, sea_level=40),
        stages=[
            TerrainStageConfig(
                noise_roughness=2.0,
                max_height_fraction=0.5,
                modification_curves=[
                    ModificationCurve(noise_roughness=0.05, max_block_difference=4)
                ],
                dirt_thickness=4,
            ),
            GrassStageConfig(),
            OceanStageConfig(
                ocean_width_fraction=0.1,
                beach_width_fraction=0.05,
                depth_per_width=0.5,
                sea_bed_thickness=2,
                beach_depth=2,
            ),
            CaveStageConfig(
                world_width_per_cave=FloatRange(min=30, max=40),
                average_radius=2.0,
                max_radius_variance=1.0,
                length_scalar=FloatRange(min=0.2, max=0.5),
                min_branch_step=5,
                steps_between_branches=FloatRange(min=5, max=10),
            ),
        ],
    )

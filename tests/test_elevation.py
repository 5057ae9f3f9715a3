"""Tests for elevation generation and terrain fill."""

import numpy as np

from worldslice.cell_types import CellType
from worldslice.config import ModificationCurve, TerrainStageConfig, WorldSize
from worldslice.elevation import fill_terrain, iter_terrain, make_elevations
from worldslice.seed import Seed


def _world(width: int, height: int, sea_level: int) -> WorldSize:
    return WorldSize(
        width=width,
        height=height,
        sea_level=sea_level,
        left_beach_edge=0,
        right_beach_edge=width,
    )


class TestMakeElevations:
    """Tests for the elevation profile."""

    def test_flat_at_sea_level(self) -> None:
        """Zero max height and no curves keeps every column at sea level."""
        config = TerrainStageConfig(max_height_fraction=0.0)
        elevations = make_elevations(_world(50, 50, 25), Seed(1), config)
        np.testing.assert_array_equal(elevations, np.full(50, 25))

    def test_base_layer_range(self) -> None:
        """Without curves, columns lie between sea level and the top."""
        config = TerrainStageConfig(max_height_fraction=1.0, noise_roughness=20.0)
        elevations = make_elevations(_world(300, 100, 40), Seed(8), config)
        assert elevations.dtype == np.int32
        assert elevations.min() >= 40
        assert elevations.max() <= 99

    def test_extreme_curves_are_clamped(self) -> None:
        """Huge modification curves are clamped into the grid."""
        config = TerrainStageConfig(
            modification_curves=[
                ModificationCurve(noise_roughness=0.1, max_block_difference=1e6)
            ]
        )
        elevations = make_elevations(_world(200, 50, 25), Seed(4), config)
        assert elevations.min() >= 0
        assert elevations.max() <= 49
        assert elevations.min() == 0
        assert elevations.max() == 49

    def test_curves_advance_seed(self) -> None:
        """Each modification curve uses a fresh seed."""
        config = TerrainStageConfig(
            modification_curves=[
                ModificationCurve(noise_roughness=0.1, max_block_difference=3),
                ModificationCurve(noise_roughness=0.3, max_block_difference=1),
            ]
        )
        seed = Seed(100)
        make_elevations(_world(64, 64, 32), seed, config)
        assert seed.value == 102

    def test_deterministic(self) -> None:
        """Same seed gives the same profile."""
        config = TerrainStageConfig(
            modification_curves=[
                ModificationCurve(noise_roughness=0.05, max_block_difference=6)
            ]
        )
        world = _world(200, 100, 50)
        a = make_elevations(world, Seed(77), config)
        b = make_elevations(world, Seed(77), config)
        np.testing.assert_array_equal(a, b)

    def test_different_seeds_uncorrelated(self) -> None:
        """Profiles from different seeds are not strongly correlated."""
        config = TerrainStageConfig(noise_roughness=40.0, max_height_fraction=1.0)
        world = _world(400, 100, 50)
        for seed in (1, 3, 5):
            a = make_elevations(world, Seed(seed), config).astype(np.float64)
            b = make_elevations(world, Seed(seed + 1), config).astype(np.float64)
            assert abs(np.corrcoef(a, b)[0, 1]) < 0.3


class TestFillTerrain:
    """Tests for the dirt and rock fill."""

    def test_flat_column_layers(self) -> None:
        """Air above the surface, then dirt, then rock."""
        grid = np.zeros((50, 50), dtype=np.uint8)
        elevations = np.full(50, 25, dtype=np.int32)
        fill_terrain(grid, elevations, dirt_thickness=4)

        assert np.all(grid[25:, :] == CellType.AIR)
        assert np.all(grid[21:25, :] == CellType.DIRT)
        assert np.all(grid[:21, :] == CellType.ROCK)

    def test_zero_dirt(self) -> None:
        """No dirt when the thickness is zero."""
        grid = np.zeros((20, 10), dtype=np.uint8)
        fill_terrain(grid, np.full(10, 5, dtype=np.int32), dirt_thickness=0)
        assert not np.any(grid == CellType.DIRT)
        assert np.all(grid[:5] == CellType.ROCK)

    def test_dirt_clamped_at_bottom(self) -> None:
        """Dirt deeper than the surface fills down to row 0."""
        grid = np.zeros((20, 3), dtype=np.uint8)
        fill_terrain(grid, np.array([2, 0, 19], dtype=np.int32), dirt_thickness=5)

        assert np.all(grid[:2, 0] == CellType.DIRT)
        assert np.all(grid[:, 1] == CellType.AIR)
        assert np.all(grid[14:19, 2] == CellType.DIRT)
        assert grid[19, 2] == CellType.AIR
        assert np.all(grid[:14, 2] == CellType.ROCK)


class TestIterTerrain:
    """Tests for the terrain stage runner."""

    def test_yields_progress_and_fills(self) -> None:
        """Stage reports progress and leaves a filled grid."""
        world = _world(40, 30, 15)
        grid = np.zeros((30, 40), dtype=np.uint8)
        elevations = np.zeros(40, dtype=np.int32)
        config = TerrainStageConfig(max_height_fraction=0.0, dirt_thickness=2)

        fractions = list(iter_terrain(grid, elevations, world, Seed(0), config))

        assert fractions == [0.5, 1.0]
        assert np.all(elevations == 15)
        assert np.all(grid[13:15] == CellType.DIRT)

"""Tests for world validation."""

import dataclasses

import numpy as np
from conftest import flat_world

from worldslice.cell_types import CellType
from worldslice.config import GenerationConfig
from worldslice.generator import generate_world
from worldslice.validation import validate_world


class TestValidateWorld:
    """Tests for post-generation checks."""

    def test_generated_world_passes(self, small_config: GenerationConfig) -> None:
        """A freshly generated world has no errors or warnings."""
        result = generate_world(small_config)
        validation = validate_world(result.grid, result.elevations, result.world_size)
        assert validation.passed
        assert validation.errors == []
        assert validation.warnings == []

    def test_shape_mismatch(self) -> None:
        """Grid must match the world dimensions."""
        grid, elevations, world = flat_world(20, 10, 5)
        validation = validate_world(grid[:, :10], elevations, world)
        assert not validation.passed

    def test_unknown_cell_value(self) -> None:
        """Values outside the enum are errors."""
        grid, elevations, world = flat_world(20, 10, 5)
        grid[0, 0] = 200
        validation = validate_world(grid, elevations, world)
        assert not validation.passed
        assert "unknown" in validation.errors[0]

    def test_elevation_out_of_range(self) -> None:
        """Elevations must stay inside the grid."""
        grid, elevations, world = flat_world(20, 10, 5)
        elevations[3] = 10
        validation = validate_world(grid, elevations, world)
        assert not validation.passed

    def test_dirt_in_ocean_warns(self) -> None:
        """Dirt under beaches or oceans is a warning only."""
        grid, elevations, world = flat_world(20, 10, 5)
        world = dataclasses.replace(
            world, left_beach_edge=3, right_beach_edge=17
        )
        validation = validate_world(grid, elevations, world)
        assert validation.passed
        assert len(validation.warnings) == 1

    def test_logs_failures(self, caplog) -> None:
        """Failures are logged."""
        grid, elevations, world = flat_world(20, 10, 5)
        grid[1, 1] = 99
        validate_world(grid, elevations, world)
        assert "validation failed" in caplog.text

    def test_flat_world_passes(self) -> None:
        """A plain filled world is valid."""
        grid, elevations, world = flat_world(20, 10, 5)
        assert validate_world(grid, elevations, world).passed
        assert np.all(grid[5:] == CellType.AIR)

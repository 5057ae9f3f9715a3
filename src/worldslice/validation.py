"""Post-generation validation of a finished world."""

import logging

import numpy as np
from numpy.typing import NDArray

from .cell_types import CellType
from .config import WorldSize
from .grid import Grid

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of world validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_world(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
) -> ValidationResult:
    """Validate a generated world against its invariants.

    Args:
        grid: World grid.
        elevations: Elevation profile.
        world_size: World bounds the run used.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    _check_shape(grid, elevations, world_size, result)
    if result.passed:
        _check_cell_values(grid, result)
        _check_elevation_range(elevations, world_size, result)
        _check_ocean_edges(grid, world_size, result)

    if result.passed:
        logger.info("World validation passed")
    else:
        logger.warning(f"World validation failed with {len(result.errors)} errors")
        for error in result.errors:
            logger.error(f"  - {error}")

    for warning in result.warnings:
        logger.warning(f"  - {warning}")

    return result


def _check_shape(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    result: ValidationResult,
) -> None:
    expected = (world_size.height, world_size.width)
    if grid.shape != expected:
        result.add_error(f"Grid shape {grid.shape} does not match world {expected}")
    if elevations.shape != (world_size.width,):
        result.add_error(
            f"Elevation profile length {elevations.shape} does not match width {world_size.width}"
        )


def _check_cell_values(grid: Grid, result: ValidationResult) -> None:
    unknown = int(np.sum(grid >= len(CellType)))
    if unknown:
        result.add_error(f"{unknown} cells hold unknown cell types")


def _check_elevation_range(
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    result: ValidationResult,
) -> None:
    out_of_range = int(np.sum((elevations < 0) | (elevations > world_size.height - 1)))
    if out_of_range:
        result.add_error(f"{out_of_range} elevations outside [0, {world_size.height - 1}]")


def _check_ocean_edges(grid: Grid, world_size: WorldSize, result: ValidationResult) -> None:
    """Check no dirt is left in the ocean and beach columns."""
    if world_size.left_beach_edge == 0:
        return

    edges = np.concatenate(
        [
            grid[:, : world_size.left_beach_edge],
            grid[:, world_size.right_beach_edge :],
        ],
        axis=1,
    )
    dirt = int(np.sum((edges == CellType.DIRT) | (edges == CellType.DIRT_WALL)))
    if dirt:
        result.add_warning(f"{dirt} dirt cells left under beaches or oceans")

"""Procedural side-view world generation.

This package fills a 2D grid of typed cells from a seed: a noise-driven
elevation field, grass, beach and ocean edges, and branching random-walk
caves. The same seed and configuration always reproduce the same world.
"""

from .cell_types import CellType
from .config import GenerationConfig, WorldSize, find_config, load_config
from .generator import (
    GenerationProgress,
    GenerationResult,
    generate_world,
    iter_generation,
)
from .persistence import load_world, save_world
from .render import grid_to_image, save_image
from .validation import ValidationResult, validate_world

__all__ = [
    "CellType",
    "GenerationConfig",
    "GenerationProgress",
    "GenerationResult",
    "ValidationResult",
    "WorldSize",
    "find_config",
    "generate_world",
    "grid_to_image",
    "iter_generation",
    "load_config",
    "load_world",
    "save_image",
    "save_world",
    "validate_world",
]

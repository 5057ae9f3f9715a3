"""World persistence: save and load generated worlds."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from .exceptions import MapFormatError
from .generator import GenerationResult

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def save_world(path: Path, result: GenerationResult) -> None:
    """Save a generated world to disk.

    Uses numpy's compressed .npz format for efficient storage.

    Args:
        path: Output path (should end with .npz).
        result: Finished generation run.
    """
    world_size = result.world_size
    metadata = {
        "version": FORMAT_VERSION,
        "seed": result.config.seed,
        "width": world_size.width,
        "height": world_size.height,
        "sea_level": world_size.sea_level,
        "left_beach_edge": world_size.left_beach_edge,
        "right_beach_edge": world_size.right_beach_edge,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "config": result.config.model_dump(mode="json"),
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path,
        grid=result.grid,
        elevations=result.elevations,
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    file_size = path.stat().st_size / 1024
    logger.info(f"Saved world to {path} ({file_size:.1f} KB)")


def load_world(path: Path) -> tuple[NDArray[np.uint8], NDArray[np.int32], dict]:
    """Load a world from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (grid, elevations, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        MapFormatError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"World file not found: {path}")

    with np.load(path) as data:
        for key in ("grid", "elevations"):
            if key not in data:
                raise MapFormatError(f"Invalid world file: missing '{key}' array")
        grid = data["grid"].astype(np.uint8)
        elevations = data["elevations"].astype(np.int32)

        if "metadata" in data:
            metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        else:
            metadata = {}

    if grid.ndim != 2 or elevations.shape != (grid.shape[1],):
        raise MapFormatError(
            f"Invalid world file: grid {grid.shape} does not match "
            f"elevations {elevations.shape}"
        )

    logger.info(f"Loaded world from {path}: {grid.shape[1]}x{grid.shape[0]}")
    return grid, elevations, metadata

"""World generation orchestration."""

import logging
from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .caves import CaveStats, iter_carve_caves
from .cell_types import CellType
from .config import (
    CaveStageConfig,
    GenerationConfig,
    GrassStageConfig,
    OceanStageConfig,
    StageSpec,
    TerrainStageConfig,
    WorldSize,
)
from .elevation import iter_terrain
from .grass import iter_grass
from .grid import Grid, new_elevations, new_grid
from .oceans import iter_oceans
from .seed import Seed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationProgress:
    """Snapshot reported at every cooperative yield point."""

    stage_index: int
    stage_kind: str
    stage_fraction: float
    overall_fraction: float


class GenerationResult:
    """Finished world and the data that produced it."""

    def __init__(
        self,
        grid: Grid,
        elevations: NDArray[np.int32],
        world_size: WorldSize,
        config: GenerationConfig,
        final_seed: int,
        cave_stats: list[CaveStats],
    ):
        self.grid = grid
        self.elevations = elevations
        self.world_size = world_size
        self.config = config
        self.final_seed = final_seed
        self.cave_stats = cave_stats


ProgressCallback = Callable[[GenerationProgress], None]


def _run_stage(
    stage: StageSpec,
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    seed: Seed,
    rng: np.random.Generator,
    cave_stats: list[CaveStats],
) -> Iterator[float]:
    """Start the runner for one configured stage."""
    if isinstance(stage, TerrainStageConfig):
        return iter_terrain(grid, elevations, world_size, seed, stage)
    if isinstance(stage, GrassStageConfig):
        return iter_grass(grid, elevations)
    if isinstance(stage, OceanStageConfig):
        return iter_oceans(grid, elevations, world_size, stage)
    if isinstance(stage, CaveStageConfig):
        stats = CaveStats()
        cave_stats.append(stats)
        return iter_carve_caves(grid, elevations, world_size, stage, seed, rng, stats)
    raise TypeError(f"Unknown stage type: {type(stage).__name__}")


def iter_generation(
    config: GenerationConfig,
) -> Generator[GenerationProgress, None, GenerationResult]:
    """Run every configured stage over one shared grid, yielding progress.

    Yields are scheduling points only: how often (or whether) the caller
    resumes the generator promptly has no effect on the result.

    Args:
        config: Generation configuration.

    Yields:
        GenerationProgress after each chunk of stage work.

    Returns:
        GenerationResult once the last stage completes.
    """
    world_size = config.world_size()
    grid = new_grid(world_size)
    elevations = new_elevations(world_size)
    seed = Seed(config.seed)
    rng = np.random.default_rng(config.seed)
    cave_stats: list[CaveStats] = []

    logger.info(
        f"Generating world {world_size.width}x{world_size.height} "
        f"with seed {config.seed}"
    )

    total_time = sum(stage.relative_time for stage in config.stages)
    completed = 0.0

    for index, stage in enumerate(config.stages):
        logger.info(f"Stage {index + 1}/{len(config.stages)}: {stage.kind}")

        for fraction in _run_stage(
            stage, grid, elevations, world_size, seed, rng, cave_stats
        ):
            overall = (completed + fraction * stage.relative_time) / total_time
            yield GenerationProgress(
                stage_index=index,
                stage_kind=stage.kind,
                stage_fraction=fraction,
                overall_fraction=min(1.0, overall),
            )
        completed += stage.relative_time

        # Each stage draws from its own noise streams
        seed.increment()

    _log_world_stats(grid)

    return GenerationResult(
        grid=grid,
        elevations=elevations,
        world_size=world_size,
        config=config,
        final_seed=int(seed),
        cave_stats=cave_stats,
    )


def generate_world(
    config: GenerationConfig,
    on_progress: ProgressCallback | None = None,
) -> GenerationResult:
    """Generate a complete world.

    Args:
        config: Generation configuration.
        on_progress: Optional observer called at every yield point.

    Returns:
        GenerationResult with the finished grid and elevation profile.
    """
    generation = iter_generation(config)
    while True:
        try:
            progress = next(generation)
        except StopIteration as done:
            return done.value
        if on_progress is not None:
            on_progress(progress)


def _log_world_stats(grid: Grid) -> None:
    """Log cell type statistics."""
    total = grid.size
    counts = np.bincount(grid.ravel(), minlength=len(CellType))

    logger.info(f"World stats ({total:,} cells):")
    for cell_type in CellType:
        count = int(counts[cell_type])
        if count:
            logger.info(f"  {cell_type.name.lower()}: {count:,} ({count / total * 100:.1f}%)")

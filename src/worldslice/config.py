"""Generation configuration models and TOML loading."""

import math
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Literal

import numpy as np
from pydantic import BaseModel, Field, model_validator

from .exceptions import ConfigNotFoundError


class FloatRange(BaseModel, frozen=True):
    """Inclusive range a random float is drawn from."""

    min: float = 0.0
    max: float = 0.0

    @model_validator(mode="after")
    def _check_order(self) -> "FloatRange":
        if self.min > self.max:
            raise ValueError(f"range min {self.min} exceeds max {self.max}")
        return self

    def draw(self, rng: np.random.Generator) -> float:
        """Draw a uniform value from the range."""
        return self.min + (self.max - self.min) * float(rng.random())


class WorldConfig(BaseModel):
    """World dimensions."""

    width: int = Field(default=800, gt=0, description="World width in cells")
    height: int = Field(default=400, gt=0, description="World height in cells")
    sea_level: int = Field(default=200, ge=0, description="Sea level y-coordinate")

    @model_validator(mode="after")
    def _check_sea_level(self) -> "WorldConfig":
        if self.sea_level >= self.height:
            raise ValueError(
                f"sea_level {self.sea_level} must be below world height {self.height}"
            )
        return self


@dataclass(frozen=True)
class WorldSize:
    """Immutable world bounds shared by every stage of a run.

    ``left_beach_edge`` is the first dry column after the left ocean and beach;
    ``right_beach_edge`` is one past the last dry column before the right beach.
    """

    width: int
    height: int
    sea_level: int
    left_beach_edge: int
    right_beach_edge: int


class StageConfig(BaseModel):
    """Fields shared by every generation stage."""

    relative_time: float = Field(
        default=1.0, gt=0, description="Weight of this stage in overall progress"
    )


class ModificationCurve(BaseModel):
    """Extra noise layer added on top of the base elevation."""

    noise_roughness: float = Field(description="Noise frequency per column")
    max_block_difference: float = Field(description="Maximum offset in cells")


class TerrainStageConfig(StageConfig):
    """Elevation field and base dirt/rock fill."""

    kind: Literal["terrain"] = "terrain"
    noise_roughness: float = Field(
        default=2.5, description="Base noise roughness, scaled by height above sea"
    )
    max_height_fraction: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="0 keeps the surface at sea level, 1 lets peaks reach the top",
    )
    modification_curves: list[ModificationCurve] = Field(default_factory=list)
    dirt_thickness: int = Field(default=8, ge=0, description="Dirt layer thickness")


class GrassStageConfig(StageConfig):
    """Grass on the surface and on exposed cliff faces."""

    kind: Literal["grass"] = "grass"


class OceanStageConfig(StageConfig):
    """Beach and ocean carving at both world edges."""

    kind: Literal["oceans"] = "oceans"
    ocean_width_fraction: float = Field(
        default=0.08, ge=0.0, lt=0.5, description="Ocean width as a fraction of world width"
    )
    beach_width_fraction: float = Field(
        default=0.03, ge=0.0, lt=0.5, description="Beach width as a fraction of world width"
    )
    depth_per_width: float = Field(
        default=0.4, ge=0.0, description="Maximum water depth per cell of ocean width"
    )
    sea_bed_thickness: int = Field(default=4, ge=0, description="Sand below the water")
    beach_depth: int = Field(default=5, ge=0, description="Sand below the beach surface")

    def extent(self, world_width: int) -> tuple[int, int]:
        """Return (water_width, beach_width) in cells for one side."""
        water_width = int(self.ocean_width_fraction * world_width)
        beach_width = int(self.beach_width_fraction * world_width)
        return water_width, beach_width


class CaveStageConfig(StageConfig):
    """Branching random-walk caves."""

    kind: Literal["caves"] = "caves"

    # Spawning
    world_width_per_cave: FloatRange = Field(
        default=FloatRange(min=60, max=90), description="World columns per cave"
    )
    min_spawn_distance: float = Field(
        default=0.0, ge=0.0, description="Minimum distance between cave starts"
    )
    spawn_on_surface: bool = Field(default=False, description="Start caves at the surface")
    avoid_oceans: bool = Field(default=True, description="Only spawn between the beaches")
    surface_sticky_steps: int = Field(
        default=6, ge=0, description="Sticky steps after a surface spawn"
    )
    starting_depth_fraction: FloatRange = Field(
        default=FloatRange(min=0.1, max=0.8),
        description="Fraction of the surface height to start below it",
    )
    length_scalar: FloatRange = Field(
        default=FloatRange(min=0.2, max=0.6),
        description="Walk step budget as a fraction of world height",
    )
    max_air_cells: int | None = Field(
        default=12, ge=1, description="Consecutive air cells before a walk stops"
    )

    # Radius
    average_radius: float = Field(default=3.0, gt=0.0)
    max_radius_variance: float = Field(default=1.5, ge=0.0)
    noise_roughness: float = Field(default=0.08, description="Wall noise roughness per step")

    # Controlled random walk
    keep_direction_weight: float = Field(default=0.8, ge=0.0, le=1.0)
    keep_sideways_direction_weight: float = Field(default=0.85, ge=0.0, le=1.0)
    upwards_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    straight_down_weight: float = Field(default=0.5, ge=0.0, le=1.0)

    # Branching
    do_branch: bool = True
    branch_chance: float = Field(default=0.5, ge=0.0, le=1.0)
    min_branch_step: int = Field(default=10, ge=0)
    steps_between_branches: FloatRange = Field(default=FloatRange(min=15, max=40))
    branch_sticky_steps: int = Field(default=4, ge=0)

    @model_validator(mode="after")
    def _check_ranges(self) -> "CaveStageConfig":
        if self.world_width_per_cave.min <= 0:
            raise ValueError("world_width_per_cave must be positive")
        if self.length_scalar.min < 0:
            raise ValueError("length_scalar must not be negative")
        if self.starting_depth_fraction.min < 0 or self.starting_depth_fraction.max > 1:
            raise ValueError("starting_depth_fraction must lie in [0, 1]")
        if self.steps_between_branches.min < 0:
            raise ValueError("steps_between_branches must not be negative")
        return self

    def spawn_span(self, world_size: WorldSize) -> tuple[int, int]:
        """Half-open column range cave starts are drawn from."""
        if self.avoid_oceans:
            low, high = world_size.left_beach_edge, world_size.right_beach_edge
        else:
            low, high = 0, world_size.width
        if self.spawn_on_surface:
            # Surface spawns sample their neighbours to find the tangent
            low, high = max(low, 1), min(high, world_size.width - 1)
        return low, high


StageSpec = Annotated[
    TerrainStageConfig | GrassStageConfig | OceanStageConfig | CaveStageConfig,
    Field(discriminator="kind"),
]


def default_stages() -> list[StageSpec]:
    """Stage list used when a configuration names none."""
    return [
        TerrainStageConfig(
            modification_curves=[
                ModificationCurve(noise_roughness=0.02, max_block_difference=12),
                ModificationCurve(noise_roughness=0.12, max_block_difference=2),
            ]
        ),
        GrassStageConfig(relative_time=0.5),
        OceanStageConfig(),
        CaveStageConfig(
            spawn_on_surface=True,
            min_spawn_distance=30,
            world_width_per_cave=FloatRange(min=120, max=180),
            length_scalar=FloatRange(min=0.15, max=0.35),
            relative_time=3.0,
        ),
        CaveStageConfig(relative_time=5.0),
    ]


class GenerationConfig(BaseModel):
    """Complete configuration for one generation run."""

    seed: int = Field(default=12345, ge=0, description="Initial seed")
    world: WorldConfig = Field(default_factory=WorldConfig)
    stages: list[StageSpec] = Field(default_factory=default_stages)

    @model_validator(mode="after")
    def _check_stages(self) -> "GenerationConfig":
        world_size = self.world_size()
        if world_size.left_beach_edge >= world_size.right_beach_edge:
            raise ValueError("oceans and beaches leave no dry land")

        for stage in self.stages:
            if isinstance(stage, CaveStageConfig):
                _check_cave_spawn_feasible(stage, world_size)
        return self

    def world_size(self) -> WorldSize:
        """Derive the immutable world bounds, including beach edges."""
        width = self.world.width
        left, right = 0, width
        for stage in self.stages:
            if isinstance(stage, OceanStageConfig):
                water_width, beach_width = stage.extent(width)
                left = water_width + beach_width
                right = width - (water_width + beach_width)
        return WorldSize(
            width=width,
            height=self.world.height,
            sea_level=self.world.sea_level,
            left_beach_edge=left,
            right_beach_edge=right,
        )


def _check_cave_spawn_feasible(stage: CaveStageConfig, world_size: WorldSize) -> None:
    """Reject cave settings whose spawn retry loop could never finish.

    Every placed cave rules out at most ``spawn_exclusion_width`` columns, and
    only columns between the beach edges are sure to hold no cave-breaking
    cells. With one cave still to place, at least one such column must be
    left over.
    """
    low, high = stage.spawn_span(world_size)
    span = high - low
    if span <= 0:
        raise ValueError("cave spawn span is empty")

    dry_span = min(high, world_size.right_beach_edge) - max(low, world_size.left_beach_edge)
    if dry_span <= 0:
        raise ValueError("cave spawn span holds no dry land")

    max_caves = round(span / stage.world_width_per_cave.min)
    if max_caves <= 1:
        return
    excluded = (max_caves - 1) * spawn_exclusion_width(stage)
    if excluded >= dry_span:
        raise ValueError(
            f"min_spawn_distance {stage.min_spawn_distance} cannot fit up to "
            f"{max_caves} caves in {dry_span} dry spawn columns"
        )


def min_spawn_square_distance(stage: CaveStageConfig) -> int:
    """Squared spawn distance threshold used by the spawn retry loop."""
    return math.ceil(stage.min_spawn_distance * stage.min_spawn_distance)


def spawn_exclusion_width(stage: CaveStageConfig) -> int:
    """Most columns a placed cave can rule out for the next spawn.

    A candidate is rejected only when its squared distance is below the
    threshold, which needs a column offset of at most ``isqrt(threshold - 1)``.
    """
    threshold = min_spawn_square_distance(stage)
    if stage.min_spawn_distance <= 0 or threshold == 0:
        return 0
    return 2 * math.isqrt(threshold - 1) + 1


def load_config(config_path: Path) -> GenerationConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed GenerationConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return GenerationConfig.model_validate(data)


def _configs_dir() -> Path:
    return Path(__file__).parent / "configs"


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        ConfigNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise ConfigNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise ConfigNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))

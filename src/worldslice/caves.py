"""Cave carving: branching controlled random walks through solid terrain.

Each cave is a walk of a centre point with a left and a right wall straddling
it. Every step the walls are moved to noise-perturbed offsets perpendicular to
the walk direction and the area swept between old and new wall positions is
turned into wall backdrop. Pending caves are kept on an explicit stack so
branches, and their own branches, finish before the next spawned cave starts.
"""

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from .cell_types import BREAKING_VALUES, WALL_TABLE, CellType
from .config import CaveStageConfig, WorldSize, min_spawn_square_distance
from .grid import Grid, in_bounds
from .noise import noise
from .raster import iter_line
from .seed import Seed
from .types import Direction, Point

logger = logging.getLogger(__name__)

STICKY_DIRECTION_MAX_TURN = 1

# Turn ring: adjacent indices are adjacent compass directions. Straight up is
# never walked and the ring does not wrap.
WALK_DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP_LEFT,
    Direction.LEFT,
    Direction.DOWN_LEFT,
    Direction.DOWN,
    Direction.DOWN_RIGHT,
    Direction.RIGHT,
    Direction.UP_RIGHT,
)
_WALK_INDEX: dict[Direction, int] = {d: i for i, d in enumerate(WALK_DIRECTIONS)}

_UP = Direction.UP.delta


class StopReason(str, Enum):
    """Why a cave walk ended."""

    BUDGET = "budget"
    OPENING_OFF_GRID = "opening_off_grid"
    OFF_GRID = "off_grid"
    BREAKING_CELL = "breaking_cell"
    AIR = "air"


@dataclass(frozen=True)
class CaveTask:
    """A scheduled cave walk."""

    start: Point
    direction: Direction
    max_steps: int
    sticky_steps: int = 0
    depth: int = 0  # 0 for spawned caves, parent depth + 1 for branches

    def __post_init__(self) -> None:
        if self.direction not in _WALK_INDEX:
            raise ValueError(f"caves cannot walk {self.direction.name}")


@dataclass
class WalkState:
    """Mutable state of one cave walk, threaded through the step helpers."""

    center: Point
    left_wall: Point
    right_wall: Point
    direction_index: int
    sticky_index: int
    sticky_steps_left: int
    air_count: int = 0
    branch_step: int = -1
    visited: list[Point] = field(default_factory=list)

    @property
    def direction(self) -> Direction:
        return WALK_DIRECTIONS[self.direction_index]

    def wall(self, is_right: bool) -> Point:
        return self.right_wall if is_right else self.left_wall

    def set_wall(self, is_right: bool, position: Point) -> None:
        if is_right:
            self.right_wall = position
        else:
            self.left_wall = position


@dataclass
class CaveWalk:
    """Outcome of carving one cave task."""

    task: CaveTask
    steps: int = 0
    stop_reason: StopReason = StopReason.BUDGET
    path: list[Point] = field(default_factory=list)
    branches: list[CaveTask] = field(default_factory=list)


@dataclass
class CaveStats:
    """Counters for one cave stage."""

    spawned: int = 0
    processed: int = 0
    branches: int = 0
    max_pending: int = 0


def surface_direction(elevations: NDArray[np.int32], x: int) -> Direction:
    """Direction pointing into the ground, perpendicular to the surface at x.

    Requires 1 <= x <= len(elevations) - 2.
    """
    tangent_x = -2
    tangent_y = int(elevations[x - 1]) - int(elevations[x + 1])
    largest = max(abs(tangent_x), abs(tangent_y))
    # Truncating division reduces the tangent to one of the eight directions
    tangent = Point(int(tangent_x / largest), int(tangent_y / largest))
    return Direction.from_delta(tangent).perpendicular()


def wall_radius(
    seed: int,
    step: int,
    config: CaveStageConfig,
    is_right: bool,
    scale: float = 1.0,
) -> float:
    """Tunnel half-width for one wall at a walk step.

    The left wall reads ``seed`` and the right wall ``seed + 1`` so the two
    sides vary independently. ``n * |n|`` keeps most samples near the average.
    """
    n = noise(seed + (1 if is_right else 0), step, config.noise_roughness)
    return (config.average_radius + config.max_radius_variance * n * abs(n)) * scale


def wall_offset(direction: Direction, radius: float, is_right: bool) -> Point:
    """Offset from the walk centre to a wall.

    Diagonal walks measure the radius in half steps along the perpendicular
    so tunnels keep the same visual width in every direction.
    """
    perpendicular = direction.delta.perpendicular()
    if is_right:
        perpendicular = -perpendicular

    if not direction.is_diagonal:
        return perpendicular.scaled(round(radius))

    half_steps = round(radius * 2 / math.sqrt(2))
    offset = perpendicular.scaled(int(half_steps / 2))
    if half_steps % 2 != 0:
        half = perpendicular + direction.delta
        offset = offset + Point(half.x // 2, half.y // 2)
    return offset


def _new_wall_positions(
    state: WalkState,
    seed: int,
    step: int,
    config: CaveStageConfig,
    scale: float = 1.0,
) -> tuple[Point, Point]:
    direction = state.direction
    left = state.center + wall_offset(
        direction, wall_radius(seed, step, config, False, scale), False
    )
    right = state.center + wall_offset(
        direction, wall_radius(seed, step, config, True, scale), True
    )
    return left, right


def _make_wall(grid: Grid, point: Point) -> None:
    """Convert a cell to its wall variant; off-grid cells are skipped."""
    if in_bounds(grid, point.x, point.y):
        grid[point.y, point.x] = WALL_TABLE[grid[point.y, point.x]]


def _connect_wall(
    grid: Grid,
    state: WalkState,
    new_position: Point,
    is_right: bool,
) -> None:
    """Sweep one wall from its stored position to ``new_position``.

    Every cell on the wall's path is joined by a second line to the opposite
    wall, filling the tunnel interior as well as its boundary.
    """
    other = state.wall(not is_right)
    for wall_point in iter_line(new_position, state.wall(is_right)):
        for inside in iter_line(wall_point, other):
            _make_wall(grid, inside)
            # Closes the gaps a diagonal inner line leaves behind
            if inside != wall_point or wall_point.y < other.y:
                _make_wall(grid, inside + _UP)
    state.set_wall(is_right, new_position)


def _take_step(grid: Grid, state: WalkState, walls: tuple[Point, Point]) -> None:
    state.visited.append(state.center)
    _connect_wall(grid, state, walls[0], False)
    _connect_wall(grid, state, walls[1], True)
    state.center = state.center + state.direction.delta


def _carve_cap(
    grid: Grid,
    state: WalkState,
    seed: int,
    config: CaveStageConfig,
    steps: range,
    origin: int,
) -> None:
    """Carve a roughly half-circular tunnel end.

    The radius follows ``r * (1 - t^2)`` where t is the distance in steps from
    ``origin`` over the average radius.
    """
    for step in steps:
        t = (step - origin) / config.average_radius
        scale = max(0.0, 1.0 - t * t)
        walls = _new_wall_positions(state, seed, step, config, scale)
        _take_step(grid, state, walls)


def _stop_reason(
    grid: Grid,
    state: WalkState,
    walls: tuple[Point, Point],
    config: CaveStageConfig,
) -> StopReason | None:
    for point in (walls[0], walls[1], state.center):
        if not in_bounds(grid, point.x, point.y):
            return StopReason.OFF_GRID

    cell = int(grid[state.center.y, state.center.x])
    if cell in BREAKING_VALUES:
        return StopReason.BREAKING_CELL

    if cell == CellType.AIR:
        state.air_count += 1
        if config.max_air_cells is not None and state.air_count >= config.max_air_cells:
            return StopReason.AIR
    else:
        state.air_count = 0
    return None


def choose_turn(index: int, config: CaveStageConfig, rng: np.random.Generator) -> int:
    """Pick the ring neighbour a turning walk moves to.

    Neighbours are equally likely unless one of them is straight down
    (``straight_down_weight`` is the chance of moving onto it) or points
    upward (``upwards_weight`` is the chance of moving onto it).
    """
    lower, upper = index - 1, index + 1
    if lower < 0:
        return upper
    if upper >= len(WALK_DIRECTIONS):
        return lower

    upper_chance = 0.5
    if WALK_DIRECTIONS[upper] == Direction.DOWN:
        upper_chance = config.straight_down_weight
    elif WALK_DIRECTIONS[lower] == Direction.DOWN:
        upper_chance = 1.0 - config.straight_down_weight
    elif WALK_DIRECTIONS[upper].delta.y > 0:
        upper_chance = config.upwards_weight
    elif WALK_DIRECTIONS[lower].delta.y > 0:
        upper_chance = 1.0 - config.upwards_weight

    return upper if rng.random() < upper_chance else lower


def _turn(state: WalkState, config: CaveStageConfig, rng: np.random.Generator) -> None:
    if state.sticky_steps_left > 0:
        state.sticky_steps_left -= 1

    if state.direction.is_horizontal:
        keep_weight = config.keep_sideways_direction_weight
    else:
        keep_weight = config.keep_direction_weight
    if rng.random() < keep_weight:
        return

    new_index = choose_turn(state.direction_index, config, rng)
    if (
        state.sticky_steps_left > 0
        and abs(new_index - state.sticky_index) > STICKY_DIRECTION_MAX_TURN
    ):
        return
    state.direction_index = new_index


def _maybe_branch(
    state: WalkState,
    step: int,
    config: CaveStageConfig,
    world_height: int,
    rng: np.random.Generator,
    depth: int,
) -> CaveTask | None:
    if step != state.branch_step:
        return None
    state.branch_step = step + int(config.steps_between_branches.draw(rng))
    if rng.random() >= config.branch_chance:
        return None

    branch_direction = state.direction.perpendicular()
    if not rng.integers(0, 2):
        branch_direction = Direction.from_delta(-branch_direction.delta)
    if branch_direction == Direction.UP:
        branch_direction = Direction.DOWN

    budget = max(0.0, config.length_scalar.max * world_height - step)
    max_steps = round(float(rng.uniform(0.0, budget)))

    state.sticky_steps_left = config.branch_sticky_steps
    state.sticky_index = state.direction_index

    return CaveTask(
        start=state.center,
        direction=branch_direction,
        max_steps=max_steps,
        sticky_steps=config.branch_sticky_steps,
        depth=depth + 1,
    )


def carve_cave(
    grid: Grid,
    task: CaveTask,
    config: CaveStageConfig,
    seed: int,
    world_height: int,
    rng: np.random.Generator,
) -> CaveWalk:
    """Carve one cave: opening cap, walk, closing cap.

    Branches found along the way are returned on the CaveWalk rather than
    carved, so the caller decides their scheduling.

    Args:
        grid: World grid, modified in place.
        task: Cave to carve.
        config: Cave stage parameters.
        seed: Noise seed for the left wall; the right wall uses seed + 1.
        world_height: World height, scales branch step budgets.
        rng: Random stream for turns and branches.

    Returns:
        CaveWalk describing the carved cave.
    """
    radius = round(config.average_radius)
    index = _WALK_INDEX[task.direction]
    origin = task.start - task.direction.delta.scaled(radius)
    state = WalkState(
        center=origin,
        left_wall=origin,
        right_wall=origin,
        direction_index=index,
        sticky_index=index,
        sticky_steps_left=task.sticky_steps,
    )
    walk = CaveWalk(task=task, path=state.visited)

    _carve_cap(grid, state, seed, config, range(-radius, 0), origin=0)
    if not all(
        in_bounds(grid, p.x, p.y)
        for p in (state.left_wall, state.right_wall, state.center)
    ):
        walk.stop_reason = StopReason.OPENING_OFF_GRID
        return walk

    if config.do_branch:
        state.branch_step = config.min_branch_step + int(
            config.steps_between_branches.draw(rng)
        )

    step = 0
    while step < task.max_steps:
        walls = _new_wall_positions(state, seed, step, config)
        reason = _stop_reason(grid, state, walls, config)
        if reason is not None:
            walk.stop_reason = reason
            break

        _take_step(grid, state, walls)

        branch = _maybe_branch(state, step, config, world_height, rng, task.depth)
        if branch is not None:
            walk.branches.append(branch)

        _turn(state, config, rng)
        step += 1

    walk.steps = step
    _carve_cap(grid, state, seed, config, range(step, step + radius), origin=step)
    return walk


def spawn_caves(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    config: CaveStageConfig,
    rng: np.random.Generator,
) -> list[CaveTask]:
    """Choose start positions and directions for the stage's caves.

    A candidate whose ground cell breaks caves (for surface spawns, the top
    solid cell under the start) is discarded and that cave is drawn again;
    with a minimum spawn distance, x is redrawn until the start is far enough
    from every placed cave.

    Returns:
        Tasks in spawn order (the last one is walked first).
    """
    low, high = config.spawn_span(world_size)
    count = round((high - low) / config.world_width_per_cave.draw(rng))
    min_square_distance = min_spawn_square_distance(config)

    tasks: list[CaveTask] = []
    while len(tasks) < count:
        while True:
            x = int(rng.integers(low, high))
            start = Point(x, int(elevations[x]))
            if config.min_spawn_distance <= 0 or all(
                start.square_distance(other.start) >= min_square_distance
                for other in tasks
            ):
                break

        max_steps = round(config.length_scalar.draw(rng) * world_size.height)
        if config.spawn_on_surface:
            direction = surface_direction(elevations, x)
            sticky_steps = config.surface_sticky_steps
            # The surface cell itself is air; the ground is the cell below
            ground_y = start.y - 1
        else:
            direction = WALK_DIRECTIONS[int(rng.integers(len(WALK_DIRECTIONS)))]
            depth = round(config.starting_depth_fraction.draw(rng) * start.y)
            start = Point(x, start.y - depth)
            sticky_steps = 0
            ground_y = start.y

        if ground_y >= 0 and int(grid[ground_y, x]) in BREAKING_VALUES:
            continue

        tasks.append(
            CaveTask(
                start=start,
                direction=direction,
                max_steps=max_steps,
                sticky_steps=sticky_steps,
            )
        )

    return tasks


def iter_carve_caves(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    config: CaveStageConfig,
    seed: Seed,
    rng: np.random.Generator,
    stats: CaveStats | None = None,
) -> Iterator[float]:
    """Cave stage runner: spawn every cave, then drain the stack depth-first.

    Args:
        grid: World grid, modified in place.
        elevations: Surface boundary per column.
        world_size: World bounds.
        config: Cave stage parameters.
        seed: Shared seed counter; advanced twice per carved cave.
        rng: Random stream.
        stats: Optional counters filled in while the stage runs.

    Yields:
        Fraction of spawned caves whose branches have all been carved.
    """
    if stats is None:
        stats = CaveStats()

    pending = spawn_caves(grid, elevations, world_size, config, rng)
    spawned = len(pending)
    stats.spawned = spawned
    stats.max_pending = spawned
    logger.info(f"Spawned {spawned} caves")

    unstarted = spawned
    while pending:
        task = pending.pop()
        if task.depth == 0:
            unstarted -= 1

        walk = carve_cave(grid, task, config, int(seed), world_size.height, rng)
        pending.extend(walk.branches)

        stats.processed += 1
        stats.branches += len(walk.branches)
        stats.max_pending = max(stats.max_pending, len(pending))

        # A cave reads both seed and seed + 1
        seed.increment()
        seed.increment()

        if len(pending) == unstarted:
            yield (spawned - unstarted) / spawned

    logger.info(f"Carved {stats.processed} caves ({stats.branches} branches)")
    yield 1.0


def carve_caves(
    grid: Grid,
    elevations: NDArray[np.int32],
    world_size: WorldSize,
    config: CaveStageConfig,
    seed: Seed,
    rng: np.random.Generator,
) -> CaveStats:
    """Run a whole cave stage without progress reporting."""
    stats = CaveStats()
    for _ in iter_carve_caves(grid, elevations, world_size, config, seed, rng, stats):
        pass
    return stats

"""Core geometric types: grid points and compass directions."""

from dataclasses import dataclass
from enum import IntEnum


@dataclass(frozen=True, slots=True)
class Point:
    """Immutable integer grid coordinate or offset. +X is right, +Y is up."""

    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def scaled(self, factor: int) -> "Point":
        """Return this offset multiplied by an integer factor."""
        return Point(self.x * factor, self.y * factor)

    def perpendicular(self) -> "Point":
        """Counter-clockwise perpendicular."""
        return Point(-self.y, self.x)

    def square_distance(self, other: "Point") -> int:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Direction(IntEnum):
    """8-direction compass enum."""

    UP = 1
    UP_RIGHT = 2
    RIGHT = 3
    DOWN_RIGHT = 4
    DOWN = 5
    DOWN_LEFT = 6
    LEFT = 7
    UP_LEFT = 8

    @property
    def delta(self) -> Point:
        return DIRECTION_DELTAS[self]

    @property
    def is_diagonal(self) -> bool:
        delta = DIRECTION_DELTAS[self]
        return delta.x != 0 and delta.y != 0

    @property
    def is_horizontal(self) -> bool:
        return DIRECTION_DELTAS[self].y == 0

    def perpendicular(self) -> "Direction":
        """Counter-clockwise perpendicular direction."""
        return Direction.from_delta(DIRECTION_DELTAS[self].perpendicular())

    @classmethod
    def from_delta(cls, delta: Point) -> "Direction":
        """Look up the direction for a unit offset.

        Raises:
            ValueError: If delta is not one of the eight unit offsets.
        """
        try:
            return _DELTA_DIRECTIONS[delta]
        except KeyError:
            raise ValueError(f"{delta} is not a unit direction") from None


# Coordinate system: +X is right, +Y is up
DIRECTION_DELTAS: dict[Direction, Point] = {
    Direction.UP: Point(0, 1),
    Direction.UP_RIGHT: Point(1, 1),
    Direction.RIGHT: Point(1, 0),
    Direction.DOWN_RIGHT: Point(1, -1),
    Direction.DOWN: Point(0, -1),
    Direction.DOWN_LEFT: Point(-1, -1),
    Direction.LEFT: Point(-1, 0),
    Direction.UP_LEFT: Point(-1, 1),
}

_DELTA_DIRECTIONS: dict[Point, Direction] = {
    delta: direction for direction, delta in DIRECTION_DELTAS.items()
}

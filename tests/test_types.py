"""Tests for points and directions."""

import pytest

from worldslice.types import DIRECTION_DELTAS, Direction, Point


class TestPoint:
    """Tests for Point arithmetic."""

    def test_add_sub(self) -> None:
        """Points add and subtract componentwise."""
        assert Point(1, 2) + Point(3, -1) == Point(4, 1)
        assert Point(1, 2) - Point(3, -1) == Point(-2, 3)
        assert -Point(1, -2) == Point(-1, 2)

    def test_scaled(self) -> None:
        """Scaling multiplies both components."""
        assert Point(1, -1).scaled(3) == Point(3, -3)

    def test_perpendicular_is_counter_clockwise(self) -> None:
        """Perpendicular rotates a quarter turn counter-clockwise."""
        assert Point(1, 0).perpendicular() == Point(0, 1)
        assert Point(0, 1).perpendicular() == Point(-1, 0)

    def test_square_distance(self) -> None:
        """Squared distance is symmetric."""
        assert Point(0, 0).square_distance(Point(3, 4)) == 25
        assert Point(3, 4).square_distance(Point(0, 0)) == 25

    def test_hashable(self) -> None:
        """Points can be used as dict keys."""
        assert {Point(1, 1): "a"}[Point(1, 1)] == "a"


class TestDirection:
    """Tests for Direction."""

    def test_all_directions_have_deltas(self) -> None:
        """Every direction has a unit delta."""
        assert len(DIRECTION_DELTAS) == 8
        for direction in Direction:
            delta = direction.delta
            assert max(abs(delta.x), abs(delta.y)) == 1

    def test_y_points_up(self) -> None:
        """UP increases y."""
        assert Direction.UP.delta == Point(0, 1)
        assert Direction.DOWN.delta == Point(0, -1)

    def test_diagonal_and_horizontal(self) -> None:
        """Diagonal and horizontal flags."""
        assert Direction.DOWN_LEFT.is_diagonal
        assert not Direction.DOWN.is_diagonal
        assert Direction.LEFT.is_horizontal
        assert Direction.RIGHT.is_horizontal
        assert not Direction.UP_RIGHT.is_horizontal

    def test_perpendicular(self) -> None:
        """Perpendicular direction is a quarter turn counter-clockwise."""
        assert Direction.RIGHT.perpendicular() == Direction.UP
        assert Direction.DOWN.perpendicular() == Direction.RIGHT
        assert Direction.DOWN_RIGHT.perpendicular() == Direction.UP_RIGHT

    def test_from_delta(self) -> None:
        """Round trip between direction and delta."""
        for direction in Direction:
            assert Direction.from_delta(direction.delta) == direction

    def test_from_delta_rejects_non_unit(self) -> None:
        """Offsets that are not unit directions raise."""
        with pytest.raises(ValueError):
            Direction.from_delta(Point(2, 0))
        with pytest.raises(ValueError):
            Direction.from_delta(Point(0, 0))

"""Tests for line rasterization."""

import numpy as np

from worldslice.raster import iter_line
from worldslice.types import Point


class TestIterLine:
    """Tests for Bresenham line iteration."""

    def test_horizontal(self) -> None:
        """End point is excluded."""
        assert list(iter_line(Point(0, 0), Point(3, 0))) == [
            Point(0, 0),
            Point(1, 0),
            Point(2, 0),
        ]

    def test_same_point_yields_nothing(self) -> None:
        """Coinciding points produce no cells."""
        assert list(iter_line(Point(4, 4), Point(4, 4))) == []

    def test_diagonal(self) -> None:
        """Pure diagonal steps on both axes every cell."""
        assert list(iter_line(Point(0, 0), Point(3, -3))) == [
            Point(0, 0),
            Point(1, -1),
            Point(2, -2),
        ]

    def test_steep_line_walks_y(self) -> None:
        """Steep lines produce one cell per row."""
        points = list(iter_line(Point(0, 0), Point(1, 4)))
        assert [p.y for p in points] == [0, 1, 2, 3]
        assert all(p.x in (0, 1) for p in points)

    def test_connected_for_random_lines(self) -> None:
        """Consecutive cells are 8-connected and the count matches the major axis."""
        rng = np.random.default_rng(0)
        for _ in range(200):
            x0, y0, x1, y1 = (int(v) for v in rng.integers(-20, 20, size=4))
            start, end = Point(x0, y0), Point(x1, y1)
            points = list(iter_line(start, end))

            assert len(points) == max(abs(x1 - x0), abs(y1 - y0))
            if points:
                assert points[0] == start
                assert end not in points
                # Last cell is adjacent to the excluded end
                assert max(abs(points[-1].x - x1), abs(points[-1].y - y1)) == 1
            for a, b in zip(points, points[1:]):
                assert max(abs(a.x - b.x), abs(a.y - b.y)) == 1

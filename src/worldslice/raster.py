"""Digital line rasterization."""

from collections.abc import Iterator

from .types import Point


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def iter_line(start: Point, end: Point) -> Iterator[Point]:
    """Yield the cells of a line from ``start`` (inclusive) to ``end`` (exclusive).

    Bresenham's algorithm driven along the axis with the larger change, so
    consecutive cells are always 8-connected. Yields nothing when the points
    coincide.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    steep = abs(dx) < abs(dy)
    if steep:
        dx, dy = dy, dx

    step_major = _sign(dx)
    step_minor = _sign(dy)
    major = abs(dx)
    minor = abs(dy)

    error = 2 * minor - major
    minor_offset = 0
    for i in range(major):
        major_offset = i * step_major
        if steep:
            yield Point(start.x + minor_offset, start.y + major_offset)
        else:
            yield Point(start.x + major_offset, start.y + minor_offset)
        if error > 0:
            minor_offset += step_minor
            error -= 2 * major
        error += 2 * minor

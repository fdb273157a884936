"""
Grid geometry for trial generation.

Points live on an integer grid of side `size`; x grows to the right and y
grows downward as in image coordinates, so bearings follow atan2(dy, dx).
"""

from __future__ import annotations

import math
from typing import NamedTuple


class Point(NamedTuple):
    """Integer grid coordinate."""

    x: int
    y: int


def in_grid(p: Point, size: int) -> bool:
    """Return True if `p` lies within a size x size grid."""
    return 0 <= p.x < size and 0 <= p.y < size


def distance(p: Point, q: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(q.x - p.x, q.y - p.y)


def bearing(p: Point, q: Point) -> float:
    """
    Bearing from `p` to `q` in degrees, normalized into [0, 360).

    Coincident points have bearing 0.
    """
    dx = q.x - p.x
    dy = q.y - p.y
    if dx == 0 and dy == 0:
        return 0.0
    ang = math.degrees(math.atan2(dy, dx)) % 360.0
    # modulo of a tiny negative angle can round up to exactly 360
    if ang >= 360.0:
        ang -= 360.0
    return ang


def ego_offset(p: Point, q: Point, size: int) -> Point:
    """
    Position of `q` relative to `p` on an egocentric map.

    The egocentric map has side 2 * size - 1 with `p` at its center
    (size - 1, size - 1), so every in-grid target lands on the map.
    """
    center = size - 1
    return Point(center + q.x - p.x, center + q.y - p.y)


def max_distance(size: int) -> float:
    """Largest distance between two points of a size x size grid."""
    return (size - 1) * math.sqrt(2.0)

"""
Bounded rejection sampling of trial point pairs.

Two sampling modes are supported:

- UNIFORM: both points are drawn uniformly over the grid.
- POLAR: a distance is drawn uniformly within the configured band and a
  bearing uniformly within [0, 360); the offset is truncated to integers and
  the first point is placed uniformly among the positions where both points
  fit on the grid.

Either way, a draw is rejected when the points coincide (if `distinct`) or
the distance falls outside the band, and redrawn. Sampling gives up with
SamplingError after `max_retries` attempts, so a band that is infeasible for
the grid size fails loudly instead of looping forever.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

from .geometry import Point, distance

logger = logging.getLogger(__name__)


class SamplingMode(Enum):
    """
    How trial point pairs are drawn.

    - UNIFORM: both points uniformly over the grid
    - POLAR: distance and bearing first, then a placement where both fit
    """

    UNIFORM = auto()
    POLAR = auto()


@dataclass
class SamplingConfig:
    """
    Trial sampling policy.

    Point pairs are redrawn until they satisfy the constraints; after
    `max_retries` failed attempts sampling raises SamplingError.
    """

    mode: SamplingMode = SamplingMode.UNIFORM

    # Require the two points of a trial to differ
    distinct: bool = True

    # Optional distance band (inclusive); None leaves that side open
    min_dist: Optional[float] = None
    max_dist: Optional[float] = None

    max_retries: int = 10000

    def __post_init__(self):
        if isinstance(self.mode, str):
            try:
                self.mode = SamplingMode[self.mode.upper()]
            except KeyError:
                raise ValueError(f"unknown sampling mode {self.mode!r}") from None
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {self.max_retries}")
        if self.min_dist is not None and self.min_dist < 0:
            raise ValueError(f"min_dist must be >= 0, got {self.min_dist}")
        if (
            self.min_dist is not None
            and self.max_dist is not None
            and self.min_dist > self.max_dist
        ):
            raise ValueError(
                f"min_dist {self.min_dist} exceeds max_dist {self.max_dist}"
            )
        if self.mode == SamplingMode.POLAR and self.max_dist is None:
            raise ValueError("polar sampling requires max_dist")


class SamplingError(RuntimeError):
    """Raised when no acceptable trial is found within the retry cap."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


def random_point(rng: np.random.Generator, size: int) -> Point:
    """Draw a point uniformly over a size x size grid."""
    x, y = rng.integers(0, size, size=2)
    return Point(int(x), int(y))


def _draw_uniform(rng: np.random.Generator, size: int, cfg: SamplingConfig) -> Optional[Tuple[Point, Point]]:
    return random_point(rng, size), random_point(rng, size)


def _draw_polar(rng: np.random.Generator, size: int, cfg: SamplingConfig) -> Optional[Tuple[Point, Point]]:
    lo = cfg.min_dist or 0.0
    hi = cfg.max_dist
    dist = lo + rng.random() * (hi - lo)
    rad = math.radians(rng.random() * 360.0)
    # truncate toward zero, matching integer grid offsets
    dx = int(dist * math.cos(rad))
    dy = int(dist * math.sin(rad))

    # first point positions that keep the second point on the grid
    x_lo, x_hi = max(0, -dx), size - max(0, dx)
    y_lo, y_hi = max(0, -dy), size - max(0, dy)
    if x_lo >= x_hi or y_lo >= y_hi:
        return None
    p = Point(int(rng.integers(x_lo, x_hi)), int(rng.integers(y_lo, y_hi)))
    return p, Point(p.x + dx, p.y + dy)


_DRAWERS = {
    SamplingMode.UNIFORM: _draw_uniform,
    SamplingMode.POLAR: _draw_polar,
}


def accepts(p: Point, q: Point, cfg: SamplingConfig) -> bool:
    """Return True if the pair satisfies the sampling constraints."""
    if cfg.distinct and p == q:
        return False
    d = distance(p, q)
    if cfg.min_dist is not None and d < cfg.min_dist:
        return False
    if cfg.max_dist is not None and d > cfg.max_dist:
        return False
    return True


def sample_pair(rng: np.random.Generator, size: int, cfg: SamplingConfig) -> Tuple[Point, Point, int]:
    """
    Draw a point pair satisfying the sampling constraints.

    Args:
        rng: Random generator owned by the caller
        size: Side length of the grid
        cfg: Sampling policy (mode, distinctness, distance band, retry cap)

    Returns:
        tuple: (point, target, attempts) where attempts counts the draws used

    Raises:
        SamplingError: If no acceptable pair is found within cfg.max_retries
    """
    draw = _DRAWERS[cfg.mode]
    for attempt in range(1, cfg.max_retries + 1):
        pair = draw(rng, size, cfg)
        if pair is not None and accepts(pair[0], pair[1], cfg):
            if attempt > 1:
                logger.debug("Accepted %s pair after %d attempts", cfg.mode.name, attempt)
            return pair[0], pair[1], attempt

    raise SamplingError(
        f"no {cfg.mode.name.lower()} point pair on a {size}x{size} grid satisfied "
        f"distinct={cfg.distinct} distance in [{cfg.min_dist}, {cfg.max_dist}] "
        f"after {cfg.max_retries} attempts",
        attempts=cfg.max_retries,
    )

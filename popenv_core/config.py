"""
Configuration objects for popenv encoders and environments.

Exposes the population code parameters and the environment setup as
dataclasses, so experiments can be described without editing core logic.
All parameter objects validate themselves on creation and raise ValueError
for invalid settings. The sampling policy lives with the sampler in
`spatial.sampling` and is re-exported here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from spatial.sampling import SamplingConfig  # noqa: F401  re-exported

# Largest Gaussian exponent whose activation is still a normal float32
MAX_FALLOFF = -math.log(float(np.finfo(np.float32).tiny))


def _falloff(units: int, sigma: float) -> float:
    """
    Gaussian exponent at the point farthest from every unit center.

    In range values lie at most half a spacing from a center, or a full
    spacing for a single-unit code.
    """
    gap = 1.0 if units == 1 else 0.5
    return 0.5 * (gap / sigma) ** 2


def min_sigma(units: int) -> float:
    """Smallest sigma for which no in-range value encodes as all zeros."""
    return math.sqrt(_falloff(units, 1.0) / MAX_FALLOFF)


@dataclass(frozen=True)
class PopCodeParams:
    """
    Parameters for a 1D population code (linear or circular).

    Each unit responds with a Gaussian bump centered on its preferred value.
    `sigma` is expressed in multiples of the spacing between unit centers.
    It must be at least `min_sigma(units)` (about 0.038, or 0.076 for a
    single unit); narrower codes would leave a value midway between two
    centers with no activation representable in the float32 buffers.
    When `normalize` is set the activations are rescaled to sum to 1.
    """

    units: int
    min_val: float = 0.0
    max_val: float = 1.0
    sigma: float = 0.5
    normalize: bool = False
    # Clamp values into [min_val, max_val] before encoding (linear codes only)
    clip: bool = True

    def __post_init__(self):
        if int(self.units) != self.units or self.units < 1:
            raise ValueError(f"units must be a positive integer, got {self.units!r}")
        if not self.min_val < self.max_val:
            raise ValueError(
                f"min_val must be below max_val, got [{self.min_val}, {self.max_val}]"
            )
        if not self.sigma > 0:
            raise ValueError(f"sigma must be positive, got {self.sigma!r}")
        if _falloff(int(self.units), self.sigma) > MAX_FALLOFF:
            raise ValueError(
                f"sigma {self.sigma!r} is too narrow for {int(self.units)} units: values "
                f"between centers would encode as all zeros (need >= {min_sigma(int(self.units)):.4f})"
            )
        object.__setattr__(self, "units", int(self.units))
        object.__setattr__(self, "min_val", float(self.min_val))
        object.__setattr__(self, "max_val", float(self.max_val))
        object.__setattr__(self, "sigma", float(self.sigma))

    @property
    def range(self) -> float:
        return self.max_val - self.min_val


def _pair(value, cast) -> Tuple:
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError(f"expected an (x, y) pair, got {value!r}")
        return (cast(value[0]), cast(value[1]))
    return (cast(value), cast(value))


@dataclass(frozen=True)
class PopCode2DParams:
    """
    Parameters for a 2D lattice population code.

    Every field takes an (x, y) pair; a single number is used for both axes.
    The encoded grid has shape (units_y, units_x).
    The sigma bound of `PopCodeParams` applies to both axes combined.
    """

    units: Tuple[int, int]
    min_val: Tuple[float, float] = (0.0, 0.0)
    max_val: Tuple[float, float] = (1.0, 1.0)
    sigma: Tuple[float, float] = (0.5, 0.5)
    normalize: bool = False
    clip: bool = True

    def __post_init__(self):
        units = _pair(self.units, int)
        lo = _pair(self.min_val, float)
        hi = _pair(self.max_val, float)
        sigma = _pair(self.sigma, float)
        for axis, n, a, b, s in zip("xy", units, lo, hi, sigma):
            if n < 1:
                raise ValueError(f"units along {axis} must be positive, got {n}")
            if not a < b:
                raise ValueError(f"min_val must be below max_val along {axis}, got [{a}, {b}]")
            if not s > 0:
                raise ValueError(f"sigma along {axis} must be positive, got {s}")
        if sum(_falloff(n, s) for n, s in zip(units, sigma)) > MAX_FALLOFF:
            raise ValueError(
                f"sigma {sigma} is too narrow for {units} units: points between "
                f"lattice centers would encode as all zeros"
            )
        object.__setattr__(self, "units", units)
        object.__setattr__(self, "min_val", lo)
        object.__setattr__(self, "max_val", hi)
        object.__setattr__(self, "sigma", sigma)

    def axis(self, i: int) -> PopCodeParams:
        """Return the 1D parameters along axis i (0 = x, 1 = y)."""
        return PopCodeParams(
            units=self.units[i],
            min_val=self.min_val[i],
            max_val=self.max_val[i],
            sigma=self.sigma[i],
            clip=self.clip,
        )


@dataclass
class EnvConfig:
    """
    Configuration for `Environment` setup.

    `size` is the side length of the square sampling grid. A
    `trials_per_epoch` of 0 disables epoch rollover. `seed` seeds the
    environment's own random generator; None draws fresh OS entropy.
    """

    size: int
    trials_per_epoch: int = 0
    name: str = "env"
    desc: str = ""
    seed: Optional[int] = None

    # Number of categorical identities drawn per trial (0 disables)
    n_identities: int = 0

    sampling: SamplingConfig = field(default_factory=SamplingConfig)

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"{self.name}: grid size must be positive, got {self.size}")
        if self.trials_per_epoch < 0:
            raise ValueError(
                f"{self.name}: trials_per_epoch must be >= 0, got {self.trials_per_epoch}"
            )
        if self.n_identities < 0:
            raise ValueError(f"{self.name}: n_identities must be >= 0, got {self.n_identities}")

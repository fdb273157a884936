"""
Population codes for scalar, circular, 2D, and categorical values.

A population code represents a value as a pattern of overlapping,
bell-shaped unit responses instead of a single number. Each unit has a
preferred value (its center) and responds with

    a_i = exp(-0.5 * (d(value, c_i) / (sigma * spacing)) ** 2)

where `spacing` is the distance between neighboring centers and `d` is the
linear or circular distance. Decoding reads back an estimate as the
activation-weighted centroid of the centers.

Encoders are stateless after construction: encode/decode are deterministic
functions of their inputs and the (immutable) parameters.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import PopCode2DParams, PopCodeParams


class DegenerateCodeError(ValueError):
    """Raised when an activation pattern carries no evidence to decode."""


def _write(acts: np.ndarray, out: Optional[np.ndarray], add: bool) -> np.ndarray:
    """Return `acts`, or store it into `out` (overwrite or accumulate)."""
    if out is None:
        return acts
    if out.shape != acts.shape:
        raise ValueError(f"target shape {out.shape} does not match code shape {acts.shape}")
    if add:
        out += acts
    else:
        out[...] = acts
    return out


def _evidence(acts, shape: Tuple[int, ...], thr: float) -> np.ndarray:
    """Validate an activation pattern and return its non-negative weights."""
    a = np.asarray(acts, dtype=np.float64)
    if a.shape != shape:
        raise ValueError(f"activation shape {a.shape} does not match code shape {shape}")
    # negative activations carry no evidence for any center
    a = np.clip(a, 0.0, None)
    if thr > 0:
        a = np.where(a >= thr, a, 0.0)
    if not a.sum() > 0:
        raise DegenerateCodeError("cannot decode an all-zero activation pattern")
    return a


class OneD:
    """
    Linear 1D population code over [min_val, max_val].

    Centers are evenly spaced with the first at min_val and the last at
    max_val. A single-unit code has its center at min_val and a spacing
    equal to the full range.

    Attributes:
        params: The immutable code parameters
        centers: Preferred value of each unit
        spacing: Distance between neighboring centers
    """

    def __init__(self, params: PopCodeParams):
        self.params = params
        self.spacing, self.centers = self._layout()
        self._width = params.sigma * self.spacing

    def _layout(self):
        p = self.params
        if p.units == 1:
            return p.range, np.array([p.min_val])
        spacing = p.range / (p.units - 1)
        return spacing, p.min_val + spacing * np.arange(p.units)

    @property
    def shape(self) -> Tuple[int, ...]:
        return (self.params.units,)

    def _prepare(self, value: float) -> float:
        if self.params.clip:
            return min(max(value, self.params.min_val), self.params.max_val)
        return value

    def _distance(self, value: float) -> np.ndarray:
        return np.abs(self.centers - value)

    def encode(self, value: float, out: Optional[np.ndarray] = None, add: bool = False) -> np.ndarray:
        """
        Encode a scalar as unit activations.

        Args:
            value: Scalar to encode
            out: Optional target array of the code's shape; written in full
            add: Accumulate onto `out` instead of overwriting it

        Returns:
            numpy.ndarray: The activations (the `out` array when given)

        Raises:
            ValueError: If `out` does not have the code's shape
        """
        v = self._prepare(float(value))
        z = self._distance(v) / self._width
        acts = np.exp(-0.5 * z * z)
        if self.params.normalize:
            acts = acts / acts.sum()
        return _write(acts.astype(np.float32), out, add)

    def decode(self, acts, thr: float = 0.0) -> float:
        """
        Estimate the encoded value as the activation-weighted centroid.

        Raises:
            DegenerateCodeError: If no activation remains above zero/`thr`
            ValueError: If `acts` does not have the code's shape
        """
        a = _evidence(acts, self.shape, thr)
        return float(np.dot(a, self.centers) / a.sum())


class Ring(OneD):
    """
    Circular 1D population code, e.g. for compass bearings in [0, 360).

    The period is max_val - min_val. Centers sit at min_val + i * period /
    units, and distances wrap around so that a value and the same value
    shifted by a whole period encode identically.
    """

    def __init__(self, params: PopCodeParams):
        super().__init__(params)
        self.period = params.range

    def _layout(self):
        p = self.params
        spacing = p.range / p.units
        return spacing, p.min_val + spacing * np.arange(p.units)

    def _prepare(self, value: float) -> float:
        p = self.params
        v = p.min_val + (value - p.min_val) % p.range
        return p.min_val if v >= p.max_val else v

    def _distance(self, value: float) -> np.ndarray:
        d = np.abs(self.centers - value) % self.period
        return np.minimum(d, self.period - d)

    def decode(self, acts, thr: float = 0.0) -> float:
        """
        Estimate the encoded value as the weighted circular mean of centers.

        The result lies within [min_val, max_val).
        """
        a = _evidence(acts, self.shape, thr)
        p = self.params
        theta = 2.0 * np.pi * (self.centers - p.min_val) / self.period
        ang = math.atan2(float(np.dot(a, np.sin(theta))), float(np.dot(a, np.cos(theta))))
        frac = (ang / (2.0 * math.pi)) % 1.0
        val = p.min_val + frac * self.period
        if val >= p.max_val:
            val = p.min_val
        return float(val)


class TwoD:
    """
    2D lattice population code over [min_x, max_x] x [min_y, max_y].

    Grids have shape (units_y, units_x); row j, column i responds to the
    lattice point (centers_x[i], centers_y[j]). Distances are scaled per axis
    by sigma * spacing before the Gaussian falloff is applied.
    """

    def __init__(self, params: PopCode2DParams):
        self.params = params
        self._x = OneD(params.axis(0))
        self._y = OneD(params.axis(1))
        self.centers_x = self._x.centers
        self.centers_y = self._y.centers

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.params.units[1], self.params.units[0])

    def encode(self, value: Sequence[float], out: Optional[np.ndarray] = None, add: bool = False) -> np.ndarray:
        """
        Encode an (x, y) position as a 2D activation grid.

        Pass `add=True` to accumulate onto `out`, e.g. to put two points on
        one shared map; the first call of such a sequence should overwrite.
        """
        x, y = value
        zx = self._x._distance(self._x._prepare(float(x))) / self._x._width
        zy = self._y._distance(self._y._prepare(float(y))) / self._y._width
        acts = np.exp(-0.5 * (zy[:, None] ** 2 + zx[None, :] ** 2))
        if self.params.normalize:
            acts = acts / acts.sum()
        return _write(acts.astype(np.float32), out, add)

    def decode(self, acts, thr: float = 0.0) -> Tuple[float, float]:
        """Return the activation-weighted centroid (x, y) of the lattice."""
        a = _evidence(acts, self.shape, thr)
        total = a.sum()
        x = float(np.dot(a.sum(axis=0), self.centers_x) / total)
        y = float(np.dot(a.sum(axis=1), self.centers_y) / total)
        return x, y


class Category:
    """
    Localist code for categorical identities: one unit per category.

    Encoding an index activates exactly that unit; decoding returns the most
    active unit.
    """

    def __init__(self, units: int):
        if int(units) != units or units < 1:
            raise ValueError(f"units must be a positive integer, got {units!r}")
        self.units = int(units)

    @property
    def shape(self) -> Tuple[int, ...]:
        return (self.units,)

    def encode(self, value: int, out: Optional[np.ndarray] = None, add: bool = False) -> np.ndarray:
        idx = int(value)
        if not 0 <= idx < self.units:
            raise ValueError(f"category {value!r} out of range [0, {self.units})")
        acts = np.zeros(self.shape, dtype=np.float32)
        acts[idx] = 1.0
        return _write(acts, out, add)

    def decode(self, acts, thr: float = 0.0) -> int:
        a = _evidence(acts, self.shape, thr)
        return int(np.argmax(a))

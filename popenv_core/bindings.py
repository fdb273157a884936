"""
Feature -> encoder bindings.

An environment is described by a list of bindings, each naming one output
buffer, the derived feature it exposes, and the population code used to
encode that feature. The buffer shape is the encoder's shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Union

from spatial.geometry import max_distance

from .config import PopCodeParams
from .enums import POINT_FEATURES, SCALAR_FEATURES, FeatureKind
from .popcode import Category, OneD, Ring, TwoD

Encoder = Union[OneD, TwoD, Category]


@dataclass
class FeatureBinding:
    """
    One named output of an environment.

    Attributes:
        name: Output buffer name consumers query by
        feature: Derived quantity written into the buffer each trial
        encoder: Population code turning the quantity into activations
    """

    name: str
    feature: FeatureKind
    encoder: Encoder

    def __post_init__(self):
        if isinstance(self.feature, str):
            self.feature = FeatureKind[self.feature.upper()]
        if self.feature in SCALAR_FEATURES:
            ok = isinstance(self.encoder, OneD)
            expected = "a 1D code (OneD or Ring)"
        elif self.feature in POINT_FEATURES:
            ok = isinstance(self.encoder, TwoD)
            expected = "a 2D code (TwoD)"
        else:
            ok = isinstance(self.encoder, Category)
            expected = "a categorical code (Category)"
        if not ok:
            raise ValueError(
                f"output {self.name!r}: feature {self.feature.name} needs {expected}, "
                f"got {type(self.encoder).__name__}"
            )

    @property
    def shape(self):
        return self.encoder.shape


def check_bindings(bindings: Iterable[FeatureBinding], n_identities: int) -> List[FeatureBinding]:
    """
    Validate a binding list against an environment setup.

    Raises:
        ValueError: On duplicate output names, or identity outputs that do
            not fit the configured number of identities
    """
    result = list(bindings)
    seen = set()
    for b in result:
        if b.name in seen:
            raise ValueError(f"duplicate output name {b.name!r}")
        seen.add(b.name)
        if b.feature == FeatureKind.IDENTITY:
            if n_identities <= 0:
                raise ValueError(f"output {b.name!r} encodes identity but n_identities is 0")
            if b.encoder.units < n_identities:
                raise ValueError(
                    f"output {b.name!r} has {b.encoder.units} units for {n_identities} identities"
                )
    return result


def default_bindings(size: int) -> List[FeatureBinding]:
    """
    Distance and bearing outputs for a size x size grid.

    Distance uses 10 linear units over the grid's distance range padded by
    10% on each side; bearing uses 24 ring units over [0, 360).
    """
    span = max(max_distance(size), 1.0)
    return [
        FeatureBinding(
            "Distance",
            FeatureKind.DISTANCE,
            OneD(PopCodeParams(units=10, min_val=-0.1 * span, max_val=1.1 * span, sigma=1.0)),
        ),
        FeatureBinding(
            "Angle",
            FeatureKind.ANGLE,
            Ring(PopCodeParams(units=24, min_val=0.0, max_val=360.0, sigma=1.0)),
        ),
    ]

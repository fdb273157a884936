"""
Core enumerations for the popenv environment generator.

This module defines the time scales and derived features used throughout the environment to describe counters and encoder bindings.
"""

from enum import Enum, auto

from spatial.sampling import SamplingMode  # noqa: F401  re-exported


class TimeScale(Enum):
    """
    Nested loop counters tracked by an environment.

    - RUN: One full experiment repetition
    - EPOCH: One full pass over the configured number of trials
    - TRIAL: One sample presented to the consumer
    """

    RUN = auto()
    """Full experiment repetition, set explicitly at init time."""

    EPOCH = auto()
    """Incremented each time the trial counter wraps around."""

    TRIAL = auto()
    """Innermost counter, advanced once per step."""


class FeatureKind(Enum):
    """
    Derived quantities an environment can expose through an encoder.

    Scalar features are encoded with 1D codes (OneD, Ring), point features
    with 2D codes (TwoD), and IDENTITY with a categorical code.
    """

    DISTANCE = auto()
    """Euclidean distance between the point and the target."""

    ANGLE = auto()
    """Bearing from the point to the target in degrees, within [0, 360)."""

    POINT = auto()
    """First sampled point as an (x, y) position."""

    TARGET = auto()
    """Second sampled point as an (x, y) position."""

    BOTH_POINTS = auto()
    """Both points accumulated onto one shared map."""

    EGO_OFFSET = auto()
    """Target position relative to the point, centered on the grid."""

    POINT_X = auto()
    POINT_Y = auto()
    TARGET_X = auto()
    TARGET_Y = auto()

    IDENTITY = auto()
    """Categorical identity drawn per trial."""


SCALAR_FEATURES = frozenset({
    FeatureKind.DISTANCE,
    FeatureKind.ANGLE,
    FeatureKind.POINT_X,
    FeatureKind.POINT_Y,
    FeatureKind.TARGET_X,
    FeatureKind.TARGET_Y,
})

POINT_FEATURES = frozenset({
    FeatureKind.POINT,
    FeatureKind.TARGET,
    FeatureKind.BOTH_POINTS,
    FeatureKind.EGO_OFFSET,
})

"""
Ready-made environment setups.

Each preset returns the sampling policy and output bindings of one
experiment layout for a given grid size:

- distance_angle: distance and bearing codes only (the default outputs)
- allo_ego: distance and bearing plus an attention map of the first point,
  an allocentric map holding both points, and an egocentric map of the
  target relative to the first point; pairs drawn in polar mode
- distance_inputs: distance plus 1D codes of each point's x coordinate
- identity: a categorical identity code plus the attention map
"""

from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from spatial.geometry import max_distance

from .bindings import FeatureBinding, default_bindings
from .config import EnvConfig, PopCode2DParams, PopCodeParams, SamplingConfig
from .enums import FeatureKind, SamplingMode
from .env import Environment
from .popcode import Category, OneD, TwoD

PresetSpec = Tuple[SamplingConfig, List[FeatureBinding], dict]


def _attn(size: int) -> FeatureBinding:
    top = float(max(size - 1, 1))
    return FeatureBinding(
        "Attn",
        FeatureKind.POINT,
        TwoD(PopCode2DParams(units=size, min_val=0.0, max_val=top, sigma=0.5)),
    )


def distance_angle(size: int) -> PresetSpec:
    return SamplingConfig(), default_bindings(size), {}


def allo_ego(size: int) -> PresetSpec:
    sampling = SamplingConfig(
        mode=SamplingMode.POLAR,
        min_dist=min(2.0, size - 1.0),
        max_dist=max(size - 1.0, 1.0),
    )
    # allocentric map padded by 3 cells on each side
    allo = TwoD(PopCode2DParams(units=size + 3, min_val=-3.0, max_val=size + 5.0, sigma=0.5))
    ego_side = 2 * size - 1
    ego = TwoD(PopCode2DParams(units=ego_side, min_val=0.0, max_val=float(max(ego_side - 1, 1)), sigma=0.5))
    bindings = default_bindings(size) + [
        _attn(size),
        FeatureBinding("AlloInput", FeatureKind.BOTH_POINTS, allo),
        FeatureBinding("EgoInput", FeatureKind.EGO_OFFSET, ego),
    ]
    return sampling, bindings, {}


def distance_inputs(size: int) -> PresetSpec:
    span = max(max_distance(size), 1.0)
    top = float(max(size - 1, 1))
    bindings = [
        FeatureBinding(
            "Distance",
            FeatureKind.DISTANCE,
            OneD(PopCodeParams(units=10, min_val=-0.1 * span, max_val=1.1 * span, sigma=1.0)),
        ),
        FeatureBinding("Input 1", FeatureKind.POINT_X, OneD(PopCodeParams(units=size, max_val=top))),
        FeatureBinding("Input 2", FeatureKind.TARGET_X, OneD(PopCodeParams(units=size, max_val=top))),
    ]
    return SamplingConfig(), bindings, {}


def identity(size: int, n_identities: int = 4) -> PresetSpec:
    bindings = [
        FeatureBinding("Identity", FeatureKind.IDENTITY, Category(n_identities)),
        _attn(size),
    ]
    return SamplingConfig(distinct=False), bindings, {"n_identities": n_identities}


PRESETS: Dict[str, Callable[[int], PresetSpec]] = {
    "distance_angle": distance_angle,
    "allo_ego": allo_ego,
    "distance_inputs": distance_inputs,
    "identity": identity,
}


def build_preset(name: str, size: int, trials_per_epoch: int = 0, seed: int | None = None) -> Environment:
    """
    Build and initialize an environment from a named preset.

    Raises:
        ValueError: If the preset name is unknown or the size invalid
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(f"unknown preset {name!r}; choose from {sorted(PRESETS)}") from None
    if size <= 0:
        raise ValueError(f"{name}: grid size must be positive, got {size}")
    sampling, bindings, extra = factory(size)
    config = EnvConfig(
        size=size,
        trials_per_epoch=trials_per_epoch,
        name=name,
        seed=seed,
        sampling=sampling,
        **extra,
    )
    env = Environment(config, bindings)
    env.init(0)
    return env

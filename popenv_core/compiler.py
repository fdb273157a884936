"""
YAML compiler for popenv environments.

This module compiles a YAML environment description into a configured and
initialized `Environment`: grid setup, sampling policy, and the declarative
list of outputs (feature -> population code bindings).

YAML schema:

env:
  name: allo_ego
  size: 10
  trials_per_epoch: 100
  seed: 1             # optional; omit for fresh entropy
  n_identities: 0     # optional; > 0 enables the identity feature
sampling:
  mode: polar         # uniform | polar
  distinct: true
  min_dist: 2
  max_dist: 9
  max_retries: 10000
outputs:
  - name: Distance
    feature: distance # see FeatureKind, case-insensitive
    code: linear      # linear | ring | grid | category
    units: 10
    min: -1.2
    max: 14
    sigma: 1.0
    normalize: false
  - name: AlloInput
    feature: both_points
    code: grid
    units: [13, 13]   # grid fields take [x, y] pairs or a single number
    min: -3
    max: 15
    sigma: 0.5

Notes:
- Without `outputs`, the environment exposes the default distance and
  bearing codes.
- Unknown features or codes, and invalid parameters, raise ValueError.
"""

from __future__ import annotations

from typing import Any, Dict, List

import yaml

from .bindings import FeatureBinding
from .config import EnvConfig, PopCode2DParams, PopCodeParams, SamplingConfig
from .enums import FeatureKind
from .env import Environment
from .popcode import Category, OneD, Ring, TwoD

_CODE_KEYS = ("units", "min", "max", "sigma", "normalize", "clip")


def _code_params(spec: Dict[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for key in _CODE_KEYS:
        if key in spec:
            name = {"min": "min_val", "max": "max_val"}.get(key, key)
            params[name] = spec[key]
    if "units" not in params:
        raise ValueError(f"output {spec.get('name')!r} is missing 'units'")
    return params


def build_encoder(spec: Dict[str, Any]):
    """
    Build a population code from an output entry.

    Args:
        spec: Output entry with 'code' and code parameters

    Returns:
        OneD, Ring, TwoD or Category encoder
    """
    code = str(spec.get("code", "linear")).lower()
    if code == "category":
        return Category(spec.get("units", 0))
    params = _code_params(spec)
    if code in ("linear", "oned"):
        return OneD(PopCodeParams(**params))
    if code == "ring":
        return Ring(PopCodeParams(**params))
    if code in ("grid", "twod"):
        return TwoD(PopCode2DParams(**params))
    raise ValueError(f"unknown code {code!r} for output {spec.get('name')!r}")


def _feature(spec: Dict[str, Any]) -> FeatureKind:
    name = str(spec.get("feature", "")).upper()
    if name not in FeatureKind.__members__:
        raise ValueError(
            f"unknown feature {spec.get('feature')!r} for output {spec.get('name')!r}"
        )
    return FeatureKind[name]


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def compile_bindings(outputs: List[Dict[str, Any]]) -> List[FeatureBinding]:
    """Compile the `outputs` list into feature bindings."""
    if not isinstance(outputs, list):
        raise ValueError(f"outputs must be a list, got {type(outputs).__name__}")
    bindings: List[FeatureBinding] = []
    for entry in outputs:
        entry = _mapping(entry, "output entry")
        name = entry.get("name")
        if not name:
            raise ValueError(f"output entry without a name: {entry!r}")
        try:
            encoder = build_encoder(entry)
        except TypeError as exc:  # non-numeric code parameters
            raise ValueError(f"invalid code parameters for output {name!r}: {exc}") from exc
        bindings.append(FeatureBinding(str(name), _feature(entry), encoder))
    return bindings


def compile_from_dict(spec: Dict[str, Any]) -> Environment:
    """
    Compile a YAML-parsed dictionary into an initialized `Environment`.

    Args:
        spec: Parsed YAML dictionary

    Returns:
        Environment: Configured environment, initialized for run 0

    Raises:
        ValueError: If the document or any of its sections is malformed
    """
    spec = _mapping(spec, "environment document")
    env_spec = dict(_mapping(spec.get("env"), "env"))
    if "size" not in env_spec:
        raise ValueError("environment spec is missing env.size")
    try:
        sampling = SamplingConfig(**_mapping(spec.get("sampling"), "sampling"))
        config = EnvConfig(sampling=sampling, **env_spec)
    except TypeError as exc:  # unknown keys or non-numeric values
        raise ValueError(f"invalid environment spec: {exc}") from exc

    outputs = spec.get("outputs")
    bindings = compile_bindings(outputs) if outputs else None

    env = Environment(config, bindings)
    env.init(0)
    return env


def compile_from_yaml(yaml_text: str) -> Environment:
    """Compile from YAML text into an `Environment`."""
    data = yaml.safe_load(yaml_text) or {}
    return compile_from_dict(data)


def compile_from_file(path: str) -> Environment:
    """Compile from a YAML file path into an `Environment`."""
    with open(path, "r", encoding="utf-8") as f:
        txt = f.read()
    return compile_from_yaml(txt)

"""
Trial environment producing population-coded geometric features.

This module implements the environment consumed by an external network
simulation. Each step draws a new trial on a square grid and rewrites the
named output buffers:

1. Sampling: draw a point pair under the configured constraints
   (bounded rejection sampling, see `spatial.sampling`)
2. Features: compute distance, bearing, and an optional categorical identity
3. Encoding: encode each bound feature into its buffer, clearing it first
4. Counters: advance the trial counter, rolling into the epoch counter

Consumers query buffers by name (`state`) and poll counters (`counter`).
Buffers are owned by the environment and handed out as read-only views.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from spatial.geometry import Point, bearing, distance, ego_offset
from spatial.sampling import sample_pair

from .bindings import FeatureBinding, check_bindings, default_bindings
from .config import EnvConfig
from .counters import Counter
from .enums import FeatureKind, TimeScale

logger = logging.getLogger(__name__)


@dataclass
class TrialSample:
    """
    Quantities drawn and derived for one trial.

    Attributes:
        point: First sampled point
        target: Second sampled point
        distance: Euclidean distance from point to target
        angle: Bearing from point to target in degrees, within [0, 360)
        identity: Categorical identity, or None when identities are disabled
        attempts: Number of draws the rejection sampler needed
    """

    point: Point
    target: Point
    distance: float
    angle: float
    identity: Optional[int] = None
    attempts: int = 1

    def as_dict(self) -> dict:
        return {
            "point": list(self.point),
            "target": list(self.target),
            "distance": self.distance,
            "angle": self.angle,
            "identity": self.identity,
            "attempts": self.attempts,
        }


class Environment:
    """
    Configurable trial generator with population-coded outputs.

    An environment is parameterized by an `EnvConfig` (grid size, trials per
    epoch, sampling policy, seed) and a list of `FeatureBinding`s declaring
    which features it exposes and how each is encoded.

    Attributes:
        config: Active configuration (None until configured)
        bindings: Output bindings in declaration order
        rng: Random generator owned by this environment
        run, epoch, trial: Counters at each time scale
        sample: Most recent trial, None before the first step
    """

    def __init__(
        self,
        config: EnvConfig | None = None,
        bindings: Iterable[FeatureBinding] | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config: Optional[EnvConfig] = None
        self.bindings: List[FeatureBinding] = []
        self.rng: Optional[np.random.Generator] = None
        self._buffers: Dict[str, np.ndarray] = {}
        self.run = Counter(TimeScale.RUN)
        self.epoch = Counter(TimeScale.EPOCH)
        self.trial = Counter(TimeScale.TRIAL)
        self.sample: Optional[TrialSample] = None
        if config is not None:
            self.apply_config(config, bindings, rng)

    # ----- setup -----
    @property
    def name(self) -> str:
        return self.config.name if self.config else ""

    @property
    def desc(self) -> str:
        return self.config.desc if self.config else ""

    def configure(
        self,
        size: int,
        trials_per_epoch: int = 0,
        bindings: Iterable[FeatureBinding] | None = None,
        rng: np.random.Generator | None = None,
        **overrides,
    ) -> "Environment":
        """
        Configure grid size, trials per epoch, and outputs.

        Extra keyword arguments are passed to `EnvConfig` (name, seed,
        sampling, n_identities, ...). Without bindings, the environment
        exposes distance and bearing codes.

        Raises:
            ValueError: If the size, trial count, or bindings are invalid
        """
        config = EnvConfig(size=size, trials_per_epoch=trials_per_epoch, **overrides)
        return self.apply_config(config, bindings, rng)

    def apply_config(
        self,
        config: EnvConfig,
        bindings: Iterable[FeatureBinding] | None = None,
        rng: np.random.Generator | None = None,
    ) -> "Environment":
        """Install a validated configuration and allocate output buffers."""
        if bindings is None:
            bindings = default_bindings(config.size)
        self.bindings = check_bindings(bindings, config.n_identities)
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._buffers = {
            b.name: np.zeros(b.shape, dtype=np.float32) for b in self.bindings
        }
        self.trial.max = config.trials_per_epoch
        self.sample = None
        logger.info(
            "Configured %s: size=%d trials_per_epoch=%d outputs=%s",
            config.name,
            config.size,
            config.trials_per_epoch,
            [b.name for b in self.bindings],
        )
        return self

    def seed(self, seed: int | None):
        """Replace the random generator with a freshly seeded one."""
        self.rng = np.random.default_rng(seed)

    def validate(self):
        """
        Check that the environment is ready to step.

        Raises:
            ValueError: If the environment has not been configured
        """
        if self.config is None:
            raise ValueError(f"Environment {self.name!r} has size == 0 -- need to configure")

    def init(self, run: int = 0):
        """Restart the environment for a fresh run."""
        self.validate()
        self.run.init()
        self.epoch.init()
        self.trial.init()
        self.run.cur = run
        self.trial.max = self.config.trials_per_epoch
        self.sample = None
        for buf in self._buffers.values():
            buf.fill(0.0)

    # ----- trials -----
    def new_trial(self) -> TrialSample:
        """
        Draw a new trial and encode every bound feature.

        Raises:
            SamplingError: If no trial satisfies the sampling constraints
                within the retry cap; buffers are left untouched
        """
        self.validate()
        cfg = self.config
        point, target, attempts = sample_pair(self.rng, cfg.size, cfg.sampling)
        identity = int(self.rng.integers(cfg.n_identities)) if cfg.n_identities > 0 else None
        sample = TrialSample(
            point=point,
            target=target,
            distance=distance(point, target),
            angle=bearing(point, target),
            identity=identity,
            attempts=attempts,
        )
        for b in self.bindings:
            self._encode(b, sample)
        self.sample = sample
        logger.debug("Trial %s", sample)
        return sample

    def _encode(self, b: FeatureBinding, s: TrialSample):
        buf = self._buffers[b.name]
        f = b.feature
        if f == FeatureKind.BOTH_POINTS:
            b.encoder.encode(s.point, out=buf)
            b.encoder.encode(s.target, out=buf, add=True)
        elif f == FeatureKind.EGO_OFFSET:
            b.encoder.encode(ego_offset(s.point, s.target, self.config.size), out=buf)
        else:
            b.encoder.encode(self._feature_value(f, s), out=buf)

    @staticmethod
    def _feature_value(f: FeatureKind, s: TrialSample):
        if f == FeatureKind.DISTANCE:
            return s.distance
        if f == FeatureKind.ANGLE:
            return s.angle
        if f == FeatureKind.POINT:
            return s.point
        if f == FeatureKind.TARGET:
            return s.target
        if f == FeatureKind.POINT_X:
            return s.point.x
        if f == FeatureKind.POINT_Y:
            return s.point.y
        if f == FeatureKind.TARGET_X:
            return s.target.x
        if f == FeatureKind.TARGET_Y:
            return s.target.y
        return s.identity

    def step(self) -> bool:
        """
        Advance the environment by one trial.

        Returns:
            bool: Always True; reserved for signaling an exhausted environment

        Raises:
            SamplingError: If no trial could be drawn; counters, including
                their change flags, are left as they were
        """
        self.new_trial()
        self.epoch.same()
        if self.trial.incr():  # wrapped around trials_per_epoch
            self.epoch.incr()
        return True

    # ----- queries -----
    def counters(self) -> List[TimeScale]:
        return [TimeScale.RUN, TimeScale.EPOCH, TimeScale.TRIAL]

    def counter(self, scale: Union[TimeScale, str]) -> Tuple[int, int, bool]:
        """
        Return (cur, prv, chg) for a time scale and clear its change flag.

        Unknown scales return (-1, -1, False).
        """
        if isinstance(scale, str):
            scale = TimeScale.__members__.get(scale.upper())
        ctr = {
            TimeScale.RUN: self.run,
            TimeScale.EPOCH: self.epoch,
            TimeScale.TRIAL: self.trial,
        }.get(scale)
        if ctr is None:
            return -1, -1, False
        return ctr.query()

    def states(self) -> List[Tuple[str, Tuple[int, ...]]]:
        """List (name, shape) for every output buffer, in declaration order."""
        return [(b.name, b.shape) for b in self.bindings]

    def state(self, name: str) -> Optional[np.ndarray]:
        """
        Return a read-only view of the named output buffer.

        Unknown names return None.
        """
        buf = self._buffers.get(name)
        if buf is None:
            return None
        view = buf.view()
        view.flags.writeable = False
        return view

    def actions(self) -> list:
        return []

    def action(self, name: str, value) -> None:
        # environment does not react to actions
        return None

    def snapshot(self) -> dict:
        """
        Capture the current trial, counters and buffers as plain data.

        Returns:
            dict: Keys 'name', 'counters', 'sample' and 'states'
        """
        return {
            "name": self.name,
            "counters": {
                ctr.scale.name.lower(): {"cur": ctr.cur, "prv": ctr.prv, "chg": ctr.chg}
                for ctr in (self.run, self.epoch, self.trial)
            },
            "sample": self.sample.as_dict() if self.sample else None,
            "states": {name: buf.tolist() for name, buf in self._buffers.items()},
        }

    def __str__(self) -> str:
        if self.sample is None:
            return "Pt_none"
        return f"Pt_{self.sample.point.x}_{self.sample.point.y}"

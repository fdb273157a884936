"""
Metrics utilities for popenv encoders and environments.

This module provides:
- Decode error of a population code over a set of probe values
- Peak unit lookup for activation patterns
- Summary statistics of trials drawn from an environment
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple, Union

import numpy as np

from .popcode import OneD, Ring


def peak_unit(acts) -> Union[int, Tuple[int, ...]]:
    """Return the index of the most active unit (a tuple for 2D grids)."""
    a = np.asarray(acts)
    idx = np.unravel_index(int(np.argmax(a)), a.shape)
    return int(idx[0]) if a.ndim == 1 else tuple(int(i) for i in idx)


def decode_errors(encoder: OneD, values: Iterable[float]) -> Dict[str, float]:
    """
    Encode then decode each probe value and report the absolute errors.

    Ring codes measure the error along the circle.

    Args:
        encoder: A OneD or Ring population code
        values: Probe values within the code's range

    Returns:
        dict with keys: mean_abs, max_abs, n
    """
    errs = []
    for v in values:
        est = encoder.decode(encoder.encode(v))
        err = abs(est - float(v))
        if isinstance(encoder, Ring):
            err = err % encoder.period
            err = min(err, encoder.period - err)
        errs.append(err)
    if not errs:
        return {"mean_abs": 0.0, "max_abs": 0.0, "n": 0.0}
    arr = np.asarray(errs)
    return {"mean_abs": float(arr.mean()), "max_abs": float(arr.max()), "n": float(arr.size)}


def trial_statistics(env, n_trials: int) -> Dict[str, float]:
    """
    Step an environment `n_trials` times and summarize the drawn trials.

    Returns:
        dict with min/max/mean distance, min/max angle, mean and max
        sampling attempts, and the number of trials
    """
    dists, angs, attempts = [], [], []
    for _ in range(n_trials):
        env.step()
        s = env.sample
        dists.append(s.distance)
        angs.append(s.angle)
        attempts.append(s.attempts)
    if not dists:
        return {"trials": 0.0}
    return {
        "trials": float(len(dists)),
        "distance_min": float(min(dists)),
        "distance_max": float(max(dists)),
        "distance_mean": float(np.mean(dists)),
        "angle_min": float(min(angs)),
        "angle_max": float(max(angs)),
        "attempts_mean": float(np.mean(attempts)),
        "attempts_max": float(max(attempts)),
    }

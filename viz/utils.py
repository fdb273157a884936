"""
Lightweight visualization utilities for environment outputs.

Panel building is plain data so it can be tested without a plotting
backend; `plot_states` renders the panels with matplotlib.
"""

from __future__ import annotations

from typing import Any, Dict, List

import numpy as np

from popenv_core.env import Environment
from popenv_core.metrics import peak_unit


def build_panels(env: Environment) -> List[Dict[str, Any]]:
    """Convert an environment's output buffers into plot-ready panels.

    Each panel carries:
    - name, shape: as listed by `env.states()`
    - values: nested lists of activations (1D buffers become one row)
    - vmin, vmax: color limits, vmax at least 1e-6
    - peak: index of the most active unit
    - kind: "vector" or "grid"
    """
    panels: List[Dict[str, Any]] = []
    for name, shape in env.states():
        buf = np.asarray(env.state(name), dtype=np.float32)
        grid = buf.reshape(1, -1) if buf.ndim == 1 else buf
        panels.append({
            "name": name,
            "shape": list(shape),
            "kind": "vector" if buf.ndim == 1 else "grid",
            "values": grid.tolist(),
            "vmin": 0.0,
            "vmax": max(float(buf.max()) if buf.size else 0.0, 1e-6),
            "peak": peak_unit(buf),
        })
    return panels


def title_for_env(env: Environment) -> str:
    s = env.sample
    if s is None:
        return f"{env.name}: no trial"
    return (
        f"{env.name}: {s.point} -> {s.target} "
        f"dist={s.distance:.2f} angle={s.angle:.1f}"
    )


def plot_states(env: Environment, cmap: str = "viridis"):
    """Draw every output buffer of `env` side by side; returns the Figure."""
    import matplotlib.pyplot as plt

    panels = build_panels(env)
    n = max(len(panels), 1)
    fig, axes = plt.subplots(1, n, figsize=(3.0 * n, 3.0), squeeze=False)
    for ax, panel in zip(axes[0], panels):
        ax.imshow(
            np.asarray(panel["values"]),
            cmap=cmap,
            vmin=panel["vmin"],
            vmax=panel["vmax"],
            aspect="auto" if panel["kind"] == "vector" else "equal",
            interpolation="nearest",
        )
        ax.set_title(panel["name"])
        ax.set_xticks([])
        ax.set_yticks([])
    fig.suptitle(title_for_env(env))
    return fig

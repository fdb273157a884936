"""
Tests for the visualization helpers.

Panel building is checked without a plotting backend; the matplotlib
rendering test is skipped when matplotlib is not installed.
"""

import numpy as np
import pytest

from popenv_core.presets import build_preset
from viz.utils import build_panels, plot_states, title_for_env


def test_build_panels_shapes_and_kinds():
    env = build_preset("allo_ego", 6, seed=0)
    env.step()
    panels = build_panels(env)
    by_name = {p["name"]: p for p in panels}
    assert [p["name"] for p in panels] == [name for name, _ in env.states()]
    assert by_name["Distance"]["kind"] == "vector"
    assert np.asarray(by_name["Distance"]["values"]).shape == (1, 10)
    assert by_name["Attn"]["kind"] == "grid"
    assert by_name["Attn"]["shape"] == [6, 6]
    p = env.sample.point
    assert by_name["Attn"]["peak"] == (p.y, p.x)
    for panel in panels:
        assert panel["vmin"] == 0.0
        assert panel["vmax"] >= 1e-6


def test_build_panels_before_first_trial():
    env = build_preset("distance_angle", 5, seed=0)
    panels = build_panels(env)
    assert all(panel["vmax"] == 1e-6 for panel in panels)


def test_title_for_env():
    env = build_preset("distance_angle", 5, seed=1)
    assert title_for_env(env) == "distance_angle: no trial"
    env.step()
    title = title_for_env(env)
    assert title.startswith("distance_angle: ")
    assert "dist=" in title and "angle=" in title


def test_plot_states_returns_figure():
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    env = build_preset("identity", 5, seed=2)
    env.step()
    fig = plot_states(env)
    assert len(fig.axes) == 2
    assert fig.axes[0].get_title() == "Identity"
    plt.close(fig)

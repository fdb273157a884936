"""
Unit tests for the YAML compiler module.

These tests validate environment construction from dictionary specs, YAML
text, and files, including output bindings, sampling settings, defaults,
and rejection of malformed descriptions.
"""

import glob
import os
import tempfile

import numpy as np
import pytest

from popenv_core.compiler import (
    build_encoder,
    compile_bindings,
    compile_from_dict,
    compile_from_file,
    compile_from_yaml,
)
from popenv_core.enums import FeatureKind
from popenv_core.popcode import Category, OneD, Ring, TwoD
from spatial.sampling import SamplingMode

SCRIPTS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "scripts")

YAML_TEXT = """
env:
  name: maps
  size: 6
  trials_per_epoch: 4
  seed: 12
sampling:
  mode: polar
  min_dist: 1
  max_dist: 5
outputs:
  - name: Distance
    feature: distance
    code: linear
    units: 8
    min: 0
    max: 8
    sigma: 1.0
  - name: Angle
    feature: angle
    code: ring
    units: 12
    min: 0
    max: 360
  - name: Allo
    feature: both_points
    code: grid
    units: [6, 6]
    min: 0
    max: 5
"""


class TestCompileFromDict:
    def test_outputs_and_sampling(self):
        spec = {
            "env": {"name": "pair", "size": 5, "trials_per_epoch": 3, "seed": 1},
            "sampling": {"mode": "uniform", "min_dist": 1, "max_dist": 3},
            "outputs": [
                {"name": "Distance", "feature": "distance", "code": "linear", "units": 6, "min": 0, "max": 6},
                {"name": "Angle", "feature": "ANGLE", "code": "ring", "units": 8, "min": 0, "max": 360},
            ],
        }
        env = compile_from_dict(spec)
        assert env.name == "pair"
        assert env.config.size == 5
        assert env.config.sampling.min_dist == 1
        assert env.states() == [("Distance", (6,)), ("Angle", (8,))]
        assert isinstance(env.bindings[1].encoder, Ring)
        assert env.bindings[1].feature == FeatureKind.ANGLE

    def test_environment_is_initialized(self):
        env = compile_from_dict({"env": {"size": 4, "trials_per_epoch": 2}})
        assert env.trial.peek() == (0, -1, True)
        for _ in range(2):
            env.step()
        assert env.epoch.cur == 1

    def test_default_outputs_without_list(self):
        env = compile_from_dict({"env": {"size": 4}})
        assert [name for name, _ in env.states()] == ["Distance", "Angle"]

    def test_missing_size_rejected(self):
        with pytest.raises(ValueError):
            compile_from_dict({"env": {"name": "nosize"}})

    def test_unknown_env_key_rejected(self):
        with pytest.raises(ValueError):
            compile_from_dict({"env": {"size": 4, "colour": "blue"}})

    def test_unknown_feature_rejected(self):
        with pytest.raises(ValueError):
            compile_bindings([{"name": "X", "feature": "velocity", "units": 4}])

    def test_unnamed_output_rejected(self):
        with pytest.raises(ValueError):
            compile_bindings([{"feature": "distance", "units": 4}])

    @pytest.mark.parametrize(
        "spec",
        [
            [{"size": 10}],
            {"env": [10]},
            {"env": {"size": 4}, "sampling": "polar"},
            {"env": {"size": 4}, "outputs": {"name": "Distance"}},
            {"env": {"size": 4}, "outputs": ["Distance"]},
            {"env": {"size": "ten"}},
        ],
    )
    def test_malformed_documents_rejected(self, spec):
        with pytest.raises(ValueError):
            compile_from_dict(spec)

    def test_non_numeric_code_parameters_rejected(self):
        with pytest.raises(ValueError):
            compile_bindings(
                [{"name": "Distance", "feature": "distance", "units": 4, "min": "near", "max": 10}]
            )


class TestBuildEncoder:
    def test_codes(self):
        assert type(build_encoder({"code": "linear", "units": 4})) is OneD
        assert type(build_encoder({"units": 4})) is OneD
        assert isinstance(build_encoder({"code": "ring", "units": 4, "max": 360}), Ring)
        assert isinstance(build_encoder({"code": "grid", "units": [3, 2]}), TwoD)
        assert isinstance(build_encoder({"code": "category", "units": 5}), Category)

    def test_grid_pairs(self):
        code = build_encoder({"code": "grid", "units": [4, 3], "min": [0, 0], "max": [3, 2]})
        assert code.shape == (3, 4)

    def test_invalid_entries(self):
        with pytest.raises(ValueError):
            build_encoder({"code": "spline", "units": 4})
        with pytest.raises(ValueError):
            build_encoder({"code": "linear"})
        with pytest.raises(ValueError):
            build_encoder({"code": "linear", "units": 4, "sigma": 0})
        with pytest.raises(ValueError):
            build_encoder({"code": "category"})


class TestCompileFromYamlAndFile:
    def test_compile_from_yaml(self):
        env = compile_from_yaml(YAML_TEXT)
        assert env.config.sampling.mode == SamplingMode.POLAR
        assert env.states()[2] == ("Allo", (6, 6))
        env.step()
        assert env.state("Allo").max() >= 0.99

    def test_compile_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "env.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(YAML_TEXT)
            env = compile_from_file(path)
        assert env.name == "maps"

    def test_same_seed_same_trials(self):
        a = compile_from_yaml(YAML_TEXT)
        b = compile_from_yaml(YAML_TEXT)
        a.step()
        b.step()
        assert a.sample == b.sample

    def test_empty_document_needs_size(self):
        with pytest.raises(ValueError):
            compile_from_yaml("")

    def test_list_document_rejected(self):
        with pytest.raises(ValueError):
            compile_from_yaml("- size: 10\n")


@pytest.mark.parametrize("path", sorted(glob.glob(os.path.join(SCRIPTS_DIR, "*.yaml"))))
def test_bundled_configs_compile_and_step(path):
    env = compile_from_file(path)
    for _ in range(20):
        assert env.step() is True
    for name, shape in env.states():
        buf = env.state(name)
        assert buf.shape == tuple(shape)
        assert np.all(buf >= 0.0)

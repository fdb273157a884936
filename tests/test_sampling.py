"""
Unit tests for bounded rejection sampling of point pairs.

These tests check the sampling constraints in both modes, reproducibility
under a fixed seed, and that infeasible constraints fail with SamplingError
instead of looping forever.
"""

import numpy as np
import pytest

from spatial.geometry import Point, distance, in_grid
from spatial.sampling import (
    SamplingConfig,
    SamplingError,
    SamplingMode,
    accepts,
    random_point,
    sample_pair,
)


class TestSamplingConfig:
    def test_defaults(self):
        cfg = SamplingConfig()
        assert cfg.mode == SamplingMode.UNIFORM
        assert cfg.distinct is True
        assert cfg.max_retries == 10000

    def test_mode_from_string(self):
        cfg = SamplingConfig(mode="polar", max_dist=5)
        assert cfg.mode == SamplingMode.POLAR

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_retries": 0},
            {"min_dist": -1.0},
            {"min_dist": 5.0, "max_dist": 2.0},
            {"mode": SamplingMode.POLAR},
            {"mode": "spiral"},
        ],
    )
    def test_invalid_configs_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SamplingConfig(**kwargs)


class TestUniform:
    def test_points_in_grid_and_distinct(self):
        rng = np.random.default_rng(0)
        cfg = SamplingConfig()
        for _ in range(500):
            p, q, attempts = sample_pair(rng, 6, cfg)
            assert in_grid(p, 6) and in_grid(q, 6)
            assert p != q
            assert attempts >= 1

    def test_distance_band_respected(self):
        rng = np.random.default_rng(1)
        cfg = SamplingConfig(min_dist=3.0, max_dist=5.0)
        for _ in range(300):
            p, q, _ = sample_pair(rng, 10, cfg)
            assert 3.0 <= distance(p, q) <= 5.0

    def test_same_seed_same_pairs(self):
        cfg = SamplingConfig()

        def draw(seed):
            rng = np.random.default_rng(seed)
            return [sample_pair(rng, 10, cfg) for _ in range(20)]

        assert draw(7) == draw(7)
        assert draw(7) != draw(8)

    def test_random_point_in_grid(self):
        rng = np.random.default_rng(2)
        assert all(in_grid(random_point(rng, 3), 3) for _ in range(100))


class TestPolar:
    def test_pairs_fit_grid_and_band(self):
        rng = np.random.default_rng(3)
        cfg = SamplingConfig(mode=SamplingMode.POLAR, min_dist=2.0, max_dist=9.0)
        for _ in range(500):
            p, q, _ = sample_pair(rng, 10, cfg)
            assert in_grid(p, 10) and in_grid(q, 10)
            assert 2.0 <= distance(p, q) <= 9.0


class TestRetryCap:
    def test_infeasible_band_fails_after_cap(self):
        rng = np.random.default_rng(4)
        cfg = SamplingConfig(min_dist=10.0, max_retries=200)
        with pytest.raises(SamplingError) as info:
            sample_pair(rng, 3, cfg)
        assert info.value.attempts == 200

    def test_default_cap_bounds_infeasible_band(self):
        rng = np.random.default_rng(5)
        cfg = SamplingConfig(min_dist=50.0)
        with pytest.raises(SamplingError) as info:
            sample_pair(rng, 10, cfg)
        assert info.value.attempts == 10000

    def test_distinct_points_impossible_on_single_cell(self):
        rng = np.random.default_rng(6)
        with pytest.raises(SamplingError):
            sample_pair(rng, 1, SamplingConfig(max_retries=50))

    def test_polar_band_larger_than_grid(self):
        rng = np.random.default_rng(8)
        cfg = SamplingConfig(mode=SamplingMode.POLAR, min_dist=20.0, max_dist=30.0, max_retries=100)
        with pytest.raises(SamplingError):
            sample_pair(rng, 5, cfg)

    def test_sampling_error_is_runtime_error(self):
        assert issubclass(SamplingError, RuntimeError)


def test_accepts_applies_all_constraints():
    cfg = SamplingConfig(min_dist=1.0, max_dist=2.0)
    assert accepts(Point(0, 0), Point(1, 1), cfg)
    assert not accepts(Point(0, 0), Point(0, 0), cfg)
    assert not accepts(Point(0, 0), Point(3, 0), cfg)
    assert accepts(Point(0, 0), Point(0, 0), SamplingConfig(distinct=False))

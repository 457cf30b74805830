"""
Tests for the multi-size sweep and finite-size scaling extrapolation.
"""

import numpy as np
import numpy.testing as npt
import pytest

from threshold_sweep import SweepResult, Extrapolation, sweep_sizes, extrapolate_threshold


class TestSweepSizes:

    def test_result_per_size(self):
        result = sweep_sizes([2, 4, 8], 60, seed=3)
        assert isinstance(result, SweepResult)
        npt.assert_array_equal(result.sizes, [2, 4, 8])
        assert result.means.shape == (3,)
        assert np.all((result.means > 0) & (result.means <= 1))
        assert np.all(result.conf_lo <= result.means)
        assert np.all(result.means <= result.conf_hi)

    def test_reproducible(self):
        a = sweep_sizes([3, 5], 40, seed=8, engine="numba")
        b = sweep_sizes([3, 5], 40, seed=8, engine="numba")
        npt.assert_array_equal(a.means, b.means)

    def test_rows(self):
        result = sweep_sizes([2, 3], 20, seed=1)
        rows = list(result.rows())
        assert [r[0] for r in rows] == [2, 3]
        assert all(len(r) == 5 for r in rows)

    def test_empty_sizes(self):
        with pytest.raises(ValueError, match="must not be empty"):
            sweep_sizes([], 10)


class TestExtrapolation:

    def test_recovers_synthetic_intercept(self):
        sizes = np.array([10, 20, 40, 80, 160])
        means = 0.5927 + 0.3 * sizes ** -0.75
        fit = extrapolate_threshold(sizes, means)
        assert isinstance(fit, Extrapolation)
        assert abs(fit.pc_inf - 0.5927) < 1e-9
        assert abs(fit.slope - 0.3) < 1e-9
        assert fit.r_squared > 0.999999

    def test_needs_two_sizes(self):
        with pytest.raises(ValueError, match="distinct sizes"):
            extrapolate_threshold([10, 10], [0.6, 0.61])

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="same length"):
            extrapolate_threshold([10, 20, 40], [0.6, 0.61])

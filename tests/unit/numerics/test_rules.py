"""Unit tests for the Gauss-Kronrod rules."""

import math

import numpy as np
import pytest

from integratepy.numerics.rules import (
    WG7,
    WG10,
    WGK15,
    WGK21,
    XGK15,
    XGK21,
    gauss_kronrod_15_infinite,
    gauss_kronrod_21,
)


def evaluating(fn, log=None):
    """Batch callback applying fn element-wise, optionally logging batches."""

    def callback(points, count, context):
        if log is not None:
            log.append(points[:count].copy())
        for i in range(count):
            points[i] = fn(points[i])

    return callback


class TestWeights:
    """Sanity checks on the tabulated nodes and weights."""

    def test_kronrod21_weights_sum_to_two(self):
        assert 2 * sum(WGK21[:10]) + WGK21[10] == pytest.approx(2.0, abs=1e-15)

    def test_gauss10_weights_sum_to_two(self):
        assert 2 * sum(WG10) == pytest.approx(2.0, abs=1e-15)

    def test_kronrod15_weights_sum_to_two(self):
        assert 2 * sum(WGK15[:7]) + WGK15[7] == pytest.approx(2.0, abs=1e-15)

    def test_gauss7_weights_sum_to_two(self):
        assert 2 * sum(WG7[:7]) + WG7[7] == pytest.approx(2.0, abs=1e-15)

    def test_abscissae_decrease_to_zero(self):
        for nodes in (XGK21, XGK15):
            assert list(nodes) == sorted(nodes, reverse=True)
            assert nodes[-1] == 0.0


class TestGaussKronrod21:
    """Tests for the 21-point rule on finite ranges."""

    def test_single_batch_of_21_points(self):
        log = []
        gauss_kronrod_21(evaluating(math.sin, log), None, 0.0, 1.0, np.empty(21))
        assert len(log) == 1
        assert len(log[0]) == 21

    def test_points_are_symmetric_about_center(self):
        log = []
        gauss_kronrod_21(evaluating(math.cos, log), None, 1.0, 3.0, np.empty(21))
        points = log[0]
        assert points[0] == 2.0
        for k in range(1, 21, 2):
            assert points[k] + points[k + 1] == pytest.approx(4.0)
        assert points.min() > 1.0
        assert points.max() < 3.0

    @pytest.mark.parametrize("degree", [0, 1, 5, 15, 29])
    def test_polynomials_exact(self, degree):
        """The Kronrod rule is exact for polynomials of degree <= 31."""
        estimate = gauss_kronrod_21(evaluating(lambda x: x**degree), None, 0.0, 1.0, np.empty(21))
        assert estimate.result == pytest.approx(1.0 / (degree + 1), rel=1e-13)

    def test_reversed_range_negates(self):
        forward = gauss_kronrod_21(evaluating(math.exp), None, 0.0, 1.0, np.empty(21))
        backward = gauss_kronrod_21(evaluating(math.exp), None, 1.0, 0.0, np.empty(21))
        assert backward.result == pytest.approx(-forward.result, rel=1e-15)
        assert backward.resabs == pytest.approx(forward.resabs)

    def test_resabs_integrates_absolute_value(self):
        estimate = gauss_kronrod_21(evaluating(math.sin), None, -math.pi, math.pi, np.empty(21))
        assert estimate.result == pytest.approx(0.0, abs=1e-15)
        assert estimate.resabs == pytest.approx(4.0, rel=1e-2)

    def test_resabs_equals_result_for_positive_integrand(self):
        estimate = gauss_kronrod_21(evaluating(math.sin), None, 0.0, math.pi, np.empty(21))
        assert estimate.resabs == pytest.approx(estimate.result, rel=1e-15)

    def test_error_floor(self):
        """The error estimate never drops below 50 * eps * resabs."""
        estimate = gauss_kronrod_21(evaluating(lambda x: 1.0), None, 0.0, 1.0, np.empty(21))
        assert estimate.abserr >= 50 * np.finfo(float).eps * estimate.resabs

    def test_zero_width(self):
        estimate = gauss_kronrod_21(evaluating(math.exp), None, 2.0, 2.0, np.empty(21))
        assert estimate.result == pytest.approx(0.0, abs=1e-15)
        assert estimate.abserr == 0.0

    def test_context_is_passed_through(self):
        seen = []

        def callback(points, count, context):
            seen.append(context)
            points[:count] = 0.0

        marker = object()
        gauss_kronrod_21(callback, marker, 0.0, 1.0, np.empty(21))
        assert seen == [marker]


class TestGaussKronrod15Infinite:
    """Tests for the transformed 15-point rule."""

    def test_lower_bounded_maps_above_bound(self):
        log = []
        gauss_kronrod_15_infinite(evaluating(lambda x: 0.0, log), None, 2.0, 1, 0.0, 1.0, np.empty(15))
        assert len(log) == 1
        assert len(log[0]) == 15
        assert (log[0] > 2.0).all()

    def test_upper_bounded_maps_below_bound(self):
        log = []
        gauss_kronrod_15_infinite(evaluating(lambda x: 0.0, log), None, -1.0, -1, 0.0, 1.0, np.empty(15))
        assert (log[0] < -1.0).all()

    def test_doubly_infinite_evaluates_mirror(self):
        """Two batches: x and -x."""
        log = []
        gauss_kronrod_15_infinite(
            evaluating(lambda x: 0.0, log), None, 0.0, 2, 0.0, 1.0, np.empty(15), np.empty(15)
        )
        assert len(log) == 2
        np.testing.assert_array_equal(log[1], -log[0])

    def test_doubly_infinite_requires_mirror(self):
        with pytest.raises(ValueError):
            gauss_kronrod_15_infinite(evaluating(math.exp), None, 0.0, 2, 0.0, 1.0, np.empty(15))

    def test_exponential_tail(self):
        """exp(-x) over [0, inf) is 1."""
        estimate = gauss_kronrod_15_infinite(
            evaluating(lambda x: math.exp(-x)), None, 0.0, 1, 0.0, 1.0, np.empty(15)
        )
        assert estimate.result == pytest.approx(1.0, rel=1e-2)
        assert estimate.abserr > 0.0

    def test_doubly_infinite_sums_both_halves(self):
        """An even integrand over (-inf, inf) is twice the half-range value."""
        fn = lambda x: 1.0 / (1.0 + x * x)  # noqa: E731
        half = gauss_kronrod_15_infinite(evaluating(fn), None, 0.0, 1, 0.0, 1.0, np.empty(15))
        full = gauss_kronrod_15_infinite(
            evaluating(fn), None, 0.0, 2, 0.0, 1.0, np.empty(15), np.empty(15)
        )
        assert full.result == pytest.approx(2 * half.result, rel=1e-14)

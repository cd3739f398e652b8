"""Integration tests: how failures surface through the public API.

Covers invalid configurations and limits, each numerical failure the kernel
can report for a realistic integrand, and the warn-and-continue pattern.
"""

import math
import warnings

import pytest

from integratepy import (
    Configuration,
    DivergenceError,
    IntegrationError,
    IntegrationRuntimeError,
    IntegrationWarning,
    Integrator,
    InvalidInputError,
    MaxSubdivisionError,
    NonFiniteValueError,
    RoundoffError,
    exponential_expectation,
    integrate,
    minimum_relative_accuracy,
)


def normal_pdf(x):
    return math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi)


class TestInvalidInput:
    """Preconditions are checked before any evaluation."""

    def test_zero_subdivisions(self):
        with pytest.raises(InvalidInputError) as exc_info:
            Integrator(Configuration(max_subdivisions=0))
        assert exc_info.value.result.neval == 0
        assert str(exc_info.value) == "the input is invalid"

    def test_relative_accuracy_below_minimum(self):
        config = Configuration(relative_accuracy=0.5 * minimum_relative_accuracy(), absolute_accuracy=0.0)
        with pytest.raises(InvalidInputError):
            integrate(math.exp, 0.0, 1.0, config)

    def test_work_size_too_small(self):
        with pytest.raises(InvalidInputError):
            Integrator(Configuration(max_subdivisions=100, work_size=399))

    @pytest.mark.parametrize("lower, upper", [(math.nan, 1.0), (0.0, math.nan), (math.nan, math.nan)])
    def test_nan_limit(self, lower, upper):
        calls = []

        def fn(x):
            calls.append(x)
            return x

        with pytest.raises(InvalidInputError):
            integrate(fn, lower, upper)
        assert calls == []

    def test_logic_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            integrate(math.exp, math.nan, 1.0)

    def test_report_for_invalid_configuration(self):
        report = integrate(math.exp, 0.0, 1.0, Configuration(max_subdivisions=0), stop_on_error=False)
        assert not report.ok
        assert isinstance(report.error, InvalidInputError)


class TestNumericalFailures:
    """Each failure carries the partial Outcome available at the time."""

    def test_max_subdivisions(self):
        with pytest.raises(MaxSubdivisionError) as exc_info:
            integrate(lambda x: math.sin(1.0 / x), 0.0, 1.0)
        error = exc_info.value
        assert str(error) == "maximum number of subdivisions reached"
        assert error.result.subdivisions == 100
        assert error.result.neval == 21 * 199

    def test_roundoff_with_pure_relative_tolerance(self):
        """x * phi(x) over [-1, 1] is exactly 0, so no relative tolerance can be met."""
        config = Configuration(absolute_accuracy=0.0)
        with pytest.raises(RoundoffError) as exc_info:
            integrate(lambda x: x * normal_pdf(x), -1.0, 1.0, config)
        assert exc_info.value.result.value == 0.0
        assert str(exc_info.value) == "roundoff error was detected"

    def test_same_integral_succeeds_with_absolute_tolerance(self):
        outcome = integrate(lambda x: x * normal_pdf(x), -1.0, 1.0)
        assert outcome.value == pytest.approx(0.0, abs=1e-12)

    def test_divergence(self):
        with pytest.raises(DivergenceError) as exc_info:
            integrate(lambda x: x**-0.9999, 0.0, 1.0)
        assert str(exc_info.value) == "the integral is probably divergent"
        assert exc_info.value.result.neval > 0

    def test_runtime_errors_are_runtime_errors(self):
        with pytest.raises(RuntimeError):
            integrate(lambda x: x**-0.9999, 0.0, 1.0)

    def test_non_finite_value(self):
        with pytest.raises(NonFiniteValueError) as exc_info:
            integrate(lambda x: math.inf if x > 0.5 else 1.0, 0.0, 1.0)
        assert isinstance(exc_info.value, IntegrationRuntimeError)

    def test_report_instead_of_raise(self):
        report = integrate(lambda x: x**-0.9999, 0.0, 1.0, stop_on_error=False)
        assert not report.ok
        assert report.message == "the integral is probably divergent"
        assert report.outcome is report.error.result


class TestUserExceptions:
    """Exceptions raised by the integrand reach the caller unchanged."""

    def test_original_exception_is_reraised(self):
        class Boom(Exception):
            pass

        def fn(x):
            if x > 0.75:
                raise Boom("too far")
            return x

        with pytest.raises(Boom, match="too far") as exc_info:
            integrate(fn, 0.0, 1.0)
        assert not isinstance(exc_info.value, IntegrationError)
        assert any("partial result" in note for note in exc_info.value.__notes__)

    def test_report_does_not_swallow_user_exceptions(self):
        def fn(x):
            raise LookupError("no table entry")

        with pytest.raises(LookupError):
            Integrator().report(fn, 0.0, math.inf)

    def test_integrator_reusable_after_user_exception(self):
        integrator = Integrator()

        def failing(x):
            raise ArithmeticError

        with pytest.raises(ArithmeticError):
            integrator(failing, 0.0, 1.0)
        assert integrator(lambda x: 2 * x, 0.0, 1.0).value == pytest.approx(1.0)


class TestExponentialExpectation:
    """The warn-and-continue pattern of exponential_expectation."""

    @pytest.mark.parametrize("rate", [0.25, 1.0, 3.0])
    def test_success_does_not_warn(self, rate):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            outcome = exponential_expectation(rate)
        assert outcome.value == pytest.approx(1.0 / rate, rel=1e-3)

    def test_failure_warns_and_returns_partial_outcome(self):
        """A single subdivision always exhausts the budget."""
        integrator = Integrator(Configuration(max_subdivisions=1))
        with pytest.warns(IntegrationWarning, match="maximum number of subdivisions"):
            outcome = exponential_expectation(2.0, integrator)
        assert outcome.subdivisions == 1
        assert outcome.neval == 15
        assert outcome.value == pytest.approx(0.5, rel=0.2)

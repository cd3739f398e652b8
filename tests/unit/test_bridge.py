"""Unit tests for the kernel callback bridge."""

import logging
import math

import numpy as np
import pytest

from integratepy import NonFiniteValueError, Outcome
from integratepy.bridge import BridgeContext, bridge_callback


class TestBridgeCallback:
    """Tests for bridge_callback."""

    def test_overwrites_points_with_values(self):
        context = BridgeContext(lambda x: x * x)
        points = np.array([0.0, 1.0, 2.0, 3.0])

        bridge_callback(points, 4, context)

        assert points.tolist() == [0.0, 1.0, 4.0, 9.0]
        assert context.calls == 4
        assert not context.failed

    def test_only_first_count_points(self):
        """Entries past count are left untouched."""
        context = BridgeContext(lambda x: -x)
        points = np.array([1.0, 2.0, 3.0])

        bridge_callback(points, 2, context)

        assert points.tolist() == [-1.0, -2.0, 3.0]
        assert context.calls == 2

    def test_receives_python_floats(self):
        seen = []

        def fn(x):
            seen.append(type(x))
            return x

        bridge_callback(np.array([0.5]), 1, BridgeContext(fn))
        assert seen == [float]

    def test_accepts_numeric_return_types(self):
        """Return values are converted with float()."""
        context = BridgeContext(lambda x: 1)
        points = np.array([0.0, 0.0])
        bridge_callback(points, 2, context)
        assert points.tolist() == [1.0, 1.0]

    def test_exception_is_captured(self):
        """An exception zero-fills the batch and is recorded, not raised."""
        error = ValueError("bad point")

        def fn(x):
            if x > 1.5:
                raise error
            return 10.0

        context = BridgeContext(fn)
        points = np.array([1.0, 2.0, 3.0])

        bridge_callback(points, 3, context)

        assert points.tolist() == [0.0, 0.0, 0.0]
        assert context.exception is error
        assert context.calls == 2
        assert context.failed

    def test_conversion_failure_is_captured(self):
        context = BridgeContext(lambda x: "not a number")
        points = np.array([1.0])

        bridge_callback(points, 1, context)

        assert isinstance(context.exception, ValueError)
        assert points[0] == 0.0

    def test_none_return_is_captured(self):
        context = BridgeContext(lambda x: None)
        bridge_callback(np.array([1.0]), 1, context)
        assert isinstance(context.exception, TypeError)

    @pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
    def test_non_finite_value_is_captured(self, bad):
        context = BridgeContext(lambda x: bad if x == 2.0 else x)
        points = np.array([1.0, 2.0, 3.0])

        bridge_callback(points, 3, context)

        assert points.tolist() == [0.0, 0.0, 0.0]
        assert context.exception is None
        point, value = context.non_finite
        assert point == 2.0
        assert value == bad or (math.isnan(value) and math.isnan(bad))

    def test_later_batches_skip_user_function(self):
        """After a failure the user function is not called again."""
        calls = []

        def fn(x):
            calls.append(x)
            raise RuntimeError("first")

        context = BridgeContext(fn)
        bridge_callback(np.array([1.0, 2.0]), 2, context)
        first = context.exception

        points = np.array([5.0, 6.0])
        bridge_callback(points, 2, context)

        assert calls == [1.0]
        assert context.exception is first
        assert points.tolist() == [0.0, 0.0]

    def test_first_failure_wins(self):
        """A non-finite value after a captured exception is not recorded."""
        responses = iter([ZeroDivisionError("zero"), math.inf])

        def fn(x):
            response = next(responses)
            if isinstance(response, Exception):
                raise response
            return response

        context = BridgeContext(fn)
        bridge_callback(np.array([1.0]), 1, context)
        bridge_callback(np.array([2.0]), 1, context)

        assert isinstance(context.exception, ZeroDivisionError)
        assert context.non_finite is None

    def test_memory_error_propagates(self):
        def fn(x):
            raise MemoryError

        context = BridgeContext(fn)
        with pytest.raises(MemoryError):
            bridge_callback(np.array([1.0]), 1, context)
        assert context.exception is None

    def test_keyboard_interrupt_propagates(self):
        def fn(x):
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            bridge_callback(np.array([1.0]), 1, BridgeContext(fn))

    def test_logs_captured_exception(self, caplog):
        def fn(x):
            raise ValueError("nope")

        with caplog.at_level(logging.DEBUG, logger="integratepy"):
            bridge_callback(np.array([1.0]), 1, BridgeContext(fn))

        assert "ValueError" in caplog.text


class TestRaiseFailure:
    """Tests for BridgeContext.raise_failure."""

    def test_noop_without_failure(self):
        BridgeContext(abs).raise_failure(Outcome())

    def test_reraises_original_exception(self):
        """The captured exception object itself is raised, with a note."""
        error = KeyError("missing")
        context = BridgeContext(abs, exception=error)
        outcome = Outcome(1.0, 0.5, 1, 21)

        with pytest.raises(KeyError) as exc_info:
            context.raise_failure(outcome)

        assert exc_info.value is error
        assert any("partial result" in note for note in error.__notes__)

    def test_non_finite_raises_typed_error(self):
        context = BridgeContext(abs, non_finite=(0.0, math.inf))
        outcome = Outcome(2.0, 0.1, 3, 105)

        with pytest.raises(NonFiniteValueError) as exc_info:
            context.raise_failure(outcome)

        assert str(exc_info.value) == "non-finite function value"
        assert exc_info.value.result is outcome

    def test_exception_takes_priority_over_non_finite(self):
        context = BridgeContext(abs, exception=OSError("io"), non_finite=(1.0, math.nan))
        with pytest.raises(OSError):
            context.raise_failure(Outcome())

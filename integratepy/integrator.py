"""Integrator facade over the adaptive quadrature kernel.

The Integrator owns a validated Configuration and evaluates integrals of
univariate functions over finite, half-infinite or doubly infinite ranges:

    from integratepy import Integrator

    integrator = Integrator()
    outcome = integrator(math.exp, 0.0, 1.0)
    print(outcome.value, outcome.absolute_error)

Failures raise a subclass of IntegrationError carrying the partial Outcome.
Use Integrator.report() or integrate(..., stop_on_error=False) to get the
outcome and the diagnostic message without raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from integratepy.bridge import BridgeContext, Integrand, bridge_callback
from integratepy.config import Configuration
from integratepy.errors import (
    MESSAGES,
    ErrorKind,
    IntegrationError,
    InvalidInputError,
    error_for_status,
)
from integratepy.numerics.quadpack import (
    BoundaryCode,
    KernelResult,
    finite_quadrature,
    infinite_quadrature,
)
from integratepy.outcome import Outcome

logger = logging.getLogger(__name__)

__all__ = ["IntegrationReport", "Integrator", "integrate"]

_CONFIG_FIELDS = frozenset({"max_subdivisions", "relative_accuracy", "absolute_accuracy", "work_size"})

OK_MESSAGE = "OK"


@dataclass(frozen=True)
class IntegrationReport:
    """Non-raising result of an integration.

    Attributes:
        outcome: The Outcome, partial if the integration failed.
        message: "OK" on success, otherwise the error message.
        error: The IntegrationError that was caught, or None.
    """

    outcome: Outcome
    message: str = OK_MESSAGE
    error: IntegrationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def value(self) -> float:
        return self.outcome.value

    def to_dict(self) -> dict[str, Any]:
        data = self.outcome.to_dict()
        data["message"] = self.message
        return data


def boundary_for(lower: float, upper: float) -> tuple[BoundaryCode, float]:
    """Choose the infinite-range boundary code and bound for non-finite limits.

    Args:
        lower: Lower limit; at least one limit must be infinite.
        upper: Upper limit.

    Returns:
        (code, bound): The finite lower limit wins, then the finite upper
        limit, otherwise the range is doubly infinite with bound 0.
    """
    if math.isfinite(lower):
        return BoundaryCode.LOWER_BOUNDED, lower
    if math.isfinite(upper):
        return BoundaryCode.UPPER_BOUNDED, upper
    return BoundaryCode.DOUBLY_INFINITE, 0.0


class Integrator:
    """Evaluates definite integrals with a fixed, always valid configuration.

    Args:
        config: Initial configuration. Defaults to Configuration().

    Raises:
        InvalidInputError: If config is invalid.

    Setting any configuration property (or calling configure()) replaces the
    configuration only if the result is valid; otherwise InvalidInputError is
    raised and the previous configuration stays in place.
    """

    def __init__(self, config: Configuration | None = None):
        if config is None:
            config = Configuration()
        self._config = config.assert_validity()

    def __repr__(self) -> str:
        return f"Integrator({self._config!r})"

    @property
    def config(self) -> Configuration:
        return self._config

    @config.setter
    def config(self, config: Configuration) -> None:
        self._config = config.assert_validity()

    @property
    def max_subdivisions(self) -> int:
        return self._config.max_subdivisions

    @max_subdivisions.setter
    def max_subdivisions(self, value: int) -> None:
        self.configure(max_subdivisions=value)

    @property
    def relative_accuracy(self) -> float:
        return self._config.relative_accuracy

    @relative_accuracy.setter
    def relative_accuracy(self, value: float) -> None:
        self.configure(relative_accuracy=value)

    @property
    def absolute_accuracy(self) -> float:
        return self._config.absolute_accuracy

    @absolute_accuracy.setter
    def absolute_accuracy(self, value: float) -> None:
        self.configure(absolute_accuracy=value)

    @property
    def work_size(self) -> int:
        return self._config.work_size

    @work_size.setter
    def work_size(self, value: int) -> None:
        self.configure(work_size=value)

    def configure(self, **changes: float | int) -> Integrator:
        """Change several configuration fields at once.

        The new configuration is validated as a whole, so e.g. raising
        max_subdivisions together with work_size is possible in one step.

        Returns:
            This integrator, to allow chaining.

        Raises:
            TypeError: For an unknown field name.
            InvalidInputError: If the resulting configuration is invalid.
        """
        unknown = set(changes) - _CONFIG_FIELDS
        if unknown:
            raise TypeError(f"unknown configuration field(s): {', '.join(sorted(unknown))}")
        candidate = self._config.replace(**changes)
        if not candidate.is_valid():
            logger.debug("Rejected configuration change %r; keeping %r", changes, self._config)
            raise InvalidInputError(MESSAGES[ErrorKind.INVALID_INPUT])
        self._config = candidate
        return self

    def is_valid(self) -> bool:
        return self._config.is_valid()

    def assert_validity(self) -> Configuration:
        return self._config.assert_validity()

    def evaluate(self, fn: Integrand, lower: float, upper: float) -> Outcome:
        """Integrate fn over [lower, upper].

        Either limit may be infinite. The kernel is chosen from the
        finiteness of the limits.

        Args:
            fn: Univariate function returning a real number.
            lower: Lower limit.
            upper: Upper limit.

        Returns:
            The Outcome of a successful integration.

        Raises:
            InvalidInputError: If the configuration is invalid or a limit is
                NaN. The kernel is not invoked.
            NonFiniteValueError: If fn returned inf or NaN.
            IntegrationRuntimeError: For other kernel failures, with the
                partial Outcome attached.
            Exception: Whatever fn raised, re-raised after the kernel
                returned.
        """
        config = self.assert_validity()
        lower = float(lower)
        upper = float(upper)
        if math.isnan(lower) or math.isnan(upper):
            logger.debug("Rejected NaN limit(s): lower=%r upper=%r", lower, upper)
            raise InvalidInputError(MESSAGES[ErrorKind.INVALID_INPUT])

        context = BridgeContext(fn)
        result = self._run_kernel(context, lower, upper, config)
        outcome = Outcome(
            value=result.value,
            absolute_error=result.abs_error,
            subdivisions=result.subdivisions,
            neval=result.neval,
        )

        # A captured callback failure takes priority over the status code.
        context.raise_failure(outcome)

        error = error_for_status(result.status, outcome)
        if error is not None:
            logger.debug("Kernel status %d: %s (%s)", result.status, error, outcome)
            raise error
        return outcome

    __call__ = evaluate

    def report(self, fn: Integrand, lower: float, upper: float) -> IntegrationReport:
        """Like evaluate(), but returns an IntegrationReport instead of raising.

        Only IntegrationError subclasses are caught; exceptions raised by fn
        still propagate.
        """
        try:
            outcome = self.evaluate(fn, lower, upper)
        except IntegrationError as e:
            return IntegrationReport(outcome=e.result, message=e.message, error=e)
        return IntegrationReport(outcome=outcome)

    def _run_kernel(
        self,
        context: BridgeContext,
        lower: float,
        upper: float,
        config: Configuration,
    ) -> KernelResult:
        index_buffer = np.zeros(config.max_subdivisions, dtype=np.intp)
        work_buffer = np.zeros(config.work_size, dtype=np.float64)

        if math.isfinite(lower) and math.isfinite(upper):
            logger.debug("Finite range [%r, %r] with %r", lower, upper, config)
            return finite_quadrature(
                bridge_callback,
                context,
                lower,
                upper,
                config.absolute_accuracy,
                config.relative_accuracy,
                config.max_subdivisions,
                config.work_size,
                index_buffer,
                work_buffer,
            )

        code, bound = boundary_for(lower, upper)
        logger.debug("Infinite range [%r, %r] as %s (bound=%r)", lower, upper, code.name, bound)
        return infinite_quadrature(
            bridge_callback,
            context,
            bound,
            int(code),
            config.absolute_accuracy,
            config.relative_accuracy,
            config.max_subdivisions,
            config.work_size,
            index_buffer,
            work_buffer,
        )


def integrate(
    fn: Integrand,
    lower: float,
    upper: float,
    config: Configuration | None = None,
    stop_on_error: bool = True,
) -> Outcome | IntegrationReport:
    """Integrate fn over [lower, upper] with a one-off Integrator.

    Args:
        fn: Univariate function returning a real number.
        lower: Lower limit, may be -inf.
        upper: Upper limit, may be inf.
        config: Configuration to use. Defaults to Configuration().
        stop_on_error: If True, failures raise. If False, an
            IntegrationReport is returned instead of an Outcome.

    Returns:
        The Outcome, or an IntegrationReport when stop_on_error is False.
    """
    if stop_on_error:
        return Integrator(config).evaluate(fn, lower, upper)
    try:
        integrator = Integrator(config)
    except IntegrationError as e:
        return IntegrationReport(outcome=e.result, message=e.message, error=e)
    return integrator.report(fn, lower, upper)

"""Error taxonomy for integration failures.

Every error raised by the facade for a failed integration derives from
IntegrationError and carries the Outcome snapshot available at the time of
failure. Two branches separate the causes:

- IntegrationRuntimeError: conditions arising from the numerical process
  itself (subdivision budget exhausted, roundoff, divergence, ...). These
  also subclass the builtin RuntimeError.
- IntegrationLogicError: violated preconditions (invalid configuration, NaN
  bounds). These also subclass the builtin ValueError.

The kernel reports failures as small integer status codes;
error_for_status() translates them. A status outside the documented range
means the facade and the kernel disagree on their contract and raises
KernelContractError, which is deliberately not an IntegrationError.
"""

from __future__ import annotations

from enum import Enum

from integratepy.outcome import Outcome

__all__ = [
    "BadIntegrandError",
    "DivergenceError",
    "ErrorKind",
    "ExtrapolationRoundoffError",
    "IntegrationError",
    "IntegrationLogicError",
    "IntegrationRuntimeError",
    "IntegrationWarning",
    "InvalidInputError",
    "KernelContractError",
    "MaxSubdivisionError",
    "NonFiniteValueError",
    "RoundoffError",
    "error_for_status",
]


class ErrorKind(Enum):
    """Tag identifying the concrete kind of an IntegrationError."""

    GENERIC = "generic"
    MAX_SUBDIVISIONS = "max_subdivisions"
    ROUNDOFF = "roundoff"
    BAD_INTEGRAND = "bad_integrand"
    EXTRAPOLATION_ROUNDOFF = "extrapolation_roundoff"
    DIVERGENCE = "divergence"
    INVALID_INPUT = "invalid_input"
    NON_FINITE_VALUE = "non_finite_value"


class IntegrationWarning(UserWarning):
    """Warning issued when an integration failure is downgraded to a warning."""


class IntegrationError(Exception):
    """Base class for all integration failures.

    Args:
        message: Human-readable diagnostic. ``str(error)`` returns it as is.
        result: Outcome snapshot at the time of failure. Defaults to a zeroed
            Outcome.
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: str = "", result: Outcome | None = None) -> None:
        super().__init__(message)
        self._message = message
        self._result = result if result is not None else Outcome()

    @property
    def message(self) -> str:
        return self._message

    @property
    def result(self) -> Outcome:
        """The Outcome snapshot attached to this error."""
        return self._result

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r}, result={self._result!r})"


class IntegrationRuntimeError(IntegrationError, RuntimeError):
    """A failure of the numerical process that better input cannot prevent."""


class IntegrationLogicError(IntegrationError, ValueError):
    """A violated precondition, detected before the kernel runs."""


class MaxSubdivisionError(IntegrationRuntimeError):
    """The subdivision budget was exhausted before the tolerance was met.

    Allowing more subdivisions may help. If it does not, the integrand likely
    has a local difficulty (singularity, discontinuity) and splitting the
    interval at that point usually pays off. The attached value is often
    still usable.
    """

    kind = ErrorKind.MAX_SUBDIVISIONS


class RoundoffError(IntegrationRuntimeError):
    """Roundoff error prevents the requested tolerance from being reached.

    The error estimate may be underestimated.
    """

    kind = ErrorKind.ROUNDOFF


class BadIntegrandError(IntegrationRuntimeError):
    """Extremely bad integrand behaviour occurs at some points of the range."""

    kind = ErrorKind.BAD_INTEGRAND


class ExtrapolationRoundoffError(IntegrationRuntimeError):
    """Roundoff error was detected in the extrapolation table.

    The requested tolerance is assumed unreachable; the attached value is the
    best the kernel could obtain.
    """

    kind = ErrorKind.EXTRAPOLATION_ROUNDOFF


class DivergenceError(IntegrationRuntimeError):
    """The integral is probably divergent, or converges too slowly."""

    kind = ErrorKind.DIVERGENCE


class NonFiniteValueError(IntegrationRuntimeError):
    """The integrand returned inf or NaN at some evaluation point."""

    kind = ErrorKind.NON_FINITE_VALUE


class InvalidInputError(IntegrationLogicError):
    """The configuration or the bounds violate a precondition."""

    kind = ErrorKind.INVALID_INPUT


class KernelContractError(AssertionError):
    """The kernel reported a status code the facade does not know.

    This signals a broken contract between the facade and the kernel, not a
    user-facing integration failure.
    """

    def __init__(self, status: int) -> None:
        super().__init__(f"kernel returned unknown status code {status}")
        self.status = status


MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.MAX_SUBDIVISIONS: "maximum number of subdivisions reached",
    ErrorKind.ROUNDOFF: "roundoff error was detected",
    ErrorKind.BAD_INTEGRAND: "extremely bad integrand behaviour",
    ErrorKind.EXTRAPOLATION_ROUNDOFF: "roundoff error is detected in the extrapolation table",
    ErrorKind.DIVERGENCE: "the integral is probably divergent",
    ErrorKind.INVALID_INPUT: "the input is invalid",
    ErrorKind.NON_FINITE_VALUE: "non-finite function value",
}

_STATUS_ERRORS: dict[int, type[IntegrationError]] = {
    1: MaxSubdivisionError,
    2: RoundoffError,
    3: BadIntegrandError,
    4: ExtrapolationRoundoffError,
    5: DivergenceError,
    6: InvalidInputError,
}


def error_for_status(status: int, outcome: Outcome) -> IntegrationError | None:
    """Translate a kernel status code into a typed error.

    Args:
        status: Status code reported by the kernel.
        outcome: Snapshot to attach to the error.

    Returns:
        None for status 0, otherwise the matching IntegrationError (not
        raised).

    Raises:
        KernelContractError: If the status is outside 0-6.
    """
    if status == 0:
        return None
    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is None:
        raise KernelContractError(status)
    return error_cls(MESSAGES[error_cls.kind], outcome)

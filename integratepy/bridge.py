"""Bridge between the kernel's flat batch callback and a Python callable.

The kernel only knows ``callback(points, count, context)`` and must never see
a Python exception unwind through it. bridge_callback therefore evaluates the
user function point by point, and on the first failure records it in the
BridgeContext, zero-fills the batch and lets the kernel run to completion.
The integrator then calls BridgeContext.raise_failure() to surface the
failure with the partial outcome attached.

Example::

    context = BridgeContext(math.sin)
    result = finite_quadrature(bridge_callback, context, 0.0, 1.0, ...)
    context.raise_failure(outcome)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from integratepy.errors import MESSAGES, ErrorKind, NonFiniteValueError
from integratepy.outcome import Outcome

logger = logging.getLogger(__name__)

Integrand = Callable[[float], float]

__all__ = ["BridgeContext", "Integrand", "bridge_callback"]


@dataclass
class BridgeContext:
    """Per-evaluation state handed to the kernel as its opaque context.

    Attributes:
        fn: The user function.
        exception: First exception raised by fn, if any.
        non_finite: First (point, value) pair where fn was not finite.
        calls: Number of times fn was invoked.
    """

    fn: Integrand
    exception: Exception | None = None
    non_finite: tuple[float, float] | None = None
    calls: int = 0

    @property
    def failed(self) -> bool:
        return self.exception is not None or self.non_finite is not None

    def raise_failure(self, outcome: Outcome) -> None:
        """Re-raise the captured failure, if any.

        A captured exception is re-raised as the original object with a note
        describing the partial outcome. A captured non-finite value raises
        NonFiniteValueError carrying the outcome.

        Args:
            outcome: Snapshot of the kernel result to attach.
        """
        if self.exception is not None:
            self.exception.add_note(f"integration aborted; partial result: {outcome}")
            raise self.exception
        if self.non_finite is not None:
            point, value = self.non_finite
            logger.debug("Integrand returned %r at x=%r", value, point)
            raise NonFiniteValueError(MESSAGES[ErrorKind.NON_FINITE_VALUE], outcome)


def bridge_callback(points: np.ndarray, count: int, context: BridgeContext) -> None:
    """Evaluate context.fn at points[:count], overwriting them in place.

    Never raises an Exception subclass: failures are recorded in the context
    and the batch is zero-filled. MemoryError and non-Exception
    BaseExceptions (KeyboardInterrupt, SystemExit) propagate.

    Args:
        points: Abscissae on entry, function values on exit.
        count: Number of leading entries to evaluate.
        context: The BridgeContext for this evaluation.
    """
    if context.failed:
        points[:count] = 0.0
        return

    fn = context.fn
    for i in range(count):
        x = float(points[i])
        try:
            context.calls += 1
            value = float(fn(x))
        except MemoryError:
            raise
        except Exception as exc:
            logger.debug("Integrand raised %s at x=%r", type(exc).__name__, x)
            context.exception = exc
            points[:count] = 0.0
            return
        if not math.isfinite(value):
            context.non_finite = (x, value)
            points[:count] = 0.0
            return
        points[i] = value

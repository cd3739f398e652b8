"""Expectation of an exponential distribution by numerical integration.

A worked example of using the Integrator from library code: failures are
downgraded to an IntegrationWarning and the partial outcome is returned.
"""

from __future__ import annotations

import logging
import math
import warnings

from integratepy.errors import IntegrationError, IntegrationWarning
from integratepy.integrator import Integrator
from integratepy.outcome import Outcome

logger = logging.getLogger(__name__)


def exponential_expectation(rate: float, integrator: Integrator | None = None) -> Outcome:
    """Integrate x * rate * exp(-rate * x) over [0, inf).

    The exact value is 1 / rate.

    Args:
        rate: Rate parameter of the exponential distribution.
        integrator: Integrator to use. Defaults to Integrator().

    Returns:
        The Outcome. If the integration failed, the partial Outcome carried
        by the error, after an IntegrationWarning was issued.
    """
    if integrator is None:
        integrator = Integrator()

    def density_moment(x: float) -> float:
        return x * rate * math.exp(-rate * x)

    try:
        return integrator(density_moment, 0.0, math.inf)
    except IntegrationError as e:
        logger.debug("Exponential expectation for rate=%r failed: %s", rate, e)
        warnings.warn(e.message, IntegrationWarning, stacklevel=2)
        return e.result

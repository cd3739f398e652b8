"""Adaptive numerical integration of univariate functions.

integratepy evaluates definite integrals over finite, half-infinite and
doubly infinite ranges with an adaptive Gauss-Kronrod kernel, and reports
failures as typed exceptions that keep the partial result:

    import math
    from integratepy import Integrator, MaxSubdivisionError

    integrator = Integrator()
    outcome = integrator(lambda x: math.exp(-x * x), -math.inf, math.inf)

    try:
        integrator(lambda x: math.sin(1 / x), 0.0, 1.0)
    except MaxSubdivisionError as e:
        print(e.result.value)

Logging is silent by default; see integratepy.logging_config.
"""

import logging

from integratepy.config import (
    DEFAULT_ACCURACY,
    DEFAULT_MAX_SUBDIVISIONS,
    MACHINE_EPSILON,
    Configuration,
    minimum_relative_accuracy,
)
from integratepy.errors import (
    BadIntegrandError,
    DivergenceError,
    ErrorKind,
    ExtrapolationRoundoffError,
    IntegrationError,
    IntegrationLogicError,
    IntegrationRuntimeError,
    IntegrationWarning,
    InvalidInputError,
    KernelContractError,
    MaxSubdivisionError,
    NonFiniteValueError,
    RoundoffError,
    error_for_status,
)
from integratepy.expectation import exponential_expectation
from integratepy.integrator import IntegrationReport, Integrator, integrate
from integratepy.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from integratepy.outcome import Outcome

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "Configuration",
    "DEFAULT_ACCURACY",
    "DEFAULT_MAX_SUBDIVISIONS",
    "MACHINE_EPSILON",
    "minimum_relative_accuracy",
    # Integration
    "Integrator",
    "IntegrationReport",
    "Outcome",
    "integrate",
    "exponential_expectation",
    # Errors
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
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]

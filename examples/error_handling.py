"""Handling integration failures.

Shows the three ways a caller can react to a failed integration:

1. Catch the typed error and use the partial result it carries.
2. Ask for an IntegrationReport instead of an exception.
3. Downgrade the failure to a warning (see exponential_expectation).

Each scenario uses an integrand known to trip one failure mode:

    sin(1/x) on [0, 1]          oscillates without bound near 0
    x * phi(x) on [-1, 1]       exactly 0, so a relative tolerance fails
    x^-0.9999 on [0, 1]         converges far too slowly to detect
"""

from __future__ import annotations

import math
import warnings

from integratepy import (
    Configuration,
    IntegrationError,
    IntegrationWarning,
    Integrator,
    exponential_expectation,
    integrate,
)

SCENARIOS = [
    ("sin(1/x) on [0, 1]", lambda x: math.sin(1.0 / x), 0.0, 1.0, Configuration()),
    (
        "x * phi(x) on [-1, 1], relative tolerance only",
        lambda x: x * math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi),
        -1.0,
        1.0,
        Configuration(absolute_accuracy=0.0),
    ),
    ("x^-0.9999 on [0, 1]", lambda x: x**-0.9999, 0.0, 1.0, Configuration()),
]


def catch_typed_errors() -> None:
    for label, fn, lower, upper, config in SCENARIOS:
        try:
            outcome = integrate(fn, lower, upper, config)
            print(f"  {label}: {outcome}")
        except IntegrationError as e:
            print(f"  {label}: {type(e).__name__}: {e}")
            print(f"      partial result: {e.result}")


def collect_reports() -> None:
    for label, fn, lower, upper, config in SCENARIOS:
        report = integrate(fn, lower, upper, config, stop_on_error=False)
        status = "ok" if report.ok else report.message
        print(f"  {label}: {status} -> {report.outcome}")


def warn_and_continue() -> None:
    integrator = Integrator(Configuration(max_subdivisions=1))
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", IntegrationWarning)
        outcome = exponential_expectation(2.0, integrator)
    for warning in caught:
        print(f"  warning: {warning.message}")
    print(f"  returned anyway: {outcome}")


if __name__ == "__main__":
    print("1. Typed errors:")
    catch_typed_errors()
    print("\n2. Reports:")
    collect_reports()
    print("\n3. Warnings:")
    warn_and_continue()

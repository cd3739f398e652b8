"""Moments of common distributions by numerical integration.

Integrates x * pdf(x) and (x - mean)^2 * pdf(x) over the support of a few
distributions and prints the result next to the closed form. The supports
cover the three kinds of range the integrator handles:

    exponential   [0, inf)      lower-bounded
    beta          [0, 1]        finite, with endpoint singularities
    normal        (-inf, inf)   doubly infinite

## Reading the output

Each line shows the numerical value, the closed form and the Outcome, whose
absolute error is an estimate (usually pessimistic) of |value - exact|.

Run with --log-level DEBUG to see which kernel handled each range.
"""

from __future__ import annotations

import math

from integratepy import Configuration, Integrator, enable_console_logging


def exponential_pdf(x: float, rate: float) -> float:
    return rate * math.exp(-rate * x)


def beta_pdf(x: float, a: float, b: float) -> float:
    log_beta = math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b)
    return math.exp((a - 1) * math.log(x) + (b - 1) * math.log1p(-x) - log_beta)


def normal_pdf(x: float, mean: float, sd: float) -> float:
    z = (x - mean) / sd
    return math.exp(-0.5 * z * z) / (sd * math.sqrt(2 * math.pi))


def run_moments(integrator: Integrator) -> list[tuple[str, float, float]]:
    """Return (label, numerical, exact) for each moment."""
    rows = []

    for rate in (0.5, 2.0):
        outcome = integrator(lambda x: x * exponential_pdf(x, rate), 0.0, math.inf)
        rows.append((f"E[Exp({rate})]", outcome, 1.0 / rate))

    for a, b in ((0.3, 0.4), (2.0, 5.0)):
        outcome = integrator(lambda x: x * beta_pdf(x, a, b), 0.0, 1.0)
        rows.append((f"E[Beta({a}, {b})]", outcome, a / (a + b)))

    for sd in (0.5, 3.0):
        outcome = integrator(lambda x: x * x * normal_pdf(x, 0.0, sd), -math.inf, math.inf)
        rows.append((f"Var[N(0, {sd}^2)]", outcome, sd * sd))

    return rows


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Distribution moments by numerical integration")
    parser.add_argument("--max-subdivisions", type=int, default=100, help="Subdivision budget")
    parser.add_argument("--relative-accuracy", type=float, default=None, help="Requested relative accuracy")
    parser.add_argument("--log-level", type=str, default=None, help="Enable console logging at this level")
    args = parser.parse_args()

    if args.log_level:
        enable_console_logging(args.log_level)

    config = Configuration(max_subdivisions=args.max_subdivisions)
    if args.relative_accuracy is not None:
        config = config.replace(relative_accuracy=args.relative_accuracy)

    integrator = Integrator(config)
    print(f"Using {integrator}")
    for label, outcome, exact in run_moments(integrator):
        print(f"  {label:<20} {outcome.value:>14.10f}  exact {exact:>14.10f}  ({outcome})")

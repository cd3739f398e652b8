"""Snapshot of an integration attempt.

Outcome is returned by Integrator.evaluate() on success and carried by every
IntegrationError on failure, so the partial result computed so far is never
lost.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of one integration attempt.

    All fields default to zero, so ``Outcome()`` is the snapshot of an
    integration that never ran.

    Attributes:
        value: The approximation to the integral. Use with caution when taken
            from an error.
        absolute_error: Estimate of ``abs(true_integral - value)``.
        subdivisions: Number of subintervals produced by the kernel.
        neval: Number of integrand evaluations.
    """

    value: float = 0.0
    absolute_error: float = 0.0
    subdivisions: int = 0
    neval: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "absolute_error": self.absolute_error,
            "subdivisions": self.subdivisions,
            "neval": self.neval,
        }

    def __str__(self) -> str:
        return (
            f"{self.value:.10g} with absolute error < {self.absolute_error:.2g} "
            f"({self.subdivisions} subdivisions, {self.neval} evaluations)"
        )

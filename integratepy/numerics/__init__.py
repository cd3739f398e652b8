"""Numerical kernel for adaptive quadrature.

This module provides pure Python implementations of the QUADPACK routines
used by the integrator:
- Adaptive quadrature on finite ranges (21-point Gauss-Kronrod)
- Adaptive quadrature on (semi-)infinite ranges (transformed 15-point rule)
- Wynn's epsilon algorithm for extrapolation
"""

from integratepy.numerics.extrapolation import EpsilonTable
from integratepy.numerics.quadpack import (
    BoundaryCode,
    KernelResult,
    finite_quadrature,
    infinite_quadrature,
)

__all__ = [
    "BoundaryCode",
    "EpsilonTable",
    "KernelResult",
    "finite_quadrature",
    "infinite_quadrature",
]

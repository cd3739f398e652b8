"""Globally adaptive quadrature with epsilon extrapolation.

Two entry points share one adaptive driver:

- finite_quadrature: [lower, upper] with the 21-point Gauss-Kronrod rule.
- infinite_quadrature: (semi-)infinite ranges, mapped onto (0, 1] and
  integrated with the transformed 15-point rule.

The driver bisects the subinterval with the largest error estimate until the
requested accuracy is met, accelerating convergence with Wynn's epsilon
algorithm. The integrand is reached only through a batch callback
``callback(points, n, context)`` which overwrites ``points[:n]`` with the
function values.

Neither entry point raises for numerical trouble. Failures are reported as a
status code in the returned KernelResult:

    0  normal termination, accuracy reached
    1  maximum number of subdivisions reached
    2  roundoff error detected
    3  extremely bad integrand behaviour
    4  roundoff error in the extrapolation table
    5  integral probably divergent
    6  invalid input (nothing was evaluated)
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from enum import IntEnum
from typing import Any, NamedTuple

import numpy as np

from integratepy.numerics.extrapolation import EpsilonTable
from integratepy.numerics.rules import (
    BatchCallback,
    RuleEstimate,
    gauss_kronrod_15_infinite,
    gauss_kronrod_21,
)

EPMACH = sys.float_info.epsilon
UFLOW = sys.float_info.min
OFLOW = sys.float_info.max

STATUS_OK = 0
STATUS_INVALID_INPUT = 6


class BoundaryCode(IntEnum):
    """Which side(s) of an infinite range are unbounded."""

    UPPER_BOUNDED = -1
    LOWER_BOUNDED = 1
    DOUBLY_INFINITE = 2


class KernelResult(NamedTuple):
    """Raw kernel output.

    Attributes:
        value: Approximation to the integral.
        abs_error: Estimate of the absolute error.
        neval: Number of points handed to the callback.
        status: Termination code (see module docstring).
        subdivisions: Number of subintervals produced.
    """

    value: float
    abs_error: float
    neval: int
    status: int
    subdivisions: int


_INVALID = KernelResult(0.0, 0.0, 0, STATUS_INVALID_INPUT, 0)


def _tolerances_invalid(abs_tol: float, rel_tol: float) -> bool:
    return abs_tol <= 0.0 and rel_tol < max(50.0 * EPMACH, 0.5e-28)


def _probably_divergent(result: float, area: float, errsum: float) -> bool:
    """Compare the extrapolated result with the plain sum over subintervals."""
    if area == 0.0:
        # An infinite ratio always counts as divergent.
        return result != 0.0 or errsum > 0.0
    ratio = result / area
    return ratio < 0.01 or ratio > 100.0 or errsum > abs(area)


def _sort_errors(
    limit: int,
    last: int,
    maxerr: int,
    elist: np.ndarray,
    iord: np.ndarray,
    nrmax: int,
) -> tuple[int, float, int]:
    """Keep iord ordered by decreasing error after a bisection.

    Interval ids in iord are 0-based. Only the first ``jupbn`` positions are
    kept sorted; intervals that can no longer be bisected within the
    remaining budget fall off the end.

    Args:
        limit: Maximum number of subintervals.
        last: Number of subintervals after the bisection.
        maxerr: Id of the interval that was just bisected (its left half).
        elist: Error estimates per interval id.
        iord: Ordering to update in place.
        nrmax: Position of maxerr in iord.

    Returns:
        (maxerr, errmax, nrmax) for the next interval to bisect.
    """
    if last <= 2:
        iord[0] = 0
        iord[1] = 1
    else:
        errmax = elist[maxerr]
        # After extrapolation has skipped large intervals, maxerr may need
        # to move up the list.
        while nrmax > 0:
            isucc = int(iord[nrmax - 1])
            if errmax <= elist[isucc]:
                break
            iord[nrmax] = isucc
            nrmax -= 1

        # Positions below are 1-based counts into iord.
        jupbn = last if last <= limit // 2 + 2 else limit + 3 - last
        errmin = elist[last - 1]
        jbnd = jupbn - 1
        ibeg = nrmax + 2
        for i in range(ibeg, jbnd + 1):
            isucc = int(iord[i - 1])
            if errmax >= elist[isucc]:
                iord[i - 2] = maxerr
                k = jbnd
                for _ in range(i, jbnd + 1):
                    isucc = int(iord[k - 1])
                    if errmin < elist[isucc]:
                        iord[k] = last - 1
                        break
                    iord[k] = isucc
                    k -= 1
                else:
                    iord[i - 1] = last - 1
                break
            iord[i - 2] = isucc
        else:
            iord[jbnd - 1] = maxerr
            iord[jupbn - 1] = last - 1

    maxerr = int(iord[nrmax])
    return maxerr, float(elist[maxerr]), nrmax


def _adaptive_quadrature(
    rule: Callable[[float, float], RuleEstimate],
    points_per_rule: int,
    a: float,
    b: float,
    abs_tol: float,
    rel_tol: float,
    limit: int,
    iord: np.ndarray,
    work: np.ndarray,
) -> KernelResult:
    """Adaptive bisection with extrapolation over [a, b] using ``rule``."""
    alist = work[0:limit]
    blist = work[limit : 2 * limit]
    rlist = work[2 * limit : 3 * limit]
    elist = work[3 * limit : 4 * limit]

    alist[0] = a
    blist[0] = b
    rlist[0] = 0.0
    elist[0] = 0.0
    iord[0] = 0
    if _tolerances_invalid(abs_tol, rel_tol):
        return _INVALID

    # First approximation to the integral.
    status = STATUS_OK
    first = rule(a, b)
    calls = 1
    result = first.result
    abserr = first.abserr
    defabs = first.resabs
    resabs = first.resasc
    dres = abs(result)
    errbnd = max(abs_tol, rel_tol * dres)
    last = 1
    rlist[0] = result
    elist[0] = abserr
    iord[0] = 0
    if abserr <= 100.0 * EPMACH * defabs and abserr > errbnd:
        status = 2
    if limit == 1:
        status = 1
    if status != STATUS_OK or (abserr <= errbnd and abserr != resabs) or abserr == 0.0:
        return KernelResult(result, abserr, calls * points_per_rule, status, last)

    epstab = EpsilonTable(result)
    errmax = abserr
    maxerr = 0
    area = result
    errsum = abserr
    abserr = OFLOW
    nrmax = 0
    ktmin = 0
    extrap = False
    noext = False
    ierro = 0
    iroff1 = iroff2 = iroff3 = 0
    ksgn = 1 if dres >= (1.0 - 50.0 * EPMACH) * defabs else -1
    small = erlarg = ertest = correc = 0.0
    converged = False

    for last in range(2, limit + 1):
        # Bisect the subinterval with the nrmax-th largest error estimate.
        a1 = float(alist[maxerr])
        b2 = float(blist[maxerr])
        b1 = 0.5 * (a1 + b2)
        a2 = b1
        erlast = errmax
        left = rule(a1, b1)
        right = rule(a2, b2)
        calls += 2
        area1, error1, defab1 = left.result, left.abserr, left.resasc
        area2, error2, defab2 = right.result, right.abserr, right.resasc

        area12 = area1 + area2
        erro12 = error1 + error2
        errsum = errsum + erro12 - errmax
        area = area + area12 - float(rlist[maxerr])
        if defab1 != error1 and defab2 != error2:
            if abs(rlist[maxerr] - area12) <= 1.0e-5 * abs(area12) and erro12 >= 0.99 * errmax:
                if extrap:
                    iroff2 += 1
                else:
                    iroff1 += 1
            if last > 10 and erro12 > errmax:
                iroff3 += 1
        rlist[maxerr] = area1
        rlist[last - 1] = area2
        errbnd = max(abs_tol, rel_tol * abs(area))

        if iroff1 + iroff2 >= 10 or iroff3 >= 20:
            status = 2
        if iroff2 >= 5:
            ierro = 3
        if last == limit:
            status = 1
        # Interval too small to be bisected further.
        if max(abs(a1), abs(b2)) <= (1.0 + 100.0 * EPMACH) * (abs(a2) + 1000.0 * UFLOW):
            status = 4

        if error2 > error1:
            alist[maxerr] = a2
            alist[last - 1] = a1
            blist[last - 1] = b1
            rlist[maxerr] = area2
            rlist[last - 1] = area1
            elist[maxerr] = error2
            elist[last - 1] = error1
        else:
            alist[last - 1] = a2
            blist[maxerr] = b1
            blist[last - 1] = b2
            elist[maxerr] = error1
            elist[last - 1] = error2

        maxerr, errmax, nrmax = _sort_errors(limit, last, maxerr, elist, iord, nrmax)

        if errsum <= errbnd:
            converged = True
            break
        if status != STATUS_OK:
            break
        if last == 2:
            small = abs(b - a) * 0.375
            erlarg = errsum
            ertest = errbnd
            epstab.append(area)
            continue
        if noext:
            continue

        erlarg -= erlast
        if abs(b1 - a1) > small:
            erlarg += erro12
        if not extrap:
            # Test whether the interval to be bisected next is the smallest.
            if abs(blist[maxerr] - alist[maxerr]) > small:
                continue
            extrap = True
            nrmax = 1

        if ierro != 3 and erlarg > ertest:
            # Bisect large intervals first while the error over them
            # dominates. The number bisected is bounded by the remaining
            # budget.
            jupbnd = last if last <= 2 + limit // 2 else limit + 3 - last
            large_left = False
            for _ in range(nrmax, jupbnd):
                maxerr = int(iord[nrmax])
                errmax = float(elist[maxerr])
                if abs(blist[maxerr] - alist[maxerr]) > small:
                    large_left = True
                    break
                nrmax += 1
            if large_left:
                continue

        # Extrapolate.
        epstab.append(area)
        reseps, abseps = epstab.extrapolate()
        ktmin += 1
        if ktmin > 5 and abserr < 1.0e-3 * errsum:
            status = 5
        if abseps < abserr:
            ktmin = 0
            abserr = abseps
            result = reseps
            correc = erlarg
            ertest = max(abs_tol, rel_tol * abs(reseps))
            if abserr <= ertest:
                break
        if epstab.size == 1:
            noext = True
        if status == 5:
            break
        maxerr = int(iord[0])
        errmax = float(elist[maxerr])
        nrmax = 0
        extrap = False
        small *= 0.5
        erlarg = errsum

    use_sum = converged or abserr == OFLOW
    if not use_sum:
        check_divergence = True
        if status + ierro != 0:
            if ierro == 3:
                abserr += correc
            if status == STATUS_OK:
                status = 3
            if result != 0.0 and area != 0.0:
                if abserr / abs(result) > errsum / abs(area):
                    use_sum = True
            elif abserr > errsum:
                use_sum = True
            elif area == 0.0:
                check_divergence = False
        if not use_sum and check_divergence:
            if not (ksgn == -1 and max(abs(result), abs(area)) <= defabs * 0.01):
                if _probably_divergent(result, area, errsum):
                    status = 6

    if use_sum:
        result = 0.0
        for k in range(last):
            result += float(rlist[k])
        abserr = errsum

    if status > 2:
        status -= 1
    return KernelResult(float(result), float(abserr), calls * points_per_rule, status, last)


def finite_quadrature(
    callback: BatchCallback,
    context: Any,
    lower: float,
    upper: float,
    abs_tol: float,
    rel_tol: float,
    limit: int,
    work_size: int,
    index_buffer: np.ndarray,
    work_buffer: np.ndarray,
) -> KernelResult:
    """Integrate over the finite range [lower, upper].

    Args:
        callback: Batch callback ``callback(points, n, context)``.
        context: Opaque value passed to every callback call.
        lower: Lower limit. May exceed upper.
        upper: Upper limit.
        abs_tol: Requested absolute accuracy.
        rel_tol: Requested relative accuracy.
        limit: Maximum number of subintervals.
        work_size: Declared length of work_buffer. Must be >= 4 * limit.
        index_buffer: Integer buffer of at least limit entries.
        work_buffer: Float64 buffer of at least work_size entries.

    Returns:
        KernelResult. Status 6 is returned without any evaluation when
        limit < 1, work_size < 4 * limit or both tolerances are unusable.
    """
    if limit < 1 or work_size < 4 * limit:
        return _INVALID
    points = np.empty(21, dtype=np.float64)

    def rule(a: float, b: float) -> RuleEstimate:
        return gauss_kronrod_21(callback, context, a, b, points)

    return _adaptive_quadrature(
        rule, 21, lower, upper, abs_tol, rel_tol, limit, index_buffer, work_buffer
    )


def infinite_quadrature(
    callback: BatchCallback,
    context: Any,
    bound: float,
    boundary_code: int,
    abs_tol: float,
    rel_tol: float,
    limit: int,
    work_size: int,
    index_buffer: np.ndarray,
    work_buffer: np.ndarray,
) -> KernelResult:
    """Integrate over [bound, inf), (-inf, bound] or (-inf, inf).

    The range is mapped onto (0, 1] with ``x = bound + dinf * (1 - t) / t``
    and integrated adaptively there; for a doubly infinite range the
    integrand is evaluated at x and -x, and ``bound`` is ignored.

    Args:
        callback: Batch callback ``callback(points, n, context)``.
        context: Opaque value passed to every callback call.
        bound: Finite endpoint, ignored for BoundaryCode.DOUBLY_INFINITE.
        boundary_code: A BoundaryCode value.
        abs_tol: Requested absolute accuracy.
        rel_tol: Requested relative accuracy.
        limit: Maximum number of subintervals.
        work_size: Declared length of work_buffer. Must be >= 4 * limit.
        index_buffer: Integer buffer of at least limit entries.
        work_buffer: Float64 buffer of at least work_size entries.

    Returns:
        KernelResult, with status 6 for invalid input as in
        finite_quadrature() or for an unknown boundary code.
    """
    if limit < 1 or work_size < 4 * limit:
        return _INVALID
    try:
        code = BoundaryCode(boundary_code)
    except ValueError:
        return _INVALID

    doubly = code is BoundaryCode.DOUBLY_INFINITE
    boun = 0.0 if doubly else bound
    points = np.empty(15, dtype=np.float64)
    mirror = np.empty(15, dtype=np.float64) if doubly else None

    def rule(a: float, b: float) -> RuleEstimate:
        return gauss_kronrod_15_infinite(callback, context, boun, int(code), a, b, points, mirror)

    return _adaptive_quadrature(
        rule, 30 if doubly else 15, 0.0, 1.0, abs_tol, rel_tol, limit, index_buffer, work_buffer
    )

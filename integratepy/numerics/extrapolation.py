"""Wynn's epsilon algorithm for accelerating a sequence of partial sums.

The adaptive kernel feeds the successive approximations of the integral into
an EpsilonTable and asks it for an extrapolated limit. The table keeps the
lower diagonal of the epsilon triangle and the last three extrapolated
values, which are used to estimate the error of the extrapolation.
"""

from __future__ import annotations

import sys

EPMACH = sys.float_info.epsilon
OFLOW = sys.float_info.max

# Maximum number of elements the table may hold before it is shortened.
LIMEXP = 50
TABLE_SIZE = LIMEXP + 2


class EpsilonTable:
    """Lower diagonal of the epsilon table plus the last three results.

    Args:
        first: First element of the sequence.

    Attributes:
        size: Number of sequence elements currently in the table.
        calls: Number of times extrapolate() has run.
    """

    def __init__(self, first: float):
        self._table = [0.0] * TABLE_SIZE
        self._table[0] = first
        self._last3 = [0.0, 0.0, 0.0]
        self.size = 1
        self.calls = 0

    def append(self, value: float) -> None:
        """Add the next element of the sequence."""
        if self.size >= LIMEXP:
            raise IndexError("epsilon table is full")
        self._table[self.size] = value
        self.size += 1

    def elements(self) -> list[float]:
        """Current table contents, oldest first."""
        return self._table[: self.size]

    def extrapolate(self) -> tuple[float, float]:
        """Compute the extrapolated limit of the sequence.

        Updates the table in place: it is reduced to the new lower diagonal
        and shortened when it grows beyond LIMEXP elements or when the
        algorithm breaks down.

        Returns:
            (result, abserr): The extrapolated value and an error estimate.
            The estimate is the overflow value until at least four
            extrapolations have been made.
        """
        e = self._table
        n = self.size
        self.calls += 1
        abserr = OFLOW
        result = e[n - 1]
        if n < 3:
            return result, max(abserr, 5.0 * EPMACH * abs(result))

        e[n + 1] = e[n - 1]
        newelm = (n - 1) // 2
        e[n - 1] = OFLOW
        num = n
        # k1 is 1-based to follow the triangle's column numbering.
        k1 = n
        for i in range(1, newelm + 1):
            k2 = k1 - 1
            k3 = k1 - 2
            res = e[k1 + 1]
            e0 = e[k3 - 1]
            e1 = e[k2 - 1]
            e2 = res
            e1abs = abs(e1)
            delta2 = e2 - e1
            err2 = abs(delta2)
            tol2 = max(abs(e2), e1abs) * EPMACH
            delta3 = e1 - e0
            err3 = abs(delta3)
            tol3 = max(e1abs, abs(e0)) * EPMACH
            if err2 <= tol2 and err3 <= tol3:
                # e0, e1 and e2 agree to machine accuracy.
                result = res
                abserr = err2 + err3
                return result, max(abserr, 5.0 * EPMACH * abs(result))

            e3 = e[k1 - 1]
            e[k1 - 1] = e1
            delta1 = e1 - e3
            err1 = abs(delta1)
            tol1 = max(e1abs, abs(e3)) * EPMACH
            if err1 <= tol1 or err2 <= tol2 or err3 <= tol3:
                n = 2 * i - 1
                break
            ss = 1.0 / delta1 + 1.0 / delta2 - 1.0 / delta3
            epsinf = abs(ss * e1)
            if epsinf <= 1.0e-4:
                # Irregular behaviour; drop this part of the table.
                n = 2 * i - 1
                break
            res = e1 + 1.0 / ss
            e[k1 - 1] = res
            k1 -= 2
            error = err2 + abs(res - e2) + err3
            if error <= abserr:
                abserr = error
                result = res

        if n == LIMEXP:
            n = 2 * (LIMEXP // 2) - 1
        ib = 1 if num % 2 == 1 else 2
        for _ in range(newelm + 1):
            e[ib - 1] = e[ib + 1]
            ib += 2
        if num != n:
            indx = num - n
            for i in range(n):
                e[i] = e[indx]
                indx += 1
        self.size = n

        last3 = self._last3
        if self.calls < 4:
            last3[self.calls - 1] = result
            abserr = OFLOW
        else:
            abserr = abs(result - last3[2]) + abs(result - last3[1]) + abs(result - last3[0])
            last3[0] = last3[1]
            last3[1] = last3[2]
            last3[2] = result
        return result, max(abserr, 5.0 * EPMACH * abs(result))

"""Integration configuration and its validity rules.

Configuration holds the four tunable kernel parameters. Construction never
validates, so a configuration can be held, inspected and corrected while it
is invalid; is_valid() answers without raising and assert_validity() raises
InvalidInputError. Use Configuration.validated() for fail-fast construction.

Example::

    cfg = Configuration(max_subdivisions=50, work_size=10)
    cfg.is_valid()  # False, work_size must be >= 4 * 50

    cfg = Configuration.validated(max_subdivisions=200)  # work_size = 800
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass

from integratepy.errors import MESSAGES, ErrorKind, InvalidInputError

__all__ = [
    "DEFAULT_ACCURACY",
    "DEFAULT_MAX_SUBDIVISIONS",
    "MACHINE_EPSILON",
    "Configuration",
    "minimum_relative_accuracy",
]

MACHINE_EPSILON = sys.float_info.epsilon

DEFAULT_MAX_SUBDIVISIONS = 100
DEFAULT_ACCURACY = MACHINE_EPSILON**0.25

# Work buffer holds four arrays of max_subdivisions entries each.
WORK_ARRAYS = 4


def minimum_relative_accuracy() -> float:
    """Smallest relative accuracy accepted when absolute_accuracy <= 0."""
    return max(50.0 * MACHINE_EPSILON, 0.5e-28)


@dataclass(frozen=True, init=False)
class Configuration:
    """Kernel parameters for one integrator.

    Args:
        max_subdivisions: Upper bound on the number of subintervals. Must be
            >= 1.
        relative_accuracy: Requested relative accuracy.
        absolute_accuracy: Requested absolute accuracy. Defaults to
            relative_accuracy.
        work_size: Size of the kernel's working buffer. Must be
            >= 4 * max_subdivisions. Defaults to exactly that.

    At least one tolerance must be meaningful: absolute_accuracy <= 0 is only
    allowed when relative_accuracy >= minimum_relative_accuracy().
    """

    max_subdivisions: int
    relative_accuracy: float
    absolute_accuracy: float
    work_size: int

    def __init__(
        self,
        max_subdivisions: int = DEFAULT_MAX_SUBDIVISIONS,
        relative_accuracy: float = DEFAULT_ACCURACY,
        absolute_accuracy: float | None = None,
        work_size: int | None = None,
    ) -> None:
        if absolute_accuracy is None:
            absolute_accuracy = relative_accuracy
        if work_size is None:
            work_size = WORK_ARRAYS * max_subdivisions
        object.__setattr__(self, "max_subdivisions", int(max_subdivisions))
        object.__setattr__(self, "relative_accuracy", float(relative_accuracy))
        object.__setattr__(self, "absolute_accuracy", float(absolute_accuracy))
        object.__setattr__(self, "work_size", int(work_size))

    @classmethod
    def validated(
        cls,
        max_subdivisions: int = DEFAULT_MAX_SUBDIVISIONS,
        relative_accuracy: float = DEFAULT_ACCURACY,
        absolute_accuracy: float | None = None,
        work_size: int | None = None,
    ) -> Configuration:
        """Construct a configuration and raise InvalidInputError if invalid."""
        return cls(max_subdivisions, relative_accuracy, absolute_accuracy, work_size).assert_validity()

    def is_valid(self) -> bool:
        """Whether all validity invariants hold. Never raises."""
        if self.max_subdivisions < 1:
            return False
        # Strict comparison: relative_accuracy equal to the minimum is accepted.
        if self.absolute_accuracy <= 0.0 and self.relative_accuracy < minimum_relative_accuracy():
            return False
        return self.work_size >= WORK_ARRAYS * self.max_subdivisions

    def assert_validity(self) -> Configuration:
        """Raise InvalidInputError with a zeroed Outcome unless valid.

        Returns:
            This configuration, to allow chaining.
        """
        if not self.is_valid():
            raise InvalidInputError(MESSAGES[ErrorKind.INVALID_INPUT])
        return self

    def replace(self, **changes: float | int) -> Configuration:
        """Return a copy with the named fields changed. Does not validate."""
        return dataclasses.replace(self, **changes)

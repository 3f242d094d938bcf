"""Incremental mean and variance of a sample.

Implements Welford's recurrence (Knuth Vol 2, p 232) with dedicated
remove and replace updates, so that a sample can shrink or slide without
storing its points.
"""

import logging
import math
from collections import namedtuple
from typing import Iterable


logger = logging.getLogger(__name__)


# Named tuple for a consistent read of all sample statistics
SampleStats = namedtuple('SampleStats', ['count', 'mean', 'variance', 'stddev'])


class EmptySampleError(RuntimeError):
    """Raised when removing or replacing a value in an empty sample."""

    def __init__(self) -> None:
        super().__init__("sample is empty")


def _divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 results instead of ZeroDivisionError."""
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _sqrt(value: float) -> float:
    """Square root returning NaN for negative input."""
    if value < 0:
        return math.nan
    return math.sqrt(value)


class Sampler:
    """Running count, mean and sum of squared deviations of a sample.

    Values can be added, removed or replaced in O(1) without retaining
    them. Removed and replaced values must have been added before; the
    sampler cannot check membership, so passing a foreign value silently
    corrupts the mean and variance.

    Not safe for concurrent mutation. Independent samplers can be merged
    periodically with :meth:`combine`.
    """

    def __init__(self) -> None:
        self._count = 0
        self._mean = 0.0
        self._m2 = 0.0  # Sum of squared differences from mean

    def add(self, x: float) -> None:
        """Add the value ``x`` to the sample; count grows by one."""
        self._count += 1
        delta = x - self._mean
        self._mean += delta / self._count
        # Must use the updated mean
        self._m2 += delta * (x - self._mean)

    def add_all(self, values: Iterable[float]) -> None:
        """Add every value of an iterable, in order."""
        for x in values:
            self.add(x)

    def remove(self, x: float) -> None:
        """Remove the value ``x`` currently present in the sample.

        Args:
            x: A value previously added and not yet removed

        Raises:
            EmptySampleError: If the sample is empty
        """
        if self._count == 0:
            raise EmptySampleError()
        if self._count == 1:
            self.reset()
            return
        count_minus_1 = self._count - 1
        delta_old = x - self._mean
        self._mean = (self._count * self._mean - x) / count_minus_1
        delta_new = x - self._mean
        self._m2 -= delta_old * delta_new
        self._count -= 1

    def replace(self, x: float, y: float) -> None:
        """Replace the value ``x`` in the sample by ``y``.

        In a sliding window ``x`` is the value that drops out and ``y`` the
        value entering. The count stays the same. This is numerically more
        stable than ``remove(x)`` followed by ``add(y)``.

        Args:
            x: The value to remove, previously added
            y: The value to add

        Raises:
            EmptySampleError: If the sample is empty
        """
        if self._count == 0:
            raise EmptySampleError()
        if self._count == 1:
            self._mean = float(y)
            self._m2 = 0.0
            return
        count = self._count
        delta_yx = y - x
        delta_x = x - self._mean
        delta_y = y - self._mean
        self._mean += delta_yx / count
        delta_yp = y - self._mean
        count_minus_1 = count - 1
        self._m2 -= (
            count * (delta_x * delta_x - delta_y * delta_yp) / count_minus_1
            + (delta_yx * delta_yp) / count_minus_1
        )

    def combine(self, other: "Sampler") -> None:
        """Merge the sample represented by ``other`` into this one.

        Uses the parallel variance identity on counts, means and sums of
        squared deviations. Less stable than adding the values one by one
        when the counts are very large or very unequal.

        Args:
            other: Sampler to merge; it is left unchanged
        """
        n1, m1, s1 = self._count, self._mean, self._m2
        n2, m2, s2 = other._count, other._mean, other._m2
        if n2 == 0:
            return
        if n1 == 0:
            self._count, self._mean, self._m2 = n2, m2, s2
            return
        n = n1 + n2
        mean = (n1 * m1 + n2 * m2) / n
        self._m2 = s1 + s2 + n1 * m1 * m1 + n2 * m2 * m2 - n * mean * mean
        self._mean = mean
        self._count = n
        logger.debug(f"Combined samples: {n1} + {n2} -> count={n}")

    def reset(self) -> None:
        """Reset to the empty sample."""
        self._count = 0
        self._mean = 0.0
        self._m2 = 0.0

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean(self) -> float:
        """Mean of the sample, 0 if the sample is empty."""
        return self._mean

    @property
    def m2(self) -> float:
        """Running sum of squared deviations from the mean."""
        return self._m2

    @property
    def variance_unbiased(self) -> float:
        """Sample variance using ``n - 1``.

        0 for an empty sample; NaN or Inf for a single value.
        """
        if self._count > 0:
            return _divide(self._m2, self._count - 1)
        return 0.0

    @property
    def variance(self) -> float:
        """Population variance using ``n``; NaN for an empty sample."""
        return _divide(self._m2, self._count)

    @property
    def stddev_unbiased(self) -> float:
        return _sqrt(self.variance_unbiased)

    @property
    def stddev(self) -> float:
        return _sqrt(self.variance)

    def stats(self) -> SampleStats:
        """Snapshot of count, mean and the unbiased variance and stddev."""
        return SampleStats(
            count=self._count,
            mean=self._mean,
            variance=self.variance_unbiased,
            stddev=self.stddev_unbiased
        )

    def copy(self) -> "Sampler":
        """Return an independent sampler with the same state."""
        duplicate = Sampler()
        duplicate._count = self._count
        duplicate._mean = self._mean
        duplicate._m2 = self._m2
        return duplicate

    __copy__ = copy

    def _key(self) -> tuple:
        # float.hex tells apart -0.0 and 0.0 and treats NaN as equal
        return (self._count, self._mean.hex(), self._m2.hex())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sampler):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return string representation of the sampler."""
        return (
            f"Sampler(count={self._count},mean={self._mean},"
            f"var={self.variance_unbiased},std={self.stddev_unbiased})"
        )

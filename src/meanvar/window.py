"""Sliding window implementation for count-based statistics.

Keeps the most recent values in a fixed-size circular buffer and maintains
their mean and variance with a :class:`~meanvar.sampler.Sampler`, using the
replace update once the window is full.
"""

import logging
from typing import Dict, Iterator, List

from meanvar.sampler import Sampler, SampleStats


logger = logging.getLogger(__name__)


class SlidingWindow:
    """Mean and variance of the last ``window_size`` values.

    The buffer is allocated once at construction. While filling, values
    are added to the internal sampler; once full, each new value replaces
    the oldest one, so every update costs a constant number of floating
    point operations.

    Not safe for concurrent mutation.
    """

    def __init__(self, window_size: int) -> None:
        """Initialize a sliding window.

        Args:
            window_size: Number of most recent values kept in the window

        Raises:
            ValueError: If window_size is not positive
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")

        self._window: List[float] = [0.0] * window_size
        self._sampler = Sampler()
        self._k = 0  # Next slot to write, oldest value once full

        logger.debug(f"Initialized SlidingWindow with {window_size} slots")

    def update(self, x: float) -> None:
        """Push a new value into the window.

        While the window is filling the value is added and the count grows
        by one. Once full, the value replaces the oldest one and the count
        stays equal to the window size.

        Args:
            x: The new value entering the window
        """
        if self._sampler.count < len(self._window):
            self._sampler.add(x)
        else:
            self._sampler.replace(self._window[self._k], x)
        self._window[self._k] = float(x)
        self._k = (self._k + 1) % len(self._window)

    def _is_full(self) -> bool:
        return self._sampler.count >= len(self._window)

    def get(self, i: int) -> float:
        """Return the i-th oldest value in the window.

        Args:
            i: Zero-based index, 0 for the oldest and ``count - 1`` for the
                newest value

        Raises:
            IndexError: If i < 0 or i >= count
        """
        count = self._sampler.count
        if i < 0 or i >= count:
            raise IndexError(f"index out of bounds: {i} not in [0..{count - 1}]")
        if self._is_full():
            return self._window[(i + self._k) % len(self._window)]
        return self._window[i]

    @property
    def first(self) -> float:
        """Oldest value in the window.

        Returns 0 if no value has been added yet; check :attr:`count` to
        tell this placeholder apart from a stored zero.
        """
        return self._window[self._k] if self._is_full() else self._window[0]

    @property
    def last(self) -> float:
        """Newest value in the window, or the 0 placeholder when empty."""
        return self._window[(self._k - 1 + len(self._window)) % len(self._window)]

    def values(self) -> List[float]:
        """Return the values in the window, oldest first."""
        return [self.get(i) for i in range(self._sampler.count)]

    @property
    def mean(self) -> float:
        """Mean of the window, 0 if empty."""
        return self._sampler.mean

    @property
    def variance_unbiased(self) -> float:
        """Variance using ``n - 1``; 0 if empty, NaN or Inf for one value."""
        return self._sampler.variance_unbiased

    @property
    def variance(self) -> float:
        """Variance using ``n``; NaN if empty."""
        return self._sampler.variance

    @property
    def stddev_unbiased(self) -> float:
        return self._sampler.stddev_unbiased

    @property
    def stddev(self) -> float:
        return self._sampler.stddev

    @property
    def count(self) -> int:
        """Number of values in the window, less than the size while filling."""
        return self._sampler.count

    @property
    def window_size(self) -> int:
        return len(self._window)

    def stats(self) -> SampleStats:
        """Snapshot of the window statistics."""
        return self._sampler.stats()

    def calculate_mean_variance(self) -> Sampler:
        """Recompute mean and variance from the buffered values.

        Adds every value in the window, oldest first, to a new sampler.
        Slow (linear in the count) but known to be stable, so it serves as
        a reference for the incrementally maintained statistics. The window
        itself is not modified.

        Returns:
            Sampler: A new sampler over the current window values
        """
        sampler = Sampler()
        for i in range(self._sampler.count):
            sampler.add(self.get(i))
        return sampler

    def reset(self) -> None:
        """Clear the window; the window size is kept."""
        end = min(len(self._window), self._sampler.count)
        self._window[:end] = [0.0] * end
        self._k = 0
        self._sampler.reset()
        logger.debug("Window reset")

    def copy(self) -> "SlidingWindow":
        """Return an independent window with the same buffer and statistics."""
        duplicate = SlidingWindow(len(self._window))
        duplicate._window[:] = self._window
        duplicate._sampler = self._sampler.copy()
        duplicate._k = self._k
        return duplicate

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SlidingWindow):
            return NotImplemented
        return (
            self._k == other._k
            and self._sampler == other._sampler
            and [v.hex() for v in self._window] == [v.hex() for v in other._window]
        )

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        """Return the current number of values in the window."""
        return self._sampler.count

    def __iter__(self) -> Iterator[float]:
        """Iterate over the window values, oldest first."""
        return iter(self.values())

    def __repr__(self) -> str:
        """Return string representation of the window."""
        return (
            f"SlidingWindow(length={len(self._window)},count={self.count},"
            f"mean={self.mean},var={self.variance_unbiased},"
            f"std={self.stddev_unbiased})"
        )


class MultiSeriesWindow:
    """Manager for multiple sliding windows, one per named series.

    All windows share the same size and are created on first access.
    """

    def __init__(self, window_size: int) -> None:
        """Initialize multi-series window manager.

        Args:
            window_size: Window size for every series

        Raises:
            ValueError: If window_size is not positive
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self.windows: Dict[str, SlidingWindow] = {}
        logger.info(f"Initialized MultiSeriesWindow with {window_size}-value windows")

    def get_window(self, name: str) -> SlidingWindow:
        """Get or create the window for the named series."""
        if name not in self.windows:
            self.windows[name] = SlidingWindow(self.window_size)
            logger.debug(f"Created new window for series: {name}")
        return self.windows[name]

    def update(self, name: str, x: float) -> None:
        """Push a value into the window of the named series."""
        self.get_window(name).update(x)

    def stats(self, name: str) -> SampleStats:
        """Get statistics for the named series."""
        return self.get_window(name).stats()

    def combined(self) -> Sampler:
        """Merge the samples of all series into a new sampler.

        Returns:
            Sampler: Statistics over the union of all window values
        """
        sampler = Sampler()
        for window in self.windows.values():
            sampler.combine(window._sampler)
        return sampler

    def reset_all(self) -> None:
        """Reset all series windows."""
        for window in self.windows.values():
            window.reset()
        logger.info("Reset all series windows")

    def series(self) -> List[str]:
        """Get sorted list of all tracked series names."""
        return sorted(self.windows.keys())

    def __len__(self) -> int:
        """Return the number of tracked series."""
        return len(self.windows)

    def __repr__(self) -> str:
        """Return string representation of the manager."""
        return (
            f"MultiSeriesWindow(window_size={self.window_size}, "
            f"series={len(self.windows)})"
        )

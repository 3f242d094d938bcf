"""Tests for sliding window implementation."""

import copy
import math
import random
import statistics

import pytest

from meanvar.sampler import Sampler, SampleStats
from meanvar.window import MultiSeriesWindow, SlidingWindow


# Values pushed into a window of size 3, with the window contents after each update
SEQUENCE = [1.0, 2.0, 3.0, 4.0, 5.0, -4.5, -0.5]
CONTENTS = [
    [1.0],
    [1.0, 2.0],
    [1.0, 2.0, 3.0],
    [2.0, 3.0, 4.0],
    [3.0, 4.0, 5.0],
    [4.0, 5.0, -4.5],
    [5.0, -4.5, -0.5],
]


class TestSlidingWindow:
    """Test cases for SlidingWindow class."""

    def test_initialization(self) -> None:
        """Test window initialization."""
        window = SlidingWindow(window_size=3)
        assert window.window_size == 3
        assert window.count == 0
        assert len(window) == 0
        assert window._window == [0.0, 0.0, 0.0]
        assert window._k == 0

    def test_initialization_invalid_size(self) -> None:
        """Test that negative or zero size raises error."""
        with pytest.raises(ValueError) as exc_info:
            SlidingWindow(window_size=-1)
        assert "must be positive" in str(exc_info.value)

        with pytest.raises(ValueError):
            SlidingWindow(window_size=0)

    def test_mean(self) -> None:
        """Test mean while filling and after eviction."""
        window = SlidingWindow(window_size=3)
        expected = [1.0, 1.5, 2.0, 3.0, 4.0, 1.5, 0.0]

        for value, mean in zip(SEQUENCE, expected):
            window.update(value)
            assert window.mean == pytest.approx(mean, abs=1e-15)

    def test_variance_unbiased(self) -> None:
        """Test sample variance while filling and after eviction."""
        window = SlidingWindow(window_size=3)
        assert window.variance_unbiased == 0.0

        window.update(SEQUENCE[0])
        assert math.isnan(window.variance_unbiased)
        assert math.isnan(window.stddev_unbiased)

        expected = [0.5, 1.0, 1.0, 1.0, 27.25, 22.75]
        for value, variance in zip(SEQUENCE[1:], expected):
            window.update(value)
            assert window.variance_unbiased == pytest.approx(variance, rel=1e-12)
            assert window.stddev_unbiased == pytest.approx(math.sqrt(variance), rel=1e-12)

    def test_variance_biased(self) -> None:
        """Test population variance while filling and after eviction."""
        window = SlidingWindow(window_size=3)
        assert math.isnan(window.variance)
        assert math.isnan(window.stddev)

        expected = [0.0, 0.25, 2.0 / 3, 2.0 / 3, 2.0 / 3, 18.166666666666667, 15.166666666666667]
        for value, variance in zip(SEQUENCE, expected):
            window.update(value)
            assert window.variance == pytest.approx(variance, rel=1e-12, abs=1e-15)
            assert window.stddev == pytest.approx(math.sqrt(variance), rel=1e-12, abs=1e-15)

    def test_count_is_capped(self) -> None:
        """Test that the count stops growing at the window size."""
        window = SlidingWindow(window_size=3)
        for i, value in enumerate(SEQUENCE):
            window.update(value)
            assert window.count == min(3, i + 1)

    def test_first_last_and_get(self) -> None:
        """Test indexed access reconstructs the arrival order."""
        window = SlidingWindow(window_size=3)
        assert window.first == 0.0
        assert window.last == 0.0

        for value, contents in zip(SEQUENCE, CONTENTS):
            window.update(value)
            assert window.first == contents[0]
            assert window.last == contents[-1]
            assert [window.get(i) for i in range(window.count)] == contents
            assert window.values() == contents
            assert list(window) == contents

    def test_get_out_of_range(self) -> None:
        """Test that get rejects indexes outside [0, count)."""
        window = SlidingWindow(window_size=3)
        with pytest.raises(IndexError):
            window.get(0)

        window.update(1.0)
        window.update(2.0)
        with pytest.raises(IndexError) as exc_info:
            window.get(2)
        assert "index out of bounds" in str(exc_info.value)
        with pytest.raises(IndexError):
            window.get(-1)

        window.update(3.0)
        window.update(4.0)
        assert window.get(2) == 4.0
        with pytest.raises(IndexError):
            window.get(3)

    def test_window_size_one(self) -> None:
        """Test a window holding a single value."""
        window = SlidingWindow(window_size=1)
        for value in [3.0, -1.0, 8.5]:
            window.update(value)
            assert window.count == 1
            assert window.mean == value
            assert window.first == window.last == value
            assert window.variance == 0.0

    def test_matches_statistics_module(self) -> None:
        """Test window statistics against the last values of a stream."""
        rng = random.Random(2024)
        stream = [rng.uniform(0.0, 100.0) for _ in range(500)]
        window = SlidingWindow(window_size=25)
        for value in stream:
            window.update(value)

        tail = stream[-25:]
        assert window.values() == tail
        assert window.mean == pytest.approx(statistics.mean(tail), rel=1e-10)
        assert window.variance_unbiased == pytest.approx(statistics.variance(tail), rel=1e-9)
        assert window.variance == pytest.approx(statistics.pvariance(tail), rel=1e-9)

    def test_calculate_mean_variance(self) -> None:
        """Test the recomputed reference sampler."""
        rng = random.Random(5)
        window = SlidingWindow(window_size=10)
        for _ in range(137):
            window.update(rng.gauss(0.0, 1.0))

        reference = window.calculate_mean_variance()
        assert isinstance(reference, Sampler)
        assert reference.count == 10
        assert reference.mean == pytest.approx(window.mean, abs=1e-12)
        assert reference.stddev_unbiased == pytest.approx(window.stddev_unbiased, abs=1e-12)

    def test_calculate_mean_variance_does_not_mutate(self) -> None:
        """Test that recomputing the reference leaves the window untouched."""
        window = SlidingWindow(window_size=4)
        for value in SEQUENCE:
            window.update(value)
        snapshot = window.copy()

        window.calculate_mean_variance()

        assert window == snapshot

    def test_calculate_mean_variance_empty(self) -> None:
        """Test the reference of an empty window."""
        assert SlidingWindow(window_size=4).calculate_mean_variance() == Sampler()

    def test_reset(self) -> None:
        """Test that a reset window equals a fresh one."""
        for updates in (2, 3, 7):
            window = SlidingWindow(window_size=3)
            for value in SEQUENCE[:updates]:
                window.update(value)

            window.reset()

            assert window == SlidingWindow(window_size=3)
            assert window.window_size == 3
            assert window.count == 0
            assert window.mean == 0.0
            assert window.variance_unbiased == 0.0
            assert math.isnan(window.variance)

    def test_reset_then_reuse(self) -> None:
        """Test that a reset window behaves like a fresh one."""
        window = SlidingWindow(window_size=3)
        for value in SEQUENCE:
            window.update(value)
        window.reset()

        fresh = SlidingWindow(window_size=3)
        for value in [10.0, 20.0, 30.0, 40.0]:
            window.update(value)
            fresh.update(value)

        assert window == fresh
        assert window.values() == [20.0, 30.0, 40.0]

    def test_equality_after_identical_updates(self) -> None:
        """Test that identically updated windows stay equal."""
        left = SlidingWindow(window_size=3)
        right = SlidingWindow(window_size=3)
        assert left == right

        for value in SEQUENCE:
            left.update(value)
            right.update(value)
            assert left == right

        right.update(1.0)
        assert left != right
        assert SlidingWindow(window_size=3) != SlidingWindow(window_size=4)

    def test_copy_is_independent(self) -> None:
        """Test that a copy has its own buffer and sampler."""
        window = SlidingWindow(window_size=3)
        for value in SEQUENCE[:4]:
            window.update(value)

        duplicate = copy.copy(window)
        assert duplicate == window

        duplicate.update(100.0)
        assert window.values() == [2.0, 3.0, 4.0]
        assert duplicate.values() == [3.0, 4.0, 100.0]
        assert window.mean == pytest.approx(3.0)

    def test_stats(self) -> None:
        """Test the stats snapshot."""
        window = SlidingWindow(window_size=3)
        for value in SEQUENCE[:5]:
            window.update(value)

        stats = window.stats()
        assert isinstance(stats, SampleStats)
        assert stats.count == 3
        assert stats.mean == pytest.approx(4.0)
        assert stats.variance == pytest.approx(1.0)
        assert stats.stddev == pytest.approx(1.0)

    def test_repr(self) -> None:
        """Test string representation."""
        window = SlidingWindow(window_size=3)
        window.update(1.0)
        window.update(3.0)

        repr_str = repr(window)
        assert repr_str.startswith("SlidingWindow(length=3,count=2,mean=2.0,var=2.0,")


class TestMultiSeriesWindow:
    """Test cases for MultiSeriesWindow class."""

    def test_initialization(self) -> None:
        """Test multi-series window initialization."""
        manager = MultiSeriesWindow(window_size=5)

        assert manager.window_size == 5
        assert len(manager) == 0
        assert manager.series() == []

    def test_initialization_invalid_size(self) -> None:
        """Test that a non-positive size raises error."""
        with pytest.raises(ValueError):
            MultiSeriesWindow(window_size=0)

    def test_get_window_reuses_existing(self) -> None:
        """Test that get_window creates once and then returns the same window."""
        manager = MultiSeriesWindow(window_size=5)

        window1 = manager.get_window("latency")
        window2 = manager.get_window("latency")

        assert window1 is window2
        assert window1.window_size == 5
        assert len(manager) == 1

    def test_update_and_stats_per_series(self) -> None:
        """Test that each series keeps its own window."""
        manager = MultiSeriesWindow(window_size=3)

        for value in [1.0, 2.0, 3.0, 4.0]:
            manager.update("a", value)
        for value in [10.0, 20.0]:
            manager.update("b", value)

        stats_a = manager.stats("a")
        stats_b = manager.stats("b")

        assert stats_a.count == 3
        assert stats_a.mean == pytest.approx(3.0)
        assert stats_b.count == 2
        assert stats_b.mean == pytest.approx(15.0)

    def test_combined(self) -> None:
        """Test merging all series into one sampler."""
        manager = MultiSeriesWindow(window_size=4)
        a_values = [1.0, 2.0, 3.0, 4.0, 5.0]
        b_values = [10.0, -2.0, 7.5]
        for value in a_values:
            manager.update("a", value)
        for value in b_values:
            manager.update("b", value)

        combined = manager.combined()
        union = a_values[-4:] + b_values

        assert combined.count == 7
        assert combined.mean == pytest.approx(statistics.mean(union), rel=1e-12)
        assert combined.variance_unbiased == pytest.approx(statistics.variance(union), rel=1e-10)
        assert manager.get_window("a").count == 4

    def test_reset_all(self) -> None:
        """Test resetting all series windows."""
        manager = MultiSeriesWindow(window_size=3)
        manager.update("a", 1.0)
        manager.update("b", 2.0)

        manager.reset_all()

        assert len(manager) == 2
        assert manager.get_window("a").count == 0
        assert manager.combined() == Sampler()

    def test_series_sorted(self) -> None:
        """Test that series returns sorted names."""
        manager = MultiSeriesWindow(window_size=3)
        manager.update("zebra", 1.0)
        manager.update("alpha", 2.0)
        manager.update("delta", 3.0)

        assert manager.series() == ["alpha", "delta", "zebra"]

    def test_repr(self) -> None:
        """Test string representation."""
        manager = MultiSeriesWindow(window_size=3)
        manager.update("a", 1.0)

        assert repr(manager) == "MultiSeriesWindow(window_size=3, series=1)"

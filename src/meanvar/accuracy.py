"""Numerical accuracy comparison of sliding window update strategies.

Pushes a random stream through a sliding window and, at every step, compares
the incrementally maintained mean and standard deviation against a reference
recomputed from the window values. Three strategies are measured:

- replace: the sliding window itself, using ``Sampler.replace``
- add_remove: a sampler adding the new value, then removing the oldest
- remove_add: a sampler removing the oldest value, then adding the new one
"""

import logging
import math
import random
from typing import Callable, Dict, Optional

from meanvar.models import AccuracyReport, Distribution, Method, MethodError
from meanvar.sampler import Sampler
from meanvar.window import SlidingWindow


logger = logging.getLogger(__name__)


def value_source(distribution: Distribution, rng: random.Random) -> Callable[[], float]:
    """Return a function drawing values from the given distribution.

    Args:
        distribution: Distribution to draw from
        rng: Random number generator to use

    Raises:
        ValueError: If the distribution is unknown
    """
    if distribution == Distribution.UNIFORM:
        return rng.random
    if distribution == Distribution.UNIFORM_SYMMETRIC:
        return lambda: rng.random() if rng.random() < 0.5 else -rng.random()
    if distribution == Distribution.GAUSSIAN:
        return lambda: rng.gauss(0.0, 1.0)
    raise ValueError(f"Unknown distribution: {distribution}")


def compare_methods(
    window_size: int,
    samples: int,
    distribution: Distribution = Distribution.GAUSSIAN,
    seed: Optional[int] = None
) -> AccuracyReport:
    """Measure the drift of each update strategy over a random stream.

    Errors are collected for steps ``window_size <= i < samples - window_size``,
    i.e. once the window is full, and are the largest absolute deviations from
    :meth:`SlidingWindow.calculate_mean_variance`.

    Args:
        window_size: Sliding window size
        samples: Number of values to push through the window
        distribution: Distribution of the values
        seed: Random seed for a reproducible run

    Returns:
        AccuracyReport: Maximum errors per strategy

    Raises:
        ValueError: If window_size or samples is not positive
    """
    if samples <= 0:
        raise ValueError(f"samples must be positive, got {samples}")
    distribution = Distribution(distribution)

    next_value = value_source(distribution, random.Random(seed))
    window = SlidingWindow(window_size)
    add_remove = Sampler()
    remove_add = Sampler()
    errors: Dict[Method, MethodError] = {
        method: MethodError(method=method) for method in Method
    }

    logger.info(
        f"Comparing update methods: distribution={distribution.value}, "
        f"window_size={window_size}, samples={samples}, seed={seed}"
    )

    for i in range(samples):
        x = next_value()
        oldest = window.first
        window.update(x)

        add_remove.add(x)
        if i >= window_size:
            add_remove.remove(oldest)
            remove_add.remove(oldest)
        remove_add.add(x)

        if window_size <= i < samples - window_size:
            reference = window.calculate_mean_variance()
            _track(errors[Method.REPLACE], window.mean, window.stddev_unbiased, reference)
            _track(errors[Method.ADD_REMOVE], add_remove.mean, add_remove.stddev_unbiased, reference)
            _track(errors[Method.REMOVE_ADD], remove_add.mean, remove_add.stddev_unbiased, reference)

    report = AccuracyReport(
        distribution=distribution,
        window_size=window_size,
        samples=samples,
        seed=seed,
        errors=list(errors.values())
    )

    for error in report.errors:
        logger.debug(
            f"{error.method.value}: mean error={error.max_mean_error:.3e}, "
            f"stddev error={error.max_stddev_error:.3e}"
        )
    logger.info(f"Best method for {distribution.value}: {report.best_method().value}")

    return report


def _deviation(value: float, reference: float) -> float:
    """Absolute difference; NaN when exactly one side is NaN."""
    if value == reference or (math.isnan(value) and math.isnan(reference)):
        return 0.0
    return abs(value - reference)


def _worst(current: float, deviation: float) -> float:
    # A NaN deviation sticks; max() alone would keep the running value
    if math.isnan(current) or math.isnan(deviation):
        return math.nan
    return max(current, deviation)


def _track(error: MethodError, mean: float, stddev: float, reference: Sampler) -> None:
    error.max_mean_error = _worst(error.max_mean_error, _deviation(mean, reference.mean))
    error.max_stddev_error = _worst(
        error.max_stddev_error, _deviation(stddev, reference.stddev_unbiased)
    )

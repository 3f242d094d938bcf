"""Data models for accuracy comparison results.

Defines Pydantic models describing how far incrementally maintained
statistics drift from a freshly recomputed reference.
"""

import math
import time
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Distribution(str, Enum):
    """Random value distributions used to drive a comparison."""

    UNIFORM = "uniform"
    UNIFORM_SYMMETRIC = "uniform_symmetric"
    GAUSSIAN = "gaussian"


class Method(str, Enum):
    """Strategies for maintaining statistics over a sliding window."""

    REPLACE = "replace"
    ADD_REMOVE = "add_remove"
    REMOVE_ADD = "remove_add"


class MethodError(BaseModel):
    """Maximum absolute errors observed for one maintenance strategy.

    An error is NaN when the strategy produced NaN while the reference did
    not, or the other way round.
    """

    model_config = ConfigDict(ser_json_inf_nan="constants")

    method: Method = Field(
        ...,
        description="Strategy used to maintain the statistics"
    )
    max_mean_error: float = Field(
        default=0.0,
        description="Largest absolute error of the mean"
    )
    max_stddev_error: float = Field(
        default=0.0,
        description="Largest absolute error of the unbiased standard deviation"
    )

    @field_validator("max_mean_error", "max_stddev_error")
    @classmethod
    def validate_error(cls, v: float) -> float:
        """Reject negative errors; NaN is allowed."""
        if v < 0:
            raise ValueError(f"Error must not be negative, got {v}")
        return v


class AccuracyReport(BaseModel):
    """Result of one accuracy comparison run."""

    model_config = ConfigDict(ser_json_inf_nan="constants")

    distribution: Distribution = Field(
        ...,
        description="Distribution the values were drawn from"
    )
    window_size: int = Field(
        ...,
        description="Sliding window size",
        gt=0
    )
    samples: int = Field(
        ...,
        description="Number of values pushed through the window",
        gt=0
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed, None for a nondeterministic run"
    )
    errors: List[MethodError] = Field(
        ...,
        description="Errors per strategy",
        min_length=1
    )
    created_at: float = Field(
        default_factory=time.time,
        description="Report creation timestamp (Unix epoch)"
    )

    @field_validator("errors")
    @classmethod
    def validate_unique_methods(cls, v: List[MethodError]) -> List[MethodError]:
        """Ensure each strategy appears at most once."""
        methods = [error.method for error in v]
        if len(set(methods)) != len(methods):
            raise ValueError(f"Duplicate methods in report: {methods}")
        return v

    def by_method(self) -> Dict[Method, MethodError]:
        """Get errors keyed by strategy."""
        return {error.method: error for error in self.errors}

    def best_method(self) -> Method:
        """Return the strategy with the smallest standard deviation error.

        Strategies with a NaN error rank after every finite one.
        """
        def rank(e: MethodError) -> tuple:
            return (
                math.isnan(e.max_stddev_error),
                0.0 if math.isnan(e.max_stddev_error) else e.max_stddev_error,
                math.isnan(e.max_mean_error),
                0.0 if math.isnan(e.max_mean_error) else e.max_mean_error,
            )
        return min(self.errors, key=rank).method

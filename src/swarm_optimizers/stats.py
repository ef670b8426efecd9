"""
Summary statistics over repeated trials.

`RunningStats` is a Welford accumulator extended with min/max so a batch of trials can be
summarized in one pass. `AggregateStats` is the immutable record handed back to callers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from swarm_optimizers.errors import ConfigurationError


class RunningStats:
    """
    Online mean/variance using Welford's algorithm.

    Usage:
        rs = RunningStats()
        for x in stream:
            rs.update(x)
        print(rs.mean, rs.std)

    Attributes:
        n (int): number of observations processed.
        mean (float): running mean of the stream.
        M2 (float): sum of squares of differences from the current mean.
        min (float), max (float): extremes seen so far.
    """

    def __init__(self) -> None:
        self.n: int = 0
        self.mean: float = 0.0
        self.M2: float = 0.0  # sum of squares of diffs from mean
        self.min: float = math.inf
        self.max: float = -math.inf

    def update(self, x: float) -> None:
        """
        Incorporate a new observation.

        Args:
            x: New sample value.
        """
        x = float(x)
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        delta2 = x - self.mean
        self.M2 += delta * delta2
        self.min = min(self.min, x)
        self.max = max(self.max, x)

    @property
    def variance(self) -> float:
        """Return sample (n - 1) variance; 0.0 for fewer than two samples."""
        return self.M2 / (self.n - 1) if self.n > 1 else 0.0

    @property
    def std(self) -> float:
        """Return sample standard deviation of the processed stream."""
        return self.variance ** 0.5


@dataclass(frozen=True)
class AggregateStats:
    count: int
    min: float
    mean: float
    std: float
    max: float
    function: Optional[str] = None
    algorithm: Optional[str] = None
    failed: int = 0

    @classmethod
    def from_running(cls, rs: RunningStats, **labels) -> "AggregateStats":
        if rs.n == 0:
            raise ConfigurationError("statistics are undefined for zero trials.")
        return cls(count=rs.n, min=rs.min, mean=rs.mean, std=rs.std, max=rs.max, **labels)

    @classmethod
    def from_values(cls, values: Iterable[float], **labels) -> "AggregateStats":
        rs = RunningStats()
        for v in values:
            rs.update(v)
        return cls.from_running(rs, **labels)

    def as_row(self) -> dict:
        return {
            "func": self.function,
            "algorithm": self.algorithm,
            "count": self.count,
            "min": self.min,
            "mean": self.mean,
            "std": self.std,
            "max": self.max,
            "failed": self.failed,
        }

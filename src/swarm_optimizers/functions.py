from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Tuple

import numpy as np

from swarm_optimizers.errors import ConfigurationError

TAU = 2 * np.pi


def ackley(x: np.ndarray) -> float:
    n = x.size
    a, b = 20.0, 0.2
    mean_sq = np.dot(x, x) / n
    mean_cos = np.mean(np.cos(TAU * x))
    # Guard against tiny negative due to FP roundoff inside sqrt:
    return float(-a * np.exp(-b * np.sqrt(max(mean_sq, 0.0)))
                 - np.exp(mean_cos) + a + np.e)


def schwefel(x: np.ndarray) -> float:
    """Schwefel 2.22 variant: sum of squares plus product of magnitudes."""
    ax = np.abs(x)
    return float(np.dot(ax, ax) + np.prod(ax))


def brown(x: np.ndarray) -> float:
    sq = x ** 2
    a, a1 = sq[:-1], sq[1:]
    return float(np.sum(a ** (a1 + 1.0) + a1 ** (a + 1.0)))


def rastrigin(x: np.ndarray) -> float:
    n = x.size
    return float(10 * n + np.sum(x ** 2 - 10 * np.cos(TAU * x)))


def schwefel2(x: np.ndarray) -> float:
    return float(np.sum(np.abs(x * np.sin(np.sqrt(np.abs(x))))))


def solomon(x: np.ndarray) -> float:
    norm = np.sqrt(np.dot(x, x))
    return float(1.0 - np.cos(TAU * norm) + 0.1 * norm)


# All six share the origin as global minimiser with value 0.
FUNCTIONS = {
    "ackley":    {"f": ackley,    "bounds": (-32.0, 32.0)},
    "schwefel":  {"f": schwefel,  "bounds": (-10.0, 10.0)},
    "brown":     {"f": brown,     "bounds": (-1.0, 4.0)},
    "rastrigin": {"f": rastrigin, "bounds": (-5.12, 5.12)},
    "schwefel2": {"f": schwefel2, "bounds": (-100.0, 100.0)},
    "solomon":   {"f": solomon,   "bounds": (-100.0, 100.0)},
}


class FunctionName(str, enum.Enum):
    ACKLEY = "ackley"
    SCHWEFEL = "schwefel"
    BROWN = "brown"
    RASTRIGIN = "rastrigin"
    SCHWEFEL2 = "schwefel2"
    SOLOMON = "solomon"

    @classmethod
    def parse(cls, name: str) -> "FunctionName":
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unknown benchmark function '{name}'. Choose from: {valid}.") from None


@dataclass(frozen=True)
class BenchmarkFunction:
    """A fixed-dimension objective with box bounds and a known optimum.

    Instances are immutable and `evaluate` has no side effects, so one
    instance can be shared by any number of concurrent trials.
    """

    name: str
    f: Callable[[np.ndarray], float]
    dim: int
    bounds: Tuple[float, float]
    optimum_position: Tuple[float, ...] = ()
    optimum_value: float = 0.0

    def __post_init__(self):
        lo, hi = self.bounds
        if not lo < hi:
            raise ConfigurationError(f"{self.name}: bounds must satisfy lower < upper, got {self.bounds}.")
        if self.dim < 1:
            raise ConfigurationError(f"{self.name}: dimension must be >= 1, got {self.dim}.")
        if not self.optimum_position:
            object.__setattr__(self, "optimum_position", (0.0,) * self.dim)

    def __call__(self, x) -> float:
        return self.evaluate(x)

    def evaluate(self, x) -> float:
        x = np.asarray(x, dtype=np.float64)
        if x.shape != (self.dim,):
            raise ValueError(f"{self.name} expects a vector of length {self.dim}, got shape {x.shape}.")
        return self.f(x)

    def dimension(self) -> int:
        return self.dim

    @property
    def lower(self) -> float:
        return self.bounds[0]

    @property
    def upper(self) -> float:
        return self.bounds[1]

    def global_optimum(self) -> Tuple[np.ndarray, float]:
        return np.array(self.optimum_position, dtype=np.float64), self.optimum_value


def make_function(name, dim: int = 20) -> BenchmarkFunction:
    """Resolve a benchmark name once into a concrete evaluator."""
    key = FunctionName.parse(name).value
    meta = FUNCTIONS[key]
    return BenchmarkFunction(name=key, f=meta["f"], dim=dim, bounds=meta["bounds"])

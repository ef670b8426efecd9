from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from swarm_optimizers.errors import ConfigurationError
from swarm_optimizers.functions import FunctionName

"""
Hyperparameter containers for the two swarm optimizers and for a sweep.

The defaults reproduce the settings of the reference parameter sweep
(20 individuals, 1000 iterations, 64 trials per sweep point on 20-dimensional
functions). Grid values that are swept over (pulse-rate factor, loudness
cooling rate, fragrance multiplier, local-search chance) are filled in by
`run_grid.py`.
"""


class Algorithm(str, enum.Enum):
    BATS = "bats"
    BUTTERFLIES = "butterflies"

    @classmethod
    def parse(cls, kind) -> "Algorithm":
        try:
            return cls(kind)
        except ValueError:
            raise ConfigurationError(f"Unknown optimizer kind: {kind!r}") from None


def _check(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigurationError(msg)


def _is_probability(x: float) -> bool:
    return 0.0 <= x <= 1.0


@dataclass(frozen=True)
class BatParams:
    bat_count: int = 20
    iterations: int = 1000
    frequency_bounds: Tuple[float, float] = (0.0, 1.0)
    initial_pulse_rate: float = 0.7
    initial_loudness: float = 1.4
    pulse_rate_factor: float = 0.5       # gamma
    loudness_cooling_rate: float = 0.9   # alpha

    def validate(self) -> "BatParams":
        _check(self.bat_count >= 1, f"bat_count must be >= 1, got {self.bat_count}.")
        _check(self.iterations >= 0, f"iterations must be >= 0, got {self.iterations}.")
        f_lo, f_hi = self.frequency_bounds
        _check(f_lo < f_hi, f"frequency bounds must satisfy lower < upper, got {self.frequency_bounds}.")
        _check(_is_probability(self.initial_pulse_rate),
               f"initial_pulse_rate must lie in [0, 1], got {self.initial_pulse_rate}.")
        _check(self.initial_loudness >= 0, f"initial_loudness must be >= 0, got {self.initial_loudness}.")
        _check(self.pulse_rate_factor >= 0, f"pulse_rate_factor must be >= 0, got {self.pulse_rate_factor}.")
        _check(0.0 < self.loudness_cooling_rate <= 1.0,
               f"loudness_cooling_rate must lie in (0, 1], got {self.loudness_cooling_rate}.")
        return self


@dataclass(frozen=True)
class ButterflyParams:
    butterfly_count: int = 20
    iterations: int = 1000
    exponent_bounds: Tuple[float, float] = (0.1, 0.3)
    fragrance_multiplier: float = 0.5    # c
    local_search_chance: float = 0.5

    def validate(self) -> "ButterflyParams":
        _check(self.butterfly_count >= 1, f"butterfly_count must be >= 1, got {self.butterfly_count}.")
        _check(self.iterations >= 0, f"iterations must be >= 0, got {self.iterations}.")
        a_lo, a_hi = self.exponent_bounds
        _check(a_lo < a_hi, f"exponent bounds must satisfy lower < upper, got {self.exponent_bounds}.")
        _check(self.fragrance_multiplier >= 0,
               f"fragrance_multiplier must be >= 0, got {self.fragrance_multiplier}.")
        _check(_is_probability(self.local_search_chance),
               f"local_search_chance must lie in [0, 1], got {self.local_search_chance}.")
        # local moves need two partners distinct from the mover
        if self.local_search_chance > 0:
            _check(self.butterfly_count >= 3,
                   "local search needs butterfly_count >= 3 "
                   f"(got {self.butterfly_count} with local_search_chance={self.local_search_chance}).")
        return self


@dataclass(frozen=True)
class SweepConfig:
    functions: Tuple[str, ...] = ("ackley", "schwefel", "brown", "rastrigin", "schwefel2", "solomon")
    trial_count: int = 64
    base_seed: Optional[int] = None
    dimension: int = 20
    workers: int = 1

    def validate(self) -> "SweepConfig":
        _check(len(self.functions) > 0, "at least one benchmark function is required.")
        for name in self.functions:
            FunctionName.parse(name)
        _check(self.trial_count >= 1, f"trial_count must be >= 1, got {self.trial_count}.")
        _check(self.base_seed is None or (isinstance(self.base_seed, int) and self.base_seed >= 0),
               f"base_seed must be a non-negative int, got {self.base_seed!r}.")
        _check(self.dimension >= 1, f"dimension must be >= 1, got {self.dimension}.")
        _check(self.workers >= 1, f"workers must be >= 1, got {self.workers}.")
        return self


def validate_sweep_point(params) -> None:
    """Validate one parameter set before it is fanned out to trials.

    A single trial may run zero iterations, a sweep point may not.
    """
    params.validate()
    _check(params.iterations >= 1, f"iterations must be >= 1 for a sweep, got {params.iterations}.")

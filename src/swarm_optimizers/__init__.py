"""Bat and butterfly swarm optimizers on continuous benchmark functions.

The package provides the benchmark suite, the two optimizers, a seeded
trial runner and the aggregation layer that turns repeated trials into
summary statistics.
"""

from swarm_optimizers.config import Algorithm, BatParams, ButterflyParams, SweepConfig
from swarm_optimizers.core import TrialResult, run_trial
from swarm_optimizers.errors import (
    ConfigurationError,
    NumericalInstabilityError,
    SwarmError,
    SweepCancelled,
    TrialFailureError,
)
from swarm_optimizers.experiment import aggregate, run_suite, run_trials
from swarm_optimizers.functions import FUNCTIONS, BenchmarkFunction, FunctionName, make_function
from swarm_optimizers.stats import AggregateStats

__all__ = [
    "Algorithm",
    "AggregateStats",
    "BatParams",
    "BenchmarkFunction",
    "ButterflyParams",
    "ConfigurationError",
    "FUNCTIONS",
    "FunctionName",
    "NumericalInstabilityError",
    "SwarmError",
    "SweepCancelled",
    "SweepConfig",
    "TrialFailureError",
    "TrialResult",
    "aggregate",
    "make_function",
    "run_suite",
    "run_trial",
    "run_trials",
]

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Tuple, Union

import numpy as np

from swarm_optimizers.bats import BatOptimizer
from swarm_optimizers.butterflies import ButterflyOptimizer
from swarm_optimizers.config import Algorithm, BatParams, ButterflyParams
from swarm_optimizers.errors import ConfigurationError, NumericalInstabilityError
from swarm_optimizers.functions import BenchmarkFunction
from swarm_optimizers.population import SwarmOptimizer
from swarm_optimizers.utils import SeedLike, make_rng

logger = logging.getLogger(__name__)

Params = Union[BatParams, ButterflyParams]

OPTIMIZERS = {
    Algorithm.BATS: (BatParams, BatOptimizer),
    Algorithm.BUTTERFLIES: (ButterflyParams, ButterflyOptimizer),
}


@dataclass(frozen=True)
class TrialResult:
    best_fitness: float
    best_position: Tuple[float, ...]
    history: Tuple[float, ...]   # best-so-far after init and after every iteration
    evaluations: int
    elapsed: float = field(default=0.0, compare=False)


def check_params(kind, params: Params):
    """Resolve the optimizer for `kind` and validate `params` against it."""
    kind = Algorithm.parse(kind)
    params_type, optimizer_type = OPTIMIZERS[kind]
    if not isinstance(params, params_type):
        raise ConfigurationError(
            f"{kind.value} expects {params_type.__name__}, got {type(params).__name__}."
        )
    params.validate()
    return optimizer_type


def build_optimizer(kind, params: Params, function: BenchmarkFunction,
                    rng: np.random.Generator) -> SwarmOptimizer:
    """Validate `params` and construct a fresh, randomly initialized optimizer."""
    optimizer_type = check_params(kind, params)
    return optimizer_type(params, function, rng)


def run_trial(kind, params: Params, function: BenchmarkFunction, seed: SeedLike) -> TrialResult:
    """Run one optimizer for exactly `params.iterations` steps.

    Every call builds its own generator from `seed`, so equal inputs give
    bit-identical results and trials never share random state.

    Raises:
        ConfigurationError: invalid parameters or optimizer kind.
        NumericalInstabilityError: an evaluation produced NaN/inf.
    """
    t0 = time.perf_counter()
    optimizer = build_optimizer(kind, params, function, make_rng(seed))
    best = optimizer.run(params.iterations)
    dt = time.perf_counter() - t0

    if not np.isfinite(best.fitness):
        raise NumericalInstabilityError(function.name, best.fitness, optimizer.iteration)

    return TrialResult(
        best_fitness=float(best.fitness),
        best_position=tuple(float(v) for v in best.position),
        history=tuple(optimizer.history),
        evaluations=int(optimizer.evaluations),
        elapsed=float(dt),
    )

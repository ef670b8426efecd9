"""Population container and the optimizer loop shared by both swarms.

An optimizer owns one `Population` for the lifetime of a trial:
- the population is sampled uniformly inside the function bounds,
- every `step()` moves all members against a frozen snapshot of the best
  solution taken at the start of the iteration,
- after the step the best solution is reconciled from the members.

Subclasses only implement `initialize()` and `step()`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Iterator, List, TypeVar

import numpy as np

from swarm_optimizers.errors import NumericalInstabilityError
from swarm_optimizers.functions import BenchmarkFunction

logger = logging.getLogger(__name__)

M = TypeVar("M")


@dataclass(frozen=True)
class BestSnapshot:
    """Best solution known at some point; owns a read-only copy of the position."""

    position: np.ndarray
    fitness: float

    @classmethod
    def of(cls, position: np.ndarray, fitness: float) -> "BestSnapshot":
        pos = np.array(position, dtype=np.float64, copy=True)
        pos.setflags(write=False)
        return cls(pos, float(fitness))


class Population(Generic[M]):
    """Ordered members plus the best solution seen so far (minimization)."""

    def __init__(self, members: List[M]):
        if not members:
            raise ValueError("a population needs at least one member.")
        self.members = list(members)
        first = min(self.members, key=lambda m: m.fitness)
        self.best = BestSnapshot.of(first.position, first.fitness)

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[M]:
        return iter(self.members)

    def snapshot(self) -> BestSnapshot:
        return self.best

    def reconcile(self) -> bool:
        """Fold the members' current fitness into the best-so-far; True if it improved."""
        improved = False
        for m in self.members:
            if m.fitness < self.best.fitness:
                self.best = BestSnapshot.of(m.position, m.fitness)
                improved = True
        return improved


class SwarmOptimizer:
    name: str = "BASE"

    def __init__(self, params, function: BenchmarkFunction, rng: np.random.Generator):
        self.params = params
        self.function = function
        self.rng = rng
        self.lb, self.ub = function.bounds
        self.dim = function.dim
        self.iteration = 0
        self.evaluations = 0
        self.population = self.initialize()
        self.history: List[float] = [self.population.best.fitness]

    # --- helpers for subclasses ---
    def random_position(self) -> np.ndarray:
        return self.rng.uniform(self.lb, self.ub, size=self.dim)

    def clamp(self, x: np.ndarray) -> np.ndarray:
        return np.clip(x, self.lb, self.ub)

    def evaluate(self, x: np.ndarray) -> float:
        value = self.function.evaluate(x)
        self.evaluations += 1
        if not np.isfinite(value):
            raise NumericalInstabilityError(self.function.name, value, self.iteration)
        return value

    # --- to implement ---
    def initialize(self) -> Population:
        raise NotImplementedError

    def step(self) -> None:
        raise NotImplementedError

    # --- main loop ---
    def iterate(self) -> bool:
        """One full iteration; returns True if the best solution improved."""
        self.iteration += 1
        self.step()
        improved = self.population.reconcile()
        self.history.append(self.population.best.fitness)
        return improved

    def run(self, iterations: int) -> BestSnapshot:
        """Advance exactly `iterations` steps and return the best solution."""
        for _ in range(iterations):
            self.iterate()
        logger.debug("%s on %s: %d iterations, best %.6g",
                     self.name, self.function.name, self.iteration, self.population.best.fitness)
        return self.population.best

    @property
    def best(self) -> BestSnapshot:
        return self.population.best

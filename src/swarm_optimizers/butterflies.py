"""Butterfly optimization algorithm (BOA)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from swarm_optimizers.config import ButterflyParams
from swarm_optimizers.population import Population, SwarmOptimizer


def stimulus_intensity(fitness: float, best_fitness: float) -> float:
    """Map a fitness to a strictly positive intensity in (0, 1].

    Uses 1 / (1 + (f - f_best)), so the best-so-far solution scores 1 and
    intensity decreases monotonically as fitness gets worse. Shifting by the
    best fitness keeps the transform valid for objectives that go negative.
    """
    gap = max(fitness - best_fitness, 0.0)
    return 1.0 / (1.0 + gap)


@dataclass
class Butterfly:
    position: np.ndarray
    fitness: float
    exponent: float = 0.0
    intensity: float = 1.0
    fragrance: float = 0.0


class ButterflyOptimizer(SwarmOptimizer):
    name = "butterflies"
    params: ButterflyParams

    def initialize(self) -> Population[Butterfly]:
        flies = []
        for _ in range(self.params.butterfly_count):
            position = self.random_position()
            flies.append(Butterfly(position=position, fitness=self.evaluate(position)))
        return Population(flies)

    def pick_partners(self, i: int) -> Tuple[int, int]:
        """Two distinct members, both different from `i`."""
        n = len(self.population)
        j, k = (int(v) for v in self.rng.choice(n - 1, size=2, replace=False))
        return j + (j >= i), k + (k >= i)

    def step(self) -> None:
        p = self.params
        rng = self.rng
        best = self.population.snapshot()
        a_lo, a_hi = p.exponent_bounds
        # partners are read from the positions at the start of the iteration
        peers = [fly.position for fly in self.population]

        for i, fly in enumerate(self.population):
            fly.exponent = rng.uniform(a_lo, a_hi)
            fly.intensity = stimulus_intensity(fly.fitness, best.fitness)
            fly.fragrance = p.fragrance_multiplier * fly.intensity ** fly.exponent

            u = rng.random()
            r = rng.random()
            if u < p.local_search_chance:
                j, k = self.pick_partners(i)
                move = (r * r * peers[j] - peers[k]) * fly.fragrance
            else:
                move = (r * r * best.position - fly.position) * fly.fragrance

            # no rejection: every butterfly moves every iteration
            fly.position = self.clamp(fly.position + move)
            fly.fitness = self.evaluate(fly.position)

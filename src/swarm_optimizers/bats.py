"""Bat algorithm.

Each bat carries a velocity, a frequency redrawn every iteration, a pulse
rate and a loudness:
- frequency scales the pull of the velocity toward the best solution,
- with probability (1 - pulse rate) the velocity move is replaced by a
  random walk around the best solution, scaled by the mean loudness,
- an improving move is accepted only with probability equal to the bat's
  loudness; on acceptance the loudness cools geometrically and the pulse
  rate follows r0 * (1 - exp(-gamma * t)).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from swarm_optimizers.config import BatParams
from swarm_optimizers.population import Population, SwarmOptimizer


@dataclass
class Bat:
    position: np.ndarray
    velocity: np.ndarray
    fitness: float
    frequency: float = 0.0
    pulse_rate: float = 0.0
    loudness: float = 1.0


class BatOptimizer(SwarmOptimizer):
    name = "bats"
    params: BatParams

    def initialize(self) -> Population[Bat]:
        bats = []
        for _ in range(self.params.bat_count):
            position = self.random_position()
            bats.append(Bat(
                position=position,
                velocity=self.rng.random(self.dim),
                fitness=self.evaluate(position),
                # pulse rate starts on its schedule at t = 0
                pulse_rate=0.0,
                loudness=self.params.initial_loudness,
            ))
        return Population(bats)

    def mean_loudness(self) -> float:
        return float(np.mean([b.loudness for b in self.population]))

    def pulse_rate_at(self, t: int) -> float:
        p = self.params
        return p.initial_pulse_rate * (1.0 - math.exp(-p.pulse_rate_factor * t))

    def step(self) -> None:
        p = self.params
        rng = self.rng
        best = self.population.snapshot()
        avg_loudness = self.mean_loudness()
        f_lo, f_hi = p.frequency_bounds

        for bat in self.population:
            bat.frequency = f_lo + (f_hi - f_lo) * rng.random()
            bat.velocity = bat.velocity + (bat.position - best.position) * bat.frequency
            candidate = self.clamp(bat.position + bat.velocity)

            # local walk around the best with probability 1 - r_i
            if rng.random() >= bat.pulse_rate:
                eps = rng.uniform(-1.0, 1.0, size=self.dim)
                candidate = self.clamp(best.position + eps * avg_loudness)

            value = self.evaluate(candidate)
            if value < bat.fitness and rng.random() < bat.loudness:
                bat.position = candidate
                bat.fitness = value
                bat.pulse_rate = self.pulse_rate_at(self.iteration)
                bat.loudness *= p.loudness_cooling_rate

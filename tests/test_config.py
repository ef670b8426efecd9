import dataclasses

import pytest

from swarm_optimizers.config import Algorithm, BatParams, ButterflyParams, SweepConfig, validate_sweep_point
from swarm_optimizers.errors import ConfigurationError


def test_defaults_are_valid():
    BatParams().validate()
    ButterflyParams().validate()
    SweepConfig(base_seed=1).validate()


@pytest.mark.parametrize("overrides", [
    {"bat_count": 0},
    {"iterations": -1},
    {"frequency_bounds": (1.0, 1.0)},
    {"frequency_bounds": (2.0, 1.0)},
    {"initial_pulse_rate": 1.5},
    {"initial_loudness": -0.1},
    {"pulse_rate_factor": -1.0},
    {"loudness_cooling_rate": 0.0},
    {"loudness_cooling_rate": 1.2},
])
def test_bad_bat_params(overrides):
    with pytest.raises(ConfigurationError):
        dataclasses.replace(BatParams(), **overrides).validate()


@pytest.mark.parametrize("overrides", [
    {"butterfly_count": 0},
    {"iterations": -5},
    {"exponent_bounds": (0.3, 0.1)},
    {"fragrance_multiplier": -0.5},
    {"local_search_chance": -0.1},
    {"local_search_chance": 1.1},
    {"butterfly_count": 2, "local_search_chance": 0.5},
])
def test_bad_butterfly_params(overrides):
    with pytest.raises(ConfigurationError):
        dataclasses.replace(ButterflyParams(), **overrides).validate()


def test_small_swarm_allowed_without_local_search():
    ButterflyParams(butterfly_count=1, local_search_chance=0.0).validate()


def test_equal_exponent_bounds_rejected():
    with pytest.raises(ConfigurationError, match="exponent bounds"):
        ButterflyParams(exponent_bounds=(0.2, 0.2)).validate()


@pytest.mark.parametrize("overrides", [
    {"functions": ()},
    {"functions": ("ackley", "griewank")},
    {"trial_count": 0},
    {"base_seed": -5},
    {"base_seed": 1.5},
    {"dimension": 0},
    {"workers": 0},
])
def test_bad_sweep_config(overrides):
    with pytest.raises(ConfigurationError):
        dataclasses.replace(SweepConfig(), **overrides).validate()


def test_sweep_point_needs_iterations():
    BatParams(iterations=0).validate()
    with pytest.raises(ConfigurationError, match="iterations"):
        validate_sweep_point(BatParams(iterations=0))


def test_algorithm_parse():
    assert Algorithm.parse("bats") is Algorithm.BATS
    with pytest.raises(ConfigurationError):
        Algorithm.parse("moths")


def test_params_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        BatParams().bat_count = 3

import dataclasses
import math

import numpy as np
import pytest

from swarm_optimizers.errors import ConfigurationError
from swarm_optimizers.functions import FUNCTIONS, BenchmarkFunction, FunctionName, make_function


@pytest.mark.parametrize("name", list(FUNCTIONS))
@pytest.mark.parametrize("dim", [1, 2, 20])
def test_optimum_value_at_optimum_position(name, dim):
    fn = make_function(name, dim)
    x_star, f_star = fn.global_optimum()
    assert x_star.shape == (dim,)
    assert fn.evaluate(x_star) == pytest.approx(f_star, abs=1e-12)


def test_enumeration_matches_registry():
    assert {m.value for m in FunctionName} == set(FUNCTIONS)


@pytest.mark.parametrize("name,x,expected", [
    ("rastrigin", [1.0, 1.0], 2.0),
    ("schwefel", [1.0, -2.0], 1.0 + 4.0 + 2.0),
    ("brown", [1.0, 1.0], 2.0),
    ("schwefel2", [1.0], abs(math.sin(1.0))),
    ("solomon", [0.6, 0.8], 0.1),
])
def test_known_values(name, x, expected):
    fn = make_function(name, len(x))
    assert fn.evaluate(x) == pytest.approx(expected, abs=1e-12)


def test_ackley_positive_away_from_origin(ackley5):
    assert ackley5.evaluate(np.full(5, 1.5)) > 1.0


def test_bounds_follow_registry():
    assert make_function("brown", 4).bounds == (-1.0, 4.0)
    fn = make_function("ackley", 4)
    assert (fn.lower, fn.upper) == (-32.0, 32.0)
    assert fn.dimension() == 4


def test_name_lookup_is_case_insensitive():
    assert make_function(" Rastrigin ", 2).name == "rastrigin"


def test_unknown_name_is_configuration_error():
    with pytest.raises(ConfigurationError, match="sphere"):
        make_function("sphere", 2)


def test_dimension_mismatch_fails_fast():
    fn = make_function("ackley", 3)
    with pytest.raises(ValueError, match="length 3"):
        fn.evaluate([0.0, 0.0])


def test_invalid_bounds_rejected():
    with pytest.raises(ConfigurationError):
        BenchmarkFunction(name="bad", f=sum, dim=2, bounds=(1.0, 1.0))


def test_function_is_immutable_and_pure():
    fn = make_function("solomon", 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        fn.dim = 4
    x = np.array([1.0, 2.0, 3.0])
    before = x.copy()
    assert fn(x) == fn.evaluate(x)
    np.testing.assert_array_equal(x, before)

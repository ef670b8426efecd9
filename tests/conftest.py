import numpy as np
import pytest

from swarm_optimizers.functions import BenchmarkFunction, make_function


def sphere(x):
    return float(np.dot(x, x))


@pytest.fixture
def toy_square():
    """f(x) = x^2 on [-5, 5]."""
    return BenchmarkFunction(name="square", f=sphere, dim=1, bounds=(-5.0, 5.0))


@pytest.fixture
def sphere3():
    return BenchmarkFunction(name="sphere", f=sphere, dim=3, bounds=(-5.0, 5.0))


@pytest.fixture
def ackley5():
    return make_function("ackley", 5)

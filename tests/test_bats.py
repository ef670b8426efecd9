import numpy as np
import pytest

from swarm_optimizers.bats import BatOptimizer
from swarm_optimizers.config import BatParams
from swarm_optimizers.core import run_trial


def _optimizer(fn, seed=0, **kw):
    params = BatParams(**{"bat_count": 10, "iterations": 60, **kw}).validate()
    return BatOptimizer(params, fn, np.random.default_rng(seed))


@pytest.mark.parametrize("seed", [0, 1, 2])
@pytest.mark.parametrize("cooling,growth", [(0.9, 0.5), (0.3, 0.1), (1.0, 0.9)])
def test_loudness_and_pulse_rate_schedules(ackley5, seed, cooling, growth):
    opt = _optimizer(ackley5, seed, loudness_cooling_rate=cooling, pulse_rate_factor=growth)
    p = opt.params
    loud = [b.loudness for b in opt.population]
    pulse = [b.pulse_rate for b in opt.population]
    for _ in range(p.iterations):
        opt.iterate()
        for i, bat in enumerate(opt.population):
            assert 0.0 <= bat.loudness <= p.initial_loudness
            assert bat.loudness <= loud[i]
            assert pulse[i] <= bat.pulse_rate <= p.initial_pulse_rate
            loud[i], pulse[i] = bat.loudness, bat.pulse_rate


def test_positions_stay_in_bounds(ackley5):
    opt = _optimizer(ackley5, 3, frequency_bounds=(0.0, 5.0))
    for _ in range(opt.params.iterations):
        opt.iterate()
        for bat in opt.population:
            assert np.all(bat.position >= ackley5.lower)
            assert np.all(bat.position <= ackley5.upper)


def test_fitness_is_never_stale(sphere3):
    opt = _optimizer(sphere3, 4)
    opt.run(20)
    for bat in opt.population:
        assert bat.fitness == sphere3.evaluate(bat.position)


def test_best_is_monotone_and_bounds_members(ackley5):
    opt = _optimizer(ackley5, 5)
    opt.run(opt.params.iterations)
    hist = np.array(opt.history)
    assert np.all(np.diff(hist) <= 0)
    assert all(opt.best.fitness <= b.fitness for b in opt.population)


def test_silent_bats_never_move(sphere3):
    # loudness 0 closes the acceptance gate for good
    opt = _optimizer(sphere3, 6, initial_loudness=0.0)
    start = [b.position.copy() for b in opt.population]
    best0 = opt.best.fitness
    opt.run(15)
    for bat, pos in zip(opt.population, start):
        np.testing.assert_array_equal(bat.position, pos)
        assert bat.loudness == 0.0
        assert bat.pulse_rate == 0.0
    assert opt.best.fitness == best0


def test_loud_bats_accept_improvements(sphere3):
    opt = _optimizer(sphere3, 7, initial_loudness=1.5, loudness_cooling_rate=1.0)
    opt.run(30)
    # with A >= 1 every improving proposal is accepted and pulse rates rise
    assert any(b.pulse_rate > 0 for b in opt.population)
    assert opt.best.fitness < opt.history[0]


def test_pulse_rate_schedule_approaches_r0(sphere3):
    opt = _optimizer(sphere3, initial_pulse_rate=0.7, pulse_rate_factor=0.5)
    rates = [opt.pulse_rate_at(t) for t in range(0, 60)]
    assert rates[0] == 0.0
    assert all(a <= b for a, b in zip(rates, rates[1:]))
    assert rates[-1] == pytest.approx(0.7, rel=1e-6)
    assert max(rates) <= 0.7


def test_zero_iterations_returns_initial_fitness(toy_square):
    params = BatParams(bat_count=1, iterations=0)
    res = run_trial("bats", params, toy_square, seed=11)
    x0 = np.random.default_rng(11).uniform(-5.0, 5.0, size=1)
    assert res.best_position == (float(x0[0]),)
    assert res.best_fitness == float(x0[0] ** 2)
    assert res.history == (res.best_fitness,)
    assert res.evaluations == 1


def test_bats_make_progress_on_sphere(sphere3):
    res = run_trial("bats", BatParams(bat_count=20, iterations=200), sphere3, seed=1)
    assert res.best_fitness < res.history[0]

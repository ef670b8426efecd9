# experiment.py
from __future__ import annotations

import itertools
import logging
from concurrent.futures import Executor, ProcessPoolExecutor, as_completed
from dataclasses import fields, replace
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from swarm_optimizers.config import Algorithm, SweepConfig, validate_sweep_point
from swarm_optimizers.core import Params, TrialResult, check_params, run_trial
from swarm_optimizers.errors import (
    ConfigurationError,
    NumericalInstabilityError,
    SweepCancelled,
    TrialFailureError,
)
from swarm_optimizers.functions import BenchmarkFunction, make_function
from swarm_optimizers.run_logger import RunLogger
from swarm_optimizers.stats import AggregateStats
from swarm_optimizers.utils import derive_seed, ensure_dirs, fresh_seed, trial_seed

"""
This file repeats trials, reduces them to statistics and, for whole sweeps,
persists per-trial rows and per-point summaries in a reproducible way.
"""

logger = logging.getLogger(__name__)

TrialFn = Callable[..., TrialResult]


def _cancelled(cancel_event) -> bool:
    return cancel_event is not None and cancel_event.is_set()


def _check_outcome(i: int, res: TrialResult, function: BenchmarkFunction,
                   results: Dict[int, TrialResult], failures: Dict[int, BaseException]) -> None:
    # trial functions other than run_trial may hand back a non-finite best
    if not np.isfinite(res.best_fitness):
        failures[i] = NumericalInstabilityError(function.name, res.best_fitness, len(res.history) - 1)
    else:
        results[i] = res


def _collect_pooled(pool: Executor, kind: Algorithm, params: Params, function: BenchmarkFunction,
                    trial_count: int, base_seed: int, cancel_event, trial_fn: TrialFn,
                    results: Dict[int, TrialResult], failures: Dict[int, BaseException]) -> None:
    futures = {
        pool.submit(trial_fn, kind, params, function, trial_seed(base_seed, i)): i
        for i in range(trial_count)
    }
    try:
        for fut in as_completed(futures):
            i = futures[fut]
            try:
                res = fut.result()
            except NumericalInstabilityError as exc:
                logger.warning("trial %d on %s failed: %s", i, function.name, exc)
                failures[i] = exc
            else:
                _check_outcome(i, res, function, results, failures)
            if _cancelled(cancel_event):
                raise SweepCancelled(
                    f"cancelled after {len(results) + len(failures)} of {trial_count} trials on {function.name}"
                )
    finally:
        # the pool may outlive this call; drop whatever has not started
        for fut in futures:
            fut.cancel()


def run_trials(
    kind,
    params: Params,
    function: BenchmarkFunction,
    trial_count: int,
    base_seed: int,
    *,
    workers: int = 1,
    pool: Optional[Executor] = None,
    cancel_event=None,
    trial_fn: TrialFn = run_trial,
) -> List[TrialResult]:
    """
    Run `trial_count` independent trials and return them ordered by trial index.

    Trial i is seeded with `trial_seed(base_seed, i)`. With `workers > 1` the
    trials run in a process pool, either the caller's `pool` or one created
    for this call; the call blocks until every trial is done.

    Raises:
      ConfigurationError: trial_count < 1, a negative base_seed, zero iterations
                          or otherwise invalid params (before any trial runs).
      TrialFailureError: one or more trials hit a non-finite fitness; the
                         exception carries the failures and the completed results.
      SweepCancelled: `cancel_event` was set; checked between trials.
    """
    # --- Basic checks  ---
    if not isinstance(trial_count, (int, np.integer)) or trial_count < 1:
        raise ConfigurationError(f"trial_count must be a positive int, got {trial_count!r}.")
    if not isinstance(base_seed, (int, np.integer)) or base_seed < 0:
        raise ConfigurationError(f"base_seed must be a non-negative int, got {base_seed!r}.")
    if workers < 1:
        raise ConfigurationError(f"workers must be >= 1, got {workers}.")
    check_params(kind, params)
    validate_sweep_point(params)
    kind = Algorithm.parse(kind)

    results: Dict[int, TrialResult] = {}
    failures: Dict[int, BaseException] = {}

    if workers == 1:
        for i in range(trial_count):
            if _cancelled(cancel_event):
                raise SweepCancelled(f"cancelled after {i} of {trial_count} trials on {function.name}")
            try:
                res = trial_fn(kind, params, function, trial_seed(base_seed, i))
            except NumericalInstabilityError as exc:
                logger.warning("trial %d on %s failed: %s", i, function.name, exc)
                failures[i] = exc
                continue
            _check_outcome(i, res, function, results, failures)
    elif pool is not None:
        _collect_pooled(pool, kind, params, function, trial_count, base_seed,
                        cancel_event, trial_fn, results, failures)
    else:
        with ProcessPoolExecutor(max_workers=workers) as own_pool:
            _collect_pooled(own_pool, kind, params, function, trial_count, base_seed,
                            cancel_event, trial_fn, results, failures)

    if failures:
        raise TrialFailureError(failures, results)
    logger.debug("%s: %d trials done", function.name, trial_count)
    return [results[i] for i in range(trial_count)]


def aggregate(
    kind,
    params: Params,
    function: BenchmarkFunction,
    trial_count: int,
    base_seed: int,
    **kwargs,
) -> AggregateStats:
    """Run `trial_count` trials and reduce their best fitness to count/min/mean/std/max."""
    results = run_trials(kind, params, function, trial_count, base_seed, **kwargs)
    return AggregateStats.from_values(
        (r.best_fitness for r in results),
        function=function.name,
        algorithm=Algorithm.parse(kind).value,
    )


def grid_points(grid: Mapping[str, Sequence]) -> List[Dict[str, object]]:
    """Cartesian product of the swept values, in the order they were given."""
    keys = list(grid)
    return [dict(zip(keys, combo)) for combo in itertools.product(*(grid[k] for k in keys))]


def run_suite(
    *,
    algorithm,
    base_params: Params,
    grid: Mapping[str, Sequence],
    sweep: SweepConfig,
    outdir,
    cancel_event=None,
    trial_fn: TrialFn = run_trial,
) -> Tuple[Path, Path, List[AggregateStats]]:
    """
    Args (all required):
      algorithm: 'bats' or 'butterflies'.
      base_params: parameter set the grid values are applied on top of.
      grid: mapping parameter name -> values to sweep (cartesian product).
      sweep: functions, trial count, base seed, dimension and worker count.
      outdir: output directory for the CSVs.
    Returns:
      (runs_csv_path, summary_csv_path, stats) where stats holds one
      AggregateStats per (grid point, function) that produced results.
    """
    algorithm = Algorithm.parse(algorithm)
    sweep.validate()
    known = {f.name for f in fields(base_params)}
    bad = [k for k in grid if k not in known]
    if bad:
        raise ConfigurationError(f"Unknown {algorithm.value} parameter(s) in grid: {bad}")
    empty = [k for k in grid if len(grid[k]) == 0]
    if empty:
        raise ConfigurationError(f"No values given for swept parameter(s): {empty}")
    points = grid_points(grid)
    # validate every sweep point before any trial starts
    param_sets = [replace(base_params, **pt) for pt in points]
    for p in param_sets:
        check_params(algorithm, p)
        validate_sweep_point(p)
    functions = [make_function(name, sweep.dimension) for name in sweep.functions]

    base_seed = sweep.base_seed
    if base_seed is None:
        base_seed = fresh_seed()
        logger.info("no seed given; using base seed %d", base_seed)

    outdir = Path(outdir)
    ensure_dirs(outdir)
    keys = list(grid)
    run_log = RunLogger(outdir / f"runs_{algorithm.value}.csv")
    stats: List[AggregateStats] = []

    # one pool serves the whole sweep
    pool = ProcessPoolExecutor(max_workers=sweep.workers) if sweep.workers > 1 else None
    try:
        for pi, (point, params) in enumerate(zip(points, param_sets)):
            run_log.set_point(algorithm=algorithm.value, **point)
            for fi, function in enumerate(functions):
                if _cancelled(cancel_event):
                    raise SweepCancelled(f"cancelled before {function.name} at sweep point {point}")
                point_seed = derive_seed(base_seed, pi, fi)
                run_log.set_point(func=function.name)
                try:
                    results = dict(enumerate(run_trials(
                        algorithm, params, function, sweep.trial_count, point_seed,
                        workers=sweep.workers, pool=pool, cancel_event=cancel_event, trial_fn=trial_fn,
                    )))
                    failures: Dict[int, BaseException] = {}
                except TrialFailureError as exc:
                    results, failures = exc.results, exc.failures
                    logger.error("%s %s: %s", function.name, point, exc)

                for i in range(sweep.trial_count):
                    if i in results:
                        run_log.log_result(i, point_seed, function.dim, results[i])
                    else:
                        run_log.log_failure(i, point_seed, function.dim, failures.get(i))

                if results:
                    s = AggregateStats.from_values(
                        (results[i].best_fitness for i in sorted(results)),
                        function=function.name, algorithm=algorithm.value, failed=len(failures),
                    )
                    stats.append(s)
                    logger.info("%s %s: Finished %d runs. Max solution is %g. Average solution is %g. "
                                "Min solution is %g.", function.name, point, s.count, s.max, s.mean, s.min)
    finally:
        if pool is not None:
            pool.shutdown(wait=True, cancel_futures=True)

    log_path = run_log.flush()
    agg_path = outdir / f"summary_{algorithm.value}.csv"
    _aggregate(log_path, agg_path, keys)
    return log_path, agg_path, stats


def run_single(algorithm, params: Params, sweep: SweepConfig) -> Dict[str, TrialResult]:
    """One trial per function; the sweep's trial count is ignored."""
    sweep.validate()
    check_params(algorithm, params)
    base_seed = sweep.base_seed if sweep.base_seed is not None else fresh_seed()
    out = {}
    for fi, name in enumerate(sweep.functions):
        function = make_function(name, sweep.dimension)
        res = run_trial(algorithm, params, function, trial_seed(base_seed, fi))
        logger.info("%s: Found optimum at %s = %g", function.name, list(res.best_position), res.best_fitness)
        out[function.name] = res
    return out


def _aggregate(log_csv, out_csv, keys: Sequence[str]):
    import pandas as pd
    df = pd.read_csv(log_csv)
    df["ok_f"] = df["best_f"].where(df["status"] == "ok")
    df["failed"] = (df["status"] != "ok").astype(int)
    g = df.groupby([*keys, "func"], as_index=False, sort=False)
    out = g.agg(
        count=("ok_f", "count"),
        min=("ok_f", "min"),
        mean=("ok_f", "mean"),
        std=("ok_f", "std"),
        max=("ok_f", "max"),
        failed=("failed", "sum"),
    )
    out.loc[out["count"] == 1, "std"] = 0.0
    out.to_csv(out_csv, index=False)
    return out

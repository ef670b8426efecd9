from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from swarm_optimizers.config import Algorithm, BatParams, ButterflyParams, SweepConfig  # noqa: E402
from swarm_optimizers.errors import SwarmError  # noqa: E402
from swarm_optimizers.experiment import run_single, run_suite  # noqa: E402
from swarm_optimizers.functions import FUNCTIONS  # noqa: E402

logger = logging.getLogger("swarm_optimizers")

DEFAULT_OUTDIR = Path("results")
SWEEP_VALUES = [0.1, 0.3, 0.5, 0.7, 0.9]


# ---------- Logging ----------
def init_logging(verbose: bool) -> logging.Logger:
    """Send package logs to stdout; --verbose adds per-trial debug lines."""
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter('[%(asctime)s] [%(levelname)s] %(message)s', '%H:%M:%S'))
    logger.addHandler(handler)
    logger.propagate = False
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    return logger


# ---------- Simple boxplot helper  ----------
def boxplot_from_runs(runs_csv: str, outpath: str, title: str):
    """Create a compact boxplot of final best fitness per function."""
    df = pd.read_csv(runs_csv)
    df = df[df["status"] == "ok"]
    order = list(dict.fromkeys(df["func"]))
    data = [df.loc[df["func"] == f, "best_f"].values for f in order]
    plt.figure()
    plt.boxplot(data, showfliers=False)
    plt.xticks(range(1, len(order) + 1), order, rotation=30, ha="right")
    plt.yscale("symlog")
    plt.ylabel("Final best fitness")
    plt.title(title)
    os.makedirs(os.path.dirname(outpath) or ".", exist_ok=True)
    plt.savefig(outpath, bbox_inches="tight")
    plt.close()


# ---------- CLI ----------
def _function_list(value: str):
    names = [v.strip() for v in value.split(",") if v.strip()]
    unknown = [n for n in names if n.lower() not in FUNCTIONS]
    if not names or unknown:
        valid = ", ".join(FUNCTIONS)
        raise argparse.ArgumentTypeError(f"Unknown function(s) {unknown}. Choose from: {valid}.")
    return tuple(n.lower() for n in names)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="swarm-optimizers",
                                 description="Bat / butterfly optimizer sweep runner.")
    ap.add_argument("--functions", type=_function_list, required=True,
                    help="Comma separated, e.g. ackley,schwefel,brown,rastrigin,schwefel2,solomon")
    ap.add_argument("--try-count", dest="try_count", type=int, default=None,
                    help="Trials per (sweep point, function). Omit for a single run per function.")
    ap.add_argument("--dim", type=int, default=20)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--workers", type=int, default=os.cpu_count() or 1)
    ap.add_argument("--outdir", default=str(DEFAULT_OUTDIR))
    ap.add_argument("--no-boxplots", dest="no_boxplots", action="store_true")
    ap.add_argument("--verbose", action="store_true")

    sub = ap.add_subparsers(dest="command", required=True)

    # ---- BATS ----
    bats = sub.add_parser("bats", help="Bat algorithm")
    bats.add_argument("--bat-num-iters", dest="iterations", type=int, default=1000)
    bats.add_argument("--bat-count", type=int, default=20)
    bats.add_argument("--frequency-left-bound", type=float, default=0.0)
    bats.add_argument("--frequency-right-bound", type=float, default=1.0)
    bats.add_argument("--initial-pulse-rate", type=float, default=0.7)
    bats.add_argument("--initial-loudness", type=float, default=1.4)
    # swept
    bats.add_argument("--pulse-rate-factor", type=float, nargs="+", default=SWEEP_VALUES)
    bats.add_argument("--loudness-cooling-rate", type=float, nargs="+", default=SWEEP_VALUES)

    # ---- BUTTERFLIES ----
    flies = sub.add_parser("butterflies", help="Butterfly optimization algorithm")
    flies.add_argument("--butterfly-num-iters", dest="iterations", type=int, default=1000)
    flies.add_argument("--butterfly-count", type=int, default=20)
    flies.add_argument("--fragrance-exponent-left-bound", type=float, default=0.1)
    flies.add_argument("--fragrance-exponent-right-bound", type=float, default=0.3)
    # swept
    flies.add_argument("--fragrance-multiplier", type=float, nargs="+", default=SWEEP_VALUES)
    flies.add_argument("--local-search-chance", type=float, nargs="+", default=SWEEP_VALUES)
    return ap


def make_params(args):
    """Return (algorithm, base params, grid) for the chosen subcommand."""
    if args.command == Algorithm.BATS.value:
        base = BatParams(
            bat_count=args.bat_count,
            iterations=args.iterations,
            frequency_bounds=(args.frequency_left_bound, args.frequency_right_bound),
            initial_pulse_rate=args.initial_pulse_rate,
            initial_loudness=args.initial_loudness,
            pulse_rate_factor=args.pulse_rate_factor[0],
            loudness_cooling_rate=args.loudness_cooling_rate[0],
        )
        grid = {
            "pulse_rate_factor": args.pulse_rate_factor,
            "loudness_cooling_rate": args.loudness_cooling_rate,
        }
        return Algorithm.BATS, base, grid

    base = ButterflyParams(
        butterfly_count=args.butterfly_count,
        iterations=args.iterations,
        exponent_bounds=(args.fragrance_exponent_left_bound, args.fragrance_exponent_right_bound),
        fragrance_multiplier=args.fragrance_multiplier[0],
        local_search_chance=args.local_search_chance[0],
    )
    grid = {
        "fragrance_multiplier": args.fragrance_multiplier,
        "local_search_chance": args.local_search_chance,
    }
    return Algorithm.BUTTERFLIES, base, grid


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_logging(args.verbose)
    algorithm, base, grid = make_params(args)

    try:
        if args.try_count is None:
            sweep = SweepConfig(functions=args.functions, trial_count=1, base_seed=args.seed,
                                dimension=args.dim, workers=1)
            run_single(algorithm, base, sweep)
            return 0

        sweep = SweepConfig(functions=args.functions, trial_count=args.try_count, base_seed=args.seed,
                            dimension=args.dim, workers=args.workers)
        outdir = Path(args.outdir)
        runs_csv, summary_csv, _ = run_suite(
            algorithm=algorithm,
            base_params=base,
            grid=grid,
            sweep=sweep,
            outdir=outdir,
        )
    except SwarmError as exc:
        logger.error("%s", exc)
        return 2

    if not args.no_boxplots:
        boxplot_from_runs(str(runs_csv), str(outdir / f"boxplot_{algorithm.value}.png"),
                          title=f"{algorithm.value}: final fitness across runs")
    logger.info("[%s] wrote: %s %s", algorithm.value, runs_csv, summary_csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())

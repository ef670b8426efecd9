import pandas as pd
import pytest

from swarm_optimizers.config import Algorithm, BatParams, ButterflyParams
from swarm_optimizers.run_grid import build_parser, main, make_params


def _bats_argv(tmp_path, *extra):
    return [
        "--functions", "ackley,solomon", "--try-count", "2", "--dim", "2", "--seed", "1",
        "--workers", "1", "--outdir", str(tmp_path), *extra,
        "bats", "--bat-num-iters", "5", "--bat-count", "4",
        "--pulse-rate-factor", "0.1", "0.5", "--loudness-cooling-rate", "0.9",
    ]


def test_bats_grid_from_flags(tmp_path):
    args = build_parser().parse_args(_bats_argv(tmp_path))
    algorithm, base, grid = make_params(args)
    assert algorithm is Algorithm.BATS
    assert isinstance(base, BatParams)
    assert base.frequency_bounds == (0.0, 1.0)
    assert grid == {"pulse_rate_factor": [0.1, 0.5], "loudness_cooling_rate": [0.9]}
    assert args.functions == ("ackley", "solomon")


def test_butterfly_defaults_sweep_five_by_five():
    args = build_parser().parse_args(["--functions=brown", "butterflies"])
    algorithm, base, grid = make_params(args)
    assert algorithm is Algorithm.BUTTERFLIES
    assert isinstance(base, ButterflyParams)
    assert base.exponent_bounds == (0.1, 0.3)
    assert len(grid["fragrance_multiplier"]) * len(grid["local_search_chance"]) == 25


def test_unknown_function_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--functions", "ackley,griewank", "bats"])


def test_sweep_end_to_end(tmp_path):
    assert main(_bats_argv(tmp_path)) == 0
    runs = pd.read_csv(tmp_path / "runs_bats.csv")
    summary = pd.read_csv(tmp_path / "summary_bats.csv")
    assert len(runs) == 2 * 2 * 2
    assert len(summary) == 4
    assert (tmp_path / "boxplot_bats.png").exists()


def test_no_boxplots(tmp_path):
    assert main(_bats_argv(tmp_path, "--no-boxplots")) == 0
    assert not (tmp_path / "boxplot_bats.png").exists()


def test_single_run_mode(tmp_path):
    argv = ["--functions", "rastrigin", "--dim", "3", "--seed", "0", "--outdir", str(tmp_path),
            "butterflies", "--butterfly-num-iters", "5", "--butterfly-count", "5",
            "--fragrance-multiplier", "0.5", "--local-search-chance", "0.5"]
    assert main(argv) == 0
    assert not (tmp_path / "runs_butterflies.csv").exists()


def test_configuration_error_exit_code(tmp_path):
    argv = ["--functions", "ackley", "--try-count", "2", "--outdir", str(tmp_path), "--no-boxplots",
            "bats", "--frequency-left-bound", "2", "--frequency-right-bound", "1",
            "--pulse-rate-factor", "0.5", "--loudness-cooling-rate", "0.5"]
    assert main(argv) == 2


@pytest.mark.parametrize("try_count", [["--try-count", "2"], []])
def test_negative_seed_exit_code(tmp_path, try_count):
    argv = ["--functions", "ackley", *try_count, "--seed", "-5", "--dim", "2", "--workers", "1",
            "--outdir", str(tmp_path), "--no-boxplots",
            "bats", "--bat-num-iters", "3", "--bat-count", "3",
            "--pulse-rate-factor", "0.5", "--loudness-cooling-rate", "0.5"]
    assert main(argv) == 2
    assert not (tmp_path / "runs_bats.csv").exists()

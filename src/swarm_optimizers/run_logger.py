"""Per-trial CSV log of a sweep: one row per trial, tagged with its sweep point."""

from __future__ import annotations

import csv
import datetime as dt
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from swarm_optimizers.core import TrialResult

TRIAL_FIELDS = ("run", "seed", "n", "best_f", "best_x_json", "evals", "status", "time_s")


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class RunLogger:
    """Buffer trial rows in memory and write them once the sweep is done.

    Every row carries the labels of the sweep point it belongs to (algorithm,
    swept parameter values, function) followed by the fixed trial columns.
    """

    path: Path

    _point: Dict[str, object] = field(default_factory=dict, init=False)
    _rows: List[Dict[str, object]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def set_point(self, **labels: object) -> None:
        """Merge labels that all following rows share."""
        self._point.update(labels)

    def log_result(self, run: int, seed: int, dim: int, res: TrialResult) -> None:
        self._append(
            run=run,
            seed=seed,
            n=dim,
            best_f=res.best_fitness,
            # include best_x for reproducibility (JSON for readability)
            best_x_json=json.dumps(list(res.best_position)),
            evals=res.evaluations,
            status="ok",
            time_s=res.elapsed,
        )

    def log_failure(self, run: int, seed: int, dim: int, error: Optional[BaseException]) -> None:
        self._append(run=run, seed=seed, n=dim, best_f=float("nan"), best_x_json="",
                     evals=0, status=f"failed: {error}", time_s=0.0)

    def _append(self, **trial: object) -> None:
        row: Dict[str, object] = {
            "timestamp": _utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
        }
        row.update(self._point)
        row.update(trial)
        self._rows.append(row)

    def __len__(self) -> int:
        return len(self._rows)

    def fieldnames(self) -> List[str]:
        labels: List[str] = []
        for row in self._rows:
            for key in row:
                if key != "timestamp" and key not in TRIAL_FIELDS and key not in labels:
                    labels.append(key)
        return ["timestamp", *labels, *TRIAL_FIELDS]

    def flush(self) -> Path:
        """Write buffered rows to `path` and return it."""
        if not self._rows:
            raise RuntimeError("No trial rows to write.")

        with self.path.open("w", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames())
            writer.writeheader()
            writer.writerows(self._rows)
        return self.path

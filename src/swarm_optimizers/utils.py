"""
Utility helpers for trials and sweeps.

Responsibilities:
  • Reproducibility (per-trial seed derivation, RNG construction).
  • Filesystem helpers (create output directories).
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np

SeedLike = Union[int, np.random.SeedSequence, None]


def trial_seed(base_seed: int, trial_index: int) -> np.random.SeedSequence:
    """
    Derive the seed of trial `trial_index` from a sweep's base seed.

    Equivalent to `SeedSequence(base_seed).spawn(n)[trial_index]` but does
    not need the total trial count, so any single trial can be replayed.
    """
    return np.random.SeedSequence(entropy=int(base_seed), spawn_key=(int(trial_index),))


def derive_seed(*keys: int) -> int:
    """Fold several integers into one 63-bit seed (stable across processes)."""
    state = np.random.SeedSequence([int(k) for k in keys]).generate_state(2, dtype=np.uint32)
    return int((int(state[0]) << 31) ^ int(state[1]))


def fresh_seed() -> int:
    """Draw a base seed from OS entropy."""
    return int(np.random.SeedSequence().entropy % (2**63))


def make_rng(seed: SeedLike) -> np.random.Generator:
    """Build an independent generator; each trial owns exactly one."""
    return np.random.default_rng(seed)


def ensure_dirs(*paths: Path) -> None:
    """
    Create all given directories (recursively) if they do not exist.

    Args:
        *paths: One or more Path objects (directories) to create.
    """
    for p in paths:
        Path(p).mkdir(parents=True, exist_ok=True)

"""
utils.py - Small, reusable helpers around the board and the Q-table.

Includes:
- Seeding / RNG utilities
- Moving average for learning curves
- Value and policy grids for inspection
- State-sequence -> (row, col) path conversion
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np


# -----------------------------
# Reproducibility / RNG
# -----------------------------

def set_seed(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create a NumPy Generator seeded with `seed`.

    Parameters
    ----------
    seed : int or None
        If None, uses unpredictable entropy; else deterministic.

    Returns
    -------
    np.random.Generator
    """
    return np.random.default_rng(seed)


# -----------------------------
# Smoothing
# -----------------------------

def rolling(x, k: int = 25) -> np.ndarray:
    """
    Moving average that keeps the length equal to len(x).

    Uses a 'valid' convolution and pads the front with the first
    smoothed value.
    """
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return np.array([])
    k = max(1, min(k, len(x)))
    y = np.convolve(x, np.ones(k) / k, mode="valid")
    pad = np.full(k - 1, y[0])
    return np.concatenate([pad, y])


# -----------------------------
# Board-specific helpers
# -----------------------------

# Arrow per action, in Action order (Right, Down, Left, Up)
ARROWS = ("→", "↓", "←", "↑")


def states_to_path(env, states: Iterable[int]) -> List[Tuple[int, int]]:
    """
    Convert a sequence of state indices into (row, col) positions.
    """
    return [env.to_pos(int(s)) for s in states]


def value_grid(env, table) -> np.ndarray:
    """
    Map V(s) = max_a Q(s,a) onto a (rows x cols) grid.
    """
    V = np.max(np.asarray(table.values), axis=1)
    return V.reshape(env.rows, env.cols)


def policy_grid(env, table) -> List[List[str]]:
    """
    Greedy action per cell as an arrow; terminal cells are marked with '·'.
    """
    pi = table.greedy_policy()
    grid = []
    for r in range(env.rows):
        row = []
        for c in range(env.cols):
            s = env.to_index((r, c))
            row.append("·" if env.is_terminal(s) else ARROWS[pi[s]])
        grid.append(row)
    return grid

"""
exploration.py - ε-greedy action selection with exponential ε decay.

ε(i) = min + (max - min) * exp(-decay * i)

The schedule owns the single random stream used by both training and
evaluation; seeding it makes a whole run reproducible.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from .config import Hyperparameters
from .errors import ConfigurationError
from .utils import set_seed


class ExplorationSchedule:
    """
    ε-greedy selector plus the per-episode decay curve.

    Parameters
    ----------
    max_rate : float
        ε at episode index 0.
    min_rate : float
        Asymptotic ε as the episode index grows.
    decay_rate : float
        Exponential decay constant, must be > 0.
    rng : np.random.Generator or None
        Shared random stream. A fresh unseeded one is created if None.
    num_actions : int
        Size of the action space for random draws.
    """

    def __init__(self, max_rate: float, min_rate: float, decay_rate: float,
                 rng: Optional[np.random.Generator] = None,
                 num_actions: int = 4) -> None:
        if min_rate > max_rate:
            raise ConfigurationError(f"min_rate {min_rate} exceeds max_rate {max_rate}")
        if not decay_rate > 0:
            raise ConfigurationError(f"decay_rate must be positive, got {decay_rate}")
        self.max_rate = float(max_rate)
        self.min_rate = float(min_rate)
        self.decay_rate = float(decay_rate)
        self.num_actions = num_actions
        self.rng: np.random.Generator = rng if rng is not None else set_seed(None)

    @classmethod
    def from_hyperparameters(cls, hp: Hyperparameters,
                             rng: Optional[np.random.Generator] = None) -> "ExplorationSchedule":
        """Build a schedule whose stream is seeded from `hp.seed` unless `rng` is given."""
        hp.validate()
        return cls(
            max_rate=hp.max_exploration_rate,
            min_rate=hp.min_exploration_rate,
            decay_rate=hp.exploration_decay_rate,
            rng=rng if rng is not None else set_seed(hp.seed),
        )

    def select_action(self, state: int, table, exploration_rate: float) -> int:
        """
        Choose an action ε-greedily.

        A uniform draw r ∈ [0, 1) above `exploration_rate` exploits
        `table.best_action(state)`; otherwise a uniformly random action
        is returned.
        """
        r = self.rng.random()
        if r > exploration_rate:
            return table.best_action(state)
        return int(self.rng.integers(self.num_actions))

    def decay(self, episode_index: int) -> float:
        """ε after the episode with index `episode_index` has finished."""
        return self.min_rate + (self.max_rate - self.min_rate) * math.exp(-self.decay_rate * episode_index)

    def seed(self, seed: Optional[int] = None) -> None:
        """
        Reseed the shared stream. If None, a random seed is drawn from OS entropy.
        """
        self.rng = set_seed(seed)

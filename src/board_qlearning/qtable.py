"""
qtable.py - Tabular state-action values and the one-step Q-learning update.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def init_q_table(num_states: int, num_actions: int, init_value: float = 0.0) -> np.ndarray:
    """
    Create a tabular Q of shape (S, A) filled with `init_value`.
    """
    return np.full((num_states, num_actions), init_value, dtype=float)


class QTable:
    """
    Mapping (state, action) -> estimated discounted return.

    Zero-initialized. `update` is the only mutator; the training loop calls
    it once per environment step and the evaluation loop never does.
    """

    def __init__(self, num_states: int, num_actions: int = 4) -> None:
        if num_states <= 0 or num_actions <= 0:
            raise ValueError(f"Q-table needs a positive shape, got ({num_states}, {num_actions})")
        self._q: np.ndarray = init_q_table(num_states, num_actions)

    @classmethod
    def for_env(cls, env) -> "QTable":
        """Zero table sized to `env.num_states` x `env.num_actions`."""
        return cls(env.num_states, env.num_actions)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._q.shape

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        view = self._q.view()
        view.setflags(write=False)
        return view

    def __getitem__(self, key):
        return self.values[key]

    def best_action(self, state: int) -> int:
        """
        Action with the highest value at `state`.

        Ties go to the lowest action index, so an all-zero row yields 0.
        """
        return int(np.argmax(self._q[state]))

    def best_value(self, state: int) -> float:
        """max_a Q(state, a)."""
        return float(np.max(self._q[state]))

    def update(self, state: int, action: int, reward: float, next_state: int,
               alpha: float, gamma: float) -> float:
        """
        Apply Q(s,a) += α [r + γ max_a' Q(s',a') − Q(s,a)].

        Terminal rows are never updated, so they stay at zero and the
        bootstrap term vanishes when `next_state` is terminal.

        Returns
        -------
        float
            The TD error that was applied (before scaling by α).
        """
        td_target = reward + gamma * self.best_value(next_state)
        td_error = td_target - self._q[state, action]
        self._q[state, action] += alpha * td_error
        return float(td_error)

    def greedy_policy(self) -> np.ndarray:
        """
        Greedy policy π(s) = argmax_a Q(s, a), lowest index on ties.
        Returns array of shape (S,) with integer actions.
        """
        return np.argmax(self._q, axis=1).astype(int)

    def snapshot(self) -> np.ndarray:
        """Independent read-only copy, safe to hand to external readers."""
        snap = self._q.copy()
        snap.setflags(write=False)
        return snap

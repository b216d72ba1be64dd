"""
GridEnvironment: the deterministic board the agent learns to cross.

- Fixed layout (start, destination, hazards) classified once at construction
- Per-cell reward table derived from the classification
- Pure transition function step(state, action) -> next_state
- States are flat row-major indices: state = row * cols + col,
  with (0, 0) at the top-left cell.

This file exposes:
    - CellClass: classification of a board cell
    - Action: the four moves, in Q-table column order
    - REWARDS: reward for entering a cell of each class
    - build_reward_table: classification array -> reward array
    - GridEnvironment: the environment class
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict, Tuple

import numpy as np

from .config import BoardSettings
from .errors import InvariantViolation


class CellClass(Enum):
    """Classification of a board cell. Immutable once the board is built."""
    EMPTY = "empty"
    START = "start"
    DESTINATION = "destination"
    HAZARD = "hazard"


# Encoded as: 0=Right, 1=Down, 2=Left, 3=Up
# The order indexes the Q-table's action axis and the random draw range.
class Action(IntEnum):
    RIGHT = 0
    DOWN = 1
    LEFT = 2
    UP = 3


NUM_ACTIONS: int = len(Action)

REWARDS: Dict[CellClass, float] = {
    CellClass.EMPTY: -1.0,
    CellClass.START: -1.0,
    CellClass.DESTINATION: 100.0,
    CellClass.HAZARD: -100.0,
}

TERMINAL_CLASSES = frozenset({CellClass.DESTINATION, CellClass.HAZARD})


def build_reward_table(classes) -> np.ndarray:
    """
    Map every cell classification onto its reward.

    Parameters
    ----------
    classes : sequence of CellClass
        One classification per state index.

    Returns
    -------
    np.ndarray
        Float array of shape (len(classes),).

    Raises
    ------
    InvariantViolation
        If a classification has no reward (a construction bug upstream).
    """
    rewards = np.empty(len(classes), dtype=float)
    for i, cls in enumerate(classes):
        try:
            rewards[i] = REWARDS[cls]
        except (KeyError, TypeError):
            raise InvariantViolation(f"Unrecognized cell classification at state {i}: {cls!r}") from None
    return rewards


class GridEnvironment:
    """
    A rows x cols board with one start cell, one destination and a set of
    hazards. Destination and hazards are terminal.

    Unlike a Gym-style environment this class holds no agent position:
    `step` is a pure function of (state, action), so the training and
    evaluation loops own the current state.

    Notes
    -----
    - Coordinates are (row, col) with (0, 0) at the top-left.
    - Actions are encoded as: 0=Right, 1=Down, 2=Left, 3=Up.
    - A move that would leave the board keeps the agent in place.
    """

    # ---------------------------------------------------------------------
    # Construction & basic properties
    # ---------------------------------------------------------------------
    def __init__(self, settings: BoardSettings) -> None:
        """
        Build the board from validated settings.

        Parameters
        ----------
        settings : BoardSettings
            Immutable board configuration.

        Raises
        ------
        ConfigurationError
            If the settings are invalid (see `BoardSettings.validate`).
        """
        self.settings: BoardSettings = settings.validate()

        self.rows: int = settings.rows
        self.cols: int = settings.cols
        self.num_states: int = self.rows * self.cols
        self.num_actions: int = NUM_ACTIONS

        self.start_state: int = self.to_index(settings.start)
        self.goal_state: int = self.to_index(settings.goal)

        classes = [CellClass.EMPTY] * self.num_states
        classes[self.start_state] = CellClass.START
        classes[self.goal_state] = CellClass.DESTINATION
        for cell in settings.hazards:
            classes[self.to_index(cell)] = CellClass.HAZARD

        self._classes: Tuple[CellClass, ...] = tuple(classes)
        self._rewards: np.ndarray = build_reward_table(self._classes)
        self._rewards.setflags(write=False)

    # --------------------------------------------------------
    # Indexing helpers
    # --------------------------------------------------------

    def to_index(self, pos: Tuple[int, int]) -> int:
        """
        Convert (row, col) to a flat state index: row * cols + col.
        """
        r, c = pos
        return r * self.cols + c

    def to_pos(self, index: int) -> Tuple[int, int]:
        """
        Convert a flat state index back to (row, col).

        Raises
        ------
        ValueError
            If the index is not in [0, num_states).
        """
        self._check_state(index)
        return (index // self.cols, index % self.cols)

    def _check_state(self, state: int) -> None:
        if not (0 <= state < self.num_states):
            raise ValueError(f"State out of range: {state}")

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def classifications(self) -> Tuple[CellClass, ...]:
        """Per-state classification, indexed by state."""
        return self._classes

    @property
    def rewards(self) -> np.ndarray:
        """Read-only reward table, indexed by state."""
        return self._rewards

    def classify(self, state: int) -> CellClass:
        self._check_state(state)
        return self._classes[state]

    def reward(self, state: int) -> float:
        """Reward for entering `state`."""
        self._check_state(state)
        return float(self._rewards[state])

    def is_terminal(self, state: int) -> bool:
        """True iff `state` is the destination or a hazard."""
        return self.classify(state) in TERMINAL_CLASSES

    def step(self, state: int, action: int) -> int:
        """
        Deterministic transition.

        Parameters
        ----------
        state : int
            Current flat state index.
        action : int
            0=Right, 1=Down, 2=Left, 3=Up.

        Returns
        -------
        int
            Next state index. Equals `state` when the move would cross
            the board edge.

        Raises
        ------
        ValueError
            If `state` or `action` is out of range.
        """
        self._check_state(state)
        if action == Action.RIGHT:
            return state if (state + 1) % self.cols == 0 else state + 1
        if action == Action.DOWN:
            return state if state >= self.cols * (self.rows - 1) else state + self.cols
        if action == Action.LEFT:
            return state if state % self.cols == 0 else state - 1
        if action == Action.UP:
            return state if state < self.cols else state - self.cols
        raise ValueError(f"Invalid action: {action}")

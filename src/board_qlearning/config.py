"""
config.py - Immutable run configuration for the board and the learner.

This file exposes:
    - BoardSettings: board geometry and the classified cells
    - Hyperparameters: training/evaluation knobs with the classic defaults

Both are frozen dataclasses; `validate()` fails fast with a
ConfigurationError instead of clamping bad values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .errors import ConfigurationError

Cell = Tuple[int, int]


def _as_cell(name: str, cell) -> Cell:
    """Normalise any (row, col) pair, e.g. a list, to a hashable tuple."""
    try:
        r, c = cell
        return (int(r), int(c))
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} {cell!r} is not a (row, col) pair") from None


@dataclass(frozen=True)
class BoardSettings:
    """
    BoardSettings
    -------------
    Immutable description of the board.

    Parameters
    ----------
    rows : int
        Number of rows (board height).
    cols : int
        Number of columns (board width).
    start : tuple[int, int]
        Start cell (row, col).
    goal : tuple[int, int]
        Destination cell (row, col). Reaching it ends the episode.
    hazards : tuple[tuple[int, int], ...]
        Hazard cells. Entering one ends the episode with a large penalty.
    """
    rows: int = 5
    cols: int = 5
    start: Cell = (0, 0)
    goal: Cell = (4, 4)

    # Hazards leave a route along the top row and down the right column
    hazards: Tuple[Cell, ...] = (
        (1, 1), (1, 3), (2, 3), (3, 0), (3, 1),
    )

    def validate(self) -> "BoardSettings":
        """
        Check geometry and cell placement.

        Returns
        -------
        BoardSettings
            `self`, so calls can be chained.

        Raises
        ------
        ConfigurationError
            If a dimension is non-positive, a cell is out of bounds, or two
            of start/goal/hazards share a cell.
        """
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(
                f"Board dimensions must be positive, got {self.rows}x{self.cols}"
            )

        named = [("start", self.start), ("goal", self.goal)]
        named += [(f"hazard #{i}", cell) for i, cell in enumerate(self.hazards)]

        seen = {}
        for name, cell in named:
            cell = _as_cell(name, cell)
            r, c = cell
            if not (0 <= r < self.rows and 0 <= c < self.cols):
                raise ConfigurationError(f"{name} {cell} is outside the {self.rows}x{self.cols} board")
            if cell in seen:
                raise ConfigurationError(f"{name} {cell} overlaps {seen[cell]}")
            seen[cell] = name
        return self


@dataclass(frozen=True)
class Hyperparameters:
    """
    Hyperparameters
    ---------------
    Knobs for one training + evaluation run.

    The exploration rate is never mutated on this object: the training loop
    threads the current value through its episodes and reports the final
    one in its result.

    Parameters
    ----------
    total_simulations : int
        Number of training episodes.
    steps_before_death : int
        Step budget per episode; an episode that exhausts it is truncated.
    learning_rate : float
        Step size α ∈ (0, 1].
    discount_rate : float
        Discount factor γ ∈ [0, 1].
    exploration_rate : float
        Initial ε used for the first episode.
    max_exploration_rate : float
        ε at episode index 0 of the decay curve.
    min_exploration_rate : float
        Asymptote of the decay curve.
    exploration_decay_rate : float
        Exponential decay constant (> 0).
    seed : int or None
        Seed for the shared random stream; None draws OS entropy.
    """
    total_simulations: int = 10_000
    steps_before_death: int = 100
    learning_rate: float = 0.7
    discount_rate: float = 0.95
    exploration_rate: float = 1.0
    max_exploration_rate: float = 1.0
    min_exploration_rate: float = 0.01
    exploration_decay_rate: float = 0.005
    seed: Optional[int] = None

    def validate(self) -> "Hyperparameters":
        """
        Reject values that would silently no-op or defeat convergence.

        Raises
        ------
        ConfigurationError
            On non-positive counts, rates outside their ranges,
            `min_exploration_rate > max_exploration_rate`, or a
            non-positive decay rate.
        """
        if self.total_simulations <= 0:
            raise ConfigurationError(f"total_simulations must be positive, got {self.total_simulations}")
        if self.steps_before_death <= 0:
            raise ConfigurationError(f"steps_before_death must be positive, got {self.steps_before_death}")
        if not (0.0 < self.learning_rate <= 1.0):
            raise ConfigurationError(f"learning_rate must be in (0, 1], got {self.learning_rate}")
        if not (0.0 <= self.discount_rate <= 1.0):
            raise ConfigurationError(f"discount_rate must be in [0, 1], got {self.discount_rate}")

        for name in ("exploration_rate", "max_exploration_rate", "min_exploration_rate"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")

        if self.min_exploration_rate > self.max_exploration_rate:
            raise ConfigurationError(
                "min_exploration_rate must not exceed max_exploration_rate "
                f"({self.min_exploration_rate} > {self.max_exploration_rate})"
            )
        if not math.isfinite(self.exploration_decay_rate) or self.exploration_decay_rate <= 0:
            raise ConfigurationError(
                f"exploration_decay_rate must be positive, got {self.exploration_decay_rate}"
            )
        return self

    def with_overrides(self, **changes) -> "Hyperparameters":
        """
        Copy with some fields replaced; None values are ignored.

        The copy is validated before it is returned.
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes).validate()

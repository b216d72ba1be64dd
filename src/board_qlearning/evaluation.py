"""
evaluation.py - Rollouts of the learned policy, without learning.

Each rollout replays the training step loop with ε frozen and no Q update,
and returns the visited-state sequence. That sequence is all a
presentation layer needs to colour cells or pace an animation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import Hyperparameters
from .errors import ConfigurationError
from .training import EpisodeOutcome, run_episode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rollout:
    """
    One evaluation episode.

    Attributes
    ----------
    states : tuple[int, ...]
        Start state followed by every state entered, in order.
    outcome : EpisodeOutcome
    total_reward : float
    """
    states: tuple
    outcome: EpisodeOutcome
    total_reward: float

    @property
    def steps(self) -> int:
        return len(self.states) - 1

    @property
    def reached_goal(self) -> bool:
        return self.outcome is EpisodeOutcome.GOAL


def run_evaluation(env, table, schedule, hyperparams: Hyperparameters,
                   rollout_count: int = 5,
                   exploration_rate: Optional[float] = None) -> List[Rollout]:
    """
    Run `rollout_count` rollouts with the (near-converged) policy.

    Parameters
    ----------
    env : GridEnvironment
    table : QTable
        Read only.
    schedule : ExplorationSchedule
    hyperparams : Hyperparameters
        Supplies the step budget.
    rollout_count : int
        Number of rollouts (5 by default).
    exploration_rate : float or None
        ε for every step; defaults to the schedule's minimum rate. Pass
        `TrainingResult.final_exploration_rate` to continue where training
        stopped.

    Returns
    -------
    List[Rollout]

    Raises
    ------
    ConfigurationError
        If `rollout_count` is not positive or `hyperparams` is invalid.
    """
    hyperparams.validate()
    if rollout_count <= 0:
        raise ConfigurationError(f"rollout_count must be positive, got {rollout_count}")

    eps = schedule.min_rate if exploration_rate is None else exploration_rate

    rollouts = []
    for i in range(rollout_count):
        states, G, outcome = run_episode(env, table, schedule, eps, hyperparams.steps_before_death)
        for s in states[1:]:
            logger.debug("rollout %d: state %d", i, s)
        rollouts.append(Rollout(states=tuple(states), outcome=outcome, total_reward=G))
    return rollouts

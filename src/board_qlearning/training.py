"""
training.py - Tabular Q-learning on the board.

Implements the training control loop:

- run_episode  : one bounded walk from the start state, optionally learning
- run_training : N episodes with ε decayed after each one

Per-episode totals, lengths and outcomes are collected in an EpisodeLog.
The mean episode reward is reported through logging as a quality signal;
nothing in the loop branches on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .config import Hyperparameters
from .gridworld import CellClass

logger = logging.getLogger(__name__)


class EpisodeOutcome(Enum):
    """How an episode ended."""
    GOAL = "goal"
    HAZARD = "hazard"
    TRUNCATED = "truncated"


@dataclass
class EpisodeLog:
    """
    Per-episode metrics gathered during training. Append-only.
    """
    returns: List[float] = field(default_factory=list)
    lengths: List[int] = field(default_factory=list)
    outcomes: List[EpisodeOutcome] = field(default_factory=list)

    def append(self, G: float, L: int, outcome: EpisodeOutcome) -> None:
        self.returns.append(G)
        self.lengths.append(L)
        self.outcomes.append(outcome)

    def __len__(self) -> int:
        return len(self.returns)

    def mean_return(self) -> float:
        return float(np.mean(self.returns)) if self.returns else 0.0


@dataclass
class TrainingResult:
    """
    Outcome of `run_training`.

    Attributes
    ----------
    log : EpisodeLog
        Returns, lengths and outcomes of every episode, in order.
    final_exploration_rate : float
        ε after the last episode; pass it on to evaluation.
    q_snapshot : np.ndarray
        Read-only copy of the trained Q-table.
    """
    log: EpisodeLog
    final_exploration_rate: float
    q_snapshot: np.ndarray

    @property
    def mean_reward(self) -> float:
        return self.log.mean_return()

    @property
    def goal_count(self) -> int:
        return sum(1 for o in self.log.outcomes if o is EpisodeOutcome.GOAL)

    @property
    def success_rate(self) -> float:
        return self.goal_count / len(self.log) if len(self.log) else 0.0


def _outcome_for(env, state: int) -> Optional[EpisodeOutcome]:
    cls = env.classify(state)
    if cls is CellClass.DESTINATION:
        return EpisodeOutcome.GOAL
    if cls is CellClass.HAZARD:
        return EpisodeOutcome.HAZARD
    return None


def run_episode(env, table, schedule, exploration_rate: float, max_steps: int,
                alpha: Optional[float] = None,
                gamma: Optional[float] = None) -> Tuple[List[int], float, EpisodeOutcome]:
    """
    Walk from `env.start_state` for at most `max_steps` steps.

    When both `alpha` and `gamma` are given, Q is updated after every step
    (training); otherwise Q is only read (evaluation).

    Parameters
    ----------
    env : GridEnvironment
    table : QTable
    schedule : ExplorationSchedule
    exploration_rate : float
        ε used for every step of this episode.
    max_steps : int
        Step budget; exhausting it truncates the episode.
    alpha, gamma : float or None
        Learning rate and discount for the Q update.

    Returns
    -------
    states : List[int]
        Start state followed by every state entered.
    G : float
        Sum of rewards collected.
    outcome : EpisodeOutcome
    """
    learn = alpha is not None and gamma is not None

    s = env.start_state
    states = [s]
    G = 0.0

    for _ in range(max_steps):
        a = schedule.select_action(s, table, exploration_rate)
        s2 = env.step(s, a)
        r = env.reward(s2)

        if learn:
            table.update(s, a, r, s2, alpha, gamma)

        G += r
        states.append(s2)
        s = s2

        outcome = _outcome_for(env, s2)
        if outcome is not None:
            return states, G, outcome

    return states, G, EpisodeOutcome.TRUNCATED


def run_training(env, table, schedule, hyperparams: Hyperparameters,
                 log_every: int = 0) -> TrainingResult:
    """
    Tabular Q-learning with ε-greedy exploration and exponential ε decay.

    Parameters
    ----------
    env : GridEnvironment
    table : QTable
        Updated in place; usually freshly zero-filled.
    schedule : ExplorationSchedule
        Action selector; its random stream drives every draw.
    hyperparams : Hyperparameters
        Validated before any episode runs.
    log_every : int
        Emit a DEBUG progress line every `log_every` episodes (0 disables).

    Returns
    -------
    TrainingResult

    Raises
    ------
    ConfigurationError
        If `hyperparams` is invalid.
    """
    hyperparams.validate()

    log = EpisodeLog()
    eps = hyperparams.exploration_rate

    for episode in range(hyperparams.total_simulations):
        states, G, outcome = run_episode(
            env, table, schedule, eps, hyperparams.steps_before_death,
            alpha=hyperparams.learning_rate,
            gamma=hyperparams.discount_rate,
        )

        eps = schedule.decay(episode)
        log.append(G, len(states) - 1, outcome)

        if log_every and (episode + 1) % log_every == 0:
            logger.debug(
                "episode %d/%d: reward=%.1f steps=%d outcome=%s epsilon=%.4f",
                episode + 1, hyperparams.total_simulations, G, len(states) - 1,
                outcome.value, eps,
            )

    result = TrainingResult(log=log, final_exploration_rate=eps, q_snapshot=table.snapshot())
    logger.info(
        "Score over time: %.3f (goal reached in %d/%d episodes, final epsilon %.4f)",
        result.mean_reward, result.goal_count, len(log), eps,
    )
    return result

"""
tests/test_evaluation.py

Tests for evaluation rollouts: they must follow the learned policy, stop at
the first terminal state or the step budget, and never modify the Q-table.
"""

import numpy as np
import pytest

from board_qlearning import (
    BoardSettings,
    ConfigurationError,
    EpisodeOutcome,
    ExplorationSchedule,
    GridEnvironment,
    Hyperparameters,
    QTable,
    Rollout,
    run_evaluation,
    run_training,
)
from board_qlearning.utils import set_seed


@pytest.fixture
def one_step_env():
    return GridEnvironment(BoardSettings(rows=1, cols=2, start=(0, 0), goal=(0, 1), hazards=()))


@pytest.fixture
def trained_one_step(one_step_env):
    hp = Hyperparameters(total_simulations=100, steps_before_death=2, seed=0)
    table = QTable.for_env(one_step_env)
    schedule = ExplorationSchedule.from_hyperparameters(hp)
    result = run_training(one_step_env, table, schedule, hp)
    return one_step_env, table, schedule, hp, result


# =====================================================================
# Rollouts of a trained policy
# =====================================================================

def test_greedy_rollout_reaches_goal_in_one_step(trained_one_step):
    env, table, schedule, hp, _ = trained_one_step
    rollouts = run_evaluation(env, table, schedule, hp, rollout_count=5, exploration_rate=0.0)

    assert len(rollouts) == 5
    for rollout in rollouts:
        assert rollout.states == (0, 1)
        assert rollout.steps == 1
        assert rollout.reached_goal
        assert rollout.total_reward == pytest.approx(100.0)


def test_evaluation_does_not_update_table(trained_one_step):
    env, table, schedule, hp, _ = trained_one_step
    before = table.snapshot()
    run_evaluation(env, table, schedule, hp, rollout_count=5, exploration_rate=1.0)
    assert np.array_equal(before, table.values)


def test_default_rate_is_schedule_minimum():
    """
    Without an explicit rate, rollouts use the schedule's minimum. A minimum
    of 0 means pure greedy: the zero table's Right walks straight to the goal.
    """
    env = GridEnvironment(BoardSettings(rows=1, cols=3, start=(0, 0), goal=(0, 2), hazards=()))
    table = QTable.for_env(env)
    schedule = ExplorationSchedule(1.0, 0.0, 0.005, rng=set_seed(0))
    hp = Hyperparameters(steps_before_death=10)

    rollouts = run_evaluation(env, table, schedule, hp, rollout_count=20)

    assert len(rollouts) == 20
    for rollout in rollouts:
        assert isinstance(rollout, Rollout)
        assert rollout.states == (0, 1, 2)
        assert rollout.reached_goal


def test_continue_with_final_training_rate(trained_one_step):
    env, table, schedule, hp, result = trained_one_step
    rollouts = run_evaluation(env, table, schedule, hp, rollout_count=3,
                              exploration_rate=result.final_exploration_rate)
    for rollout in rollouts:
        assert rollout.states[0] == env.start_state
        assert 1 <= rollout.steps <= hp.steps_before_death


# =====================================================================
# Termination and truncation
# =====================================================================

def test_rollout_stops_at_first_terminal_state():
    """
    With an untrained table (all zeros) the greedy action is Right, which
    walks straight into the hazard next to the start.
    """
    env = GridEnvironment(BoardSettings(rows=1, cols=3, start=(0, 0), goal=(0, 2), hazards=((0, 1),)))
    hp = Hyperparameters(steps_before_death=10)
    schedule = ExplorationSchedule(1.0, 0.01, 0.005, rng=set_seed(0))

    (rollout,) = run_evaluation(env, QTable.for_env(env), schedule, hp,
                                rollout_count=1, exploration_rate=0.0)
    assert rollout.states == (0, 1)
    assert rollout.outcome is EpisodeOutcome.HAZARD
    assert rollout.total_reward == pytest.approx(-100.0)


def test_rollout_truncated_at_step_budget():
    """
    Greedy Right from the last column stays put forever: truncation.
    """
    env = GridEnvironment(BoardSettings(rows=2, cols=2, start=(0, 1), goal=(1, 0), hazards=()))
    hp = Hyperparameters(steps_before_death=4)
    schedule = ExplorationSchedule(1.0, 0.01, 0.005, rng=set_seed(0))

    (rollout,) = run_evaluation(env, QTable.for_env(env), schedule, hp,
                                rollout_count=1, exploration_rate=0.0)
    assert rollout.outcome is EpisodeOutcome.TRUNCATED
    assert rollout.steps == 4
    assert set(rollout.states) == {1}
    assert rollout.total_reward == pytest.approx(-4.0)


# =====================================================================
# Validation
# =====================================================================

@pytest.mark.parametrize("count", [0, -1])
def test_non_positive_rollout_count_rejected(one_step_env, count):
    schedule = ExplorationSchedule(1.0, 0.01, 0.005, rng=set_seed(0))
    with pytest.raises(ConfigurationError):
        run_evaluation(one_step_env, QTable.for_env(one_step_env), schedule,
                       Hyperparameters(), rollout_count=count)

"""
tests/test_qtable.py

Unit tests for QTable: initialization, greedy lookups with deterministic
tie-breaking, the one-step Q-learning update, and read-only snapshots.
"""

import numpy as np
import pytest

from board_qlearning import QTable
from board_qlearning.qtable import init_q_table


# =====================================================================
# Construction
# =====================================================================

def test_init_q_table_shape():
    """
    init_q_table should create a table of shape (S, A) with the given init value.
    """
    Q = init_q_table(5, 4, 0.5)
    assert Q.shape == (5, 4)
    assert np.allclose(Q, 0.5)


def test_new_table_is_zero_filled():
    table = QTable(6)
    assert table.shape == (6, 4)
    assert np.all(table.values == 0.0)


def test_rejects_empty_shape():
    with pytest.raises(ValueError):
        QTable(0)


# =====================================================================
# Greedy lookups
# =====================================================================

def test_best_action_all_zero_row_is_zero():
    """
    Ties go to the lowest action index: an all-zero row yields action 0.
    """
    table = QTable(3)
    for s in range(3):
        assert table.best_action(s) == 0


def test_best_action_tie_break_lowest_index():
    table = QTable(1)
    table._q[0] = [1.0, 3.0, 3.0, 2.0]
    assert table.best_action(0) == 1
    assert table.best_value(0) == 3.0


def test_greedy_policy_per_state():
    table = QTable(2, 2)
    table._q[:] = [[1.0, 2.0], [3.0, 1.0]]
    assert (table.greedy_policy() == np.array([1, 0])).all()


# =====================================================================
# Update rule
# =====================================================================

def test_update_applies_q_learning_rule():
    """
    Q[s][a] += α (r + γ max Q[s'] − Q[s][a]).
    """
    table = QTable(2)
    table._q[1] = [0.0, 10.0, 4.0, 0.0]
    table._q[0, 2] = 1.0

    td = table.update(0, 2, reward=-1.0, next_state=1, alpha=0.5, gamma=0.9)

    expected_td = -1.0 + 0.9 * 10.0 - 1.0
    assert td == pytest.approx(expected_td)
    assert table[0, 2] == pytest.approx(1.0 + 0.5 * expected_td)
    # Other entries untouched
    assert table[0, 0] == 0.0
    assert list(table[1]) == [0.0, 10.0, 4.0, 0.0]


def test_update_into_terminal_row_uses_reward_only():
    """
    A never-updated (terminal) row contributes zero to the target.
    """
    table = QTable(2)
    table.update(0, 0, reward=100.0, next_state=1, alpha=0.7, gamma=0.95)
    assert table[0, 0] == pytest.approx(70.0)


# =====================================================================
# Snapshots
# =====================================================================

def test_snapshot_is_independent_and_read_only():
    table = QTable(2)
    snap = table.snapshot()
    table.update(0, 0, 1.0, 1, 1.0, 0.0)

    assert snap[0, 0] == 0.0
    with pytest.raises(ValueError):
        snap[0, 0] = 1.0


def test_values_view_is_read_only():
    table = QTable(2)
    with pytest.raises(ValueError):
        table.values[0, 0] = 1.0


def test_indexing_is_read_only():
    """
    update() is the only way to change values; [] only reads.
    """
    table = QTable(2)
    with pytest.raises(ValueError):
        table[0][1] = 5.0
    with pytest.raises(ValueError):
        table[0, 1] = 5.0
    assert table.values[0, 1] == 0.0

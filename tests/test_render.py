"""
tests/test_render.py

Tests for the presentation helpers. Matplotlib runs on the non-interactive
Agg backend so nothing is shown.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from board_qlearning import BoardSettings, EpisodeOutcome, GridEnvironment, Rollout
from board_qlearning.render import board_to_text, play_rollout, plot_learning_curve, render_board


@pytest.fixture
def env():
    """
        S . .
        X . G
    """
    return GridEnvironment(BoardSettings(rows=2, cols=3, start=(0, 0), goal=(1, 2), hazards=((1, 0),)))


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


# =====================================================================
# Text board
# =====================================================================

def test_board_to_text_layout(env):
    assert board_to_text(env) == "S . .\nX . G"


def test_board_to_text_marks_visited_empty_cells(env):
    text = board_to_text(env, [0, 1, 4, 5])
    assert text == "S * .\nX * G"


# =====================================================================
# Matplotlib
# =====================================================================

def test_render_board_returns_axes_with_path(env):
    ax = render_board(env, states=(0, 1, 4, 5), title="Rollout")

    assert ax.get_title() == "Rollout"
    labels = [line.get_label() for line in ax.get_lines()]
    assert "Path" in labels
    path = next(line for line in ax.get_lines() if line.get_label() == "Path")
    assert np.allclose(path.get_xdata(), [0.5, 1.5, 1.5, 2.5])
    assert np.allclose(path.get_ydata(), [0.5, 0.5, 1.5, 1.5])


def test_render_board_without_path(env):
    _, ax = plt.subplots()
    out = render_board(env, ax=ax)
    assert out is ax
    assert not any(line.get_label() == "Path" for line in ax.get_lines())


def test_plot_learning_curve(env):
    ax = plot_learning_curve([-10.0, -5.0, 50.0, 90.0], window=2)
    lines = ax.get_lines()
    assert len(lines) == 2
    assert len(lines[0].get_ydata()) == 4


# =====================================================================
# Playback
# =====================================================================

def test_play_rollout_paces_each_step():
    rollout = Rollout(states=(0, 1, 4), outcome=EpisodeOutcome.GOAL, total_reward=99.0)
    seen, sleeps = [], []

    play_rollout(rollout, lambda n, s: seen.append((n, s)), delay=0.5, sleep=sleeps.append)

    assert seen == [(1, 1), (2, 4)]
    assert sleeps == [0.5, 0.5]


def test_play_rollout_zero_delay_does_not_sleep():
    rollout = Rollout(states=(0, 1), outcome=EpisodeOutcome.GOAL, total_reward=100.0)
    sleeps = []
    play_rollout(rollout, lambda n, s: None, delay=0.0, sleep=sleeps.append)
    assert sleeps == []

"""
render.py - Presentation helpers that consume engine output.

Nothing here feeds back into learning: every function takes a board and
plain data (state sequences, reward logs) and draws or paces it.

- render_board       : matplotlib board with classified cells and a path
- plot_learning_curve: raw and smoothed episode rewards
- board_to_text      : ASCII board for terminals
- play_rollout       : timed step-by-step playback through a callback
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap, BoundaryNorm

from .gridworld import CellClass
from .utils import rolling, states_to_path

# Cell codes for the colour map
_EMPTY, _VISITED, _HAZARD, _GOAL = 0, 1, 2, 3

_COLORS = [
    '#eef8ea',  # 0 empty
    '#fff176',  # 1 start / visited (yellow)
    '#ef9a9a',  # 2 hazards (red)
    '#66bb6a',  # 3 destination (green)
]

_TEXT_MARKS = {
    CellClass.EMPTY: ".",
    CellClass.START: "S",
    CellClass.DESTINATION: "G",
    CellClass.HAZARD: "X",
}


def _cell_codes(env, states: Iterable[int] = ()) -> np.ndarray:
    grid = np.full((env.rows, env.cols), _EMPTY)
    for s in states:
        r, c = env.to_pos(int(s))
        grid[r, c] = _VISITED
    for s, cls in enumerate(env.classifications):
        r, c = env.to_pos(s)
        if cls is CellClass.START:
            grid[r, c] = _VISITED
        elif cls is CellClass.HAZARD:
            grid[r, c] = _HAZARD
        elif cls is CellClass.DESTINATION:
            grid[r, c] = _GOAL
    return grid


def render_board(env, states: Optional[Sequence[int]] = None, ax=None,
                 title: str = "Board", show: bool = False):
    """
    Draw the board, optionally with a rollout path through cell centres.

    Parameters
    ----------
    env : GridEnvironment
    states : sequence of int or None
        Visited states, e.g. `Rollout.states`. Visited cells are painted
        yellow like the start cell.
    ax : matplotlib.axes.Axes or None
        Axes to draw into; a new figure is created if None.
    title : str
        Axes title.
    show : bool
        Call `plt.show()` after drawing.

    Returns
    -------
    matplotlib.axes.Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    grid = _cell_codes(env, states or ())
    cmap = ListedColormap(_COLORS)
    norm = BoundaryNorm([0, 1, 2, 3, 4], cmap.N)

    # extent puts cell (r, c) at [c, c+1] x [r, r+1]; invert so (0, 0) is top-left
    ax.imshow(grid, cmap=cmap, norm=norm, origin='lower',
              extent=[0, env.cols, 0, env.rows], interpolation="none")
    ax.invert_yaxis()

    ax.set_xticks(np.arange(0, env.cols + 1, 1))
    ax.set_yticks(np.arange(0, env.rows + 1, 1))
    ax.grid(True, which='major', color='k', linewidth=0.4, alpha=0.15)
    ax.set_xlim(0, env.cols)
    ax.set_ylim(env.rows, 0)
    ax.set_aspect('equal')
    ax.tick_params(axis='both', which='major',
                   labelbottom=False, labelleft=False, length=0)

    sr, sc = env.settings.start
    ax.scatter(sc + 0.5, sr + 0.5, s=180, marker='D',
               facecolors='#4fc3f7', edgecolors='black', label='Start', zorder=5)
    gr, gc = env.settings.goal
    ax.scatter(gc + 0.5, gr + 0.5, s=180, marker='*',
               facecolors='#66bb6a', edgecolors='black', label='Goal', zorder=6)

    if states is not None and len(states) > 1:
        rows, cols = zip(*states_to_path(env, states))
        xs = np.asarray(cols, dtype=float) + 0.5
        ys = np.asarray(rows, dtype=float) + 0.5
        ax.plot(xs, ys, linewidth=3.2, label='Path', zorder=4)

    ax.set_title(title)
    ax.legend(bbox_to_anchor=(1.02, 1), borderaxespad=0., loc='upper left', frameon=True)
    if show:
        plt.show()
    return ax


def plot_learning_curve(returns: Sequence[float], window: int = 100, ax=None,
                        title: str = "Learning Curve", show: bool = False):
    """
    Plot raw and smoothed episode rewards. Returns the Axes.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(7.5, 4))
    r = np.asarray(returns, dtype=float)
    ax.plot(r, alpha=0.35, label="Reward (raw)")
    ax.plot(rolling(r, window), linewidth=2.0, label=f"Reward (MA{window})")
    ax.set_xlabel("Episode")
    ax.set_ylabel("Total reward")
    ax.set_title(title)
    ax.legend()
    if show:
        plt.show()
    return ax


def board_to_text(env, states: Iterable[int] = ()) -> str:
    """
    ASCII board: S start, G goal, X hazard, . empty, * visited empty cell.
    """
    visited = set(int(s) for s in states)
    lines: List[str] = []
    for r in range(env.rows):
        row = []
        for c in range(env.cols):
            s = env.to_index((r, c))
            cls = env.classify(s)
            if cls is CellClass.EMPTY and s in visited:
                row.append("*")
            else:
                row.append(_TEXT_MARKS[cls])
        lines.append(" ".join(row))
    return "\n".join(lines)


def play_rollout(rollout, on_step: Callable[[int, int], None], delay: float = 0.5,
                 sleep: Callable[[float], None] = time.sleep) -> None:
    """
    Replay a rollout one state at a time.

    Calls `on_step(step_number, state)` for every state after the start,
    sleeping `delay` seconds after each call. Pacing only; the rollout is
    already complete when this runs.
    """
    for i, s in enumerate(rollout.states[1:], start=1):
        on_step(i, s)
        if delay > 0:
            sleep(delay)

"""
cli.py - Train an agent on a board from the command line and show its rollouts.

Usage
-----
python -m board_qlearning --rows 4 --cols 6 --goal 3,5 --hazard 1,1 --hazard 2,4
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

from .config import BoardSettings, Hyperparameters
from .errors import BoardQLearningError, ConfigurationError
from .evaluation import run_evaluation
from .exploration import ExplorationSchedule
from .gridworld import GridEnvironment
from .qtable import QTable
from .render import board_to_text, play_rollout
from .training import run_training

logger = logging.getLogger(__name__)


def parse_cell(text: str) -> Tuple[int, int]:
    """Parse 'ROW,COL' into a (row, col) tuple."""
    try:
        r, c = text.split(",")
        return int(r), int(c)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected ROW,COL, got {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    defaults = Hyperparameters()
    board = BoardSettings()

    p = argparse.ArgumentParser(
        prog="board-qlearning",
        description="Train a tabular Q-learning agent to cross a board while avoiding hazards.",
    )

    g = p.add_argument_group("board")
    g.add_argument("--rows", type=int, default=board.rows)
    g.add_argument("--cols", type=int, default=board.cols)
    g.add_argument("--start", type=parse_cell, default=board.start, metavar="R,C")
    g.add_argument("--goal", type=parse_cell, default=None, metavar="R,C",
                   help="Destination cell (default: bottom-right corner)")
    g.add_argument("--hazard", type=parse_cell, action="append", default=None, metavar="R,C",
                   help="Hazard cell; repeat for several (default: the built-in layout)")

    h = p.add_argument_group("hyperparameters")
    h.add_argument("--episodes", type=int, default=defaults.total_simulations)
    h.add_argument("--steps", type=int, default=defaults.steps_before_death,
                   help="Step budget per episode")
    h.add_argument("--alpha", type=float, default=defaults.learning_rate)
    h.add_argument("--gamma", type=float, default=defaults.discount_rate)
    h.add_argument("--epsilon", type=float, default=defaults.exploration_rate,
                   help="Initial exploration rate")
    h.add_argument("--max-epsilon", type=float, default=defaults.max_exploration_rate)
    h.add_argument("--min-epsilon", type=float, default=defaults.min_exploration_rate)
    h.add_argument("--decay", type=float, default=defaults.exploration_decay_rate)
    h.add_argument("--seed", type=int, default=None)

    o = p.add_argument_group("output")
    o.add_argument("--rollouts", type=int, default=5, help="Evaluation rollouts after training")
    o.add_argument("--log-every", type=int, default=0, help="Progress line every N episodes (with -v)")
    o.add_argument("--playback-delay", type=float, default=0.0,
                   help="Seconds between printed rollout steps (0 prints paths at once)")
    o.add_argument("--plot", action="store_true", help="Show the board and learning curve with matplotlib")
    o.add_argument("-v", "--verbose", action="store_true")
    return p


def settings_from_args(args: argparse.Namespace) -> Tuple[BoardSettings, Hyperparameters]:
    board = BoardSettings()
    goal = args.goal if args.goal is not None else (args.rows - 1, args.cols - 1)
    if args.hazard is not None:
        hazards = tuple(args.hazard)
    elif (args.rows, args.cols) == (board.rows, board.cols):
        hazards = board.hazards
    else:
        hazards = ()

    settings = BoardSettings(rows=args.rows, cols=args.cols, start=args.start,
                             goal=goal, hazards=hazards)
    if args.rollouts <= 0:
        raise ConfigurationError(f"--rollouts must be positive, got {args.rollouts}")

    hp = Hyperparameters().with_overrides(
        total_simulations=args.episodes,
        steps_before_death=args.steps,
        learning_rate=args.alpha,
        discount_rate=args.gamma,
        exploration_rate=args.epsilon,
        max_exploration_rate=args.max_epsilon,
        min_exploration_rate=args.min_epsilon,
        exploration_decay_rate=args.decay,
        seed=args.seed,
    )
    return settings.validate(), hp


def _show_plots(env, result, rollouts) -> None:
    import matplotlib.pyplot as plt

    from .render import plot_learning_curve, render_board

    plot_learning_curve(result.log.returns)
    render_board(env, rollouts[0].states, title="Rollout 1")
    plt.show()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings, hp = settings_from_args(args)
        env = GridEnvironment(settings)
        table = QTable.for_env(env)
        schedule = ExplorationSchedule.from_hyperparameters(hp)

        result = run_training(env, table, schedule, hp, log_every=args.log_every)
        rollouts = run_evaluation(env, table, schedule, hp, rollout_count=args.rollouts,
                                  exploration_rate=result.final_exploration_rate)
    except BoardQLearningError as e:
        logger.error("%s", e)
        return 2

    print(f"Mean training reward: {result.mean_reward:.3f}")
    for i, rollout in enumerate(rollouts, start=1):
        print(f"\nRollout {i}: {rollout.outcome.value} after {rollout.steps} steps "
              f"(reward {rollout.total_reward:.1f})")
        if args.playback_delay > 0:
            play_rollout(rollout, lambda n, s: print(f"  step {n}: {env.to_pos(s)}"),
                         delay=args.playback_delay)
        print(board_to_text(env, rollout.states))

    if args.plot:
        _show_plots(env, result, rollouts)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Package init - expose a clean, minimal API for end users.

Usage
-----
from board_qlearning import BoardSettings, GridEnvironment, Hyperparameters
from board_qlearning import QTable, ExplorationSchedule
from board_qlearning import run_training, run_evaluation
from board_qlearning import render    # Optional: matplotlib / text output
"""

from .config import BoardSettings, Hyperparameters
from .errors import BoardQLearningError, ConfigurationError, InvariantViolation
from .gridworld import Action, CellClass, GridEnvironment, REWARDS
from .qtable import QTable
from .exploration import ExplorationSchedule
from .training import EpisodeLog, EpisodeOutcome, TrainingResult, run_training
from .evaluation import Rollout, run_evaluation

# Expose render as a module so users can do: from board_qlearning import render
from . import render

__all__ = [
    "Action",
    "BoardQLearningError",
    "BoardSettings",
    "CellClass",
    "ConfigurationError",
    "EpisodeLog",
    "EpisodeOutcome",
    "ExplorationSchedule",
    "GridEnvironment",
    "Hyperparameters",
    "InvariantViolation",
    "QTable",
    "REWARDS",
    "Rollout",
    "TrainingResult",
    "render",
    "run_evaluation",
    "run_training",
]

__version__ = "0.1.0"

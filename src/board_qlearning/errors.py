"""
errors.py - Exception types raised by the board Q-learning engine.

All problems are detected while a run is being set up. Once training has
started the only branches are episode endings (goal, hazard, truncation),
which are normal outcomes and never raise.
"""


class BoardQLearningError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(BoardQLearningError, ValueError):
    """
    Invalid board geometry, cell placement, or hyperparameters.

    Subclasses ValueError so callers that already guard against bad
    arguments keep working.
    """


class InvariantViolation(BoardQLearningError, RuntimeError):
    """An internal structure is inconsistent (e.g. an unknown cell class)."""

"""
Exceptions for the TicTacToe core.

Illegal moves made by a player are not exceptions: the game state and the
session reject them by returning False. These exceptions mark programming
errors in the caller.
"""


class TicTacToeError(Exception):
    """Base class for all TicTacToe errors."""


class InvalidMove(TicTacToeError, ValueError):
    """A mark was placed on an occupied or out-of-range cell."""


class PreconditionViolation(TicTacToeError, RuntimeError):
    """The AI was asked to move on a full or finished board."""

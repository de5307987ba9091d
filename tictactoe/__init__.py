"""
TicTacToe Core
==============
Game state engine and AI opponent for tic-tac-toe.
Handles the board, win/draw detection, turns and undo, and an AI that
plays either randomly or perfectly. A UI drives it through GameSession.

X always moves first. In Player vs AI the AI plays O.
"""

from .board import Board, Player
from .win_checker import Outcome, OutcomeKind, WinChecker, evaluate
from .move_validator import MoveValidator, ValidationResult
from .game_state import GameState, HistoryEntry
from .ai_player import AIPlayer, Difficulty
from .session import GameSession, Mode, SessionState
from .config import GameConfig
from .errors import InvalidMove, PreconditionViolation, TicTacToeError

__version__ = "1.0.0"

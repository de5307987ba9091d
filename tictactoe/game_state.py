"""
Game state management for TicTacToe.
Tracks the board, current player, and move history.
"""

import logging
from typing import List, Optional
from dataclasses import dataclass, field

from .board import Board, Player
from .move_validator import MoveValidator
from .win_checker import Outcome, evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """
    A snapshot taken just before a move.
    """
    board: Board        # Board before the move
    player: Player      # Who made the move


@dataclass
class GameState:
    """
    The complete state of the TicTacToe game.

    Tracks:
    - The board
    - Current player
    - Move history (for undo)

    The outcome is not stored. It is worked out from the board on every read.
    """

    board: Board = field(default_factory=Board.empty)

    # Current player's turn
    current_player: Player = Player.X

    # Snapshots before each accepted move, oldest first
    history: List[HistoryEntry] = field(default_factory=list)

    validator: MoveValidator = field(
        default_factory=MoveValidator, repr=False, compare=False
    )

    @property
    def outcome(self) -> Outcome:
        """Win/draw/ongoing for the current board."""
        return evaluate(self.board)

    @property
    def is_game_over(self) -> bool:
        return self.outcome.is_over

    @property
    def winner(self) -> Optional[Player]:
        return self.outcome.winner

    @property
    def can_undo(self) -> bool:
        return len(self.history) > 0

    def get_empty_cells(self) -> List[int]:
        return self.board.empty_cells()

    def apply_move(self, index: int, player: Optional[Player] = None) -> bool:
        """
        Place the current player's mark.

        Args:
            index: Cell index (0-8).
            player: Who is asking to move. If given, it must be their turn.

        Returns:
            True if move was accepted, False if it was rejected.
            A rejected move leaves the state unchanged.
        """
        result = self.validator.validate_move(self, index, player)
        if not result.is_valid:
            logger.debug("Move %r rejected: %s", index, result.error_message)
            return False

        mover = self.current_player
        self.history.append(HistoryEntry(board=self.board, player=mover))
        self.board = self.board.place(index, mover)
        self.current_player = mover.opposite()

        logger.debug("%s played cell %d", mover.value, index)
        return True

    def undo(self) -> bool:
        """
        Take back the last move.

        Returns:
            True if a move was undone, False if there was nothing to undo.
        """
        if not self.history:
            return False

        last = self.history.pop()
        self.board = last.board
        self.current_player = last.player
        return True

    def reset(self):
        """Empty the board and give X the first move."""
        self.board = Board.empty()
        self.current_player = Player.X
        self.history = []

    def copy(self) -> "GameState":
        """Create a copy of the game state. Boards are immutable so are shared."""
        return GameState(
            board=self.board,
            current_player=self.current_player,
            history=list(self.history),
        )


# Quick test
if __name__ == "__main__":
    print("Testing GameState...")

    game = GameState()

    for index in [4, 0, 2, 6, 3, 5, 8, 7, 1]:
        print(f"\n{game.current_player.value} moves to {index}")
        game.apply_move(index)
        print(game.board)
        print(game.outcome.describe(game.current_player))

    print("\nGame state test done!")

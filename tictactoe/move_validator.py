"""
Move validator for TicTacToe.
Validates that moves follow the rules.
"""

from typing import TYPE_CHECKING, List, Optional
from dataclasses import dataclass

from .board import Player, cell_index
from .win_checker import evaluate

if TYPE_CHECKING:
    from .game_state import GameState


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Game must not be over
    2. Can only place on empty cells inside the board
    3. Players move in turn (X first)
    """

    def validate_move(
        self,
        game_state: "GameState",
        index: int,
        player: Optional[Player] = None
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            game_state: Current game state.
            index: Cell to place the mark on (0-8).
            player: Who is asking to move. If given, it must be their turn.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        # Check if game is over
        if evaluate(game_state.board).is_over:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        # Check if index is in valid range
        checked = cell_index(index)
        if checked is None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell {index!r}. Must be 0-8."
            )
        index = checked

        # Check if cell is empty
        occupant = game_state.board[index]
        if occupant is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {occupant.value}"
            )

        if player is not None and player != game_state.current_player:
            return ValidationResult(
                is_valid=False,
                error_message=f"It's not {player.value}'s turn!"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, game_state: "GameState") -> List[int]:
        """
        Get all valid moves for the current player.

        Returns:
            Empty cell indices, or an empty list once the game is over.
        """
        if evaluate(game_state.board).is_over:
            return []

        return game_state.board.empty_cells()

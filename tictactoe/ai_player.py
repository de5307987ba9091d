"""
AI player for TicTacToe.
Picks a random move, or the best move using the Minimax algorithm.
"""

import logging
from enum import Enum
from typing import Optional

import numpy as np

from .board import Board, Player
from .config import GameConfig
from .errors import PreconditionViolation
from .win_checker import OutcomeKind, WinChecker

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """AI difficulty levels."""
    RANDOM = "random"     # Random moves
    OPTIMAL = "optimal"   # Full minimax


class AIPlayer:
    """
    An AI that plays TicTacToe.

    On OPTIMAL it searches the whole remaining game tree with Minimax and
    never loses. Scores are flat (+10 win, -10 loss, 0 draw) with no bonus
    for faster wins, and ties go to the lowest cell index, so the same board
    always gets the same move.
    """

    def __init__(
        self,
        player: Player = Player.O,
        seed: Optional[int] = None,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize the AI player.

        Args:
            player: Which mark the AI plays (default: O)
            seed: Seed for the random policy (None = unpredictable)
            config: Search scores. Defaults to GameConfig().
        """
        self.player = player
        self.config = config or GameConfig()
        self.win_checker = WinChecker()
        self.rng = np.random.default_rng(seed)

        # Keep track of how many positions we've evaluated (for debugging)
        self.moves_evaluated = 0

    def choose_move(self, board: Board, difficulty: Difficulty = Difficulty.OPTIMAL) -> int:
        """
        Choose the AI's next move.

        Args:
            board: Current board. It must be the AI's turn.
            difficulty: RANDOM or OPTIMAL.

        Returns:
            The chosen cell index.

        Raises:
            PreconditionViolation: If the game is over or the board is full.
        """
        empty_cells = board.empty_cells()
        if not empty_cells:
            raise PreconditionViolation("AI asked to move on a full board")
        if self.win_checker.evaluate(board).is_over:
            raise PreconditionViolation("AI asked to move on a finished board")

        if Difficulty(difficulty) == Difficulty.RANDOM:
            move = self.get_random_move(board)
            logger.info("AI (random) plays %d", move)
            return move

        return self.get_best_move(board)

    def get_random_move(self, board: Board) -> int:
        """Pick uniformly among the empty cells."""
        return int(self.rng.choice(board.empty_cells()))

    def get_best_move(self, board: Board) -> int:
        """
        Get the best move for the current position.

        Returns:
            Index of the first move (in cell order) with the best score.
        """
        self.moves_evaluated = 0

        valid_moves = board.empty_cells()
        best_score = float('-inf')
        best_move = valid_moves[0]

        for index in valid_moves:
            new_board = board.place(index, self.player)
            score = self._minimax(
                new_board,
                to_move=self.player.opposite(),
                alpha=best_score,
                beta=float('inf')
            )

            # Strictly better only, so the lowest index wins a tie
            if score > best_score:
                best_score = score
                best_move = index

        logger.info(
            "AI evaluated %d positions. Best move: %d (score: %s)",
            self.moves_evaluated, best_move, best_score
        )
        return best_move

    def score_board(self, board: Board) -> Optional[int]:
        """
        Score a finished board from the AI's point of view.

        Returns:
            WIN_SCORE, LOSS_SCORE, DRAW_SCORE, or None if the game goes on.
        """
        outcome = self.win_checker.evaluate(board)

        if outcome.kind == OutcomeKind.WIN:
            if outcome.winner == self.player:
                return self.config.WIN_SCORE
            return self.config.LOSS_SCORE
        if outcome.kind == OutcomeKind.DRAW:
            return self.config.DRAW_SCORE
        return None

    def _minimax(
        self,
        board: Board,
        to_move: Player,
        alpha: float = float('-inf'),
        beta: float = float('inf')
    ) -> float:
        """
        Minimax algorithm with alpha-beta pruning.

        Pruning only skips branches that cannot change the result, so the
        value is the same as a full search.

        Args:
            board: Board to evaluate.
            to_move: Player whose turn it is on this board.
            alpha: Best score the AI is already assured of.
            beta: Best score the opponent is already assured of.

        Returns:
            The score of the position.
        """
        self.moves_evaluated += 1

        score = self.score_board(board)
        if score is not None:
            return score

        if to_move == self.player:
            max_score = float('-inf')
            for index in board.empty_cells():
                new_board = board.place(index, to_move)
                score = self._minimax(new_board, to_move.opposite(), alpha, beta)
                max_score = max(max_score, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # Prune
            return max_score
        else:
            min_score = float('inf')
            for index in board.empty_cells():
                new_board = board.place(index, to_move)
                score = self._minimax(new_board, to_move.opposite(), alpha, beta)
                min_score = min(min_score, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break  # Prune
            return min_score


# Quick test
if __name__ == "__main__":
    print("Testing AIPlayer...")

    ai = AIPlayer(Player.O)

    # AI should block X at 2
    board = Board.from_string("XX..O....")
    print(board)
    move = ai.choose_move(board)
    print(f"AI's move: {move}")
    assert move == 2, f"Expected 2, got {move}"

    # AI should take the win at 2
    board = Board.from_string("OO.XX...X")
    print(board)
    move = ai.choose_move(board)
    print(f"AI's move: {move}")
    assert move == 2, f"Expected 2, got {move}"

    print("\nAIPlayer test done!")

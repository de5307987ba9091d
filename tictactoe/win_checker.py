"""
Win checker for TicTacToe.
Works out whether a board is won, drawn or still being played.
"""

from enum import Enum
from typing import Optional, Set, Tuple
from dataclasses import dataclass

import numpy as np

from .board import Board, Player


class OutcomeKind(Enum):
    """State of a game as read off the board."""
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    """
    The result of evaluating a board.

    winner and line are only set for a WIN.
    """
    kind: OutcomeKind
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def ongoing(cls) -> "Outcome":
        return cls(OutcomeKind.ONGOING)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(OutcomeKind.DRAW)

    @classmethod
    def win(cls, winner: Player, line: Tuple[int, int, int]) -> "Outcome":
        return cls(OutcomeKind.WIN, winner, tuple(line))

    @property
    def is_over(self) -> bool:
        return self.kind != OutcomeKind.ONGOING

    @property
    def is_draw(self) -> bool:
        return self.kind == OutcomeKind.DRAW

    def describe(self, turn: Optional[Player] = None) -> str:
        """Short status text, e.g. 'X wins!' or 'Turn: O'."""
        if self.kind == OutcomeKind.WIN:
            return f"{self.winner.value} wins!"
        if self.kind == OutcomeKind.DRAW:
            return "It's a draw!"
        if turn is not None:
            return f"Turn: {turn.value}"
        return "In progress"


# Cell values used for the vectorised line check
_CELL_VALUES = {None: 0, Player.X: 1, Player.O: -1}


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 marks of the same player in a row
    (horizontally, vertically, or diagonally).
    Lines are checked in a fixed order and the first complete one is reported.
    """

    # All possible winning lines, as cell indices
    WINNING_LINES = np.array([
        # Rows
        (0, 1, 2),
        (3, 4, 5),
        (6, 7, 8),
        # Columns
        (0, 3, 6),
        (1, 4, 7),
        (2, 5, 8),
        # Diagonals
        (0, 4, 8),
        (2, 4, 6),
    ])

    def _line_sums(self, board: Board) -> np.ndarray:
        """Sum of cell values along each winning line (+3 = X, -3 = O)."""
        values = np.array([_CELL_VALUES[cell] for cell in board], dtype=np.int8)
        return values[self.WINNING_LINES].sum(axis=1)

    def winners(self, board: Board) -> Set[Player]:
        """
        Get every player who owns a complete line.

        Legal play never produces more than one.
        """
        sums = self._line_sums(board)
        found = set()
        if np.any(sums == 3):
            found.add(Player.X)
        if np.any(sums == -3):
            found.add(Player.O)
        return found

    def evaluate(self, board: Board) -> Outcome:
        """
        Evaluate a board.

        Args:
            board: The board to check.

        Returns:
            Outcome: WIN with the first complete line in WINNING_LINES order,
            DRAW if the board is full, otherwise ONGOING.
        """
        sums = self._line_sums(board)
        complete = np.flatnonzero(np.abs(sums) == 3)

        if complete.size > 0:
            first = int(complete[0])
            line = tuple(int(i) for i in self.WINNING_LINES[first])
            winner = Player.X if sums[first] > 0 else Player.O
            return Outcome.win(winner, line)

        if board.is_full():
            return Outcome.draw()

        return Outcome.ongoing()


_default_checker = WinChecker()


def evaluate(board: Board) -> Outcome:
    """Evaluate a board with the shared WinChecker."""
    return _default_checker.evaluate(board)


# Quick test
if __name__ == "__main__":
    print("Testing WinChecker...")

    checker = WinChecker()

    board = Board.from_string("XXXOO....")
    print(f"Row win: {checker.evaluate(board)}")

    board = Board.from_string("XOXXOOOXX")
    print(f"Draw: {checker.evaluate(board)}")

    print("\nWinChecker test done!")

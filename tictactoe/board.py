"""
Board model for TicTacToe.
A fixed 3x3 grid stored as 9 cells, indexed 0-8 row by row.
"""

import operator
from enum import Enum
from typing import Iterator, List, Optional, Tuple
from dataclasses import dataclass, field

from .errors import InvalidMove


BOARD_CELLS = 9


def cell_index(value) -> Optional[int]:
    """
    Turn a cell index into a plain int.

    Accepts anything usable as a list index (numpy integers too).

    Returns:
        The index, or None if it is not an integer in 0-8.
    """
    try:
        index = operator.index(value)
    except TypeError:
        return None
    if not 0 <= index < BOARD_CELLS:
        return None
    return index


class Player(Enum):
    """The two marks in the game."""
    X = "X"
    O = "O"

    def opposite(self) -> "Player":
        """Get the opposite player."""
        return Player.O if self == Player.X else Player.X


# Character used for an empty cell in text form
EMPTY_CHAR = "."


@dataclass(frozen=True)
class Board:
    """
    An immutable TicTacToe board.

    Each cell is None (empty), Player.X or Player.O.
    Use place() to get a new board with one more mark on it.
    """

    cells: Tuple[Optional[Player], ...] = field(
        default_factory=lambda: (None,) * BOARD_CELLS
    )

    def __post_init__(self):
        if len(self.cells) != BOARD_CELLS:
            raise ValueError(f"Board needs {BOARD_CELLS} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> "Board":
        """Create an all-empty board."""
        return cls()

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """
        Build a board from a 9 character string.

        Args:
            text: Characters 'X', 'O' or '.' (also ' ' or '_' for empty).
                  Whitespace between rows and '|' separators are ignored.

        Returns:
            The board.
        """
        chars = [c for c in text if c not in "|\n\t"]
        if len(chars) != BOARD_CELLS:
            chars = [c for c in chars if c != " "]

        cells = []
        for c in chars:
            upper = c.upper()
            if upper in ("X", "O"):
                cells.append(Player(upper))
            elif c in (EMPTY_CHAR, " ", "_"):
                cells.append(None)
            else:
                raise ValueError(f"Unknown board character: {c!r}")
        return cls(tuple(cells))

    def __getitem__(self, index: int) -> Optional[Player]:
        return self.cells[index]

    def __iter__(self) -> Iterator[Optional[Player]]:
        return iter(self.cells)

    def __len__(self) -> int:
        return BOARD_CELLS

    def empty_cells(self) -> List[int]:
        """
        Get all empty cells on the board.

        Returns:
            Cell indices in ascending order.
        """
        return [i for i, cell in enumerate(self.cells) if cell is None]

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    def count(self, mark: Player) -> int:
        """Number of cells holding the given mark."""
        return sum(1 for cell in self.cells if cell == mark)

    def place(self, index: int, mark: Player) -> "Board":
        """
        Return a new board with a mark placed.

        Args:
            index: Cell index (0-8).
            mark: The player's mark.

        Returns:
            The new board. This board is not changed.

        Raises:
            InvalidMove: If the index is out of range or already occupied.
        """
        if not isinstance(mark, Player):
            raise InvalidMove(f"Not a player mark: {mark!r}")

        checked = cell_index(index)
        if checked is None:
            raise InvalidMove(f"Invalid cell {index!r}. Must be 0-8.")
        index = checked

        if self.cells[index] is not None:
            raise InvalidMove(
                f"Cell {index} is already occupied by {self.cells[index].value}"
            )

        cells = list(self.cells)
        cells[index] = mark
        return Board(tuple(cells))

    def to_string(self) -> str:
        """Flat 9 character form, e.g. 'XO.......'."""
        return "".join(EMPTY_CHAR if c is None else c.value for c in self.cells)

    def __str__(self) -> str:
        rows = []
        for row in range(3):
            marks = [
                EMPTY_CHAR if c is None else c.value
                for c in self.cells[row * 3:row * 3 + 3]
            ]
            rows.append(" | ".join(marks))
        return "\n---------\n".join(rows)

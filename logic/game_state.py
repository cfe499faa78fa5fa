"""
Board and game value types for TicTacToe.
Boards are immutable 9-tuples; every move produces a new snapshot.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass


class Mark(Enum):
    """The two marks on the board."""
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        """Get the opposite mark."""
        return Mark.O if self == Mark.X else Mark.X


# The human always plays X and moves first
HUMAN_MARK = Mark.X
AI_MARK = Mark.O

BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE
CENTER = 4
CORNERS = (0, 2, 6, 8)
EDGES = (1, 3, 5, 7)

# A board is 9 cells, None means empty
Board = Tuple[Optional[Mark], ...]


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = "Easy"        # Random moves
    MEDIUM = "Medium"    # Win / block / position heuristic
    HARD = "Hard"        # Remote model
    TRAINED = "Trained"  # Remote model with example games

    @property
    def uses_remote(self) -> bool:
        return self in (Difficulty.HARD, Difficulty.TRAINED)

    @classmethod
    def parse(cls, text: str) -> "Difficulty":
        """Parse a difficulty from its name or display value (any case)."""
        wanted = str(text).strip().lower()
        for level in cls:
            if wanted in (level.name.lower(), level.value.lower()):
                return level
        raise ValueError(f"Unknown difficulty: {text!r}")


class OutcomeKind(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class GameOutcome:
    """
    Result of evaluating a board.

    Exactly one of in-progress, win or draw holds. For a win,
    winner and line are set; otherwise both are None.
    """
    kind: OutcomeKind
    winner: Optional[Mark] = None
    line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def in_progress(cls) -> "GameOutcome":
        return cls(OutcomeKind.IN_PROGRESS)

    @classmethod
    def win(cls, mark: Mark, line: Tuple[int, int, int]) -> "GameOutcome":
        return cls(OutcomeKind.WIN, mark, tuple(line))

    @classmethod
    def draw(cls) -> "GameOutcome":
        return cls(OutcomeKind.DRAW)

    @property
    def is_over(self) -> bool:
        return self.kind != OutcomeKind.IN_PROGRESS


def empty_board() -> Board:
    """Create a board with all cells empty."""
    return (None,) * CELL_COUNT


def place_mark(board: Board, index: int, mark: Mark) -> Board:
    """
    Return a new board with mark placed at index.

    Args:
        board: The current board (left untouched).
        index: Cell index (0-8).
        mark: Mark to place.

    Returns:
        The new board snapshot.
    """
    if board[index] is not None:
        raise ValueError(f"Cell {index} is already occupied by {board[index].value}")
    cells = list(board)
    cells[index] = mark
    return tuple(cells)


def empty_cells(board: Board) -> List[int]:
    """Get the indices of all empty cells, in ascending order."""
    return [i for i, cell in enumerate(board) if cell is None]


def is_full(board: Board) -> bool:
    return all(cell is not None for cell in board)


def index_to_cell(index: int) -> Tuple[int, int]:
    """Convert a cell index to (row, col)."""
    return divmod(index, BOARD_SIZE)


def board_from_string(text: str) -> Board:
    """
    Build a board from a 9 character string such as "XO_ X__ ___".
    Whitespace is ignored, '_' or '.' means empty.
    """
    chars = [c for c in text if not c.isspace()]
    if len(chars) != CELL_COUNT:
        raise ValueError(f"Expected {CELL_COUNT} cells, got {len(chars)}")
    cells = []
    for c in chars:
        if c in "_.":
            cells.append(None)
        else:
            cells.append(Mark(c.upper()))
    return tuple(cells)


def board_to_string(board: Board) -> str:
    """
    Render the board as a human readable grid, e.g.

        X | O |
        ---------
          | X |
        ---------
          |   | O
    """
    rows = []
    for start in range(0, CELL_COUNT, BOARD_SIZE):
        cells = board[start:start + BOARD_SIZE]
        rows.append(" | ".join(cell.value if cell else " " for cell in cells))
    return "\n---------\n".join(rows)

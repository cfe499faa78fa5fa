"""
Win checker for TicTacToe.
Checks if a mark has won or if the game is a draw.
"""

from typing import Optional, Tuple
from .game_state import Board, GameOutcome, Mark, OutcomeKind, is_full


# All possible winning lines, in the order they are checked
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
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
)


def _check_line(board: Board, line: Tuple[int, int, int]) -> Optional[Mark]:
    a, b, c = line
    if board[a] is not None and board[a] == board[b] == board[c]:
        return board[a]
    return None


def evaluate(board: Board) -> GameOutcome:
    """
    Evaluate a board.

    Lines are checked rows first, then columns, then diagonals; the first
    completed line is reported. A full board with a completed line is a
    win, not a draw.

    Args:
        board: Board snapshot.

    Returns:
        GameOutcome for the board.
    """
    for line in WINNING_LINES:
        winner = _check_line(board, line)
        if winner is not None:
            return GameOutcome.win(winner, line)

    if is_full(board):
        return GameOutcome.draw()

    return GameOutcome.in_progress()


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 of the same mark in a row
    (horizontally, vertically, or diagonally)
    """

    WINNING_LINES = WINNING_LINES

    def check_winner(self, board: Board) -> Optional[Mark]:
        """Get the winning mark, or None if no winner yet."""
        return evaluate(board).winner

    def get_winning_line(self, board: Board) -> Optional[Tuple[int, int, int]]:
        """Get the winning line if there is one."""
        return evaluate(board).line

    def check_draw(self, board: Board) -> bool:
        """A draw is a full board with no completed line."""
        return evaluate(board).kind == OutcomeKind.DRAW

    def evaluate(self, board: Board) -> GameOutcome:
        return evaluate(board)

"""
Move validator for TicTacToe.
Validates that moves follow the rules.
"""

from typing import Any, Optional, List
from dataclasses import dataclass
from .game_state import Board, CELL_COUNT, empty_cells


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


def coerce_move(value: Any) -> Optional[int]:
    """
    Turn a raw move value (e.g. parsed from JSON) into a cell index.

    Accepts ints and integral floats. Booleans, strings and everything
    else give None. The range is not checked here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Index must be a cell of the board (0-8)
    2. Can only place on empty cells
    3. Game must not be over
    """

    def validate_move(
        self,
        board: Board,
        index: Any,
        game_over: bool = False
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            index: Cell to place the mark in (0-8).
            game_over: Whether the game has already finished.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if game_over:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        move = coerce_move(index)
        if move is None or not (0 <= move < CELL_COUNT):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {index!r}. Must be 0-8."
            )

        if board[move] is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {move} is already occupied by {board[move].value}"
            )

        return ValidationResult(is_valid=True)

    def is_playable(self, board: Board, index: Any) -> bool:
        return self.validate_move(board, index).is_valid

    def get_valid_moves(self, board: Board, game_over: bool = False) -> List[int]:
        """Get all valid cell indices."""
        if game_over:
            return []
        return empty_cells(board)

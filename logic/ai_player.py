"""
Local AI players for TicTacToe.
Easy picks a random cell; Medium follows a win / block / position rule chain.
"""

import logging
import random
from typing import Optional, Sequence
from .game_state import (
    AI_MARK, CELL_COUNT, CENTER, CORNERS, EDGES,
    Board, Mark, empty_cells, place_mark,
)
from .win_checker import evaluate


logger = logging.getLogger(__name__)


def find_winning_move(board: Board, mark: Mark) -> Optional[int]:
    """
    Find a cell that completes a line for mark.

    Cells are scanned 0..8 and the first winning one is returned.

    Args:
        board: Current board.
        mark: Mark that would be placed.

    Returns:
        Cell index, or None if no single move wins.
    """
    for index in range(CELL_COUNT):
        if board[index] is not None:
            continue
        outcome = evaluate(place_mark(board, index, mark))
        if outcome.winner == mark:
            return index
    return None


class AIPlayer:
    """
    Base class for everything that picks a move for the AI.

    Players never modify the board they are given; they return the
    index of an empty cell.
    """

    def __init__(self, mark: Mark = AI_MARK):
        """
        Args:
            mark: Which mark the AI plays (default: O)
        """
        self.mark = mark

    def choose_move(self, board: Board, move_history: Sequence[int] = ()) -> int:
        raise NotImplementedError

    def _require_empty_cells(self, board: Board):
        cells = empty_cells(board)
        if not cells:
            raise ValueError("No empty cells left to play")
        return cells


class RandomAI(AIPlayer):
    """Easy: a uniformly random empty cell."""

    def __init__(self, mark: Mark = AI_MARK, rng: Optional[random.Random] = None):
        super().__init__(mark)
        self.rng = rng or random.Random()

    def choose_move(self, board: Board, move_history: Sequence[int] = ()) -> int:
        return self.rng.choice(self._require_empty_cells(board))


class HeuristicAI(AIPlayer):
    """
    Medium: a fixed priority chain.

    1. Take a winning cell
    2. Block the opponent's winning cell
    3. Take the center
    4. Take a random free corner
    5. Take a random free edge
    6. Take the lowest free cell

    This is also the fallback for the remote players, so it must always
    return an empty cell when one exists.
    """

    def __init__(self, mark: Mark = AI_MARK, rng: Optional[random.Random] = None):
        super().__init__(mark)
        self.rng = rng or random.Random()

    def choose_move(self, board: Board, move_history: Sequence[int] = ()) -> int:
        cells = self._require_empty_cells(board)

        winning = find_winning_move(board, self.mark)
        if winning is not None:
            return winning

        blocking = find_winning_move(board, self.mark.opposite())
        if blocking is not None:
            return blocking

        if board[CENTER] is None:
            return CENTER

        corners = [i for i in CORNERS if board[i] is None]
        if corners:
            return self.rng.choice(corners)

        edges = [i for i in EDGES if board[i] is None]
        if edges:
            return self.rng.choice(edges)

        # Unreachable on a 3x3 board, kept so the chain always terminates
        return cells[0]

"""
Hard / Trained AI player: asks a MoveOracle, falls back to the heuristic.
"""

import logging
import queue
import threading
from typing import Optional, Sequence

from logic.ai_player import AIPlayer, HeuristicAI
from logic.game_state import AI_MARK, Board, Mark
from logic.move_validator import MoveValidator

from .config import OracleConfig
from .move_oracle import MoveOracle, MoveSuggestion


logger = logging.getLogger(__name__)


class OracleWorker(threading.Thread):
    """Run one oracle call off the caller's thread."""

    def __init__(self, oracle: MoveOracle, board: Board, move_history: Sequence[int], outq):
        super().__init__(daemon=True)
        self.oracle = oracle
        self.board = board
        self.move_history = tuple(move_history)
        self.outq = outq

    def run(self) -> None:
        try:
            result = self.oracle.suggest_move(self.board, self.move_history)
        except Exception as e:
            result = MoveSuggestion.failed(f"oracle raised: {e}")
        self.outq.put(result)


class RemoteAIPlayer(AIPlayer):
    """
    AI player backed by a remote oracle.

    Whatever goes wrong with the oracle (error, bad JSON, an occupied or
    out-of-range cell, no answer within the timeout), the move comes from
    the fallback player instead. choose_move never raises as long as the
    board has an empty cell.
    """

    def __init__(
        self,
        oracle: MoveOracle,
        fallback: Optional[AIPlayer] = None,
        timeout: Optional[float] = None,
        mark: Mark = AI_MARK,
    ):
        super().__init__(mark)
        self.oracle = oracle
        self.fallback = fallback or HeuristicAI(mark)
        self.timeout = OracleConfig.REQUEST_TIMEOUT_S if timeout is None else timeout
        self.validator = MoveValidator()

        # "oracle" or "fallback", for diagnostics
        self.last_source: Optional[str] = None

    def _ask_oracle(self, board: Board, move_history: Sequence[int]) -> MoveSuggestion:
        outq: "queue.Queue[MoveSuggestion]" = queue.Queue(maxsize=1)
        OracleWorker(self.oracle, board, move_history, outq).start()
        try:
            return outq.get(timeout=self.timeout)
        except queue.Empty:
            return MoveSuggestion.failed(f"no answer within {self.timeout:.1f}s")

    def choose_move(self, board: Board, move_history: Sequence[int] = ()) -> int:
        self._require_empty_cells(board)

        suggestion = self._ask_oracle(board, move_history)
        if suggestion.ok and self.validator.is_playable(board, suggestion.move):
            self.last_source = "oracle"
            return suggestion.move

        reason = suggestion.failure or f"invalid move {suggestion.move!r}"
        logger.warning("Remote move rejected (%s), falling back to %s",
                       reason, type(self.fallback).__name__)
        self.last_source = "fallback"
        return self.fallback.choose_move(board, move_history)

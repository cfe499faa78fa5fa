"""
Game orchestration for TicTacToe vs. AI.

TicTacToeGame owns the board, the turn state and the scores:
- Human (X) moves first; illegal clicks are ignored
- The AI (O) answers with the player for the current difficulty
- Hard / Trained also get a short comment from the AI, off the critical path
- Scores are counted the moment a game ends
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, List, Optional, Tuple

from logic.ai_player import AIPlayer, HeuristicAI, RandomAI
from logic.game_state import (
    AI_MARK, HUMAN_MARK, Board, Difficulty, GameOutcome, OutcomeKind,
    empty_board, place_mark,
)
from logic.move_validator import MoveValidator
from logic.win_checker import evaluate
from oracle.commentary import CommentaryGenerator
from oracle.config import OracleConfig
from oracle.move_oracle import GeminiMoveOracle
from oracle.remote_player import RemoteAIPlayer
from oracle.service import GeminiService, ReasoningService
from storage.settings_store import SettingsStore


logger = logging.getLogger(__name__)

THINKING_TEXT = "Hmm, let me think..."
HUMAN_WIN_TEXT = "You got lucky..."
AI_WIN_TEXT = "Victory is mine!"
DRAW_TEXT = "A worthy opponent. It's a draw!"


class TurnState(Enum):
    HUMAN_TURN = "human_turn"
    AI_TURN = "ai_turn"
    AI_THINKING = "ai_thinking"
    FINISHED = "finished"


def create_ai_player(
    difficulty: Difficulty,
    service: Optional[ReasoningService] = None,
    config: Optional[OracleConfig] = None,
) -> AIPlayer:
    """
    Build the AI player for a difficulty.

    Args:
        difficulty: Difficulty level.
        service: Reasoning service for Hard / Trained (default: Gemini).
        config: Oracle settings.

    Returns:
        The AI player.
    """
    if difficulty == Difficulty.EASY:
        return RandomAI(AI_MARK)
    if difficulty == Difficulty.MEDIUM:
        return HeuristicAI(AI_MARK)

    config = config or OracleConfig()
    service = service or GeminiService(config)
    oracle = GeminiMoveOracle(service, difficulty, config)
    return RemoteAIPlayer(oracle, fallback=HeuristicAI(AI_MARK), timeout=config.REQUEST_TIMEOUT_S)


class TicTacToeGame:
    """
    Turn-based controller for one human against the AI.

    States:
        HUMAN_TURN -> (legal move) -> AI_TURN or FINISHED
        AI_TURN -> AI_THINKING -> (AI move) -> HUMAN_TURN or FINISHED
        FINISHED -> (reset) -> HUMAN_TURN

    Anything attempted in the wrong state is a no-op.
    """

    def __init__(
        self,
        difficulty: Optional[Difficulty] = None,
        *,
        service: Optional[ReasoningService] = None,
        config: Optional[OracleConfig] = None,
        store: Optional[SettingsStore] = None,
        ai_player_factory: Callable[..., AIPlayer] = create_ai_player,
        commentary: Optional[CommentaryGenerator] = None,
        on_change: Optional[Callable[["TicTacToeGame"], None]] = None,
        background_commentary: bool = True,
        think_delay: float = 0.0,
    ):
        """
        Args:
            difficulty: Starting difficulty (default: the stored one).
            service: Reasoning service shared by the remote player and commentary.
            config: Oracle settings.
            store: Settings / scores store (default: in memory only).
            ai_player_factory: Builds the AI player for a difficulty.
            commentary: Commentary generator for Hard / Trained.
            on_change: Called after every visible state change.
            background_commentary: Generate commentary on a daemon thread.
            think_delay: Pause before each AI move (seconds).
        """
        self.config = config or OracleConfig()
        self.store = store or SettingsStore.in_memory()
        self.service = service or GeminiService(self.config)
        self.ai_player_factory = ai_player_factory
        self.commentary_generator = commentary or CommentaryGenerator(self.service, self.config)
        self.on_change = on_change
        self.background_commentary = background_commentary
        self.think_delay = think_delay

        self.validator = MoveValidator()
        self._lock = threading.RLock()

        self.difficulty = difficulty or self.store.load_difficulty()
        self.scores = self.store.load_scores()
        self.games_played = self.store.load_games_played()
        self.ai_player = self.ai_player_factory(self.difficulty, self.service, self.config)

        # Bumped on reset and at the start of every AI turn, so late comments can be dropped
        self._epoch = 0
        self._commentary_seq = 0

        self._clear_board()

    def _clear_board(self) -> None:
        self.board: Board = empty_board()
        self.move_history: List[int] = []
        self.outcome: GameOutcome = GameOutcome.in_progress()
        self.state = TurnState.HUMAN_TURN
        self.commentary = ""
        self.last_ai_move: Optional[int] = None

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)

    # ----- Queries -----
    @property
    def is_over(self) -> bool:
        return self.state == TurnState.FINISHED

    @property
    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return self.outcome.line

    def status_text(self) -> str:
        if self.outcome.kind == OutcomeKind.WIN:
            return "You Won!" if self.outcome.winner == HUMAN_MARK else "AI Won!"
        if self.outcome.kind == OutcomeKind.DRAW:
            return "It's a Draw!"
        if self.state == TurnState.AI_THINKING:
            return "AI is Thinking..."
        return "Your Turn" if self.state == TurnState.HUMAN_TURN else "AI Turn"

    # ----- Moves -----
    def human_move(self, index: int) -> bool:
        """
        Play the human's mark.

        Args:
            index: Cell index (0-8).

        Returns:
            True if the move was applied. Illegal moves are ignored.
        """
        with self._lock:
            if self.state != TurnState.HUMAN_TURN:
                logger.debug("Ignoring human move %r in state %s", index, self.state.name)
                return False

            result = self.validator.validate_move(self.board, index)
            if not result.is_valid:
                logger.debug("Ignoring human move: %s", result.error_message)
                return False

            self._apply_move(index, HUMAN_MARK)
            if not self._check_finished():
                self.state = TurnState.AI_TURN

        self._notify()
        return True

    def play_ai_turn(self) -> Optional[int]:
        """
        Let the AI move.

        Blocks while the AI is thinking (remote calls are bounded by the
        oracle timeout).

        Returns:
            The index the AI played, or None if it was not the AI's turn.
        """
        with self._lock:
            if self.state != TurnState.AI_TURN:
                return None
            self.state = TurnState.AI_THINKING
            self.commentary = THINKING_TEXT
            # Comments still in flight for the previous move are now stale
            self._commentary_seq += 1
            seq = self._commentary_seq
            board = self.board
            history = tuple(self.move_history)
        self._notify()

        if self.think_delay > 0:
            time.sleep(self.think_delay)

        try:
            move = self.ai_player.choose_move(board, history)
        except Exception:
            logger.exception("%s failed to choose a move, using heuristic",
                             type(self.ai_player).__name__)
            move = None

        if not self.validator.is_playable(board, move):
            logger.error("%s returned unplayable move %r, using heuristic",
                         type(self.ai_player).__name__, move)
            move = HeuristicAI(AI_MARK).choose_move(board, history)

        with self._lock:
            self._apply_move(move, AI_MARK)
            self.last_ai_move = move
            new_board = self.board
            if self.difficulty.uses_remote:
                request = (new_board, move, self._epoch, seq)
            else:
                self.commentary = ""
                request = None

        if request is not None:
            self._request_commentary(*request)

        with self._lock:
            if not self._check_finished():
                self.state = TurnState.HUMAN_TURN

        self._notify()
        return move

    def start_ai_turn(self, on_done: Optional[Callable[[Optional[int]], None]] = None) -> threading.Thread:
        """Run play_ai_turn on a daemon thread."""
        def run():
            move = self.play_ai_turn()
            if on_done:
                on_done(move)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread

    def _apply_move(self, index: int, mark) -> None:
        self.board = place_mark(self.board, index, mark)
        self.move_history.append(index)
        self.outcome = evaluate(self.board)
        logger.info("%s played %d (%s)", mark.value, index, self.difficulty.value)

    def _check_finished(self) -> bool:
        """Move to FINISHED and count the result if the game is over."""
        if not self.outcome.is_over:
            return False

        self.state = TurnState.FINISHED
        self.scores.record(self.outcome)
        self.store.save_scores(self.scores)

        if self.outcome.kind == OutcomeKind.DRAW:
            self.commentary = DRAW_TEXT
        elif self.outcome.winner == HUMAN_MARK:
            self.commentary = HUMAN_WIN_TEXT
        else:
            self.commentary = AI_WIN_TEXT

        logger.info("Game over: %s", self.status_text())
        return True

    # ----- Commentary -----
    def _request_commentary(self, board: Board, move: int, epoch: int, seq: int) -> None:
        if self.background_commentary:
            threading.Thread(
                target=self._generate_commentary,
                args=(board, move, epoch, seq),
                daemon=True,
            ).start()
        else:
            self._generate_commentary(board, move, epoch, seq)

    def _generate_commentary(self, board: Board, move: int, epoch: int, seq: int) -> None:
        text = self.commentary_generator.generate(board, move)
        with self._lock:
            # Drop comments for an old game, an older move, or a finished game
            if epoch != self._epoch or seq != self._commentary_seq:
                return
            if self.state == TurnState.FINISHED:
                return
            self.commentary = text
        self._notify()

    # ----- Game control -----
    def reset(self) -> bool:
        """
        Start a new game. Ignored while the AI is thinking.

        Returns:
            True if the game was reset.
        """
        with self._lock:
            if self.state == TurnState.AI_THINKING:
                return False
            self._epoch += 1
            self._clear_board()
            self.games_played += 1
            self.store.save_games_played(self.games_played)

        logger.info("New game (%s)", self.difficulty.value)
        self._notify()
        return True

    def set_difficulty(self, difficulty: Difficulty) -> bool:
        """Change difficulty and start a new game. Ignored while the AI is thinking."""
        with self._lock:
            if self.state == TurnState.AI_THINKING:
                return False
            self.difficulty = difficulty
            self.store.save_difficulty(difficulty)
            self.ai_player = self.ai_player_factory(difficulty, self.service, self.config)
        return self.reset()

"""
Move suggestions from the remote reasoning service.

A MoveOracle turns a board and move history into a MoveSuggestion: either
a validated move or a failure reason. Oracles never raise; deciding what
to do on failure is up to the caller (see remote_player.py).
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Sequence

from logic.game_state import AI_MARK, HUMAN_MARK, Board, Difficulty, board_to_string
from logic.move_validator import MoveValidator, coerce_move

from .config import OracleConfig
from .service import ReasoningService
from .training_data import TrainingExample, find_relevant_examples, format_example


logger = logging.getLogger(__name__)

NO_EXAMPLES_TEXT = "No direct examples, rely on your core strategy."


@dataclass(frozen=True)
class MoveSuggestion:
    """Either a move or the reason there is none."""
    move: Optional[int] = None
    failure: Optional[str] = None
    reasoning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.move is not None and self.failure is None

    @classmethod
    def success(cls, move: int, reasoning: Optional[str] = None) -> "MoveSuggestion":
        return cls(move=move, reasoning=reasoning)

    @classmethod
    def failed(cls, reason: str) -> "MoveSuggestion":
        return cls(failure=reason)


class MoveOracle(Protocol):
    def suggest_move(self, board: Board, move_history: Sequence[int]) -> MoveSuggestion:
        ...


def _history_text(move_history: Sequence[int]) -> str:
    return ", ".join(str(m) for m in move_history) or "none"


def build_hard_prompt(board: Board, move_history: Sequence[int]) -> str:
    return (
        f"You are an unbeatable Tic-Tac-Toe AI expert playing as '{AI_MARK.value}' "
        f"against a human '{HUMAN_MARK.value}'.\n"
        "Your goal is to win if possible, otherwise, force a draw. You must never lose.\n"
        "The current board state is (0-8 indices, row by row):\n"
        f"{board_to_string(board)}\n\n"
        f"The move history (indices played) is: {_history_text(move_history)}.\n"
        "It's your turn. Analyze the board and determine the absolute best move.\n"
        "Return your move as a JSON object with the cell index."
    )


def build_trained_prompt(
    board: Board,
    move_history: Sequence[int],
    examples: Sequence[TrainingExample],
) -> str:
    example_text = "\n".join(format_example(e) for e in examples) or NO_EXAMPLES_TEXT
    return (
        f"You are a world-class Tic-Tac-Toe AI ('{AI_MARK.value}') playing a human "
        f"('{HUMAN_MARK.value}'). You have been trained on thousands of games.\n"
        "Your goal is to make the optimal move to secure a win or force a draw.\n\n"
        "Current board state (0-8 indices, row by row):\n"
        f"{board_to_string(board)}\n\n"
        f"Move history: {_history_text(move_history)}.\n\n"
        "Based on your training, here are some relevant winning patterns from similar game states:\n"
        f"{example_text}\n\n"
        "Analyze the current board, consider the winning patterns, and determine the single "
        "best move to make next.\n"
        "The move must be on an empty cell.\n\n"
        "Return your move as a JSON object."
    )


def move_schema(with_reasoning: bool) -> Dict[str, Any]:
    """JSON schema for the response: an integer move, optionally a reasoning string."""
    properties: Dict[str, Any] = {
        "move": {
            "type": "INTEGER",
            "description": "The index of the cell to play (0-8).",
        },
    }
    if with_reasoning:
        properties["reasoning"] = {
            "type": "STRING",
            "description": "A brief explanation for the chosen move.",
        }
    return {"type": "OBJECT", "properties": properties, "required": ["move"]}


def parse_move_response(text: str, board: Board) -> MoveSuggestion:
    """
    Parse and validate a JSON move response.

    Args:
        text: Raw response text.
        board: Board the move is meant for.

    Returns:
        MoveSuggestion with the move, or a failure reason.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        return MoveSuggestion.failed(f"malformed JSON: {e}")

    if not isinstance(data, dict) or "move" not in data:
        return MoveSuggestion.failed(f"no move in response: {text!r}")

    move = coerce_move(data["move"])
    if move is None:
        return MoveSuggestion.failed(f"move is not an integer: {data['move']!r}")

    result = MoveValidator().validate_move(board, move)
    if not result.is_valid:
        return MoveSuggestion.failed(result.error_message)

    reasoning = data.get("reasoning")
    return MoveSuggestion.success(move, reasoning if isinstance(reasoning, str) else None)


class GeminiMoveOracle:
    """
    Asks the reasoning service for a move.

    Hard sends the board and history. Trained also sends up to three
    recorded games that start the same way as the current one.
    """

    def __init__(
        self,
        service: ReasoningService,
        difficulty: Difficulty = Difficulty.HARD,
        config: Optional[OracleConfig] = None,
        corpus: Optional[Sequence[TrainingExample]] = None,
    ):
        if not difficulty.uses_remote:
            raise ValueError(f"{difficulty.value} does not use the remote service")
        self.service = service
        self.difficulty = difficulty
        self.config = config or OracleConfig()
        self.corpus = corpus

    def build_request(self, board: Board, move_history: Sequence[int]) -> Dict[str, Any]:
        """Build the prompt and generation settings for the current tier."""
        if self.difficulty == Difficulty.TRAINED:
            examples = find_relevant_examples(
                move_history, self.corpus, limit=self.config.MAX_TRAINING_EXAMPLES
            )
            return {
                "prompt": build_trained_prompt(board, move_history, examples),
                "model": self.config.TRAINED_MODEL,
                "temperature": self.config.TRAINED_TEMPERATURE,
                "response_schema": move_schema(with_reasoning=False),
            }
        return {
            "prompt": build_hard_prompt(board, move_history),
            "model": self.config.HARD_MODEL,
            "temperature": self.config.HARD_TEMPERATURE,
            "response_schema": move_schema(with_reasoning=True),
        }

    def suggest_move(self, board: Board, move_history: Sequence[int]) -> MoveSuggestion:
        try:
            request = self.build_request(board, move_history)
            prompt = request.pop("prompt")
            text = self.service.generate(prompt, **request)
        except Exception as e:
            logger.error("Error fetching move from reasoning service (%s): %s",
                         self.difficulty.value, e)
            return MoveSuggestion.failed(f"service error: {e}")

        suggestion = parse_move_response(text, board)
        if not suggestion.ok:
            logger.warning("Reasoning service (%s) gave an unusable move: %s",
                           self.difficulty.value, suggestion.failure)
        elif suggestion.reasoning:
            logger.debug("Move %d: %s", suggestion.move, suggestion.reasoning)
        return suggestion

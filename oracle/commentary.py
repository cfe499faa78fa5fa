"""
Short trash talk from the AI after its move. Cosmetic only.
"""

import logging
from typing import Optional

from logic.game_state import AI_MARK, HUMAN_MARK, Board, board_to_string

from .config import OracleConfig
from .service import ReasoningService


logger = logging.getLogger(__name__)

QUOTE_CHARS = "\"'“”‘’`"


def clean_commentary(text: str) -> str:
    """Strip whitespace and wrapping quote characters."""
    return text.strip().strip(QUOTE_CHARS).strip()


class CommentaryGenerator:
    """
    Generates a short comment (about 10 words) on the AI's latest move.
    Any failure gives the placeholder text instead of an error.
    """

    def __init__(self, service: ReasoningService, config: Optional[OracleConfig] = None):
        self.service = service
        self.config = config or OracleConfig()

    def build_prompt(self, board: Board, ai_move: int) -> str:
        return (
            "You are a witty and slightly taunting AI opponent in a game of Tic-Tac-Toe.\n"
            "The board is:\n"
            f"{board_to_string(board)}\n"
            f"I (AI, '{AI_MARK.value}') just played at index {ai_move}. "
            f"The human is '{HUMAN_MARK.value}'.\n"
            "Provide a short, fun, cheeky comment (max 10 words) about the game state "
            "from my perspective.\n"
            'Examples: "Nice try, human!", "My victory is inevitable.", '
            '"Are you even trying?", "A clever move... for a human."'
        )

    def generate(self, board: Board, ai_move: int) -> str:
        try:
            text = self.service.generate(
                self.build_prompt(board, ai_move),
                model=self.config.COMMENTARY_MODEL,
                temperature=self.config.COMMENTARY_TEMPERATURE,
                max_output_tokens=self.config.COMMENTARY_MAX_TOKENS,
            )
            comment = clean_commentary(text or "")
        except Exception as e:
            logger.error("Error fetching commentary: %s", e)
            return self.config.COMMENTARY_PLACEHOLDER

        return comment or self.config.COMMENTARY_PLACEHOLDER

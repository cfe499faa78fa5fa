"""
Configuration for the remote reasoning service.
Models, sampling settings and timeouts for the Hard / Trained opponents.

Setup:
    pip install google-genai
    export GEMINI_API_KEY=...
"""

import os
from typing import Optional


class OracleConfig:
    """
    Configuration class for the remote AI.
    Change these values to try other models or settings!
    """

    # ==================== API KEY ====================
    # Checked in order; the first one that is set wins
    API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

    # ==================== MOVE SELECTION ====================
    # Hard: fast model, asked for a move plus a short reasoning
    HARD_MODEL = "gemini-2.5-flash"
    HARD_TEMPERATURE = 0.1

    # Trained: stronger model, prompted with recorded example games
    TRAINED_MODEL = "gemini-2.5-pro"
    TRAINED_TEMPERATURE = 0.0
    MAX_TRAINING_EXAMPLES = 3

    # ==================== COMMENTARY ====================
    COMMENTARY_MODEL = "gemini-2.5-flash"
    COMMENTARY_TEMPERATURE = 0.9   # More varied phrasing
    COMMENTARY_MAX_TOKENS = 20
    COMMENTARY_PLACEHOLDER = "Thinking..."

    # ==================== TIMING ====================
    # Upper bound for one remote call before falling back (seconds)
    REQUEST_TIMEOUT_S = 8.0

    # Cosmetic pause before the AI moves in the interactive front-ends
    THINKING_DELAY_S = 0.75

    def get_api_key(self) -> Optional[str]:
        """Get the API key from the environment, or None if not set."""
        for name in self.API_KEY_ENV_VARS:
            value = os.environ.get(name)
            if value:
                return value
        return None

"""
Persistence configuration for TicTacToe.
Where settings and scores are kept, and their default values.
"""

import os
from pathlib import Path

from logic.game_state import Difficulty


class StorageConfig:
    """
    Configuration class for the settings file.
    """

    # ==================== FILE LOCATION ====================
    SETTINGS_PATH_ENV_VAR = "TICTACTOE_SETTINGS_PATH"
    DEFAULT_SETTINGS_PATH = Path.home() / ".tictactoe_ai" / "settings.json"

    # ==================== KEYS ====================
    DIFFICULTY_KEY = "tictactoe-difficulty"
    SCORES_KEY = "tictactoe-scores"
    GAMES_PLAYED_KEY = "tictactoe-games-played"
    DARK_MODE_KEY = "tictactoe-dark-mode"

    # ==================== DEFAULTS ====================
    DEFAULT_DIFFICULTY = Difficulty.MEDIUM
    DEFAULT_DARK_MODE = False

    def settings_path(self) -> Path:
        """Get the settings file path (environment override first)."""
        override = os.environ.get(self.SETTINGS_PATH_ENV_VAR)
        if override:
            return Path(override).expanduser()
        return self.DEFAULT_SETTINGS_PATH

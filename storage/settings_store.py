"""
Durable key-value store for settings and scores.

Everything lives in one small JSON file that is read once at start-up and
rewritten on every change. A missing or broken file never stops the game:
reads fall back to defaults and failed writes keep the value in memory.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from logic.game_state import Difficulty, GameOutcome, HUMAN_MARK, OutcomeKind

from .config import StorageConfig


logger = logging.getLogger(__name__)


@dataclass
class Scores:
    """Cumulative results across games."""
    player_wins: int = 0
    ai_wins: int = 0
    draws: int = 0

    def record(self, outcome: GameOutcome) -> None:
        """Count a finished game. In-progress outcomes are ignored."""
        if outcome.kind == OutcomeKind.WIN:
            if outcome.winner == HUMAN_MARK:
                self.player_wins += 1
            else:
                self.ai_wins += 1
        elif outcome.kind == OutcomeKind.DRAW:
            self.draws += 1

    def to_dict(self) -> Dict[str, int]:
        return {"player": self.player_wins, "ai": self.ai_wins, "draws": self.draws}

    @classmethod
    def from_dict(cls, data: Any) -> "Scores":
        """Build scores from stored data; anything unusable counts as 0."""
        if not isinstance(data, dict):
            return cls()

        def count(key: str) -> int:
            value = data.get(key, 0)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                return 0
            return value

        return cls(player_wins=count("player"), ai_wins=count("ai"), draws=count("draws"))


class SettingsStore:
    """
    JSON-file key-value store.

    Args:
        path: File to use. None uses the configured default location.
        persist: If False, nothing is read from or written to disk.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        config: Optional[StorageConfig] = None,
        persist: bool = True,
    ):
        self.config = config or StorageConfig()
        self.path = Path(path) if path is not None else self.config.settings_path()
        self.persist = persist
        self._data: Dict[str, Any] = self._read() if persist else {}

    @classmethod
    def in_memory(cls) -> "SettingsStore":
        return cls(path=Path("settings.json"), persist=False)

    # ----- Raw access -----
    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("No settings file at %s, using defaults", self.path)
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings from %s, using defaults: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object, using defaults", self.path)
            return {}
        return data

    def _write(self) -> None:
        if not self.persist:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self.path, e)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._write()

    # ----- Typed accessors -----
    def load_difficulty(self) -> Difficulty:
        value = self.get(self.config.DIFFICULTY_KEY)
        if value is None:
            return self.config.DEFAULT_DIFFICULTY
        try:
            return Difficulty.parse(value)
        except ValueError:
            logger.warning("Ignoring stored difficulty %r", value)
            return self.config.DEFAULT_DIFFICULTY

    def save_difficulty(self, difficulty: Difficulty) -> None:
        self.set(self.config.DIFFICULTY_KEY, difficulty.value)

    def load_scores(self) -> Scores:
        return Scores.from_dict(self.get(self.config.SCORES_KEY))

    def save_scores(self, scores: Scores) -> None:
        self.set(self.config.SCORES_KEY, scores.to_dict())

    def load_games_played(self) -> int:
        value = self.get(self.config.GAMES_PLAYED_KEY, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return 0
        return value

    def save_games_played(self, count: int) -> None:
        self.set(self.config.GAMES_PLAYED_KEY, count)

    def load_dark_mode(self) -> bool:
        value = self.get(self.config.DARK_MODE_KEY, self.config.DEFAULT_DARK_MODE)
        return value if isinstance(value, bool) else self.config.DEFAULT_DARK_MODE

    def save_dark_mode(self, enabled: bool) -> None:
        self.set(self.config.DARK_MODE_KEY, bool(enabled))

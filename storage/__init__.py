"""
Storage module for TicTacToe.
Keeps difficulty, theme and scores between runs.
"""

from .config import StorageConfig
from .settings_store import SettingsStore, Scores

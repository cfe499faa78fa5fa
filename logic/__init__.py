"""
Logic module for TicTacToe.
Handles board state, rules, and the local AI opponents.
"""

from .game_state import (
    Mark, Difficulty, GameOutcome, OutcomeKind, Board,
    HUMAN_MARK, AI_MARK,
)
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker, WINNING_LINES, evaluate
from .ai_player import AIPlayer, RandomAI, HeuristicAI, find_winning_move

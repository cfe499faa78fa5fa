"""
Oracle module for TicTacToe.
Talks to the remote reasoning service for moves and commentary.
"""

from .config import OracleConfig
from .service import ReasoningService, GeminiService, ServiceError
from .training_data import TrainingExample, load_training_corpus, find_relevant_examples
from .move_oracle import MoveOracle, MoveSuggestion, GeminiMoveOracle
from .remote_player import RemoteAIPlayer
from .commentary import CommentaryGenerator

"""
Recorded example games for the Trained opponent.

The corpus is a small static JSON asset, loaded once and kept as an
immutable tuple. Examples are picked by exact prefix match against the
current move history.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence, Tuple

from logic.game_state import CELL_COUNT, Mark


logger = logging.getLogger(__name__)

DEFAULT_CORPUS_PATH = Path(__file__).parent / "data" / "training_games.json"


@dataclass(frozen=True)
class TrainingExample:
    """One complete recorded game."""
    winner: Mark
    moves: Tuple[int, ...]

    def matches(self, move_history: Sequence[int]) -> bool:
        """True if move_history is an exact positional prefix of this game."""
        history = tuple(move_history)
        if len(history) > len(self.moves):
            return False
        return self.moves[:len(history)] == history


def _parse_record(position: int, record) -> TrainingExample:
    if not isinstance(record, dict):
        raise ValueError(f"Training game #{position} is not an object")
    try:
        winner = Mark(record["winner"])
    except (KeyError, ValueError):
        raise ValueError(f"Training game #{position} has no valid winner") from None

    moves = record.get("moves")
    if not isinstance(moves, list) or not moves:
        raise ValueError(f"Training game #{position} has no moves")
    for move in moves:
        if isinstance(move, bool) or not isinstance(move, int) or not 0 <= move < CELL_COUNT:
            raise ValueError(f"Training game #{position} has invalid move {move!r}")
    if len(set(moves)) != len(moves):
        raise ValueError(f"Training game #{position} repeats a cell")

    return TrainingExample(winner=winner, moves=tuple(moves))


@lru_cache(maxsize=None)
def load_training_corpus(path: Optional[Path] = None) -> Tuple[TrainingExample, ...]:
    """
    Load the training corpus.

    Args:
        path: JSON file to read (default: the bundled corpus).

    Returns:
        Tuple of TrainingExample, in file order.

    Raises:
        ValueError: If a record is malformed.
    """
    path = Path(path) if path is not None else DEFAULT_CORPUS_PATH
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    games = data.get("games", []) if isinstance(data, dict) else data
    corpus = tuple(_parse_record(i, record) for i, record in enumerate(games))
    logger.info("Loaded %d training games from %s (version %s)",
                len(corpus), path.name, data.get("version") if isinstance(data, dict) else "-")
    return corpus


def find_relevant_examples(
    move_history: Sequence[int],
    corpus: Optional[Sequence[TrainingExample]] = None,
    limit: int = 3,
) -> Tuple[TrainingExample, ...]:
    """
    Find recorded games that start with the current move history.

    Args:
        move_history: Moves played so far.
        corpus: Games to search (default: the bundled corpus).
        limit: Maximum number of games to return.

    Returns:
        Up to `limit` matching games in corpus order. Empty if none match.
    """
    if corpus is None:
        corpus = load_training_corpus()

    matches = []
    for example in corpus:
        if len(matches) >= limit:
            break
        if example.matches(move_history):
            matches.append(example)
    return tuple(matches)


def format_example(example: TrainingExample) -> str:
    moves = " -> ".join(str(m) for m in example.moves)
    return f"Example of a winning sequence: {moves} resulted in a win for '{example.winner.value}'."

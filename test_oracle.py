"""
Tests for the remote AI: training examples, move oracle, remote player
and commentary. The reasoning service is replaced by fakes; nothing here
touches the network.

Usage:
    pytest test_oracle.py
"""

import json
import random
import threading

import pytest

from logic.ai_player import HeuristicAI
from logic.game_state import Difficulty, Mark, board_from_string, empty_board
from oracle.commentary import CommentaryGenerator, clean_commentary
from oracle.config import OracleConfig
from oracle.move_oracle import (
    NO_EXAMPLES_TEXT, GeminiMoveOracle, MoveSuggestion, move_schema, parse_move_response,
)
from oracle.remote_player import RemoteAIPlayer
from oracle.service import GeminiService, ServiceError
from oracle.training_data import (
    TrainingExample, find_relevant_examples, format_example, load_training_corpus,
)


X, O = Mark.X, Mark.O


class FakeService:
    """Reasoning service returning canned replies and recording requests."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, prompt, *, model, temperature, response_schema=None, max_output_tokens=None):
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "temperature": temperature,
            "response_schema": response_schema,
            "max_output_tokens": max_output_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply


class FixedOracle:
    def __init__(self, suggestion):
        self.suggestion = suggestion

    def suggest_move(self, board, move_history):
        return self.suggestion


class RaisingOracle:
    def suggest_move(self, board, move_history):
        raise RuntimeError("boom")


class SlowOracle:
    def __init__(self):
        self.release = threading.Event()

    def suggest_move(self, board, move_history):
        self.release.wait(5)
        return MoveSuggestion.success(0)


# ==================== TRAINING DATA ====================

def test_bundled_corpus_loads():
    corpus = load_training_corpus()
    assert len(corpus) == 20
    assert corpus[0] == TrainingExample(winner=O, moves=(0, 4, 1, 2, 3, 6))
    assert all(isinstance(e.moves, tuple) for e in corpus)


def test_retriever_prefix_match_limited_to_three():
    corpus = load_training_corpus()
    examples = find_relevant_examples([4, 0], corpus)

    assert 0 < len(examples) <= 3
    for example in examples:
        assert example.moves[:2] == (4, 0)
    assert examples == tuple(e for e in corpus if e.moves[:2] == (4, 0))[:3]


def test_retriever_keeps_corpus_order_and_limit():
    corpus = (
        TrainingExample(O, (4, 0, 1)),
        TrainingExample(X, (4, 1, 0)),
        TrainingExample(X, (4, 0, 2)),
        TrainingExample(O, (4, 0, 6)),
        TrainingExample(O, (4, 0, 8)),
    )
    examples = find_relevant_examples([4, 0], corpus)
    assert examples == (corpus[0], corpus[2], corpus[3])


def test_retriever_empty_history_and_no_match():
    corpus = (
        TrainingExample(O, (4, 0, 1)),
        TrainingExample(X, (2,)),
    )
    assert find_relevant_examples([], corpus) == corpus
    assert find_relevant_examples([5], corpus) == ()
    # A recorded game shorter than the history never matches
    assert find_relevant_examples([2, 4], corpus) == ()


def test_format_example():
    text = format_example(TrainingExample(O, (0, 4, 1)))
    assert text == "Example of a winning sequence: 0 -> 4 -> 1 resulted in a win for 'O'."


def test_corpus_rejects_bad_record(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(json.dumps({"version": 1, "games": [{"winner": "Z", "moves": [1]}]}))
    with pytest.raises(ValueError):
        load_training_corpus(path)

    path = tmp_path / "games2.json"
    path.write_text(json.dumps({"version": 1, "games": [{"winner": "X", "moves": [1, 9]}]}))
    with pytest.raises(ValueError):
        load_training_corpus(path)


# ==================== RESPONSE PARSING ====================

def test_parse_valid_response():
    suggestion = parse_move_response('{"move": 4, "reasoning": "center"}', empty_board())
    assert suggestion.ok
    assert suggestion.move == 4
    assert suggestion.reasoning == "center"


@pytest.mark.parametrize("text", [
    "not json",
    "[4]",
    '{"reasoning": "no move"}',
    '{"move": "4"}',
    '{"move": 4.5}',
    '{"move": 9}',
    '{"move": -1}',
    '{"move": 0}',  # occupied below
])
def test_parse_rejects_bad_response(text):
    board = board_from_string("X__ ___ ___")
    suggestion = parse_move_response(text, board)
    assert not suggestion.ok
    assert suggestion.failure


def test_schema_shapes():
    hard = move_schema(with_reasoning=True)
    trained = move_schema(with_reasoning=False)

    assert hard["required"] == ["move"]
    assert hard["properties"]["move"]["type"] == "INTEGER"
    assert "reasoning" in hard["properties"]
    assert "reasoning" not in trained["properties"]


# ==================== MOVE ORACLE ====================

def test_hard_oracle_request():
    service = FakeService('{"move": 2, "reasoning": "block"}')
    oracle = GeminiMoveOracle(service, Difficulty.HARD)
    board = board_from_string("XX_ _O_ ___")

    suggestion = oracle.suggest_move(board, [0, 4, 1])

    assert suggestion == MoveSuggestion.success(2, "block")
    call = service.calls[0]
    assert call["model"] == OracleConfig.HARD_MODEL
    assert call["temperature"] == OracleConfig.HARD_TEMPERATURE
    assert "reasoning" in call["response_schema"]["properties"]
    assert "X | X |  " in call["prompt"]
    assert "0, 4, 1" in call["prompt"]


def test_trained_oracle_includes_examples():
    corpus = (
        TrainingExample(O, (4, 0, 1, 2)),
        TrainingExample(X, (0, 4)),
    )
    service = FakeService('{"move": 8}')
    oracle = GeminiMoveOracle(service, Difficulty.TRAINED, corpus=corpus)
    board = board_from_string("O__ _X_ ___")

    assert oracle.suggest_move(board, [4, 0]).move == 8

    call = service.calls[0]
    assert call["model"] == OracleConfig.TRAINED_MODEL
    assert call["temperature"] == OracleConfig.TRAINED_TEMPERATURE
    assert "reasoning" not in call["response_schema"]["properties"]
    assert "4 -> 0 -> 1 -> 2" in call["prompt"]
    assert "0 -> 4" not in call["prompt"]


def test_trained_oracle_without_examples():
    service = FakeService('{"move": 8}')
    oracle = GeminiMoveOracle(service, Difficulty.TRAINED, corpus=())
    oracle.suggest_move(board_from_string("___ _X_ ___"), [4])
    assert NO_EXAMPLES_TEXT in service.calls[0]["prompt"]


def test_oracle_turns_errors_into_failures():
    oracle = GeminiMoveOracle(FakeService(error=ServiceError("API key not set")), Difficulty.HARD)
    suggestion = oracle.suggest_move(empty_board(), [])
    assert not suggestion.ok
    assert "API key not set" in suggestion.failure


def test_oracle_rejects_local_difficulty():
    with pytest.raises(ValueError):
        GeminiMoveOracle(FakeService(), Difficulty.MEDIUM)


def test_gemini_service_without_key_raises(monkeypatch):
    for name in OracleConfig.API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    service = GeminiService(OracleConfig())
    with pytest.raises(ServiceError):
        service.generate("hi", model="m", temperature=0.0)


def test_api_key_lookup_order(monkeypatch):
    monkeypatch.setenv("API_KEY", "second")
    monkeypatch.setenv("GEMINI_API_KEY", "first")
    assert OracleConfig().get_api_key() == "first"
    monkeypatch.delenv("GEMINI_API_KEY")
    assert OracleConfig().get_api_key() == "second"


# ==================== REMOTE PLAYER ====================

def _fallback_pair(seed=11):
    """Two heuristic players that make identical random choices."""
    return HeuristicAI(O, rng=random.Random(seed)), HeuristicAI(O, rng=random.Random(seed))


def test_remote_player_uses_valid_oracle_move():
    player = RemoteAIPlayer(FixedOracle(MoveSuggestion.success(8)), timeout=2)
    assert player.choose_move(board_from_string("X__ _O_ ___"), [0, 4]) == 8
    assert player.last_source == "oracle"


@pytest.mark.parametrize("suggestion", [
    MoveSuggestion.success(9),
    MoveSuggestion.success(-3),
    MoveSuggestion.success(0),  # occupied
    MoveSuggestion.failed("malformed JSON"),
])
def test_remote_player_falls_back_like_heuristic(suggestion):
    board = board_from_string("X__ _O_ ___")
    fallback, reference = _fallback_pair()
    player = RemoteAIPlayer(FixedOracle(suggestion), fallback=fallback, timeout=2)

    for _ in range(5):
        assert player.choose_move(board, [0, 4]) == reference.choose_move(board, [0, 4])
        assert player.last_source == "fallback"


def test_remote_player_falls_back_on_exception():
    board = board_from_string("XX_ _O_ ___")
    player = RemoteAIPlayer(RaisingOracle(), timeout=2)
    assert player.choose_move(board, [0, 4, 1]) == 2


def test_remote_player_falls_back_on_timeout():
    oracle = SlowOracle()
    board = board_from_string("OO_ XX_ ___")
    player = RemoteAIPlayer(oracle, timeout=0.05)
    try:
        assert player.choose_move(board, [3, 0, 4, 1]) == 2
        assert player.last_source == "fallback"
    finally:
        oracle.release.set()


def test_remote_player_with_failing_service_end_to_end():
    oracle = GeminiMoveOracle(FakeService(error=ConnectionError("offline")), Difficulty.TRAINED)
    player = RemoteAIPlayer(oracle, timeout=2)
    board = board_from_string("X__ ___ ___")
    assert player.choose_move(board, [0]) == 4


# ==================== COMMENTARY ====================

def test_clean_commentary():
    assert clean_commentary('  "Nice try, human!"\n') == "Nice try, human!"
    assert clean_commentary("“My victory is inevitable.”") == "My victory is inevitable."
    assert clean_commentary("Don't worry") == "Don't worry"


def test_commentary_request():
    service = FakeService('"Are you even trying?"')
    generator = CommentaryGenerator(service)
    board = board_from_string("X__ _O_ ___")

    assert generator.generate(board, 4) == "Are you even trying?"
    call = service.calls[0]
    assert call["model"] == OracleConfig.COMMENTARY_MODEL
    assert call["temperature"] == OracleConfig.COMMENTARY_TEMPERATURE
    assert call["max_output_tokens"] == OracleConfig.COMMENTARY_MAX_TOKENS
    assert call["response_schema"] is None
    assert "index 4" in call["prompt"]


def test_commentary_placeholder_on_failure():
    generator = CommentaryGenerator(FakeService(error=ServiceError("no key")))
    assert generator.generate(empty_board(), 4) == "Thinking..."

    generator = CommentaryGenerator(FakeService('""'))
    assert generator.generate(empty_board(), 4) == "Thinking..."

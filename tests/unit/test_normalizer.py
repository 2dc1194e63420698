"""
Unit tests for model output normalization.
"""

import pytest

from app.core.errors import EmptyModelOutput, UpstreamFailure
from app.modules.study.models.flashcards import Difficulty, Flashcard
from app.modules.study.normalizer import (
    extract_array_block,
    normalize_flashcards,
    parse_json_array,
    require_text,
)


class TestRequireText:
    @pytest.mark.parametrize("raw", [None, "", "   \n"])
    def test_blank_output_is_error(self, raw):
        with pytest.raises(EmptyModelOutput) as exc_info:
            require_text(raw, "Failed to summarize text")

        assert isinstance(exc_info.value, UpstreamFailure)
        assert exc_info.value.message == "Failed to summarize text"

    def test_text_is_passed_through_stripped(self):
        assert require_text("  key points\n", "x") == "key points"


class TestParsing:
    def test_direct_array(self):
        assert parse_json_array('[{"question": "Q"}]') == [{"question": "Q"}]

    @pytest.mark.parametrize("raw", ['{"question": "Q"}', "42", "not json", "", None])
    def test_direct_rejects_non_arrays(self, raw):
        assert parse_json_array(raw) is None

    def test_extract_after_commentary(self):
        raw = 'Some commentary\n[{"question":"Q","answer":"A","difficulty":"easy"}]'

        assert parse_json_array(raw) is None
        items = extract_array_block(raw)
        cards = normalize_flashcards(items)

        assert len(cards) == 1
        assert cards[0].question == "Q"
        assert cards[0].answer == "A"
        assert cards[0].difficulty is Difficulty.EASY

    def test_extract_from_code_fence(self):
        raw = 'Here you go:\n```json\n[{"question": "Q", "answer": "A"}]\n```'

        assert extract_array_block(raw) == [{"question": "Q", "answer": "A"}]

    def test_deeply_nested_output_is_not_an_array(self):
        nested = "[" * 5000 + "]" * 5000

        assert parse_json_array(nested) is None
        assert extract_array_block("Cards:\n" + nested) is None

    def test_extract_fails_without_valid_block(self):
        assert extract_array_block("no brackets here") is None
        assert extract_array_block('[{"question": "Q",] trailing [') is None


class TestNormalize:
    def test_difficulty_defaults_to_medium(self):
        cards = normalize_flashcards(
            [
                {"question": "a", "answer": "b"},
                {"question": "a", "answer": "b", "difficulty": "impossible"},
                {"question": "a", "answer": "b", "difficulty": 3},
                {"question": "a", "answer": "b", "difficulty": "HARD"},
            ]
        )

        assert [c.difficulty for c in cards] == [
            Difficulty.MEDIUM,
            Difficulty.MEDIUM,
            Difficulty.MEDIUM,
            Difficulty.HARD,
        ]

    def test_fields_trimmed_and_coerced(self):
        cards = normalize_flashcards(
            [{"question": "  What?  ", "answer": 12, "difficulty": " Easy "}, "junk", None]
        )

        assert cards[0].question == "What?"
        assert cards[0].answer == ""
        assert cards[0].difficulty is Difficulty.EASY
        assert cards[1].question == "" and cards[1].answer == ""
        assert len(cards) == 3

    def test_synthesized_ids_are_unique(self):
        cards = normalize_flashcards([{}, {}, {}], now_ms=1700000000000)

        ids = [c.id for c in cards]
        assert all(ids)
        assert len(set(ids)) == 3
        assert ids[0] == "card-1700000000000-0"

    def test_given_ids_are_kept(self):
        cards = normalize_flashcards([{"id": "abc"}, {"id": 7}, {"id": ""}], now_ms=1)

        assert cards[0].id == "abc"
        assert cards[1].id == "7"
        assert cards[2].id == "card-1-2"

    def test_repeated_ids_get_replaced(self):
        cards = normalize_flashcards([{"id": "x"}, {"id": "x"}], now_ms=5)

        assert cards[0].id == "x"
        assert cards[1].id == "card-5-1"

    def test_order_preserved(self):
        cards = normalize_flashcards([{"question": str(i)} for i in range(6)])

        assert [c.question for c in cards] == [str(i) for i in range(6)]

    def test_idempotent_on_own_output(self):
        first = normalize_flashcards(
            [
                {"question": "Q1", "answer": "A1", "difficulty": "hard"},
                {"question": "Q2", "answer": "A2"},
                {"id": "keep", "question": "Q3", "answer": "A3", "difficulty": "easy"},
            ],
            now_ms=100,
        )

        again_models = normalize_flashcards(first, now_ms=999)
        again_dicts = normalize_flashcards(
            [c.model_dump(mode="json") for c in first], now_ms=999
        )

        assert again_models == first
        assert again_dicts == first

    def test_returns_flashcard_models(self):
        cards = normalize_flashcards([{"question": "Q", "answer": "A"}])

        assert isinstance(cards[0], Flashcard)

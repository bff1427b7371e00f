from __future__ import annotations

import pytest

from ai_providers.local_stub import LocalStub
from schemas import Flashcard, Level, QuizQuestion
from helpers import CATS


@pytest.fixture
def stub() -> LocalStub:
    return LocalStub()


def test_sentences_keep_punctuation_and_drop_unterminated(stub) -> None:
    assert stub._sentences("One. Two! Three? trailing words") == ["One.", "Two!", "Three?"]
    assert stub._sentences("no punctuation here") == []


def test_keywords_filter_short_stop_and_non_alpha(stub) -> None:
    text = "The plants absorb sunlight which plants convert; energy123 matters because energy"
    assert stub._keywords(text, 6) == ["plants", "absorb", "sunlight", "matters", "energy"]


def test_keywords_cap(stub) -> None:
    text = "alpha bravo charlie delta echoes foxtrot golfer hotel"
    assert stub._keywords(text, 5) == ["alpha", "bravo", "charlie", "delta", "echoes"]


def test_summary_picks_first_middle_last(stub) -> None:
    text = "First point here. Second point here. Third point here. Fourth point here. Fifth point here."
    summary = stub.summarize(text, Level.COLLEGE)
    assert summary.startswith("This college level content")
    assert "First point here. Third point here. Fifth point here." in summary
    assert "Second point" not in summary


@pytest.mark.parametrize("text", ["", "Just one sentence.", "One sentence. Two sentences.", "no terminal"])
def test_summary_handles_short_inputs(stub, text) -> None:
    summary = stub.summarize(text, "middle-school")
    assert summary.startswith("This middle school level content")
    assert "words" in summary


def test_quiz_always_four_questions_with_first_correct(stub) -> None:
    quiz = stub.generate_quiz("")
    assert len(quiz) == 4
    assert all(isinstance(q, QuizQuestion) for q in quiz)
    assert all(len(q.options) == 4 for q in quiz)
    assert [q.correct_index for q in quiz] == [0, 0, 0, 0]


def test_flashcards_for_empty_text_are_padded(stub) -> None:
    cards = stub.make_flashcards("")
    assert len(cards) == 3
    assert all(isinstance(c, Flashcard) for c in cards)


def test_flashcards_main_concept_trims_and_clips(stub) -> None:
    long_sentence = "- " + "word " * 60 + "end."
    cards = stub.make_flashcards(long_sentence)
    assert cards[0].front == "What is the main concept explained in this text?"
    assert cards[0].back.startswith("word")
    assert cards[0].back.endswith("...")
    assert len(cards[0].back) == 153


def test_flashcards_capped_at_five(stub) -> None:
    text = "Photosynthesis converts sunlight. Chlorophyll absorbs photons. Glucose stores energy. Oxygen escapes leaves. Carbon becomes sugar."
    cards = stub.make_flashcards(text)
    assert len(cards) == 5


def test_flashcards_generic_definition_when_no_sentence_matches(stub) -> None:
    cards = stub.make_flashcards("photosynthesis without punctuation")
    assert cards[0].front == "What is photosynthesis?"
    assert len(cards) == 3


def test_cats_scenario(stub) -> None:
    summary = stub.summarize(CATS, Level.HIGH_SCHOOL)
    assert "cats" in summary.lower()
    assert "high school" in summary

    quiz = stub.generate_quiz(CATS)
    assert len(quiz) == 4
    assert [q.correct_index for q in quiz[:3]] == [0, 0, 0]
    assert "cats" in quiz[3].model_dump_json().lower()

    cards = stub.make_flashcards(CATS)
    assert len(cards) >= 3
    assert cards[0].back == "Cats are mammals."


def test_output_is_deterministic(stub) -> None:
    text = "Rivers carry sediment downstream. Deltas form where rivers slow. Floods reshape valleys."
    assert stub.summarize(text, "college") == LocalStub().summarize(text, "college")
    assert stub.generate_quiz(text) == LocalStub().generate_quiz(text)
    assert stub.make_flashcards(text) == LocalStub().make_flashcards(text)

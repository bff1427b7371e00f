# services/study_kit.py
"""Assemble summary, quiz and flashcards for one piece of text."""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

import services.flashcards as fc
import services.quizzer as quizzer
import services.summarizer as summarizer
from schemas import (MAX_TEXT_LENGTH, GenerationKind, GenerationMetadata,
                     GenerationRequest, GenerationResult, Level)
from services.orchestrator import FallbackOrchestrator

LOGGER = logging.getLogger(__name__)


def generate_study_kit(text: str, level, orchestrator: FallbackOrchestrator, *,
                       concurrent: bool = True, spacing: float = 1.0,
                       sleep: Callable[[float], None] = time.sleep,
                       max_text_length: int = MAX_TEXT_LENGTH,
                       **metadata) -> GenerationResult:
    """
    Build a GenerationResult for ``text``.

    Raises pydantic.ValidationError when the text is blank, too long, or the
    level is unknown. Provider and parsing failures never propagate.

    Args:
        concurrent: run the three generators in parallel threads. When False
            they run one after another, pausing ``spacing`` seconds before the
            quiz and flashcard calls whenever a provider is configured.
        max_text_length: upper bound on ``len(text)``.
        metadata: extra metadata fields (filename, file_size, is_demo).
    """
    request = GenerationRequest.with_limit(max_text_length, text=text, level=level)
    level = request.level

    if concurrent:
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="studykit") as pool:
            f_summary = pool.submit(summarizer.summarize, text, level, orchestrator)
            f_quiz = pool.submit(quizzer.generate_quiz, text, orchestrator)
            f_cards = pool.submit(fc.make_cards, text, orchestrator)
            summary, summary_src = f_summary.result()
            quiz, quiz_src = f_quiz.result()
            cards, cards_src = f_cards.result()
    else:
        pause = spacing if orchestrator.has_providers else 0
        summary, summary_src = summarizer.summarize(text, level, orchestrator)
        if pause:
            sleep(pause)
        quiz, quiz_src = quizzer.generate_quiz(text, orchestrator)
        if pause:
            sleep(pause)
        cards, cards_src = fc.make_cards(text, orchestrator)

    sources = {
        GenerationKind.SUMMARY.value: summary_src,
        GenerationKind.QUIZ.value: quiz_src,
        GenerationKind.FLASHCARDS.value: cards_src,
    }
    LOGGER.info("Study kit ready (%d chars, level=%s, sources=%s)", len(text), level.value, sources)

    return GenerationResult(
        original_text=text,
        summary=summary,
        quiz=quiz,
        flashcards=cards,
        metadata=GenerationMetadata(text_length=len(text), level=level,
                                    sources=sources, **metadata),
    )


def generate_one(request: GenerationRequest, orchestrator: FallbackOrchestrator):
    """Run a single generator for ``request.kind`` and return (artifact, source)."""
    if request.kind == GenerationKind.QUIZ:
        return quizzer.generate_quiz(request.text, orchestrator)
    if request.kind == GenerationKind.FLASHCARDS:
        return fc.make_cards(request.text, orchestrator)
    return summarizer.summarize(request.text, Level(request.level), orchestrator)

# services/quizzer.py
import logging
from typing import List, Tuple

from ai_providers.local_stub import LocalStub
from schemas import FALLBACK_SOURCE, QUIZ_SIZE, QuizQuestion
from services.orchestrator import AllProvidersFailed, FallbackOrchestrator
from services.parsing import ParseError, parse_quiz

LOGGER = logging.getLogger(__name__)

PROMPT_TEXT_LIMIT = 2500


def build_prompt(text: str) -> str:
    return (
        f"Create exactly {QUIZ_SIZE} multiple-choice questions from this text.\n\n"
        "Return ONLY a valid JSON array in this format:\n"
        "[\n"
        "  {\n"
        '    "question": "Question text here?",\n'
        '    "options": ["Option A", "Option B", "Option C", "Option D"],\n'
        '    "correctIndex": 0,\n'
        '    "explanation": "Why this answer is correct"\n'
        "  }\n"
        "]\n\n"
        "No other text, just the JSON array.\n\n"
        f"Text: {text[:PROMPT_TEXT_LIMIT]}"
    )


def generate_quiz(text: str, orchestrator: FallbackOrchestrator) -> Tuple[List[QuizQuestion], str]:
    """Return (questions, source); provider output that cannot be parsed falls back to the stub."""
    try:
        raw, provider = orchestrator.generate(build_prompt(text))
        return parse_quiz(raw), provider
    except AllProvidersFailed as e:
        LOGGER.warning("Using fallback quiz: %s", e)
    except ParseError as e:
        LOGGER.warning("Quiz parsing failed, using fallback quiz: %s", e)
    return LocalStub().generate_quiz(text), FALLBACK_SOURCE

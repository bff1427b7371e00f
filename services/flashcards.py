# services/flashcards.py
import logging
from typing import List, Tuple

from ai_providers.local_stub import LocalStub
from schemas import FALLBACK_SOURCE, MAX_FLASHCARDS, Flashcard
from services.orchestrator import AllProvidersFailed, FallbackOrchestrator
from services.parsing import ParseError, parse_flashcards

LOGGER = logging.getLogger(__name__)

PROMPT_TEXT_LIMIT = 2500


def build_prompt(text: str) -> str:
    return (
        f"Create exactly {MAX_FLASHCARDS} study flashcards from this text.\n\n"
        "Return ONLY a valid JSON array in this format:\n"
        "[\n"
        "  {\n"
        '    "front": "Question or key term",\n'
        '    "back": "Clear, concise answer"\n'
        "  }\n"
        "]\n\n"
        "No other text, just the JSON array.\n\n"
        f"Text: {text[:PROMPT_TEXT_LIMIT]}"
    )


def make_cards(text: str, orchestrator: FallbackOrchestrator) -> Tuple[List[Flashcard], str]:
    try:
        raw, provider = orchestrator.generate(build_prompt(text))
        return parse_flashcards(raw), provider
    except AllProvidersFailed as e:
        LOGGER.warning("Using fallback flashcards: %s", e)
    except ParseError as e:
        LOGGER.warning("Flashcard parsing failed, using fallback flashcards: %s", e)
    return LocalStub().make_flashcards(text), FALLBACK_SOURCE

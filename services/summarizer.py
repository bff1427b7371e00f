# services/summarizer.py
import logging
from typing import Tuple

from ai_providers.local_stub import LocalStub
from schemas import FALLBACK_SOURCE, Level
from services.orchestrator import AllProvidersFailed, FallbackOrchestrator

LOGGER = logging.getLogger(__name__)

PROMPT_TEXT_LIMIT = 3000

LEVEL_PROMPTS = {
    Level.MIDDLE_SCHOOL: "Explain this using simple words a 12-year-old would understand",
    Level.HIGH_SCHOOL: "Explain this clearly for a high school student with helpful analogies",
    Level.COLLEGE: "Provide a comprehensive college-level explanation",
}


def build_prompt(text: str, level: Level) -> str:
    return (
        f"You are an expert tutor. {LEVEL_PROMPTS[level]}.\n\n"
        "Create a clear, engaging summary of this text in under 300 words:\n\n"
        f"{text[:PROMPT_TEXT_LIMIT]}\n\n"
        f"Make it educational and accessible for {level.label} students."
    )


def summarize(text: str, level: Level, orchestrator: FallbackOrchestrator) -> Tuple[str, str]:
    """Return (summary, source) where source is a provider name or "fallback"."""
    level = Level(level)
    try:
        raw, provider = orchestrator.generate(build_prompt(text, level))
        return raw.strip(), provider
    except AllProvidersFailed as e:
        LOGGER.warning("Using fallback summary: %s", e)
    return LocalStub().summarize(text, level), FALLBACK_SOURCE

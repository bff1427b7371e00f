# services/parsing.py
"""Pull a JSON array out of free-form model output and keep only well-formed entries."""
import json
import re
import logging
from typing import List

from pydantic import ValidationError

from schemas import MAX_FLASHCARDS, QUIZ_SIZE, Flashcard, QuizQuestion

LOGGER = logging.getLogger(__name__)

FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
ARRAY_RE = re.compile(r"\[[\s\S]*\]")


class ParseError(Exception):
    pass


class NoStructuredPayload(ParseError):
    pass


class InvalidPayload(ParseError):
    pass


class NoValidEntries(ParseError):
    pass


def extract_json_array(raw: str) -> list:
    text = FENCE_RE.sub("", (raw or "").strip())
    match = ARRAY_RE.search(text)
    if not match:
        raise NoStructuredPayload("No JSON array found in response")
    try:
        data = json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        raise InvalidPayload(f"Array is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise InvalidPayload("Payload is not a JSON array")
    return data


def _valid_entries(items: list, model, limit: int) -> list:
    out = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            out.append(model.model_validate(item))
        except ValidationError as e:
            LOGGER.debug("Dropping %s entry: %s", model.__name__, e.errors()[0].get("msg"))
    if not out:
        raise NoValidEntries(f"No valid {model.__name__} entries found")
    return out[:limit]


def parse_quiz(raw: str) -> List[QuizQuestion]:
    return _valid_entries(extract_json_array(raw), QuizQuestion, QUIZ_SIZE)


def parse_flashcards(raw: str) -> List[Flashcard]:
    return _valid_entries(extract_json_array(raw), Flashcard, MAX_FLASHCARDS)

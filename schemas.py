"""Request and result shapes exchanged between the HTTP layer and the generators."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

MAX_TEXT_LENGTH = 10000
QUIZ_SIZE = 4
MAX_FLASHCARDS = 5
FALLBACK_SOURCE = "fallback"


class Level(str, Enum):
    MIDDLE_SCHOOL = "middle-school"
    HIGH_SCHOOL = "high-school"
    COLLEGE = "college"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


class GenerationKind(str, Enum):
    SUMMARY = "summary"
    QUIZ = "quiz"
    FLASHCARDS = "flashcards"


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    level: Level = Level.HIGH_SCHOOL
    kind: GenerationKind = GenerationKind.SUMMARY

    @classmethod
    def with_limit(cls, max_text_length: int = MAX_TEXT_LENGTH, **fields) -> "GenerationRequest":
        """Validate ``fields`` against a configured text length limit."""
        return cls.model_validate(fields, context={"max_text_length": max_text_length})

    @field_validator("text")
    @classmethod
    def text_within_limits(cls, v: str, info: ValidationInfo) -> str:
        if not v.strip():
            raise ValueError("Text content is required")
        limit = (info.context or {}).get("max_text_length", MAX_TEXT_LENGTH)
        if len(v) > limit:
            raise PydanticCustomError("string_too_long",
                                      "String should have at most {max_length} characters",
                                      {"max_length": limit})
        return v


class QuizQuestion(BaseModel):
    """One multiple-choice question; entries failing these rules are dropped by the parser."""
    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=QUIZ_SIZE, max_length=QUIZ_SIZE)
    correct_index: int = Field(..., alias="correctIndex", ge=0, lt=QUIZ_SIZE)
    explanation: str = ""

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question is blank")
        return v.strip()

    @field_validator("options", mode="before")
    @classmethod
    def numeric_options_as_text(cls, v):
        if isinstance(v, list):
            return [_scalar_text(o) for o in v]
        return v

    @field_validator("options")
    @classmethod
    def options_not_blank(cls, v: List[str]) -> List[str]:
        if any(not o.strip() for o in v):
            raise ValueError("options must be non-empty")
        return v

    @field_validator("explanation", mode="before")
    @classmethod
    def explanation_default(cls, v):
        return "" if v is None else _scalar_text(v)


class Flashcard(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    front: str = Field(..., min_length=1)
    back: str = Field(..., min_length=1)

    @field_validator("front", "back")
    @classmethod
    def side_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("flashcard side is blank")
        return v.strip()


def _scalar_text(value):
    # numbers count as text; bools and containers are left to fail strict str checks
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class GenerationMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    processed_at: str = Field(default_factory=_utcnow_iso, alias="processedAt")
    text_length: int = Field(..., alias="textLength")
    level: Level
    sources: Dict[str, str] = Field(default_factory=dict)
    filename: Optional[str] = None
    file_size: Optional[int] = Field(None, alias="fileSize")
    is_demo: Optional[bool] = Field(None, alias="isDemo")


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_text: str = Field(..., alias="originalText")
    summary: str
    quiz: List[QuizQuestion]
    flashcards: List[Flashcard]
    metadata: GenerationMetadata

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

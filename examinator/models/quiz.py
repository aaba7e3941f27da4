"""Pydantic models for quiz data structures."""

import base64
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePath
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from examinator.errors import ConfigurationError

DEFAULT_TOPIC = "General Knowledge"
TRUE_FALSE_OPTIONS = ["True", "False"]

MIN_QUESTIONS = 1
MAX_QUESTIONS = 20
DEFAULT_QUESTIONS = 10
MIN_OPTIONS = 2
MAX_OPTIONS = 5
DEFAULT_OPTIONS = 3

PASS_RATIO = 0.5


class Difficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizMode(str, Enum):
    """Answer format for every question in a quiz."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"


class ScoreBand(str, Enum):
    """Coarse classification of a score, used for colouring results."""

    LOW = "low"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


class SourceDocument(BaseModel):
    """A document the questions must be drawn from."""

    data: bytes = Field(..., min_length=1, description="Raw document bytes")
    mime_type: str = Field(default="application/pdf", description="Media type")
    filename: str | None = Field(None, description="Original file name")

    model_config = ConfigDict(frozen=True)

    @property
    def base64(self) -> str:
        """Document payload encoded for the provider request."""
        return base64.b64encode(self.data).decode("ascii")

    @property
    def stem(self) -> str | None:
        if not self.filename:
            return None
        return PurePath(self.filename).stem or None


class QuizConfiguration(BaseModel):
    """User input for quiz generation."""

    topic: str = Field(default="", description="Free-text topic, may be empty")
    document: SourceDocument | None = Field(
        None,
        description="Optional document used as the only source of truth",
    )
    num_questions: int = Field(
        default=DEFAULT_QUESTIONS,
        ge=MIN_QUESTIONS,
        le=MAX_QUESTIONS,
        description="Number of questions to generate",
    )
    num_options: int = Field(
        default=DEFAULT_OPTIONS,
        ge=MIN_OPTIONS,
        le=MAX_OPTIONS,
        description="Options per question (ignored in true/false mode)",
    )
    mode: QuizMode = Field(default=QuizMode.MULTIPLE_CHOICE)
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "topic": "Solar System",
                "num_questions": 3,
                "mode": "true-false",
                "difficulty": "easy",
            }
        },
    )

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, v: str) -> str:
        return v.strip()

    @property
    def effective_topic(self) -> str:
        """Topic used for generation and history, never empty."""
        if self.topic:
            return self.topic
        if self.document is not None and self.document.stem:
            return self.document.stem
        return DEFAULT_TOPIC

    @property
    def options_per_question(self) -> int:
        """Number of options every generated question must carry."""
        if self.mode == QuizMode.TRUE_FALSE:
            return len(TRUE_FALSE_OPTIONS)
        return self.num_options


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def build_configuration(
    topic: str = "",
    num_questions: int = DEFAULT_QUESTIONS,
    num_options: int = DEFAULT_OPTIONS,
    mode: QuizMode = QuizMode.MULTIPLE_CHOICE,
    difficulty: Difficulty = Difficulty.MEDIUM,
    document: SourceDocument | None = None,
) -> QuizConfiguration:
    """
    Build a configuration from raw user input, clamping counts into range.

    Args:
        topic: Topic text, may be empty
        num_questions: Requested number of questions
        num_options: Requested options per multiple-choice question
        mode: Quiz mode
        difficulty: Difficulty level
        document: Optional source document

    Returns:
        A valid QuizConfiguration

    Raises:
        ConfigurationError: If the input cannot form a configuration
    """
    try:
        return QuizConfiguration(
            topic=topic or "",
            document=document,
            num_questions=clamp(num_questions, MIN_QUESTIONS, MAX_QUESTIONS),
            num_options=clamp(num_options, MIN_OPTIONS, MAX_OPTIONS),
            mode=mode,
            difficulty=difficulty,
        )
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


class Question(BaseModel):
    """A single generated question."""

    question: str = Field(..., min_length=1, description="The question or statement")
    options: list[str] = Field(
        ...,
        min_length=2,
        description="Possible answers, in display order",
    )
    correct_index: int = Field(
        ...,
        ge=0,
        alias="correctIndex",
        description="Zero-based index of the correct option",
    )
    explanation: str = Field(
        ...,
        description="A short explanation of why the answer is correct",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "question": "What is the capital of France?",
                "options": ["London", "Paris", "Berlin", "Madrid"],
                "correctIndex": 1,
                "explanation": "Paris has been the capital of France since 987 AD.",
            }
        },
    )

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: list[str]) -> list[str]:
        """Ensure no option is blank."""
        for i, value in enumerate(v):
            if not value or not value.strip():
                raise ValueError(f"Option {i} cannot be empty")
        return [value.strip() for value in v]

    @model_validator(mode="after")
    def validate_correct_index(self) -> "Question":
        """Ensure the correct index points at an option."""
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correctIndex {self.correct_index} out of range for "
                f"{len(self.options)} options"
            )
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]


# Structured output model for LLM responses


class QuestionList(BaseModel):
    """List of questions returned by the provider."""

    questions: list[Question] = Field(
        ...,
        description="List of generated questions, in order",
    )


class QuizResult(BaseModel):
    """Outcome of one finished quiz session."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the result",
    )
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Completion timestamp",
    )
    topic: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1, alias="totalQuestions")
    difficulty: str = Field(..., description="Difficulty label")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def validate_score(self) -> "QuizResult":
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed totalQuestions")
        return self

    @property
    def percentage(self) -> float:
        return self.score / self.total_questions

    @property
    def passed(self) -> bool:
        return self.percentage >= PASS_RATIO

    @property
    def score_band(self) -> ScoreBand:
        return score_band(self.score, self.total_questions)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted history layout."""
        return self.model_dump(mode="json", by_alias=True)


def score_band(score: int, total: int) -> ScoreBand:
    """
    Classify a score into a colour band.

    Args:
        score: Correct answers
        total: Questions asked

    Returns:
        The ScoreBand for the score ratio
    """
    ratio = score / total if total else 0.0
    if ratio < 0.4:
        return ScoreBand.LOW
    if ratio < 0.6:
        return ScoreBand.FAIR
    if ratio < 0.8:
        return ScoreBand.GOOD
    return ScoreBand.EXCELLENT

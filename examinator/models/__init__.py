"""Data models for quiz generation and results."""

from .quiz import (
    DEFAULT_TOPIC,
    TRUE_FALSE_OPTIONS,
    Difficulty,
    Question,
    # Structured output model
    QuestionList,
    QuizConfiguration,
    QuizMode,
    QuizResult,
    ScoreBand,
    SourceDocument,
    build_configuration,
    score_band,
)

__all__ = [
    "DEFAULT_TOPIC",
    "TRUE_FALSE_OPTIONS",
    "Difficulty",
    "Question",
    "QuestionList",
    "QuizConfiguration",
    "QuizMode",
    "QuizResult",
    "ScoreBand",
    "SourceDocument",
    "build_configuration",
    "score_band",
]

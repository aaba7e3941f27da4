"""Question providers for quiz generation."""

from .generator import (
    BedrockQuestionProvider,
    QuestionProvider,
    build_instruction,
    validate_questions,
)

__all__ = [
    "BedrockQuestionProvider",
    "QuestionProvider",
    "build_instruction",
    "validate_questions",
]

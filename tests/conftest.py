"""Shared test fixtures and configuration for pytest."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from examinator.config.settings import Settings
from examinator.errors import GenerationError
from examinator.models.quiz import (
    Difficulty,
    Question,
    QuestionList,
    QuizConfiguration,
    QuizMode,
    QuizResult,
)
from examinator.storage.backends import MemoryStorage
from examinator.storage.consent import CONSENT_ENTRY, CONSENT_VALUE, ConsentFlag
from examinator.storage.history import HistoryStore


class FakeStructuredLLM:
    """Stands in for a chat model: returns a canned structured response or raises."""

    def __init__(self, response: Any = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.schema = None
        self.calls: list[list] = []

    def with_structured_output(self, schema):
        self.schema = schema
        return self

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.response


class FakeProvider:
    """Question provider returning a fixed list, or failing."""

    def __init__(self, questions: list[Question] | None = None, error: Exception | None = None):
        self.questions = questions or []
        self.error = error
        self.calls: list[QuizConfiguration] = []

    def generate(self, config: QuizConfiguration) -> list[Question]:
        self.calls.append(config)
        if self.error is not None:
            raise self.error
        return list(self.questions)


class ReadOnlyStorage(MemoryStorage):
    """Storage whose writes fail, as if the medium were read-only."""

    def set(self, name: str, value: str) -> None:
        raise PermissionError("storage is read-only")

    def delete(self, name: str) -> None:
        raise PermissionError("storage is read-only")


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Settings:
    """Settings isolated from the developer's environment."""
    monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
    return Settings(_env_file=None, STORAGE_DIR=str(tmp_path / "storage"))


@pytest.fixture
def sample_question() -> Question:
    """Create a sample Question for testing."""
    return Question(
        question="What is the capital of France?",
        options=["London", "Paris", "Berlin", "Madrid"],
        correct_index=1,
        explanation="Paris is the capital and largest city of France.",
    )


@pytest.fixture
def sample_questions() -> list[Question]:
    """Create a list of multiple-choice questions, correct answers B, A, B."""
    return [
        Question(
            question="What is 2 + 2?",
            options=["3", "4", "5", "6"],
            correct_index=1,
            explanation="Basic addition: 2 + 2 = 4",
        ),
        Question(
            question="What is the speed of light?",
            options=[
                "299,792,458 m/s",
                "300,000,000 m/s",
                "150,000,000 m/s",
                "500,000,000 m/s",
            ],
            correct_index=0,
            explanation="The speed of light in vacuum is exactly 299,792,458 m/s.",
        ),
        Question(
            question="Who wrote '1984'?",
            options=["Aldous Huxley", "George Orwell", "Ray Bradbury", "Philip K. Dick"],
            correct_index=1,
            explanation="George Orwell wrote the dystopian novel '1984' in 1949.",
        ),
    ]


@pytest.fixture
def solar_system_questions() -> list[Question]:
    """True/false questions about the solar system, all answered True."""
    return [
        Question(
            question="The Sun is a star.",
            options=["True", "False"],
            correct_index=0,
            explanation="The Sun is a G-type main-sequence star.",
        ),
        Question(
            question="Jupiter is the largest planet in the Solar System.",
            options=["True", "False"],
            correct_index=0,
            explanation="Jupiter is more than twice as massive as all other planets combined.",
        ),
        Question(
            question="Mars has two moons.",
            options=["True", "False"],
            correct_index=0,
            explanation="Mars has two small moons, Phobos and Deimos.",
        ),
    ]


@pytest.fixture
def true_false_config() -> QuizConfiguration:
    return QuizConfiguration(
        topic="Solar System",
        num_questions=3,
        mode=QuizMode.TRUE_FALSE,
        difficulty=Difficulty.EASY,
    )


@pytest.fixture
def multiple_choice_config() -> QuizConfiguration:
    return QuizConfiguration(
        topic="General Science",
        num_questions=3,
        num_options=4,
        mode=QuizMode.MULTIPLE_CHOICE,
        difficulty=Difficulty.MEDIUM,
    )


@pytest.fixture
def fake_llm_factory() -> Callable[..., FakeStructuredLLM]:
    """Build fake chat models returning the given questions or raising."""

    def factory(
        questions: list[Question] | None = None, error: Exception | None = None
    ) -> FakeStructuredLLM:
        response = QuestionList(questions=questions) if questions is not None else None
        return FakeStructuredLLM(response=response, error=error)

    return factory


@pytest.fixture
def failing_provider() -> FakeProvider:
    return FakeProvider(error=GenerationError("simulated network error"))


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def history_store(memory_storage: MemoryStorage) -> HistoryStore:
    return HistoryStore(memory_storage)


@pytest.fixture
def consent_flag(memory_storage: MemoryStorage) -> ConsentFlag:
    return ConsentFlag(memory_storage)


@pytest.fixture
def read_only_storage() -> ReadOnlyStorage:
    """Read-only storage on which consent was given earlier."""
    return ReadOnlyStorage({CONSENT_ENTRY: CONSENT_VALUE})


@pytest.fixture
def make_result() -> Callable[..., QuizResult]:
    """Create results with increasing timestamps."""
    base = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def factory(n: int = 0, score: int = 3, total: int = 5, topic: str | None = None) -> QuizResult:
        return QuizResult(
            id=f"result-{n}",
            date=base + timedelta(minutes=n),
            topic=topic or f"Topic {n}",
            score=score,
            total_questions=total,
            difficulty="medium",
        )

    return factory


@pytest.fixture
def fake_provider_factory() -> Callable[..., FakeProvider]:
    """Build question providers returning the given questions or raising."""
    return FakeProvider

"""Quiz session state machine: question progression, answer locking and scoring."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from examinator.errors import (
    AnswerOutOfRangeError,
    ConfigurationError,
    InvalidTransitionError,
    SessionFinishedError,
)
from examinator.models.quiz import Question

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    """Phases a session moves through."""

    AWAITING_ANSWER = "awaiting_answer"
    ANSWERED = "answered"
    FINISHED = "finished"


@dataclass(frozen=True)
class Progress:
    """Read-only snapshot of where a session stands."""

    question_index: int
    total_questions: int
    score: int


class QuizSession:
    """
    One run through a fixed, ordered list of questions.

    The session starts awaiting an answer to question 0. ``submit_answer``
    locks in a selection and scores it, ``advance`` moves to the next question
    or finishes the session after the last one. Once finished, no further
    changes are accepted.
    """

    def __init__(self, questions: Sequence[Question]):
        if not questions:
            raise ConfigurationError("A quiz session needs at least one question")

        self._questions: tuple[Question, ...] = tuple(questions)
        self._index = 0
        self._score = 0
        self._selected: int | None = None
        self._answers: list[int | None] = [None] * len(self._questions)
        self._phase = SessionPhase.AWAITING_ANSWER

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def question_index(self) -> int:
        return self._index

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def score(self) -> int:
        return self._score

    @property
    def selected_index(self) -> int | None:
        """Selection for the current question, None until answered."""
        return self._selected

    @property
    def is_finished(self) -> bool:
        return self._phase == SessionPhase.FINISHED

    @property
    def current_question(self) -> Question:
        return self._questions[self._index]

    @property
    def is_last_question(self) -> bool:
        return self._index == len(self._questions) - 1

    @property
    def is_correct(self) -> bool | None:
        """Whether the current selection is correct, None until answered."""
        if self._selected is None:
            return None
        return self._selected == self.current_question.correct_index

    @property
    def answers(self) -> list[int | None]:
        """Selected option per question, None where not yet answered."""
        return list(self._answers)

    @property
    def progress_fraction(self) -> float:
        """Share of questions answered so far, between 0.0 and 1.0."""
        answered = sum(1 for a in self._answers if a is not None)
        return answered / len(self._questions)

    def progress(self) -> Progress:
        """Get the (question_index, total_questions, score) projection."""
        return Progress(
            question_index=self._index,
            total_questions=len(self._questions),
            score=self._score,
        )

    def submit_answer(self, selected_index: int) -> bool:
        """
        Lock in an answer for the current question.

        Args:
            selected_index: Zero-based option index

        Returns:
            True if the selection was recorded, False if the question was
            already answered and the call was ignored

        Raises:
            SessionFinishedError: If the session is finished
            AnswerOutOfRangeError: If the index is not a valid option
        """
        if self._phase == SessionPhase.FINISHED:
            raise SessionFinishedError("Cannot answer a finished session")

        if self._phase == SessionPhase.ANSWERED:
            logger.debug(
                "Ignoring duplicate answer %s for question %d",
                selected_index,
                self._index,
            )
            return False

        option_count = len(self.current_question.options)
        if not 0 <= selected_index < option_count:
            raise AnswerOutOfRangeError(selected_index, option_count)

        self._selected = selected_index
        self._answers[self._index] = selected_index
        if selected_index == self.current_question.correct_index:
            self._score += 1
        self._phase = SessionPhase.ANSWERED
        return True

    def advance(self) -> SessionPhase:
        """
        Move past the answered question.

        Returns:
            The phase after advancing

        Raises:
            SessionFinishedError: If the session is already finished
            InvalidTransitionError: If the current question is unanswered
        """
        if self._phase == SessionPhase.FINISHED:
            raise SessionFinishedError("Session is already finished")
        if self._phase != SessionPhase.ANSWERED:
            raise InvalidTransitionError(
                f"Question {self._index} must be answered before advancing"
            )

        if self.is_last_question:
            self._phase = SessionPhase.FINISHED
            logger.info(
                "Session finished with score %d/%d", self._score, len(self._questions)
            )
        else:
            self._index += 1
            self._selected = None
            self._phase = SessionPhase.AWAITING_ANSWER
        return self._phase

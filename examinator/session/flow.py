"""Start sessions from a configuration and record their results."""

import logging

from examinator.errors import InvalidTransitionError
from examinator.models.quiz import QuizConfiguration, QuizResult
from examinator.providers.generator import QuestionProvider
from examinator.session.state import QuizSession
from examinator.storage.consent import ConsentFlag
from examinator.storage.history import HistoryStore

logger = logging.getLogger(__name__)


def start_session(config: QuizConfiguration, provider: QuestionProvider) -> QuizSession:
    """
    Generate questions for a configuration and open a session over them.

    Exactly one generation request is made. If it fails the GenerationError
    propagates and no session exists.

    Args:
        config: Submitted quiz configuration
        provider: Question provider to call

    Returns:
        A new session awaiting the first answer
    """
    questions = provider.generate(config)
    logger.info("Starting session with %d questions", len(questions))
    return QuizSession(questions)


def build_result(session: QuizSession, config: QuizConfiguration) -> QuizResult:
    """
    Create the result record for a finished session.

    Raises:
        InvalidTransitionError: If the session has not finished
    """
    if not session.is_finished:
        raise InvalidTransitionError("Only a finished session has a result")

    return QuizResult(
        topic=config.effective_topic,
        score=session.score,
        total_questions=session.total_questions,
        difficulty=config.difficulty.value,
    )


def finish_session(
    session: QuizSession,
    config: QuizConfiguration,
    history: HistoryStore,
    consent: ConsentFlag,
) -> QuizResult:
    """
    Build the result of a finished session and store it if consent was given.

    Args:
        session: The finished session
        config: Configuration the session was started with
        history: Store receiving the result
        consent: Gate deciding whether the result is persisted

    Returns:
        The result, whether or not it was persisted. A failed write is
        logged and does not raise.
    """
    result = build_result(session, config)

    if consent.has_consented():
        try:
            history.append(result)
        except OSError as e:
            logger.warning("Could not store result %s: %s", result.id, e)
    else:
        logger.info("No storage consent, result %s not persisted", result.id)

    return result

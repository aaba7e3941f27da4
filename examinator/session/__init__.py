"""Quiz session state and flow."""

from .flow import build_result, finish_session, start_session
from .state import Progress, QuizSession, SessionPhase

__all__ = [
    "Progress",
    "QuizSession",
    "SessionPhase",
    "build_result",
    "finish_session",
    "start_session",
]

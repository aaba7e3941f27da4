"""Examinator - AI-generated quizzes with a local result history."""

__version__ = "0.1.0"

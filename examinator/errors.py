"""Exception hierarchy for the quiz application."""


class ExaminatorError(Exception):
    """Base class for all application errors."""


class ConfigurationError(ExaminatorError):
    """A quiz configuration or question list cannot be used."""


class GenerationError(ExaminatorError):
    """The question provider failed to produce a complete, valid question list."""

    user_message = "Could not generate the quiz. Check your credentials or try again."


class CredentialMissingError(GenerationError):
    """No credential is configured for the question provider."""

    user_message = "No provider credential configured. Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY."


class StorageReadError(ExaminatorError):
    """Persisted history is missing, unreadable or malformed."""


class AnswerOutOfRangeError(ExaminatorError):
    """A selected option index does not exist on the current question."""

    def __init__(self, selected_index: int, option_count: int):
        self.selected_index = selected_index
        self.option_count = option_count
        super().__init__(
            f"Option {selected_index} is out of range (question has {option_count} options)"
        )


class InvalidTransitionError(ExaminatorError):
    """An operation is not valid in the session's current state."""


class SessionFinishedError(InvalidTransitionError):
    """The session is finished and accepts no further changes."""

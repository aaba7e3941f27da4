"""Question provider - turns a quiz configuration into validated questions using AI."""

import logging
from typing import Any, Protocol

from langchain_aws import ChatBedrock
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from examinator.config.settings import Settings, get_settings
from examinator.errors import CredentialMissingError, GenerationError
from examinator.models.quiz import (
    TRUE_FALSE_OPTIONS,
    Question,
    QuestionList,
    QuizConfiguration,
    QuizMode,
)

logger = logging.getLogger(__name__)


class QuestionProvider(Protocol):
    """Capability that produces a complete question list for a configuration."""

    def generate(self, config: QuizConfiguration) -> list[Question]:
        """
        Generate exactly ``config.num_questions`` questions.

        Raises:
            GenerationError: On any failure; no partial results are returned
        """
        ...


SYSTEM_PROMPT = """You are an expert exam writer. Create clear, accurate test questions.

Requirements:
- Every question has exactly ONE correct option
- correctIndex is the zero-based position of the correct option in the options array
- Incorrect options are plausible but clearly wrong
- Questions are clear and unambiguous
- Every question includes a short explanation of why the answer is correct
- Match the requested difficulty level

Difficulty levels:
- easy: Common knowledge, straightforward questions
- medium: Requires general knowledge or logical thinking
- hard: Challenging, requires specific knowledge or deep thinking"""


def build_instruction(config: QuizConfiguration) -> str:
    """
    Build the natural-language generation instruction for a configuration.

    Args:
        config: Quiz configuration

    Returns:
        Instruction text
    """
    lines = [
        f"Generate a test of {config.difficulty.value} difficulty.",
        f'Topic: "{config.effective_topic}".',
        f"Number of questions: {config.num_questions}.",
        "",
    ]

    if config.mode == QuizMode.TRUE_FALSE:
        lines += [
            "Mode: True/False.",
            "Every question must be a statement that is either true or false.",
            'The "options" array must ALWAYS be exactly ["True", "False"], in that order.',
        ]
    else:
        lines += [
            "Mode: Multiple choice.",
            f'Every question must have exactly {config.num_options} options in the "options" array.',
        ]

    lines.append("")
    if config.document is not None:
        lines.append(
            "Use the attached document as the ONLY source of information for the questions."
        )
    else:
        lines.append("Use your general knowledge of the topic to write the questions.")

    lines.append(f"Generate exactly {config.num_questions} questions.")
    return "\n".join(lines)


def build_messages(config: QuizConfiguration) -> list[BaseMessage]:
    """
    Build the chat messages for one generation request.

    The document, when present, travels as a base64 file content block ahead
    of the instruction text.
    """
    content: list[dict[str, Any]] = []
    if config.document is not None:
        content.append(
            {
                "type": "file",
                "source_type": "base64",
                "mime_type": config.document.mime_type,
                "data": config.document.base64,
            }
        )
    content.append({"type": "text", "text": build_instruction(config)})

    return [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(content=content),
    ]


def normalize_true_false(question: Question) -> Question:
    """
    Force a true/false question's options to ``["True", "False"]``.

    Reversed English labels are reordered with the correct index remapped;
    any other pair (e.g. localized labels) is relabelled by position.

    Raises:
        GenerationError: If the question does not have exactly two options
    """
    if question.options == TRUE_FALSE_OPTIONS:
        return question

    if len(question.options) != 2:
        raise GenerationError(
            f"True/false question has {len(question.options)} options: {question.question!r}"
        )

    correct_index = question.correct_index
    if [o.lower() for o in question.options] == ["false", "true"]:
        correct_index = 1 - correct_index

    return question.model_copy(
        update={"options": list(TRUE_FALSE_OPTIONS), "correct_index": correct_index}
    )


def validate_questions(
    questions: list[Question], config: QuizConfiguration
) -> list[Question]:
    """
    Check a generated list against the configuration.

    Args:
        questions: Questions parsed from the provider response
        config: Configuration the questions were requested for

    Returns:
        The questions, with true/false options normalized

    Raises:
        GenerationError: If the count or any question's shape is wrong
    """
    if len(questions) != config.num_questions:
        raise GenerationError(
            f"Expected {config.num_questions} questions, got {len(questions)}"
        )

    if config.mode == QuizMode.TRUE_FALSE:
        return [normalize_true_false(q) for q in questions]

    for i, question in enumerate(questions):
        if len(question.options) != config.num_options:
            raise GenerationError(
                f"Question {i} has {len(question.options)} options, "
                f"expected {config.num_options}"
            )
    return list(questions)


class BedrockQuestionProvider:
    """Generates questions with a Bedrock-hosted chat model via structured output."""

    def __init__(
        self,
        settings: Settings | None = None,
        llm: BaseChatModel | None = None,
    ):
        self.settings = settings or get_settings()
        self._llm = llm

    def _get_llm(self) -> BaseChatModel:
        if self._llm is None:
            if not self.settings.has_credentials:
                raise CredentialMissingError(
                    "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set"
                )

            try:
                self._llm = ChatBedrock(
                    model=self.settings.model_name,
                    region_name=self.settings.aws_default_region,
                    aws_access_key_id=self.settings.aws_api_key_id,
                    aws_secret_access_key=self.settings.aws_api_key_secret,
                    temperature=self.settings.generation_temperature,
                )
            except Exception as e:
                raise GenerationError(f"Could not create the chat model: {e}") from e
        return self._llm

    def generate(self, config: QuizConfiguration) -> list[Question]:
        """
        Generate the questions for a quiz in a single request.

        Args:
            config: Quiz configuration

        Returns:
            Exactly ``config.num_questions`` validated questions

        Raises:
            CredentialMissingError: If no credential is configured
            GenerationError: If the request, parsing or validation fails
        """
        llm = self._get_llm()
        messages = build_messages(config)

        logger.info(
            "Requesting %d %s questions on %r",
            config.num_questions,
            config.mode.value,
            config.effective_topic,
        )

        try:
            # Use structured output to automatically generate and validate the schema
            llm_with_structure = llm.with_structured_output(QuestionList)
            question_list = llm_with_structure.invoke(messages)
        except Exception as e:
            logger.error("Question generation failed: %s", e)
            raise GenerationError(f"Question generation failed: {e}") from e

        if not isinstance(question_list, QuestionList):
            raise GenerationError("Provider returned no structured question list")

        return validate_questions(question_list.questions, config)

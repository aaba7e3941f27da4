"""Bounded, most-recent-first history of quiz results."""

import json
import logging
from typing import List

from pydantic import TypeAdapter, ValidationError

from examinator.errors import StorageReadError
from examinator.models.quiz import QuizResult
from examinator.storage.backends import Storage

logger = logging.getLogger(__name__)

HISTORY_ENTRY = "examinator_history"
HISTORY_CAPACITY = 10

_results_adapter = TypeAdapter(list[QuizResult])


class HistoryStore:
    """
    Ordered storage of past results, newest first, capped at ``capacity``.

    Reads never raise: missing or corrupt data reads as an empty history.
    """

    def __init__(
        self,
        storage: Storage,
        entry_name: str = HISTORY_ENTRY,
        capacity: int = HISTORY_CAPACITY,
    ):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.storage = storage
        self.entry_name = entry_name
        self.capacity = capacity

    def _read(self) -> list[QuizResult]:
        """
        Load the stored sequence.

        Raises:
            StorageReadError: If the entry cannot be read or parsed
        """
        try:
            raw = self.storage.get(self.entry_name)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"History unavailable: {e}") from e

        if raw is None:
            return []

        try:
            return _results_adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageReadError(f"History is malformed: {e}") from e

    def list(self) -> list[QuizResult]:
        """
        Get all stored results, most recent first.

        Returns:
            A new list; mutating it does not affect the store
        """
        try:
            return self._read()
        except StorageReadError as e:
            logger.warning("Ignoring unreadable history: %s", e)
            return []

    # HistoryStore.list shadows the builtin from here on in the class body
    def append(self, result: QuizResult) -> List[QuizResult]:
        """
        Add a result at the front, dropping the oldest beyond capacity.

        Args:
            result: Result of a finished session

        Returns:
            The stored sequence after the append

        Raises:
            OSError: If the storage cannot be written
        """
        history = [result, *self.list()][: self.capacity]
        payload = json.dumps([r.to_record() for r in history])
        self.storage.set(self.entry_name, payload)
        logger.info("Recorded result %s (%d stored)", result.id, len(history))
        return list(history)

    def clear(self) -> None:
        """Remove every stored result."""
        self.storage.delete(self.entry_name)

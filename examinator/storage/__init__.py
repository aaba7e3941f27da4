"""Client-side persistence for history and consent."""

from .backends import FileStorage, MemoryStorage, Storage
from .consent import ConsentFlag
from .history import HISTORY_CAPACITY, HistoryStore

__all__ = [
    "ConsentFlag",
    "FileStorage",
    "HISTORY_CAPACITY",
    "HistoryStore",
    "MemoryStorage",
    "Storage",
]

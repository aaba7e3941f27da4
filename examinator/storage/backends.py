"""Key-value storage backends for client-side persistence."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Named string entries, in the manner of browser cookies or local storage."""

    def get(self, name: str) -> str | None:
        """Return the entry's value, or None if it does not exist."""
        ...

    def set(self, name: str, value: str) -> None:
        """Create or replace an entry atomically."""
        ...

    def delete(self, name: str) -> None:
        """Remove an entry; missing entries are ignored."""
        ...


class MemoryStorage:
    """Process-local storage, mainly for tests."""

    def __init__(self, entries: dict[str, str] | None = None):
        self._entries: dict[str, str] = dict(entries or {})

    def get(self, name: str) -> str | None:
        return self._entries.get(name)

    def set(self, name: str, value: str) -> None:
        self._entries[name] = value

    def delete(self, name: str) -> None:
        self._entries.pop(name, None)


class FileStorage:
    """
    One file per entry inside a storage directory.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so readers see either the old or the new value.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _path(self, name: str) -> Path:
        if not name or Path(name).name != name:
            raise ValueError(f"Invalid storage entry name: {name!r}")
        return self.directory / name

    def get(self, name: str) -> str | None:
        path = self._path(name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, name: str, value: str) -> None:
        path = self._path(name)
        self.directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote storage entry %s (%d bytes)", name, len(value))

    def delete(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)

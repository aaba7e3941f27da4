"""Consent flag gating whether results are persisted."""

from examinator.storage.backends import Storage

CONSENT_ENTRY = "examinator_consent"
CONSENT_VALUE = "true"


class ConsentFlag:
    """Stores the literal ``"true"`` once the user agrees to local storage."""

    def __init__(self, storage: Storage, entry_name: str = CONSENT_ENTRY):
        self.storage = storage
        self.entry_name = entry_name

    def has_consented(self) -> bool:
        try:
            return self.storage.get(self.entry_name) == CONSENT_VALUE
        except (OSError, UnicodeDecodeError):
            return False

    def give(self) -> None:
        self.storage.set(self.entry_name, CONSENT_VALUE)

    def revoke(self) -> None:
        self.storage.delete(self.entry_name)

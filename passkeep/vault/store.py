"""
Credential storage - an ordered list of entries persisted as one JSON blob.

The store is addressed by position only. An index is valid until the next
insert or delete, so callers must re-derive indices from a fresh load()
after every mutation.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Optional
import json
import logging

from PyQt6.QtCore import QObject, pyqtSignal

from .backend import KeyValueBackend, SQLiteBackend

logger = logging.getLogger(__name__)

# Key the serialized list lives under
STORAGE_KEY = "passwords"


class ValidationError(ValueError):
    """A required field was empty."""
    pass


@dataclass
class CredentialEntry:
    """One stored website/username/password record."""
    website: str
    username: str = ""
    password: str = ""

    def __repr__(self):
        return (
            f"CredentialEntry(website={self.website!r}, "
            f"username={self.username!r}, "
            f"password=<hidden>)"
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> CredentialEntry:
        """
        Build an entry from a decoded JSON object.

        Raises:
            TypeError: data is not an object, or a field has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected object, got {type(data).__name__}")

        website = data.get("website")
        password = data.get("password")
        username = data.get("username", "")
        if username is None:
            username = ""

        for name, value in (("website", website), ("username", username), ("password", password)):
            if not isinstance(value, str):
                raise TypeError(f"field '{name}' must be a string")

        return cls(website=website, username=username, password=password)


class CredentialStore(QObject):
    """
    Persisted, insertion-ordered sequence of CredentialEntry.

    Every mutating call reads the full list, changes it and writes the
    full list back before returning.

    Signals:
        entries_changed: Emitted after every save
    """

    entries_changed = pyqtSignal()

    def __init__(
        self,
        backend: KeyValueBackend = None,
        key: str = STORAGE_KEY,
        parent: QObject = None,
    ):
        """
        Initialize credential store.

        Args:
            backend: Byte store to persist into (SQLite file by default)
            key: Key the serialized list is stored under
        """
        super().__init__(parent)
        self.backend = backend if backend is not None else SQLiteBackend()
        self.key = key
        logger.info(f"Credential store opened ({type(self.backend).__name__}, key={key!r})")

    # -------------------------------------------------------------------------
    # Persistence boundary
    # -------------------------------------------------------------------------

    def load(self) -> list[CredentialEntry]:
        """
        Read all entries.

        Missing, undecodable or non-list data yields an empty list.
        Never raises for bad stored content.
        """
        raw = self.backend.get(self.key)
        if raw is None:
            return []

        try:
            data = json.loads(raw.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            logger.warning(f"Stored data under {self.key!r} is corrupt, treating as empty: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(
                f"Stored data under {self.key!r} is {type(data).__name__}, not a list; treating as empty"
            )
            return []

        entries = []
        for position, item in enumerate(data):
            try:
                entries.append(CredentialEntry.from_dict(item))
            except TypeError as e:
                logger.warning(f"Skipping malformed entry at position {position}: {e}")
        return entries

    def save(self, entries: list[CredentialEntry]) -> None:
        """Serialize and persist the full list, replacing any prior value."""
        blob = json.dumps([entry.to_dict() for entry in entries])
        self.backend.set(self.key, blob.encode("utf-8"))
        logger.debug(f"Saved {len(entries)} entries")
        self.entries_changed.emit()

    # -------------------------------------------------------------------------
    # Entry operations
    # -------------------------------------------------------------------------

    def add(self, entry: CredentialEntry) -> None:
        """
        Append an entry.

        Raises:
            ValidationError: website or password is empty
        """
        if not entry.website or not entry.password:
            raise ValidationError("Website and password are required")

        entries = self.load()
        entries.append(CredentialEntry(entry.website, entry.username or "", entry.password))
        self.save(entries)
        logger.debug(f"Added entry for {entry.website}")

    def update_password_at(self, index: int, new_password: str) -> None:
        """
        Replace the password of the entry at index.

        Raises:
            IndexError: index out of range
            ValidationError: new_password is empty
        """
        entries = self.load()
        _check_index(index, len(entries))
        if not new_password:
            raise ValidationError("Password cannot be empty")

        entries[index].password = new_password
        self.save(entries)
        logger.debug(f"Updated password at index {index}")

    def delete_at(self, index: int) -> None:
        """
        Remove the entry at index; later entries shift down by one.

        Raises:
            IndexError: index out of range
        """
        entries = self.load()
        _check_index(index, len(entries))

        removed = entries.pop(index)
        self.save(entries)
        logger.debug(f"Deleted entry for {removed.website} at index {index}")

    def entry_at(self, index: int) -> CredentialEntry:
        """
        Get the entry at index.

        Raises:
            IndexError: index out of range
        """
        entries = self.load()
        _check_index(index, len(entries))
        return entries[index]

    def count(self) -> int:
        return len(self.load())


def _check_index(index: Optional[int], count: int) -> None:
    # Negative indices must not wrap around
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < count:
        raise IndexError(f"Entry index {index!r} out of range for {count} entries")

"""
User-level workflows built on the credential store and dialog controller.

Renderers call these instead of touching the store directly. Each
coroutine suspends only while its dialog is showing.
"""

from __future__ import annotations
from pathlib import Path
from typing import Callable, Iterable, Optional
import logging

import pyperclip

from ..config import AppSettings
from ..dialog import DialogController
from ..vault import (
    CharClass,
    CredentialEntry,
    CredentialStore,
    SQLiteBackend,
    ValidationError,
    DEFAULT_LENGTH,
    GeneratorOptions,
    parse_length,
)

logger = logging.getLogger(__name__)

ADD_INVALID_MESSAGE = "Please fill in both fields."
DELETE_CONFIRM_MESSAGE = "Are you sure you want to delete this password?"
EDIT_PROMPT_MESSAGE = "Enter new password:"
COPIED_MESSAGE = "Password copied to clipboard."
GENERATE_FIRST_MESSAGE = "Generate a password first."
GENERATED_COPIED_MESSAGE = "Generated password copied to clipboard."
CLIPBOARD_FAILED_MESSAGE = "Could not access the clipboard."

MASK_CHAR = "*"


class PasswordManager:
    """
    Add, reveal, copy, edit, delete and generate workflows.

    Validation failures and acknowledgements are surfaced as INFO
    dialogs. Index arguments are positions in the most recent
    store.load() and are checked before any dialog opens.
    """

    def __init__(
        self,
        store: CredentialStore,
        dialogs: DialogController = None,
        clipboard: Callable[[str], None] = None,
        default_length: int = DEFAULT_LENGTH,
        default_classes: Iterable[CharClass] = None,
    ):
        self.store = store
        self.dialogs = dialogs or DialogController()
        self.clipboard = clipboard or pyperclip.copy
        self.default_length = default_length
        self.default_classes = frozenset(default_classes or CharClass)

        self.last_generated = ""
        self._revealed: set[int] = set()

        self.store.entries_changed.connect(self._on_entries_changed)

    @classmethod
    def from_settings(cls, settings: AppSettings, clipboard: Callable[[str], None] = None) -> PasswordManager:
        """Wire a manager to the SQLite store named in settings."""
        store = CredentialStore(
            backend=SQLiteBackend(Path(settings.db_path).expanduser()),
            key=settings.storage_key,
        )
        return cls(
            store=store,
            dialogs=DialogController(empty_value_message=settings.empty_value_message),
            clipboard=clipboard,
            default_length=settings.default_length,
            default_classes=settings.default_char_classes,
        )

    def entries(self) -> list[CredentialEntry]:
        return self.store.load()

    # -------------------------------------------------------------------------
    # Store workflows
    # -------------------------------------------------------------------------

    async def add_entry(self, website: str, username: str, password: str) -> bool:
        """Add an entry, or show a notice if a required field is empty."""
        try:
            self.store.add(CredentialEntry(website=website, username=username or "", password=password))
        except ValidationError:
            await self.dialogs.notify(ADD_INVALID_MESSAGE)
            return False
        return True

    async def confirm_delete(self, index: int) -> bool:
        """Ask for confirmation, then delete. True if deleted."""
        self.store.entry_at(index)

        if not await self.dialogs.confirm(DELETE_CONFIRM_MESSAGE):
            logger.debug(f"Delete of index {index} cancelled")
            return False

        self.store.delete_at(index)
        return True

    async def edit_password(self, index: int) -> bool:
        """Prompt for a new password, prefilled with the current one. True if changed."""
        entry = self.store.entry_at(index)

        value = await self.dialogs.prompt(EDIT_PROMPT_MESSAGE, seed_value=entry.password)
        if value is None:
            logger.debug(f"Edit of index {index} cancelled")
            return False

        self.store.update_password_at(index, value)
        return True

    async def copy_password(self, index: int) -> bool:
        """Copy an entry's password to the clipboard and acknowledge."""
        entry = self.store.entry_at(index)

        if not self._copy(entry.password):
            await self.dialogs.notify(CLIPBOARD_FAILED_MESSAGE)
            return False

        await self.dialogs.notify(COPIED_MESSAGE)
        return True

    # -------------------------------------------------------------------------
    # Reveal toggling
    # -------------------------------------------------------------------------

    def is_revealed(self, index: int) -> bool:
        return index in self._revealed

    def toggle_reveal(self, index: int) -> bool:
        """Flip masked/plain display for one entry. Returns the new revealed state."""
        self.store.entry_at(index)
        if index in self._revealed:
            self._revealed.discard(index)
            return False
        self._revealed.add(index)
        return True

    def display_password(self, index: int, entry: CredentialEntry = None) -> str:
        """Password as it should be drawn: masked unless revealed."""
        entry = entry if entry is not None else self.store.entry_at(index)
        if index in self._revealed:
            return entry.password
        return MASK_CHAR * len(entry.password)

    def _on_entries_changed(self) -> None:
        # Positions may have shifted
        self._revealed.clear()

    # -------------------------------------------------------------------------
    # Generator
    # -------------------------------------------------------------------------

    def generate(self, raw_length: Optional[str] = None, classes: Iterable[CharClass] = None) -> str:
        """
        Generate and remember a password.

        Args:
            raw_length: Length as typed; unparsable input uses the default
            classes: Character classes; None uses the configured defaults,
                an empty selection uses every class
        """
        length = parse_length(raw_length, self.default_length)
        selected = self.default_classes if classes is None else classes
        options = GeneratorOptions(length=length, classes=selected)
        self.last_generated = options.generate()
        return self.last_generated

    async def copy_generated(self) -> bool:
        """Copy the last generated password, or ask the user to generate one first."""
        if not self.last_generated:
            await self.dialogs.notify(GENERATE_FIRST_MESSAGE)
            return False

        if not self._copy(self.last_generated):
            await self.dialogs.notify(CLIPBOARD_FAILED_MESSAGE)
            return False

        await self.dialogs.notify(GENERATED_COPIED_MESSAGE)
        return True

    def _copy(self, text: str) -> bool:
        try:
            self.clipboard(text)
        except pyperclip.PyperclipException as e:
            logger.warning(f"Clipboard copy failed: {e}")
            return False
        return True

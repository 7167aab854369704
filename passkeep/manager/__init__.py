"""
Password manager workflows and console front end.
"""

from .actions import (
    PasswordManager,
    ADD_INVALID_MESSAGE,
    DELETE_CONFIRM_MESSAGE,
    EDIT_PROMPT_MESSAGE,
    COPIED_MESSAGE,
    GENERATE_FIRST_MESSAGE,
    GENERATED_COPIED_MESSAGE,
    CLIPBOARD_FAILED_MESSAGE,
)
from .console import ConsoleRenderer, read_stdin

__all__ = [
    "PasswordManager",
    "ConsoleRenderer",
    "read_stdin",
    "ADD_INVALID_MESSAGE",
    "DELETE_CONFIRM_MESSAGE",
    "EDIT_PROMPT_MESSAGE",
    "COPIED_MESSAGE",
    "GENERATE_FIRST_MESSAGE",
    "GENERATED_COPIED_MESSAGE",
    "CLIPBOARD_FAILED_MESSAGE",
]

"""
Dialog request/result value types.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional


class DialogMode(Enum):
    """What the dialog asks of the user."""
    INFO = auto()       # message + OK
    CONFIRM = auto()    # question + OK/Cancel
    EDIT = auto()       # prompt + text input


class DialogState(Enum):
    """Controller state."""
    IDLE = auto()
    SHOWING = auto()
    RESOLVING = auto()


@dataclass(frozen=True)
class DialogRequest:
    """One user interaction."""
    message: str
    mode: DialogMode = DialogMode.INFO
    has_cancel: bool = False

    # Prefilled input, EDIT only
    seed_value: Optional[str] = None

    def __post_init__(self):
        if self.seed_value is not None and self.mode is not DialogMode.EDIT:
            raise ValueError("seed_value is only valid for EDIT dialogs")

    @classmethod
    def info(cls, message: str) -> DialogRequest:
        return cls(message=message, mode=DialogMode.INFO)

    @classmethod
    def confirm(cls, message: str, has_cancel: bool = True) -> DialogRequest:
        return cls(message=message, mode=DialogMode.CONFIRM, has_cancel=has_cancel)

    @classmethod
    def edit(cls, message: str, seed_value: str = "", has_cancel: bool = True) -> DialogRequest:
        return cls(
            message=message,
            mode=DialogMode.EDIT,
            has_cancel=has_cancel,
            seed_value=seed_value,
        )

    def with_message(self, message: str) -> DialogRequest:
        return replace(self, message=message)


@dataclass(frozen=True)
class DialogResult:
    """
    Outcome of one dialog.

    INFO always resolves confirmed. CONFIRM carries the choice in
    `confirmed`. EDIT carries the submitted text in `value`, or
    confirmed=False when cancelled.
    """
    mode: DialogMode
    confirmed: bool
    value: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return not self.confirmed

    def __bool__(self) -> bool:
        return self.confirmed

"""
Modal dialog workflow - one outstanding message/confirm/edit prompt at a time.
"""

from .models import DialogMode, DialogRequest, DialogResult, DialogState
from .controller import (
    DialogController,
    DialogBusyError,
    DialogStateError,
    EMPTY_VALUE_MESSAGE,
)

__all__ = [
    "DialogMode",
    "DialogRequest",
    "DialogResult",
    "DialogState",
    "DialogController",
    "DialogBusyError",
    "DialogStateError",
    "EMPTY_VALUE_MESSAGE",
]

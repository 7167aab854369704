"""
Single-flight modal dialog controller.

One dialog at a time. The workflow that calls open() suspends until the
renderer reports the user's action through submit() or cancel(), then
resumes with a DialogResult.

    Idle --open--> Showing --submit/cancel--> Resolving --> Idle
                     ^   |
                     +---+  submit("") in EDIT mode (re-prompt)
"""

from __future__ import annotations
import asyncio
import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .models import DialogMode, DialogRequest, DialogResult, DialogState

logger = logging.getLogger(__name__)

EMPTY_VALUE_MESSAGE = "Password cannot be empty."


class DialogBusyError(RuntimeError):
    """A dialog is already showing."""
    pass


class DialogStateError(RuntimeError):
    """Dialog action does not fit the current state or request."""
    pass


class DialogController(QObject):
    """
    Serializes message, confirmation and edit prompts.

    The renderer listens to dialog_shown to draw the current request
    (again, when an empty edit re-prompts) and calls submit()/cancel()
    when the user acts.

    Signals:
        dialog_shown(request): A request is showing or its message changed
        dialog_resolved(result): The showing request resolved
    """

    dialog_shown = pyqtSignal(object)     # DialogRequest
    dialog_resolved = pyqtSignal(object)  # DialogResult

    def __init__(self, empty_value_message: str = EMPTY_VALUE_MESSAGE, parent: QObject = None):
        super().__init__(parent)
        self.empty_value_message = empty_value_message
        self._state = DialogState.IDLE
        self._request: Optional[DialogRequest] = None
        self._future: Optional[asyncio.Future] = None

    @property
    def state(self) -> DialogState:
        return self._state

    @property
    def current_request(self) -> Optional[DialogRequest]:
        """Request being shown, or None when idle."""
        return self._request

    @property
    def is_busy(self) -> bool:
        return self._state is not DialogState.IDLE

    async def open(self, request: DialogRequest) -> DialogResult:
        """
        Show a dialog and wait for the user.

        Args:
            request: What to show

        Returns:
            DialogResult, delivered once the controller is idle again

        Raises:
            DialogBusyError: Another dialog is showing
        """
        if self._state is not DialogState.IDLE:
            raise DialogBusyError(
                f"Dialog already showing: {self._request.message if self._request else '?'}"
            )

        future = asyncio.get_running_loop().create_future()
        self._future = future
        self._request = request
        self._state = DialogState.SHOWING
        logger.debug(f"Dialog shown ({request.mode.name}): {request.message}")
        self.dialog_shown.emit(request)

        try:
            return await future
        finally:
            # Awaiting task was cancelled before the user acted
            if self._future is future:
                logger.debug("Dialog abandoned by caller")
                self._reset()

    async def notify(self, message: str) -> DialogResult:
        """Plain notice with only an OK control."""
        return await self.open(DialogRequest.info(message))

    async def confirm(self, message: str) -> bool:
        """OK/Cancel question. True when confirmed."""
        result = await self.open(DialogRequest.confirm(message))
        return result.confirmed

    async def prompt(self, message: str, seed_value: str = "") -> Optional[str]:
        """Text prompt. Returns the non-empty value, or None if cancelled."""
        result = await self.open(DialogRequest.edit(message, seed_value=seed_value))
        return result.value if result.confirmed else None

    def submit(self, value: str = None) -> bool:
        """
        OK action.

        In EDIT mode an empty value keeps the dialog showing with the
        empty-value message instead of resolving.

        Returns:
            True if the dialog resolved

        Raises:
            DialogStateError: No dialog is showing
        """
        request = self._require_showing()

        if request.mode is DialogMode.EDIT:
            if not value:
                self._request = request.with_message(self.empty_value_message)
                logger.debug("Empty value submitted, prompting again")
                self.dialog_shown.emit(self._request)
                return False
            result = DialogResult(mode=request.mode, confirmed=True, value=value)
        else:
            result = DialogResult(mode=request.mode, confirmed=True)

        self._resolve(result)
        return True

    def cancel(self) -> None:
        """
        Cancel action.

        Raises:
            DialogStateError: No dialog is showing, or it has no cancel control
        """
        request = self._require_showing()
        if not request.has_cancel:
            raise DialogStateError("Dialog has no cancel control")
        self._resolve(DialogResult(mode=request.mode, confirmed=False))

    def _require_showing(self) -> DialogRequest:
        if self._state is not DialogState.SHOWING or self._request is None:
            raise DialogStateError(f"No dialog showing (state={self._state.name})")
        return self._request

    def _resolve(self, result: DialogResult) -> None:
        # dialog_resolved handlers run in RESOLVING; the caller resumes once IDLE
        future = self._future
        self._state = DialogState.RESOLVING
        logger.debug(f"Dialog resolved ({result.mode.name}, confirmed={result.confirmed})")
        try:
            self.dialog_resolved.emit(result)
        finally:
            self._reset()

        if future is not None and not future.done():
            future.set_result(result)

    def _reset(self) -> None:
        self._request = None
        self._future = None
        self._state = DialogState.IDLE

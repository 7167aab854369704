"""
Interactive console front end.

Draws the entry list, turns typed commands into PasswordManager
workflows and answers their dialogs from the same input stream.
Entry numbers shown to the user are 1-based.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..dialog import DialogBusyError, DialogMode, DialogRequest
from ..vault import CharClass
from .actions import PasswordManager

logger = logging.getLogger(__name__)

CANCEL_WORD = ":cancel"

HELP_TEXT = """\
Commands:
  list                 Show saved passwords
  add                  Add a password (prompts for website, username, password)
  show N               Show/hide the password of entry N
  copy N               Copy the password of entry N to the clipboard
  edit N               Change the password of entry N
  delete N             Delete entry N
  gen [LENGTH] [CLASS ...]
                       Generate a password (classes: lower upper digit symbol)
  copygen              Copy the last generated password
  help                 Show this help
  quit                 Exit"""

ReadLine = Callable[[str], Awaitable[Optional[str]]]


async def read_stdin(prompt: str) -> Optional[str]:
    """Read one line without blocking the event loop. None on EOF."""
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, input, prompt)
    except EOFError:
        return None


class ConsoleRenderer:
    """Line-oriented renderer for a PasswordManager."""

    def __init__(
        self,
        manager: PasswordManager,
        read_line: ReadLine = None,
        write: Callable[[str], None] = None,
    ):
        self.manager = manager
        self._read_line = read_line or read_stdin
        self._write = write or print

        self.manager.store.entries_changed.connect(self.render)
        self.manager.dialogs.dialog_shown.connect(self._on_dialog_shown)

    # ── Drawing ──────────────────────────────────────────────────────

    def render(self) -> None:
        """Draw the current entry list."""
        entries = self.manager.entries()
        if not entries:
            self._write("  (no saved passwords)")
            return

        for index, entry in enumerate(entries):
            shown = self.manager.display_password(index, entry)
            self._write(f"  {index + 1:>3}. {entry.website}: {entry.username}  {shown}")

    def _on_dialog_shown(self, request: DialogRequest) -> None:
        self._write(f"\n  {request.message}")

    # ── Command loop ─────────────────────────────────────────────────

    async def run(self) -> None:
        """Read and dispatch commands until quit or end of input."""
        self.render()
        self._write("Type 'help' for commands.")

        while True:
            line = await self._read_line("passkeep> ")
            if line is None:
                break
            line = line.strip()
            if not line:
                continue
            if not await self.handle(line):
                break

    async def handle(self, line: str) -> bool:
        """Dispatch one command. Returns False when the user quits."""
        parts = line.split()
        cmd, args = parts[0].lower(), parts[1:]
        logger.debug(f"Command: {cmd} {args}")

        try:
            if cmd in ("quit", "exit", "q"):
                return False
            elif cmd in ("help", "?"):
                self._write(HELP_TEXT)
            elif cmd in ("list", "ls"):
                self.render()
            elif cmd == "add":
                await self._add()
            elif cmd == "show":
                index = self._parse_index(args)
                if index is not None:
                    self.manager.toggle_reveal(index)
                    self.render()
            elif cmd == "copy":
                index = self._parse_index(args)
                if index is not None:
                    await self.drive(self.manager.copy_password(index))
            elif cmd == "edit":
                index = self._parse_index(args)
                if index is not None:
                    await self.drive(self.manager.edit_password(index))
            elif cmd in ("delete", "rm"):
                index = self._parse_index(args)
                if index is not None:
                    await self.drive(self.manager.confirm_delete(index))
            elif cmd == "gen":
                self._generate(args)
            elif cmd == "copygen":
                await self.drive(self.manager.copy_generated())
            else:
                self._write(f"Unknown command '{cmd}' - type 'help'")
        except DialogBusyError as e:
            self._write(f"Busy: {e}")

        return True

    async def _add(self) -> None:
        website = await self._read_line("  Website: ")
        if website is None:
            return
        username = await self._read_line("  Username: ")
        if username is None:
            return
        password = await self._read_line("  Password: ")
        if password is None:
            return
        await self.drive(self.manager.add_entry(website.strip(), username.strip(), password))

    def _generate(self, args: list[str]) -> None:
        raw_length = None
        names = args
        if args and args[0].isdecimal():
            raw_length, names = args[0], args[1:]

        try:
            classes = {CharClass.parse(name) for name in names} if names else None
        except ValueError as e:
            self._write(str(e))
            return

        password = self.manager.generate(raw_length, classes)
        self._write(f"  Generated: {password}")

    def _parse_index(self, args: list[str]) -> Optional[int]:
        """Map a 1-based entry number from user input to a store index."""
        count = self.manager.store.count()
        if not args or not args[0].isdecimal() or not 1 <= int(args[0]) <= count:
            self._write(f"  Enter an entry number between 1 and {count}" if count else "  No saved passwords")
            return None
        return int(args[0]) - 1

    # ── Dialog answering ─────────────────────────────────────────────

    async def drive(self, workflow: Awaitable):
        """
        Run a workflow, answering each dialog it opens from input.

        Returns the workflow's result, or None if input ended while a
        dialog could not be resolved.
        """
        task = asyncio.ensure_future(workflow)
        dialogs = self.manager.dialogs

        while not task.done():
            # Let the workflow run up to its next dialog (or finish)
            await asyncio.sleep(0)
            if task.done():
                break

            request = dialogs.current_request
            if request is None:
                continue

            if not await self._answer(request):
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                return None

        return task.result()

    async def _answer(self, request: DialogRequest) -> bool:
        """Read the user's response to one dialog. False on unresolvable end of input."""
        dialogs = self.manager.dialogs

        if request.mode is DialogMode.EDIT:
            if request.seed_value:
                self._write(f"  Current: {request.seed_value}")
            hint = f" ({CANCEL_WORD} to cancel)" if request.has_cancel else ""
            answer = await self._read_line(f"  New value{hint}: ")
            if answer is None or (request.has_cancel and answer.strip() == CANCEL_WORD):
                if not request.has_cancel:
                    return False
                dialogs.cancel()
            else:
                dialogs.submit(answer)
            return True

        if request.has_cancel:
            answer = await self._read_line("  [y/N] ")
            if answer is not None and answer.strip().lower() in ("y", "yes"):
                dialogs.submit()
            else:
                dialogs.cancel()
            return True

        await self._read_line("  [Enter] ")
        dialogs.submit()
        return True

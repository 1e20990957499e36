"""Clipboard delivery through the platform's clipboard tools."""

import asyncio
import shutil
from typing import Optional, Protocol

from .logging import get_logger

logger = get_logger("clipboard")

# Tried in order; the first one found on PATH wins
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["pbcopy"],
    ["clip"],
]

CLIPBOARD_TIMEOUT_SECONDS = 5


class ClipboardError(Exception):
    """Raised when the clipboard tool fails."""


class ClipboardUnavailableError(ClipboardError):
    """Raised when no clipboard tool is installed."""

    def __init__(self):
        super().__init__(
            "Clipboard is not available on this platform. "
            "Install wl-clipboard, xclip or xsel (Linux); "
            "pbcopy and clip ship with macOS and Windows."
        )


class Clipboard(Protocol):
    async def write(self, text: str) -> None: ...


def find_clipboard_command() -> Optional[list[str]]:
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


class SystemClipboard:
    """Pipes text into the first available clipboard tool."""

    def __init__(self, command: Optional[list[str]] = None):
        self.command = command

    async def write(self, text: str) -> None:
        command = self.command or find_clipboard_command()
        if command is None:
            raise ClipboardUnavailableError()

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ClipboardError(f"Could not start {command[0]}: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(
                proc.communicate(text.encode("utf-8")),
                timeout=CLIPBOARD_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise ClipboardError(f"{command[0]} timed out") from None

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            raise ClipboardError(f"{command[0]} failed: {detail or proc.returncode}")

        logger.debug(f"Wrote {len(text)} chars to clipboard via {command[0]}")


class MemoryClipboard:
    """In-process clipboard for tests and headless runs."""

    def __init__(self):
        self.text: Optional[str] = None
        self.writes = 0

    async def write(self, text: str) -> None:
        self.text = text
        self.writes += 1

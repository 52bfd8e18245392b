"""Clipboard access through pyperclip."""

import logging

import pyperclip

from ..exceptions import ClipboardContextError, ClipboardReadError, ClipboardWriteError

logger = logging.getLogger(__name__)

CLIPBOARD_ERRORS = (pyperclip.PyperclipException, OSError)


class ClipboardHandle:
    """Plain-text handle on the system clipboard"""

    def __init__(self, backend=pyperclip):
        self.backend = backend

    def read(self) -> str:
        try:
            content = self.backend.paste()
        except CLIPBOARD_ERRORS as e:
            raise ClipboardReadError("Failed to get clipboard contents", e) from e
        if content is None:
            raise ClipboardReadError("Clipboard returned no text")
        return content

    def write(self, text: str) -> None:
        try:
            self.backend.copy(text)
        except CLIPBOARD_ERRORS as e:
            raise ClipboardWriteError("Failed to set clipboard contents", e) from e


def open_clipboard(backend=pyperclip) -> ClipboardHandle:
    """Open a clipboard handle and make sure it actually works.

    pyperclip picks a mechanism lazily, so a handle can look fine while no
    clipboard server is reachable. Probe with a read, falling back to writing
    an empty string.
    """
    handle = ClipboardHandle(backend)
    try:
        handle.read()
    except ClipboardReadError as read_error:
        logger.debug(f"Clipboard read probe failed: {read_error}")
        try:
            handle.write("")
        except ClipboardWriteError as e:
            raise ClipboardContextError("Failed to create clipboard provider", e) from e
    return handle


def read(handle: ClipboardHandle) -> str:
    return handle.read()


def write(handle: ClipboardHandle, text: str) -> None:
    handle.write(text)

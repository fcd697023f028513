"""Clipboard port injected by the host.

Defines the interface copy/paste style commands use for text transfer.
"""

from typing import Protocol


class ClipboardPort(Protocol):
    """Protocol for a plain-text clipboard."""

    def read_text(self) -> str:
        """Read the current clipboard text.

        Returns:
            Clipboard contents, "" when empty.
        """
        ...

    def write_text(self, text: str) -> None:
        """Replace the clipboard contents.

        Args:
            text: Text to store.
        """
        ...

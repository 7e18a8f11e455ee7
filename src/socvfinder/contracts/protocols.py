"""Protocols for collaborators outside the core."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """Sink for human-readable progress messages (e.g. a status bar)."""

    def message(self, text: str) -> None:
        """Show ``text`` to the user."""
        ...

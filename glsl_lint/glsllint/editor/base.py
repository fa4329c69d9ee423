"""Abstract editor surface the lint engine reports to."""

from __future__ import annotations

from abc import ABC, abstractmethod

from glsllint.editor.models import MessageSeverity


class EditorSurface(ABC):
    """Where notifications go and where virtual documents get displayed."""

    @abstractmethod
    def show_message(self, message: str, severity: MessageSeverity) -> None:
        """Surface a user-facing message."""
        ...

    @abstractmethod
    async def show_document(self, uri: str, language_id: str) -> None:
        """Open a (virtual) document and set its language."""
        ...

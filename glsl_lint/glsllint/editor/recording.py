"""In-memory editor surface used by the HTTP service."""

from __future__ import annotations

import logging

from glsllint.editor.base import EditorSurface
from glsllint.editor.models import MessageSeverity, Notification

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    MessageSeverity.info: logging.INFO,
    MessageSeverity.warning: logging.WARNING,
    MessageSeverity.error: logging.ERROR,
}


class RecordingEditor(EditorSurface):
    """Keeps notifications and shown documents until a client drains them."""

    def __init__(self) -> None:
        self._notifications: list[Notification] = []
        self._shown: list[tuple[str, str]] = []

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def shown_documents(self) -> list[tuple[str, str]]:
        return list(self._shown)

    def show_message(self, message: str, severity: MessageSeverity) -> None:
        logger.log(_LOG_LEVELS[severity], "%s", message)
        self._notifications.append(Notification(message=message, severity=severity))

    async def show_document(self, uri: str, language_id: str) -> None:
        logger.info("Showing document %s as %s", uri, language_id)
        self._shown.append((uri, language_id))

    def drain_notifications(self) -> list[Notification]:
        """Return and forget all pending notifications."""
        drained, self._notifications = self._notifications, []
        return drained

    def drain_shown_documents(self) -> list[tuple[str, str]]:
        drained, self._shown = self._shown, []
        return drained

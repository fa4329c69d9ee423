"""Editor-facing data models."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath

from pydantic import BaseModel, Field


class MessageSeverity(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"


class Notification(BaseModel):
    """A user-facing message raised by the lint pipeline."""

    message: str
    severity: MessageSeverity = MessageSeverity.error


class TextDocument(BaseModel):
    """A document as handed over by the editor."""

    uri: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1, description="File system path or virtual name")
    language_id: str
    text: str = ""

    @property
    def extension(self) -> str:
        return PurePath(self.file_name).suffix

    @property
    def basename(self) -> str:
        return PurePath(self.file_name).name

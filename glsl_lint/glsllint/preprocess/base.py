"""Preprocessor interface for include-flattening steps."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod


class PreprocessError(Exception):
    """An include could not be flattened."""


class Preprocessor(ABC):
    """Flattens one kind of shader include into compilable source."""

    name: str = ""

    def __init__(self, trigger: str | re.Pattern[str]) -> None:
        self._trigger = trigger if isinstance(trigger, re.Pattern) else re.compile(trigger, re.MULTILINE)

    @property
    def trigger(self) -> re.Pattern[str]:
        return self._trigger

    def applies(self, text: str) -> bool:
        return self._trigger.search(text) is not None

    @abstractmethod
    async def flatten(self, text: str, file_name: str) -> str:
        """Return ``text`` with includes resolved. Raises PreprocessError."""
        ...

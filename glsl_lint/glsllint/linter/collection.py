"""Per-document diagnostic sets."""

from __future__ import annotations

from collections.abc import Iterator

from glsllint.linter.models import Diagnostic


class DiagnosticCollection:
    """The published diagnostics, one list per document URI.

    Every lint pass replaces a document's list wholesale.
    """

    def __init__(self, name: str = "glsllint") -> None:
        self.name = name
        self._entries: dict[str, list[Diagnostic]] = {}

    def set(self, uri: str, diagnostics: list[Diagnostic]) -> None:
        self._entries[uri] = list(diagnostics)

    def get(self, uri: str) -> list[Diagnostic]:
        return list(self._entries.get(uri, []))

    def delete(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> Iterator[tuple[str, list[Diagnostic]]]:
        for uri, diagnostics in self._entries.items():
            yield uri, list(diagnostics)

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

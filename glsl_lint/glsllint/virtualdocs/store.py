"""Virtual documents holding flattened shader source."""

from __future__ import annotations

import logging
from pathlib import PurePath

logger = logging.getLogger(__name__)

GLSLIFY_SCHEME = "glslify"
IMPORT_SCHEME = "wpglsl"

# Documents carrying this marker were produced by the linter itself.
FLATTENED_MARKER = "(flattened)"


def flattened_identifier(file_name: str, scheme: str = GLSLIFY_SCHEME) -> str:
    """``glslify:shader.frag-(flattened)``"""
    return f"{scheme}:{PurePath(file_name).name}-{FLATTENED_MARKER}"


def combined_identifier(file_name: str, scheme: str = IMPORT_SCHEME) -> str:
    """``wpglsl:shader.combined.frag``"""
    path = PurePath(file_name)
    return f"{scheme}:{path.stem}.combined{path.suffix}"


def scheme_of(identifier: str) -> str:
    scheme, _, _ = identifier.partition(":")
    return scheme


class VirtualDocumentStore:
    """Identifier to text mapping shared by the engine and the providers.

    Owned by whoever creates it (the service lifespan); writes overwrite.
    """

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}

    def add(self, identifier: str, text: str) -> None:
        self._documents[identifier] = text
        logger.debug("Stored virtual document %s (%d chars)", identifier, len(text))

    def get(self, identifier: str) -> str:
        return self._documents.get(identifier, "")

    def identifiers(self) -> list[str]:
        return sorted(self._documents)

    def clear(self) -> None:
        self._documents.clear()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._documents

    def __len__(self) -> int:
        return len(self._documents)


class VirtualDocumentProvider:
    """Serves store content for identifiers of a single scheme."""

    def __init__(self, scheme: str, store: VirtualDocumentStore) -> None:
        self.scheme = scheme
        self._store = store

    def handles(self, identifier: str) -> bool:
        return scheme_of(identifier) == self.scheme

    def provide(self, identifier: str) -> str:
        if not self.handles(identifier):
            raise KeyError(f"{identifier} is not a '{self.scheme}' document")
        return self._store.get(identifier)

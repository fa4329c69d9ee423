"""Shared FastAPI dependencies."""

from __future__ import annotations

from glsllint.editor.recording import RecordingEditor
from glsllint.linter.collection import DiagnosticCollection
from glsllint.linter.engine import LintEngine
from glsllint.settings import LintSettings
from glsllint.virtualdocs.store import VirtualDocumentProvider, VirtualDocumentStore

_settings: LintSettings | None = None
_editor: RecordingEditor | None = None
_collection: DiagnosticCollection | None = None
_store: VirtualDocumentStore | None = None
_providers: dict[str, VirtualDocumentProvider] = {}
_engine: LintEngine | None = None


def get_settings() -> LintSettings:
    """FastAPI dependency: return the active LintSettings."""
    assert _settings is not None, "Settings not initialised"
    return _settings


def get_editor() -> RecordingEditor:
    """FastAPI dependency: return the shared editor surface."""
    assert _editor is not None, "Editor surface not initialised"
    return _editor


def get_collection() -> DiagnosticCollection:
    assert _collection is not None, "DiagnosticCollection not initialised"
    return _collection


def get_providers() -> dict[str, VirtualDocumentProvider]:
    """FastAPI dependency: virtual document providers keyed by scheme."""
    return _providers


def get_engine() -> LintEngine:
    """FastAPI dependency: return the shared LintEngine."""
    assert _engine is not None, "LintEngine not initialised"
    return _engine

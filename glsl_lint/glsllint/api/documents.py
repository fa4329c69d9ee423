"""Document event and diagnostics endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from glsllint.deps import get_collection, get_editor, get_engine
from glsllint.editor.models import Notification, TextDocument
from glsllint.editor.recording import RecordingEditor
from glsllint.linter.collection import DiagnosticCollection
from glsllint.linter.engine import LintEngine
from glsllint.linter.models import Diagnostic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


class LintResponse(BaseModel):
    """Response body for document open/save events."""

    uri: str
    skipped: bool = Field(False, description="True when the document is not linted")
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class CloseRequest(BaseModel):
    uri: str = Field(..., min_length=1)


class DiagnosticsResponse(BaseModel):
    documents: dict[str, list[Diagnostic]]


class ShownDocument(BaseModel):
    uri: str
    language_id: str


class NotificationsResponse(BaseModel):
    notifications: list[Notification]
    shown_documents: list[ShownDocument]


def _response(document: TextDocument, diagnostics: list[Diagnostic] | None) -> LintResponse:
    if diagnostics is None:
        return LintResponse(uri=document.uri, skipped=True)
    return LintResponse(uri=document.uri, diagnostics=diagnostics)


@router.post("/documents/open", response_model=LintResponse)
async def open_document(
    document: TextDocument,
    engine: LintEngine = Depends(get_engine),
) -> LintResponse:
    """Lint a document that was just opened."""
    return _response(document, await engine.on_open(document))


@router.post("/documents/save", response_model=LintResponse)
async def save_document(
    document: TextDocument,
    engine: LintEngine = Depends(get_engine),
) -> LintResponse:
    """Lint a document that was just saved."""
    return _response(document, await engine.on_save(document))


@router.post("/documents/activate", response_model=list[LintResponse])
async def activate_documents(
    documents: list[TextDocument],
    engine: LintEngine = Depends(get_engine),
) -> list[LintResponse]:
    """Initial sweep over the documents a client already has open."""
    results = await engine.activate(documents)
    return [_response(document, diagnostics) for document, diagnostics in results]


@router.post("/documents/close")
async def close_document(
    body: CloseRequest,
    engine: LintEngine = Depends(get_engine),
) -> dict[str, str]:
    """Forget a closed document's diagnostics."""
    engine.on_close(body.uri)
    return {"status": "closed"}


@router.get("/diagnostics", response_model=DiagnosticsResponse)
async def list_diagnostics(
    uri: str | None = Query(default=None),
    collection: DiagnosticCollection = Depends(get_collection),
) -> DiagnosticsResponse:
    """Published diagnostics, for one document or all of them."""
    if uri is not None:
        if uri not in collection:
            raise HTTPException(status_code=404, detail="No diagnostics for document")
        return DiagnosticsResponse(documents={uri: collection.get(uri)})
    return DiagnosticsResponse(documents=dict(collection.items()))


@router.get("/notifications", response_model=NotificationsResponse)
async def drain_notifications(
    editor: RecordingEditor = Depends(get_editor),
) -> NotificationsResponse:
    """Return and clear pending notifications and display requests."""
    return NotificationsResponse(
        notifications=editor.drain_notifications(),
        shown_documents=[
            ShownDocument(uri=uri, language_id=language_id)
            for uri, language_id in editor.drain_shown_documents()
        ],
    )

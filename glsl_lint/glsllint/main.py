"""FastAPI application -- GLSL Lint entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import glsllint.deps as deps
from glsllint.api.documents import router as documents_router
from glsllint.api.settings import router as settings_router
from glsllint.api.virtual import router as virtual_router
from glsllint.editor.recording import RecordingEditor
from glsllint.linter.collection import DiagnosticCollection
from glsllint.linter.engine import LintEngine
from glsllint.settings import load_settings
from glsllint.virtualdocs.store import (
    GLSLIFY_SCHEME,
    IMPORT_SCHEME,
    VirtualDocumentProvider,
    VirtualDocumentStore,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: activate the linter on startup, tear it down on shutdown."""
    log_level = logging.DEBUG if os.environ.get("GLSLLINT_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    deps._settings = load_settings()
    logger.info(
        "GLSL Lint starting: validator=%s, literal languages=%s",
        deps._settings.glslang_validator_path or "glslangValidator",
        deps._settings.supported_langs_with_string_literals,
    )

    # Virtual documents live exactly as long as the service
    deps._store = VirtualDocumentStore()
    deps._providers = {
        scheme: VirtualDocumentProvider(scheme, deps._store)
        for scheme in (GLSLIFY_SCHEME, IMPORT_SCHEME)
    }

    deps._editor = RecordingEditor()
    deps._collection = DiagnosticCollection()
    deps._engine = LintEngine(
        deps._settings,
        deps._editor,
        deps._collection,
        deps._store,
    )

    yield

    # Shutdown
    if deps._engine:
        deps._engine.dispose()
    if deps._store:
        deps._store.clear()
    deps._engine = None
    deps._collection = None
    deps._editor = None
    deps._providers = {}
    deps._store = None
    deps._settings = None


app = FastAPI(
    title="GLSL Lint",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(documents_router)
app.include_router(virtual_router)
app.include_router(settings_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=os.environ.get("GLSLLINT_HOST", "127.0.0.1"),
        port=int(os.environ.get("GLSLLINT_PORT", "8099")),
        log_level="info",
    )

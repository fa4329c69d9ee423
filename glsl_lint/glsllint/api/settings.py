"""Settings API -- linter configuration and validator health."""

from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

import glsllint.deps as deps
from glsllint.deps import get_settings
from glsllint.linter.engine import LintEngine
from glsllint.linter.invoker import ValidatorNotFoundError, resolve_validator_path
from glsllint.settings import LintSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


class SettingsUpdateRequest(BaseModel):
    glslang_validator_path: str | None = None
    glslang_validator_args: str | None = None
    glslify_pattern: str | None = None
    glslify_path: str | None = None
    additional_stage_associations: dict[str, str] | None = None
    supported_langs_with_string_literals: list[str] | None = None
    workspace_root: str | None = None


@router.get("/settings", response_model=LintSettings)
async def read_settings(
    settings: LintSettings = Depends(get_settings),
) -> LintSettings:
    """Return the active linter settings."""
    return settings


@router.put("/settings", response_model=LintSettings)
async def update_settings(body: SettingsUpdateRequest) -> LintSettings:
    """Update linter settings at runtime (no restart needed).

    Only provided fields are updated; omitted fields keep their current value.
    """
    current = deps._settings
    if current is None or deps._editor is None or deps._collection is None or deps._store is None:
        raise HTTPException(status_code=500, detail="Linter not initialised")

    updates = body.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    for ext in updates.get("additional_stage_associations", {}):
        if not ext.startswith("."):
            raise HTTPException(
                status_code=400,
                detail=f"Stage association keys must be file extensions, got '{ext}'",
            )

    new_settings = current.model_copy(update=updates)
    try:
        engine = LintEngine(new_settings, deps._editor, deps._collection, deps._store)
    except re.error as e:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid glslify_pattern '{new_settings.glslify_pattern}': {e}",
        ) from e

    # Swap globally; diagnostics and virtual documents survive the swap
    deps._settings = new_settings
    deps._engine = engine

    logger.info("Settings updated: %s", sorted(updates))
    return new_settings


@router.get("/health/validator")
async def health_check_validator(
    settings: LintSettings = Depends(get_settings),
) -> dict:
    """Check whether the configured validator binary is available."""
    problems: list[str] = []
    try:
        path = resolve_validator_path(settings.glslang_validator_path, problems.append)
    except ValidatorNotFoundError as e:
        return {"healthy": False, "path": "", "error": str(e)}
    return {"healthy": not problems, "path": path, "error": "; ".join(problems)}

"""Virtual document content endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from glsllint.deps import get_providers
from glsllint.virtualdocs.store import VirtualDocumentProvider, scheme_of

router = APIRouter(prefix="/api", tags=["virtual"])


@router.get("/virtual/{identifier:path}", response_class=PlainTextResponse)
async def get_virtual_document(
    identifier: str,
    providers: dict[str, VirtualDocumentProvider] = Depends(get_providers),
) -> PlainTextResponse:
    """Serve flattened shader text registered by the linter."""
    provider = providers.get(scheme_of(identifier))
    if provider is None:
        raise HTTPException(status_code=404, detail="Unknown virtual document scheme")
    return PlainTextResponse(content=provider.provide(identifier))

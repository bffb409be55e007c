"""Admin API routes for editing templates.

Every write carries the version token the client last read; stale tokens are
reported as conflicts instead of overwriting newer content.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from prompt_assembler.api.deps import get_editor
from prompt_assembler.api.schemas import (
    FileWriteRequest,
    FileWriteResponse,
    SaveResponse,
    StoredFileResponse,
)
from prompt_assembler.interfaces.template_store import (
    InvalidStorePathError,
    StoreDecodeError,
    StoreFileNotFoundError,
    TemplateStoreError,
    VersionConflictError,
)
from prompt_assembler.strategies.template_engine import (
    InvalidTemplateError,
    PartialSaveError,
    TemplateChangeSet,
    TemplateEditor,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from prompt_assembler.strategies.template_engine.editor import TemplateFiles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# =============================================================================
# Helper Functions
# =============================================================================


def _store_error_to_http(e: TemplateStoreError) -> HTTPException:
    """Translate a store failure into an HTTP error."""
    if isinstance(e, InvalidStorePathError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, StoreFileNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, StoreDecodeError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if isinstance(e, VersionConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    logger.error(f"Template store error: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/templates/{slug}/files", response_model=TemplateFiles)
async def load_template_files(
    slug: str,
    editor: TemplateEditor = Depends(get_editor),
) -> TemplateFiles:
    """Load metadata, blocks and extraction rules with their version tokens."""
    try:
        return await editor.load_files(slug)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidTemplateError as e:
        logger.error(f"Invalid template '{slug}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    except TemplateStoreError as e:
        raise _store_error_to_http(e) from e


@router.post(
    "/templates/{slug}/save",
    response_model=SaveResponse,
    responses={409: {"description": "Version conflict"}, 502: {"description": "Store failure"}},
)
async def save_template(
    slug: str,
    changes: TemplateChangeSet,
    editor: TemplateEditor = Depends(get_editor),
):
    """Save edited template files in order: metadata, blocks, rules.

    A failure part-way returns the files that were already saved alongside
    the error, since those commits cannot be rolled back.
    """
    try:
        report = await editor.save_changes(slug, changes)
    except PartialSaveError as e:
        code = (
            status.HTTP_409_CONFLICT
            if isinstance(e.cause, VersionConflictError)
            else status.HTTP_502_BAD_GATEWAY
        )
        return JSONResponse(
            status_code=code,
            content={
                "detail": str(e),
                "saved": [f.model_dump() for f in e.saved],
                "failed": e.failed,
            },
        )
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (InvalidTemplateError, TemplateSyntaxError) as e:
        logger.warning(f"Rejected save of '{slug}': {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e
    except TemplateStoreError as e:
        raise _store_error_to_http(e) from e

    return SaveResponse(message=report.message, saved=report.saved)


@router.get("/files", response_model=StoredFileResponse)
async def read_file(
    path: str = Query(..., min_length=1, description="Store-relative path"),
    editor: TemplateEditor = Depends(get_editor),
) -> StoredFileResponse:
    """Read one file inside the templates root."""
    try:
        stored = await editor.read_file(path)
    except TemplateStoreError as e:
        raise _store_error_to_http(e) from e
    return StoredFileResponse(path=stored.path, content=stored.content, version=stored.version)


@router.put("/files", response_model=FileWriteResponse)
async def write_file(
    request: FileWriteRequest,
    editor: TemplateEditor = Depends(get_editor),
) -> FileWriteResponse:
    """Write one file inside the templates root."""
    try:
        version = await editor.write_file(
            request.path, request.content, request.version, request.message
        )
    except TemplateStoreError as e:
        raise _store_error_to_http(e) from e
    logger.info(f"Wrote {request.path}")
    return FileWriteResponse(path=request.path, version=version)

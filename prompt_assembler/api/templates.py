"""Template listing API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from prompt_assembler.api.deps import get_loader
from prompt_assembler.api.schemas import TemplateListResponse
from prompt_assembler.interfaces.template_store import TemplateStoreError
from prompt_assembler.strategies.template_engine import (
    InvalidTemplateError,
    TemplateLoader,
    TemplateMetadata,
    TemplateNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    loader: TemplateLoader = Depends(get_loader),
) -> TemplateListResponse:
    """List the templates available in the store.

    Templates with missing or invalid metadata are skipped.

    Raises:
        HTTPException: 502 if the store cannot be read.
    """
    try:
        return TemplateListResponse(templates=await loader.list_templates())
    except TemplateStoreError as e:
        logger.error(f"Failed to list templates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to load templates: {e}",
        ) from e


@router.get("/{slug}", response_model=TemplateMetadata)
async def get_template(
    slug: str,
    loader: TemplateLoader = Depends(get_loader),
) -> TemplateMetadata:
    """Return a template's metadata.

    Raises:
        HTTPException: 404 for unknown templates, 500 for invalid metadata.
    """
    try:
        metadata, _ = await loader.load_metadata(slug)
        return metadata
    except TemplateNotFoundError as e:
        logger.warning(f"Template not found: {slug}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidTemplateError as e:
        logger.error(f"Invalid template '{slug}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    except TemplateStoreError as e:
        logger.error(f"Failed to read template '{slug}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

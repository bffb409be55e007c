"""Prompt assembly API route."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from prompt_assembler.api.deps import get_loader
from prompt_assembler.api.schemas import AssembleRequest, AssembleResponse
from prompt_assembler.interfaces.template_store import TemplateStoreError
from prompt_assembler.strategies.template_engine import (
    AssemblyError,
    InvalidTemplateError,
    TemplateLoader,
    TemplateNotFoundError,
    TemplateSyntaxError,
    assemble_prompt,
    normalize_placeholders,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assembly"])


@router.post("/assemble-prompt", response_model=AssembleResponse)
async def assemble(
    request: AssembleRequest,
    loader: TemplateLoader = Depends(get_loader),
) -> AssembleResponse:
    """Assemble the final prompt from reviewed placeholder values.

    Raises:
        HTTPException: 404 for unknown templates, 500 when the template's
            blocks cannot be assembled.
    """
    try:
        template = await loader.load_template(request.template_slug)
    except TemplateNotFoundError as e:
        logger.warning(f"Template not found: {request.template_slug}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidTemplateError as e:
        logger.error(f"Invalid template '{request.template_slug}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    except TemplateStoreError as e:
        logger.error(f"Failed to load template '{request.template_slug}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    data = normalize_placeholders(request.placeholders)

    try:
        prompt = assemble_prompt(template.metadata, template.blocks, data)
    except (AssemblyError, TemplateSyntaxError) as e:
        logger.error(f"Prompt assembly failed for '{request.template_slug}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    return AssembleResponse(prompt=prompt)

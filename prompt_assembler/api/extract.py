"""Placeholder extraction API route.

Combines free text and uploaded documents into one input, then asks the
extractor to fill the chosen template's placeholders.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from prompt_assembler.api.deps import get_extractor, get_loader, get_parsers
from prompt_assembler.api.schemas import ExtractResponse
from prompt_assembler.interfaces.extractor import (
    BaseExtractor,
    ExtractionUnavailableError,
    MalformedExtractionError,
)
from prompt_assembler.interfaces.parser import BaseParser, ParsingError, UnsupportedFormatError
from prompt_assembler.interfaces.template_store import TemplateStoreError
from prompt_assembler.strategies.parsers import parse_files
from prompt_assembler.strategies.template_engine import (
    InvalidTemplateError,
    TemplateLoader,
    TemplateNotFoundError,
    extract_placeholders,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["extraction"])

NO_INPUT_DETAIL = "No input provided. Please enter text or upload files."


async def _combine_input(
    text: str | None,
    files: list[UploadFile],
    parsers: list[BaseParser],
) -> str:
    """Join trimmed free text and parsed uploads, text first."""
    combined = text.strip() if text else ""

    uploads = [(f.filename, await f.read()) for f in files if f.filename]
    if uploads:
        file_text = await parse_files(uploads, parsers)
        combined = f"{combined}\n\n{file_text}" if combined else file_text

    return combined


@router.post("/extract", response_model=ExtractResponse)
async def extract(
    template_slug: str = Form(..., min_length=1),
    text: str | None = Form(default=None),
    files: list[UploadFile] | None = File(default=None),
    loader: TemplateLoader = Depends(get_loader),
    parsers: list[BaseParser] = Depends(get_parsers),
    extractor: BaseExtractor = Depends(get_extractor),
) -> ExtractResponse:
    """Extract placeholder values for a template from text and documents.

    Args:
        template_slug: Template whose placeholders to fill.
        text: Optional free text.
        files: Optional .txt, .md, .pdf or .docx uploads.
        loader: Template loader.
        parsers: Document parsers.
        extractor: Structured extractor.

    Returns:
        ExtractResponse with normalized placeholders and the template name.

    Raises:
        HTTPException: 400 without input, 404 for unknown templates, 415 for
            unsupported uploads, 502/503 when the extractor fails.
    """
    logger.info(f"Extraction requested for template '{template_slug}'")

    try:
        combined = await _combine_input(text, files or [], parsers)
    except UnsupportedFormatError as e:
        logger.warning(f"Rejected upload: {e}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e)
        ) from e
    except ParsingError as e:
        logger.error(f"Failed to parse upload: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e

    if not combined:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NO_INPUT_DETAIL)

    try:
        template = await loader.load_template(template_slug)
    except TemplateNotFoundError as e:
        logger.warning(f"Template not found: {template_slug}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidTemplateError as e:
        logger.error(f"Invalid template '{template_slug}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    except TemplateStoreError as e:
        logger.error(f"Failed to load template '{template_slug}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    try:
        placeholders = await extract_placeholders(extractor, template, combined)
    except ExtractionUnavailableError as e:
        logger.error(f"Extraction unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e
    except MalformedExtractionError as e:
        logger.error(f"Malformed extraction output: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return ExtractResponse(placeholders=placeholders, template_name=template.metadata.name)

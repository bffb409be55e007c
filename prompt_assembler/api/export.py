"""Placeholder export API routes."""

import logging
from urllib.parse import quote

from fastapi import APIRouter
from fastapi.responses import Response

from prompt_assembler.api.schemas import ExportRequest, RowsResponse
from prompt_assembler.strategies.template_engine import normalize_placeholders
from prompt_assembler.strategies.template_engine.export import (
    csv_filename,
    placeholders_to_rows,
    rows_to_csv,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.post("/rows", response_model=RowsResponse)
async def export_rows(request: ExportRequest) -> RowsResponse:
    """Flatten placeholder values into ``placeholder,content`` rows."""
    data = normalize_placeholders(request.placeholders)
    return RowsResponse(rows=placeholders_to_rows(data))


@router.post("/csv")
async def export_csv(request: ExportRequest) -> Response:
    """Download placeholder values as a CSV attachment."""
    data = normalize_placeholders(request.placeholders)
    rows = placeholders_to_rows(data)
    filename = csv_filename(data.artifact_name)
    logger.info(f"Exporting {len(rows)} rows as '{filename}'")
    return Response(
        content=rows_to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": _content_disposition(filename)},
    )

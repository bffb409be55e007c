"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from prompt_assembler.strategies.template_engine.editor import SavedFile
from prompt_assembler.strategies.template_engine.models import (
    ExtractedPlaceholders,
    PlaceholderRow,
    TemplateSummary,
)


# =============================================================================
# Template Schemas
# =============================================================================


class TemplateListResponse(BaseModel):
    """Response for listing templates."""

    templates: list[TemplateSummary]


# =============================================================================
# Extraction and Assembly Schemas
# =============================================================================


class ExtractResponse(BaseModel):
    """Response for the extraction endpoint."""

    placeholders: ExtractedPlaceholders
    template_name: str


class AssembleRequest(BaseModel):
    """Request for assembling a prompt from reviewed placeholder values."""

    template_slug: str = Field(min_length=1, description="Template to assemble")
    placeholders: dict[str, Any] = Field(
        description="Placeholder values; normalized before assembly",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "template_slug": "target-artifact",
                "placeholders": {
                    "artifact_name": "Quarterly Revenue Summary",
                    "inputs": [{"name": "revenue", "use": "Figures to summarize"}],
                    "checklist": ["States the reporting period"],
                },
            }
        }
    }


class AssembleResponse(BaseModel):
    """Response containing the assembled prompt."""

    prompt: str


# =============================================================================
# Export Schemas
# =============================================================================


class ExportRequest(BaseModel):
    """Request for exporting placeholder values as rows or CSV."""

    placeholders: dict[str, Any]


class RowsResponse(BaseModel):
    """Tabular export of placeholder values."""

    rows: list[PlaceholderRow]


# =============================================================================
# Admin Schemas
# =============================================================================


class SaveResponse(BaseModel):
    """Response for a successful admin save."""

    message: str
    saved: list[SavedFile] = Field(default_factory=list)


class StoredFileResponse(BaseModel):
    """A file read through the admin file endpoint."""

    path: str
    content: str
    version: str


class FileWriteRequest(BaseModel):
    """Request for writing one file inside the templates root."""

    path: str = Field(min_length=1)
    content: str
    message: str = Field(min_length=1, description="Change description / commit message")
    version: str | None = Field(
        default=None,
        description="Version token from the last read; omit to create a new file",
    )


class FileWriteResponse(BaseModel):
    """Response for a single-file write."""

    path: str
    version: str


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    error_code: str | None = None

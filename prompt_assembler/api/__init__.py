"""FastAPI routers and dependencies."""

from prompt_assembler.api.admin import router as admin_router
from prompt_assembler.api.assemble import router as assemble_router
from prompt_assembler.api.deps import get_editor, get_extractor, get_factory, get_loader
from prompt_assembler.api.export import router as export_router
from prompt_assembler.api.extract import router as extract_router
from prompt_assembler.api.templates import router as templates_router

__all__ = [
    "admin_router",
    "assemble_router",
    "export_router",
    "extract_router",
    "get_editor",
    "get_extractor",
    "get_factory",
    "get_loader",
    "templates_router",
]

"""Template engine strategies.

Implements block markup parsing, repeat-group expansion, prompt assembly,
extraction schema building and template loading/editing.
"""

from prompt_assembler.strategies.template_engine.assembler import (
    assemble_prompt,
    should_include_block,
)
from prompt_assembler.strategies.template_engine.editor import (
    PartialSaveError,
    SaveReport,
    TemplateChangeSet,
    TemplateEditor,
)
from prompt_assembler.strategies.template_engine.errors import (
    AssemblyError,
    BlockCountMismatchError,
    InvalidTemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from prompt_assembler.strategies.template_engine.expansion import render_block
from prompt_assembler.strategies.template_engine.extraction import (
    build_extraction_prompt,
    extract_placeholders,
)
from prompt_assembler.strategies.template_engine.loader import TemplateLoader
from prompt_assembler.strategies.template_engine.models import (
    BlockConfig,
    BlockContent,
    ExtractedPlaceholders,
    LoadedTemplate,
    PlaceholderConfig,
    TemplateMetadata,
)
from prompt_assembler.strategies.template_engine.normalize import normalize_placeholders

__all__ = [
    "AssemblyError",
    "BlockConfig",
    "BlockContent",
    "BlockCountMismatchError",
    "ExtractedPlaceholders",
    "InvalidTemplateError",
    "LoadedTemplate",
    "PartialSaveError",
    "PlaceholderConfig",
    "SaveReport",
    "TemplateChangeSet",
    "TemplateEditor",
    "TemplateLoader",
    "TemplateMetadata",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "assemble_prompt",
    "build_extraction_prompt",
    "extract_placeholders",
    "normalize_placeholders",
    "render_block",
    "should_include_block",
]

"""Concrete strategy implementations."""

from prompt_assembler.strategies.extractors import (
    OpenAIExtractor,
)
from prompt_assembler.strategies.parsers import (
    DocxParser,
    PdfParser,
    SimpleTextParser,
)
from prompt_assembler.strategies.stores import (
    GitHubTemplateStore,
    LocalTemplateStore,
)

__all__ = [
    "DocxParser",
    "GitHubTemplateStore",
    "LocalTemplateStore",
    "OpenAIExtractor",
    "PdfParser",
    "SimpleTextParser",
]

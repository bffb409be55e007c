"""Abstract base classes for parsing, extraction and template storage."""

from prompt_assembler.interfaces.extractor import (
    BaseExtractor,
    ExtractionError,
    ExtractionUnavailableError,
    MalformedExtractionError,
)
from prompt_assembler.interfaces.parser import (
    BaseParser,
    Document,
    ParsingError,
    UnsupportedFormatError,
)
from prompt_assembler.interfaces.template_store import (
    BaseTemplateStore,
    InvalidStorePathError,
    StoreDecodeError,
    StoredFile,
    StoreEntry,
    StoreFileNotFoundError,
    TemplateStoreError,
    VersionConflictError,
)

__all__ = [
    "BaseExtractor",
    "BaseParser",
    "BaseTemplateStore",
    "Document",
    "ExtractionError",
    "ExtractionUnavailableError",
    "InvalidStorePathError",
    "MalformedExtractionError",
    "ParsingError",
    "StoreDecodeError",
    "StoredFile",
    "StoreEntry",
    "StoreFileNotFoundError",
    "TemplateStoreError",
    "UnsupportedFormatError",
    "VersionConflictError",
]

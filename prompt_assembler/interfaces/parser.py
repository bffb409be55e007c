"""Abstract base class for document parsers.

The Strategy Pattern allows different parsing implementations
to be interchangeable at runtime.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Document:
    """Represents a parsed document with metadata.

    Attributes:
        content: The extracted plain text of the document.
        metadata: Additional parser-specific information (page count, etc.).
        source: The original file name.
    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = ""


class ParsingError(Exception):
    """Raised when a supported file cannot be parsed."""


class UnsupportedFormatError(ParsingError):
    """Raised when no parser handles a file's extension."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Unsupported file type: .{extension.lstrip('.')}")


def file_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` including the dot."""
    _, ext = os.path.splitext(filename)
    return ext.lower()


class BaseParser(ABC):
    """Abstract base class for document parsing strategies.

    All concrete parser implementations must inherit from this class
    and implement the `aparse` method.

    Example:
        ```python
        class PdfParser(BaseParser):
            async def aparse(self, data: bytes, filename: str) -> Document:
                # Implementation here
                pass
        ```
    """

    @abstractmethod
    async def aparse(self, data: bytes, filename: str) -> Document:
        """Asynchronously extract plain text from an uploaded file.

        Args:
            data: The raw file bytes.
            filename: The original file name (used for logging and metadata).

        Returns:
            A Document containing the extracted text and metadata.

        Raises:
            ParsingError: If the file cannot be parsed.
        """
        ...

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return the set of file extensions supported by this parser.

        Returns:
            A set of file extensions (e.g., {'.pdf', '.docx'}).
        """
        ...

    def supports_file(self, filename: str) -> bool:
        """Check if this parser supports the given file.

        Args:
            filename: The name of the file to check.

        Returns:
            True if the file extension is supported, False otherwise.
        """
        return file_extension(filename) in self.supported_extensions

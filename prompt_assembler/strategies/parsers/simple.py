"""Simple text-based document parser.

Handles plain text uploads without any external library.
"""

import logging

from prompt_assembler.interfaces.parser import BaseParser, Document

logger = logging.getLogger(__name__)


class SimpleTextParser(BaseParser):
    """Simple parser for plain text and markdown files.

    Decodes the upload as-is; undecodable bytes are replaced rather than
    failing the whole request.
    """

    def __init__(
        self,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the simple text parser.

        Args:
            encoding: The character encoding to use when decoding uploads.
        """
        self._encoding = encoding

    async def aparse(self, data: bytes, filename: str) -> Document:
        """Decode a plain text upload.

        Args:
            data: Raw file bytes.
            filename: Original file name.

        Returns:
            A Document with the decoded text.
        """
        logger.info(f"Reading text file: {filename} ({len(data)} bytes)")

        content = data.decode(self._encoding, errors="replace")
        if content.startswith("\ufeff"):
            content = content[1:]

        logger.info(f"Successfully read {len(content)} characters from {filename}")
        return Document(
            content=content,
            metadata={
                "parser": "simple_text",
                "source_file": filename,
                "file_size": len(data),
            },
            source=filename,
        )

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".txt", ".md"}

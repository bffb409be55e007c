"""PDF document parser.

Extracts page text from PDF uploads with pdfplumber.
"""

import io
import logging

import pdfplumber

from prompt_assembler.interfaces.parser import BaseParser, Document, ParsingError

logger = logging.getLogger(__name__)


class PdfParser(BaseParser):
    """Parser for PDF files.

    Pages are read in order and their text joined with newlines. Pages
    without a text layer contribute nothing.
    """

    def __init__(self, x_tolerance: float = 1.5, y_tolerance: float = 3) -> None:
        """Initialize the PDF parser.

        Args:
            x_tolerance: Horizontal gap (points) still treated as one word.
            y_tolerance: Vertical gap (points) still treated as one line.
        """
        self._x_tolerance = x_tolerance
        self._y_tolerance = y_tolerance

    async def aparse(self, data: bytes, filename: str) -> Document:
        """Extract the text of a PDF upload.

        Args:
            data: Raw PDF bytes.
            filename: Original file name.

        Returns:
            A Document with the text of all pages.

        Raises:
            ParsingError: If the PDF cannot be opened or read.
        """
        logger.info(f"Parsing PDF: {filename} ({len(data)} bytes)")

        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [
                    page.extract_text(x_tolerance=self._x_tolerance, y_tolerance=self._y_tolerance)
                    or ""
                    for page in pdf.pages
                ]
        except Exception as e:
            logger.error(f"Failed to parse PDF {filename}: {e}", exc_info=True)
            raise ParsingError(f"Could not read PDF {filename}: {e}") from e

        content = "\n".join(pages)
        logger.info(f"Parsed {len(pages)} page(s), {len(content)} characters from {filename}")
        return Document(
            content=content,
            metadata={
                "parser": "pdfplumber",
                "source_file": filename,
                "page_count": len(pages),
            },
            source=filename,
        )

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".pdf"}

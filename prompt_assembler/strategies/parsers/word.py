"""Word document parser.

Extracts paragraph text from .docx uploads with python-docx.
"""

import io
import logging

from docx import Document as load_docx

from prompt_assembler.interfaces.parser import BaseParser, Document, ParsingError

logger = logging.getLogger(__name__)


class DocxParser(BaseParser):
    """Parser for Word (.docx) files.

    Body paragraphs come first, followed by the text of every table cell,
    row by row.
    """

    async def aparse(self, data: bytes, filename: str) -> Document:
        """Extract the raw text of a Word upload.

        Args:
            data: Raw .docx bytes.
            filename: Original file name.

        Returns:
            A Document with the paragraph text.

        Raises:
            ParsingError: If the file is not a readable .docx package.
        """
        logger.info(f"Parsing Word document: {filename} ({len(data)} bytes)")

        try:
            doc = load_docx(io.BytesIO(data))
        except Exception as e:
            logger.error(f"Failed to parse Word document {filename}: {e}", exc_info=True)
            raise ParsingError(f"Could not read Word document {filename}: {e}") from e

        lines = [p.text for p in doc.paragraphs]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append("\t".join(cells))

        content = "\n".join(lines)
        logger.info(
            f"Parsed {len(doc.paragraphs)} paragraphs, {len(doc.tables)} tables from {filename}"
        )
        return Document(
            content=content,
            metadata={
                "parser": "python_docx",
                "source_file": filename,
                "paragraph_count": len(doc.paragraphs),
            },
            source=filename,
        )

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}

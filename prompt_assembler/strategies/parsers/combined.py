"""Parser selection and multi-file text assembly."""

import logging
from collections.abc import Sequence

from prompt_assembler.interfaces.parser import BaseParser, UnsupportedFormatError, file_extension

logger = logging.getLogger(__name__)


def select_parser(filename: str, parsers: Sequence[BaseParser]) -> BaseParser:
    """Return the first parser supporting ``filename``.

    Raises:
        UnsupportedFormatError: If no parser handles the file's extension.
    """
    for parser in parsers:
        if parser.supports_file(filename):
            return parser
    raise UnsupportedFormatError(file_extension(filename))


async def parse_files(
    files: Sequence[tuple[str, bytes]],
    parsers: Sequence[BaseParser],
) -> str:
    """Parse uploads and join them into one text.

    Every file becomes a ``--- filename ---`` section; sections are separated
    by a blank line. All extensions are checked before anything is parsed, so
    an unsupported file fails the request without partial work.

    Args:
        files: (filename, bytes) pairs in upload order.
        parsers: Available parser strategies.

    Returns:
        The combined text.

    Raises:
        UnsupportedFormatError: If any file has an unsupported extension.
        ParsingError: If a supported file cannot be parsed.
    """
    selected = [(name, data, select_parser(name, parsers)) for name, data in files]

    sections: list[str] = []
    for name, data, parser in selected:
        document = await parser.aparse(data, name)
        sections.append(f"--- {name} ---\n{document.content}")

    logger.info(f"Parsed {len(sections)} uploaded file(s)")
    return "\n\n".join(sections)

"""Concrete parser implementations."""

from prompt_assembler.strategies.parsers.combined import parse_files, select_parser
from prompt_assembler.strategies.parsers.pdf import PdfParser
from prompt_assembler.strategies.parsers.simple import SimpleTextParser
from prompt_assembler.strategies.parsers.word import DocxParser

__all__ = [
    "DocxParser",
    "PdfParser",
    "SimpleTextParser",
    "parse_files",
    "select_parser",
]

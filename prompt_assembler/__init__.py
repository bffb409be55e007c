"""Prompt template assembler.

Fills block-structured prompt templates from free text and documents:
an LLM extracts placeholder values, a reviewer edits them, and the
assembler renders the final prompt.
"""

__version__ = "0.1.0"

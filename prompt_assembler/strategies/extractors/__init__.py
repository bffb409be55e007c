"""Concrete extractor implementations."""

from prompt_assembler.strategies.extractors.openai import OpenAIExtractor

__all__ = [
    "OpenAIExtractor",
]

"""Structured extraction interfaces.

Defines the abstract capability that turns free text plus a schema
description into a raw JSON value.
"""

from abc import ABC, abstractmethod
from typing import Any


class ExtractionError(Exception):
    """Base exception for extraction failures."""


class ExtractionUnavailableError(ExtractionError):
    """Raised when the capability could not be reached or produced no answer."""


class MalformedExtractionError(ExtractionError):
    """Raised when the capability answered with undecodable output."""


class BaseExtractor(ABC):
    """Abstract base class for structured extraction strategies.

    Implementations receive the schema description (instructions listing the
    placeholder keys and their shapes) and the user's text, and return the
    decoded JSON answer without interpreting it. Coercing that answer into
    placeholder values is the caller's job.
    """

    @abstractmethod
    async def extract(self, schema_description: str, input_text: str) -> Any:
        """Run one extraction.

        Args:
            schema_description: Instructions and the expected JSON shape.
            input_text: The user's text to extract from.

        Returns:
            The decoded JSON value.

        Raises:
            ExtractionUnavailableError: If no answer was obtained.
            MalformedExtractionError: If the answer is not valid JSON.
        """

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

"""OpenAI-backed structured extractor.

Asks a chat model for a JSON object and decodes it. The client is created
once by the component factory and shared by reference.
"""

import json
import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError

from prompt_assembler.interfaces.extractor import (
    BaseExtractor,
    ExtractionUnavailableError,
    MalformedExtractionError,
)

logger = logging.getLogger(__name__)


class OpenAIExtractor(BaseExtractor):
    """Structured extraction through the OpenAI chat completions API.

    The schema description goes in as the system message and the user's text
    as the user message; ``response_format`` forces a JSON object answer.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o",
        temperature: float | None = 0.1,
    ) -> None:
        """Initialize the extractor.

        Args:
            client: Configured async OpenAI client (timeout included).
            model: Chat model name.
            temperature: Sampling temperature, or None to use the model default.
        """
        self._client = client
        self._model = model
        self._temperature = temperature
        logger.info(f"OpenAIExtractor initialized: model={model}")

    async def extract(self, schema_description: str, input_text: str) -> Any:
        """Run one extraction call and decode the JSON answer.

        Raises:
            ExtractionUnavailableError: On connection, timeout or API errors.
            MalformedExtractionError: If the answer is empty or not valid JSON.
        """
        kwargs: dict[str, Any] = {}
        if self._temperature is not None:
            kwargs["temperature"] = self._temperature

        logger.info(
            f"Calling {self._model} for extraction "
            f"(system_len={len(schema_description)}, user_len={len(input_text)})"
        )
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": schema_description},
                    {"role": "user", "content": input_text},
                ],
                response_format={"type": "json_object"},
                **kwargs,
            )
        except APITimeoutError as e:
            logger.error(f"Extraction call timed out: {e}")
            raise ExtractionUnavailableError("The extraction service timed out") from e
        except APIConnectionError as e:
            logger.error(f"Extraction call could not connect: {e}")
            raise ExtractionUnavailableError("Could not reach the extraction service") from e
        except APIStatusError as e:
            logger.error(f"Extraction call failed: {e.status_code} {e.message}")
            raise ExtractionUnavailableError(
                f"Extraction service error ({e.status_code}): {e.message}"
            ) from e
        except OpenAIError as e:
            logger.error(f"Extraction call failed: {e}", exc_info=True)
            raise ExtractionUnavailableError(f"Extraction failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("Empty extraction response")
            raise MalformedExtractionError("The extraction service returned an empty answer")

        logger.info(f"Extraction response received: {len(content)} chars")
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse extraction JSON: {e}")
            raise MalformedExtractionError(f"Extraction returned invalid JSON: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying OpenAI client."""
        await self._client.close()

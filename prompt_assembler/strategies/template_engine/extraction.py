"""Extraction schema builder.

Turns template metadata, block text and the template's extraction rules into
the instructions handed to the structured-extraction capability, and runs the
extraction end to end.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any

from prompt_assembler.interfaces.extractor import BaseExtractor
from prompt_assembler.strategies.template_engine.models import (
    BlockContent,
    ExtractedPlaceholders,
    LoadedTemplate,
    PlaceholderConfig,
    TemplateMetadata,
)
from prompt_assembler.strategies.template_engine.normalize import normalize_placeholders

logger = logging.getLogger(__name__)


EXTRACTION_PREAMBLE = """You are an information extraction assistant specialized in analyzing text to fill placeholders in prompt templates.

Below are the BLOCK TEMPLATES that assemble into the final prompt. Each block contains placeholders in curly brackets {{ }} that need values extracted from the user's input. Repeat groups ({{#each ...}} ... {{/each}}) are filled from list placeholders."""

OUTPUT_INSTRUCTIONS = """OUTPUT FORMAT:
Return ONLY a valid JSON object with exactly these keys:
{example}

Do NOT include any text outside the JSON object. Do NOT use markdown formatting."""

USER_MESSAGE_TEMPLATE = (
    "Extract all placeholder values from the following text. If information for an "
    "optional placeholder is not found, use the appropriate empty value (empty string "
    "or empty array).\n\n---\n\n{text}"
)


def example_value(placeholder: PlaceholderConfig) -> Any:
    """Return the canonical example shape for a placeholder type."""
    match placeholder.type:
        case "list":
            return ["string", "..."]
        case "variable_list":
            if placeholder.key == "input_definitions":
                return [{"name": "string", "definition": "string"}, "..."]
            return [{"name": "string", "use": "string"}, "..."]
        case _:
            return "string"


def describe_placeholder(placeholder: PlaceholderConfig) -> str:
    """Render one placeholder line of the schema description."""
    status = "REQUIRED" if placeholder.required else "optional"
    return f'- "{placeholder.key}" ({status}, type: {placeholder.type}): {placeholder.description}'


def build_output_example(metadata: TemplateMetadata) -> str:
    """Render the JSON object shape the capability must return."""
    shape = {p.key: example_value(p) for p in metadata.placeholders}
    return json.dumps(shape, indent=2, ensure_ascii=False)


def build_extraction_prompt(
    metadata: TemplateMetadata,
    blocks: Sequence[BlockContent],
    rules: str = "",
) -> str:
    """Build the schema description for the extraction capability.

    Args:
        metadata: Template metadata with the placeholder declarations.
        blocks: Raw block contents, shown to the model for context.
        rules: Free-text extraction rules maintained per template.

    Returns:
        The full instruction text.
    """
    block_descriptions = "\n\n".join(f"=== {b.label} BLOCK ===\n{b.content}" for b in blocks)
    placeholder_descriptions = "\n".join(describe_placeholder(p) for p in metadata.placeholders)

    sections = [
        EXTRACTION_PREAMBLE,
        block_descriptions,
        "---",
        f"Here are ALL the placeholders you must extract, with their descriptions:\n\n"
        f"{placeholder_descriptions}",
    ]
    if rules.strip():
        sections.append(f"EXTRACTION RULES:\n\n{rules.strip()}")
    sections.append(OUTPUT_INSTRUCTIONS.format(example=build_output_example(metadata)))
    return "\n\n".join(sections)


def build_user_message(text: str) -> str:
    """Wrap the user's raw input for the extraction call."""
    return USER_MESSAGE_TEMPLATE.format(text=text)


async def extract_placeholders(
    extractor: BaseExtractor,
    template: LoadedTemplate,
    text: str,
) -> ExtractedPlaceholders:
    """Extract placeholder values for a template from free text.

    Args:
        extractor: The structured-extraction capability.
        template: The template to extract for.
        text: Combined user input.

    Returns:
        Normalized placeholder values.

    Raises:
        ExtractionUnavailableError: If the capability could not be reached.
        MalformedExtractionError: If it answered with undecodable output.
    """
    schema = build_extraction_prompt(template.metadata, template.blocks, template.extraction_rules)
    logger.info(
        f"Extracting placeholders for '{template.slug}' "
        f"(schema_len={len(schema)}, input_len={len(text)})"
    )
    raw = await extractor.extract(schema, build_user_message(text))
    placeholders = normalize_placeholders(raw)
    logger.info(
        f"Extraction complete for '{template.slug}': "
        f"inputs={len(placeholders.inputs)}, checklist={len(placeholders.checklist)}"
    )
    return placeholders

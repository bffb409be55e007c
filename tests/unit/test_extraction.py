"""Unit tests for the extraction schema builder and orchestration."""

import asyncio
import json
from typing import Any

import pytest

from prompt_assembler.interfaces.extractor import BaseExtractor, MalformedExtractionError
from prompt_assembler.strategies.template_engine.extraction import (
    build_extraction_prompt,
    build_output_example,
    build_user_message,
    describe_placeholder,
    extract_placeholders,
)
from prompt_assembler.strategies.template_engine.models import (
    BlockConfig,
    BlockContent,
    LoadedTemplate,
    PlaceholderConfig,
    TemplateMetadata,
)


class FakeExtractor(BaseExtractor):
    """Extractor returning a canned answer and recording its inputs."""

    def __init__(self, answer: Any = None, error: Exception | None = None) -> None:
        self.answer = answer
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def extract(self, schema_description: str, input_text: str) -> Any:
        self.calls.append((schema_description, input_text))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def metadata() -> TemplateMetadata:
    return TemplateMetadata(
        name="Memo",
        blocks=[BlockConfig(filename="role.txt", label="ROLE", required=True)],
        placeholders=[
            PlaceholderConfig(
                key="artifact_name",
                label="Artifact Name",
                description="Name of the artifact.",
                type="text",
                required=True,
                block="ROLE",
            ),
            PlaceholderConfig(key="examples", label="Examples", type="list"),
            PlaceholderConfig(key="inputs", label="Inputs", type="variable_list"),
            PlaceholderConfig(key="input_definitions", label="Definitions", type="variable_list"),
        ],
    )


@pytest.fixture
def template(metadata) -> LoadedTemplate:
    return LoadedTemplate(
        slug="memo",
        metadata=metadata,
        blocks=[BlockContent(label="ROLE", content="You write {{artifact_name}}.")],
        extraction_rules='1. "artifact_name": the memo title.\n',
    )


# =============================================================================
# Schema Builder Tests
# =============================================================================


class TestBuildExtractionPrompt:
    """Test suite for the extraction schema description."""

    def test_describe_placeholder(self, metadata):
        """Test the one-line placeholder description format."""
        assert describe_placeholder(metadata.placeholders[0]) == (
            '- "artifact_name" (REQUIRED, type: text): Name of the artifact.'
        )
        assert describe_placeholder(metadata.placeholders[1]).startswith(
            '- "examples" (optional, type: list)'
        )

    def test_output_example_shapes(self, metadata):
        """Test that example values follow each placeholder type."""
        example = json.loads(build_output_example(metadata))

        assert example["artifact_name"] == "string"
        assert example["examples"] == ["string", "..."]
        assert example["inputs"][0] == {"name": "string", "use": "string"}
        assert example["input_definitions"][0] == {"name": "string", "definition": "string"}

    def test_prompt_sections(self, metadata):
        """Test that blocks, placeholders, rules and format appear in order."""
        blocks = [BlockContent(label="ROLE", content="You write {{artifact_name}}.")]

        prompt = build_extraction_prompt(metadata, blocks, "Be literal.\n")

        assert "=== ROLE BLOCK ===\nYou write {{artifact_name}}." in prompt
        assert prompt.index("=== ROLE BLOCK ===") < prompt.index('- "artifact_name"')
        assert prompt.index('- "artifact_name"') < prompt.index("EXTRACTION RULES:\n\nBe literal.")
        assert prompt.index("EXTRACTION RULES:") < prompt.index("OUTPUT FORMAT:")

    def test_blank_rules_omitted(self, metadata):
        """Test that a template without rules gets no rules section."""
        prompt = build_extraction_prompt(metadata, [], "  \n")

        assert "EXTRACTION RULES" not in prompt

    def test_user_message_wraps_text(self):
        """Test that the user text is appended after the instructions."""
        message = build_user_message("Quarterly memo about revenue")

        assert message.endswith("---\n\nQuarterly memo about revenue")


# =============================================================================
# Orchestration Tests
# =============================================================================


class TestExtractPlaceholders:
    """Test suite for extract_placeholders."""

    def test_normalizes_answer(self, template):
        """Test that the raw answer is normalized before it is returned."""
        extractor = FakeExtractor(
            answer={
                "artifact_name": "Board Memo",
                "examples": "not a list",
                "inputs": [{"name": "Revenue", "use": "figure"}],
            }
        )

        async def run_test():
            return await extract_placeholders(extractor, template, "some text")

        data = asyncio.run(run_test())

        assert data.artifact_name == "Board Memo"
        assert data.examples == []
        assert data.inputs[0].name == "revenue"

        schema, user_message = extractor.calls[0]
        assert "EXTRACTION RULES:" in schema
        assert user_message.endswith("some text")

    def test_non_object_answer(self, template):
        """Test that a JSON array answer yields empty placeholders."""
        extractor = FakeExtractor(answer=["unexpected"])

        data = asyncio.run(extract_placeholders(extractor, template, "text"))

        assert data.artifact_name == ""
        assert data.inputs == []

    def test_errors_propagate(self, template):
        """Test that extractor errors reach the caller unchanged."""
        extractor = FakeExtractor(error=MalformedExtractionError("garbage"))

        with pytest.raises(MalformedExtractionError, match="garbage"):
            asyncio.run(extract_placeholders(extractor, template, "text"))

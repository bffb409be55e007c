"""Shared fixtures for the unit tests."""

import shutil
from pathlib import Path

import pytest

from prompt_assembler.strategies.template_engine.models import (
    BlockConfig,
    BlockContent,
    ExtractedPlaceholders,
    InputVariable,
    TemplateMetadata,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
BUNDLED_TEMPLATES = PROJECT_ROOT / "templates"


@pytest.fixture
def store_root(tmp_path) -> Path:
    """A writable copy of the bundled templates, rooted like the project."""
    shutil.copytree(BUNDLED_TEMPLATES, tmp_path / "templates")
    return tmp_path


@pytest.fixture
def simple_metadata() -> TemplateMetadata:
    """Three-block metadata: required, conditioned on examples, unconditioned."""
    return TemplateMetadata(
        name="Simple",
        blocks=[
            BlockConfig(filename="role.txt", label="ROLE", required=True),
            BlockConfig(filename="examples.txt", label="EXAMPLES", condition="examples"),
            BlockConfig(filename="closing.txt", label="CLOSING"),
        ],
    )


@pytest.fixture
def simple_blocks() -> list[BlockContent]:
    return [
        BlockContent(label="ROLE", content="You write {{artifact_name}}."),
        BlockContent(label="EXAMPLES", content="EXAMPLES:\n{{examples}}"),
        BlockContent(label="CLOSING", content="Done."),
    ]


@pytest.fixture
def revenue_data() -> ExtractedPlaceholders:
    return ExtractedPlaceholders(
        artifact_name="Revenue Summary",
        inputs=[
            InputVariable(name="revenue", use="financial figure"),
            InputVariable(name="date", use="reporting period"),
        ],
        checklist=["Scope Fit: stays on revenue", "- Length: under 200 words"],
    )

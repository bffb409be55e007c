"""Template engine domain models.

Pydantic models for template metadata, block content and the placeholder
values extracted from user input. The assembler, the extraction schema
builder and the export layer all share these models.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_IDENTIFIER_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_WORD_START_RE = re.compile(r"\b\w")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

# Fields a block condition may reference. Lists test non-empty, text tests non-blank.
LIST_CONDITIONS = frozenset(
    {
        "examples",
        "inputs",
        "input_variables_list",
        "input_definitions",
        "hard_boundary_may_not",
        "checklist",
    }
)
TEXT_CONDITIONS = frozenset({"criteria_guidance", "definition", "defined_scope"})
KNOWN_CONDITIONS = LIST_CONDITIONS | TEXT_CONDITIONS

PlaceholderType = Literal["text", "textarea", "list", "variable_list"]


# =============================================================================
# Name conversion
# =============================================================================


def is_identifier(name: str) -> bool:
    """Return True if ``name`` is a raw snake_case identifier."""
    return bool(_IDENTIFIER_RE.match(name))


def display_form(name: str) -> str:
    """Convert a raw identifier into its human-readable label.

    Underscores become spaces and the first character of every word is
    upper-cased; the rest of each word is left as-is.

    Example:
        ```python
        display_form("reporting_period")  # "Reporting Period"
        ```
    """
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), name.replace("_", " "))


def to_identifier(name: str) -> str:
    """Convert a display name (or anything else) into a snake_case identifier."""
    return _NON_ALNUM_RE.sub("_", name.strip().lower()).strip("_")


def _split_name(name: str) -> tuple[str, str]:
    """Split an upstream name into (identifier, label override).

    The label is kept only when the caller supplied a display-ready name that
    the identifier cannot reproduce through ``display_form``.
    """
    name = name.strip()
    if not name or is_identifier(name):
        return name, ""
    identifier = to_identifier(name)
    if not identifier:
        return "", name
    label = "" if display_form(identifier) == name else name
    return identifier, label


# =============================================================================
# Template metadata
# =============================================================================


class BlockConfig(BaseModel):
    """One ordered block of a template."""

    filename: str = Field(description="Block file name inside the template directory")
    label: str = Field(description="Human-readable block label, e.g. 'INPUTS'")
    required: bool = Field(default=False, description="Always include this block")
    condition: str | None = Field(
        default=None,
        description="Field whose presence decides inclusion of a non-required block",
    )

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Block files must live directly inside the template directory."""
        if not v or "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError(f"Invalid block filename '{v}'")
        return v

    @field_validator("condition")
    @classmethod
    def validate_condition(cls, v: str | None) -> str | None:
        """Reject conditions that do not name a known predicate."""
        if v is None or v == "":
            return None
        if v not in KNOWN_CONDITIONS:
            raise ValueError(
                f"Unknown block condition '{v}'. "
                f"Valid options: {', '.join(sorted(KNOWN_CONDITIONS))}"
            )
        return v


class PlaceholderConfig(BaseModel):
    """Description of one extractable placeholder."""

    key: str
    label: str
    description: str = ""
    type: PlaceholderType = "text"
    required: bool = False
    block: str = Field(default="", description="Label of the block owning this placeholder")


class TemplateMetadata(BaseModel):
    """Parsed ``metadata.json`` of a template."""

    name: str
    description: str = ""
    blocks: list[BlockConfig] = Field(default_factory=list)
    placeholders: list[PlaceholderConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_blocks(self) -> "TemplateMetadata":
        """Block file names must be unique within one template."""
        seen: set[str] = set()
        for block in self.blocks:
            if block.filename in seen:
                raise ValueError(f"Duplicate block filename '{block.filename}'")
            seen.add(block.filename)
        return self


class TemplateSummary(BaseModel):
    """Listing entry for a template."""

    slug: str
    name: str
    description: str = ""


class BlockContent(BaseModel):
    """Raw text of one block, paired with its label."""

    label: str
    content: str


class LoadedTemplate(BaseModel):
    """Everything needed to extract into and assemble one template."""

    slug: str
    metadata: TemplateMetadata
    blocks: list[BlockContent]
    extraction_rules: str = ""


# =============================================================================
# Extracted placeholder values
# =============================================================================


class InputVariable(BaseModel):
    """A named input binding: raw identifier plus what the input is used for."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Raw snake_case identifier")
    use: str = Field(default="", description="Operational role of the input")
    label: str = Field(default="", description="Display name override, if any")

    @property
    def display_name(self) -> str:
        return self.label or display_form(self.name)

    @property
    def bracketed_name(self) -> str:
        return f"{{{{{self.name}}}}}"

    @classmethod
    def from_name(cls, name: str, use: str = "") -> "InputVariable":
        """Build a binding from either a raw identifier or a display name."""
        identifier, label = _split_name(name)
        return cls(name=identifier, use=use, label=label)


class InputDefinition(BaseModel):
    """Clarifying definition of an input variable."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    definition: str = ""
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or display_form(self.name)

    @classmethod
    def from_name(cls, name: str, definition: str = "") -> "InputDefinition":
        identifier, label = _split_name(name)
        return cls(name=identifier, definition=definition, label=label)


class InputVariablesListEntry(BaseModel):
    """Row of the name/value variables list, derived from an input binding."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    bracketed_name: str


class ExtractedPlaceholders(BaseModel):
    """Placeholder values for one template, as consumed by the assembler.

    Every list keeps insertion order. Build instances through
    ``normalize_placeholders`` when the source is untrusted.
    """

    model_config = ConfigDict(frozen=True)

    artifact_name: str = ""
    defined_scope: str = ""
    hard_boundary_may_not: list[str] = Field(default_factory=list)
    definition: str = ""
    examples: list[str] = Field(default_factory=list)
    inputs: list[InputVariable] = Field(default_factory=list)
    input_definitions: list[InputDefinition] = Field(default_factory=list)
    checklist: list[str] = Field(default_factory=list)
    criteria_guidance: str = ""

    @property
    def input_variables_list(self) -> list[InputVariablesListEntry]:
        """Name/value rows for the variables list, one per input binding."""
        return [
            InputVariablesListEntry(
                display_name=v.display_name,
                bracketed_name=v.bracketed_name,
            )
            for v in self.inputs
        ]

    def condition_holds(self, condition: str) -> bool:
        """Evaluate a block condition against these values.

        Args:
            condition: One of ``KNOWN_CONDITIONS``.

        Returns:
            True if the named list is non-empty, or the named text is
            non-blank after trimming.

        Raises:
            ValueError: If the condition is not a known predicate.
        """
        if condition in LIST_CONDITIONS:
            return len(getattr(self, condition)) > 0
        if condition in TEXT_CONDITIONS:
            return bool(getattr(self, condition).strip())
        raise ValueError(f"Unknown block condition '{condition}'")


class PlaceholderRow(BaseModel):
    """One ``placeholder,content`` row of the tabular export."""

    placeholder: str
    content: str

"""Unit tests for extraction output normalization and name handling."""

import sys

import pytest

from prompt_assembler.strategies.template_engine.models import (
    ExtractedPlaceholders,
    InputVariable,
    display_form,
    to_identifier,
)
from prompt_assembler.strategies.template_engine.normalize import normalize_placeholders


# =============================================================================
# Name Conversion Tests
# =============================================================================


class TestNames:
    """Test suite for identifier and display-name conversion."""

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("revenue", "Revenue"),
            ("reporting_period", "Reporting Period"),
            ("q3_net_margin", "Q3 Net Margin"),
        ],
    )
    def test_display_form(self, identifier, expected):
        """Test that underscores become spaces and words are capitalized."""
        assert display_form(identifier) == expected

    def test_to_identifier(self):
        """Test that display names collapse into snake_case."""
        assert to_identifier("  Reporting Period (UTC) ") == "reporting_period_utc"

    def test_from_display_name_keeps_no_label(self):
        """Test that a reproducible display name is stored as a raw identifier only."""
        variable = InputVariable.from_name("Reporting Period")

        assert variable.name == "reporting_period"
        assert variable.label == ""
        assert variable.display_name == "Reporting Period"
        assert variable.bracketed_name == "{{reporting_period}}"

    def test_from_irregular_display_name_keeps_label(self):
        """Test that a display name the identifier cannot reproduce is kept as a label."""
        variable = InputVariable.from_name("EBITDA (adj.)")

        assert variable.name == "ebitda_adj"
        assert variable.display_name == "EBITDA (adj.)"


# =============================================================================
# Normalization Tests
# =============================================================================


class TestNormalizePlaceholders:
    """Test suite for normalize_placeholders."""

    def test_wrong_types_coerced(self):
        """Test that wrongly typed scalars and lists fall back to empty values."""
        data = normalize_placeholders({"artifact_name": 123, "checklist": "not-a-list"})

        assert data.artifact_name == ""
        assert data.checklist == []

    @pytest.mark.parametrize("raw", [None, [], "text", 42, True])
    def test_non_object_input(self, raw):
        """Test that non-object JSON yields an empty record."""
        assert normalize_placeholders(raw) == ExtractedPlaceholders()

    def test_list_items_filtered(self):
        """Test that numbers are stringified and other non-strings dropped."""
        data = normalize_placeholders({"examples": ["a", 2, 1.5, None, {"x": 1}, ["y"], True]})

        assert data.examples == ["a", "2", "1.5"]

    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"), reason="no int string conversion limit"
    )
    def test_oversized_int_dropped(self):
        """Test that an int too large to stringify is dropped, not raised."""
        data = normalize_placeholders({"examples": ["a", 10**5000, 3], "checklist": [10**5000]})

        assert data.examples == ["a", "3"]
        assert data.checklist == []

    def test_extra_keys_ignored(self):
        """Test that unexpected keys do not leak into the record."""
        data = normalize_placeholders({"artifact_name": "Memo", "surprise": "value"})

        assert data.artifact_name == "Memo"
        assert "surprise" not in data.model_dump()

    def test_object_entries_default_missing_fields(self):
        """Test that input objects with missing sub-fields get empty strings."""
        data = normalize_placeholders({"inputs": [{"name": "revenue"}, {"use": "orphan"}, {}, 7]})

        assert [(v.name, v.use) for v in data.inputs] == [
            ("revenue", ""),
            ("", "orphan"),
            ("", ""),
        ]

    def test_display_names_canonicalized(self):
        """Test that title-case names are stored as raw identifiers."""
        data = normalize_placeholders(
            {"inputs": [{"name": "Revenue", "use": "financial figure"}, {"name": "net_margin"}]}
        )

        assert [v.name for v in data.inputs] == ["revenue", "net_margin"]
        assert [v.display_name for v in data.inputs] == ["Revenue", "Net Margin"]

    def test_legacy_input_variables_key(self):
        """Test that input_variables is accepted when inputs is absent."""
        data = normalize_placeholders({"input_variables": [{"name": "date", "use": "period"}]})

        assert data.inputs == [InputVariable(name="date", use="period")]

    def test_legacy_variables_list_folded_into_inputs(self):
        """Test that title-case/bracketed rows become inputs when inputs is absent."""
        data = normalize_placeholders(
            {
                "input_variables_list": [
                    {"title_case_name": "Net Margin", "bracketed_snake_case_name": "{{net_margin}}"},
                    {"title_case_name": "EBITDA", "bracketed_snake_case_name": "{{ebitda}}"},
                    "junk",
                ]
            }
        )

        assert [v.name for v in data.inputs] == ["net_margin", "ebitda"]
        assert [v.display_name for v in data.inputs] == ["Net Margin", "EBITDA"]

    def test_inputs_take_precedence_over_legacy_keys(self):
        """Test that explicit inputs win over legacy aliases."""
        data = normalize_placeholders(
            {
                "inputs": [{"name": "a"}],
                "input_variables": [{"name": "b"}],
                "input_variables_list": [{"bracketed_snake_case_name": "{{c}}"}],
            }
        )

        assert [v.name for v in data.inputs] == ["a"]

    def test_input_definitions(self):
        """Test that definitions are normalized like inputs."""
        data = normalize_placeholders(
            {"input_definitions": [{"name": "Net Margin", "definition": "profit / revenue"}, None]}
        )

        assert len(data.input_definitions) == 1
        assert data.input_definitions[0].name == "net_margin"
        assert data.input_definitions[0].definition == "profit / revenue"

    def test_idempotent(self):
        """Test that normalizing a normalized record (or its dump) is a no-op."""
        raw = {
            "artifact_name": "Revenue Summary",
            "hard_boundary_may_not": ["- give advice", 3],
            "inputs": [{"name": "EBITDA (adj.)", "use": "profit"}, {"name": "date"}],
            "input_definitions": [{"name": "date", "definition": "period end"}],
            "checklist": "oops",
        }

        once = normalize_placeholders(raw)

        assert normalize_placeholders(once) == once
        assert normalize_placeholders(once.model_dump()) == once
        assert normalize_placeholders(once.model_dump(mode="json")) == once

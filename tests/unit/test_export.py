"""Unit tests for the tabular placeholder export."""

import csv
import io

from prompt_assembler.strategies.template_engine.export import (
    csv_filename,
    placeholders_to_rows,
    rows_to_csv,
)
from prompt_assembler.strategies.template_engine.models import (
    ExtractedPlaceholders,
    InputVariable,
    PlaceholderRow,
)


def _as_dict(rows: list[PlaceholderRow]) -> dict[str, str]:
    return {row.placeholder: row.content for row in rows}


class TestPlaceholdersToRows:
    """Test suite for placeholders_to_rows."""

    def test_full_record(self, revenue_data):
        """Test indexed variable keys and derived rows."""
        data = revenue_data.model_copy(
            update={"examples": ["one"], "criteria_guidance": "Be strict."}
        )

        rows = placeholders_to_rows(data)
        values = _as_dict(rows)

        assert [row.placeholder for row in rows] == [
            "artifact_name",
            "defined_scope",
            "hard_boundary_may_not",
            "definition",
            "examples",
            "variable1_name",
            "variable1_use",
            "variable2_name",
            "variable2_use",
            "checklist",
            "criteria_guidance",
            "target_artifact",
            "checklist_with_marks",
            "input_variables_list",
        ]
        assert values["variable1_name"] == "revenue"
        assert values["variable2_use"] == "reporting period"
        assert values["target_artifact"] == "Revenue Summary"
        assert values["checklist"] == "- Scope Fit: stays on revenue\n- Length: under 200 words"
        assert values["checklist_with_marks"] == (
            "- [MARK] Scope Fit: stays on revenue\n- [MARK] Length: under 200 words"
        )
        assert values["input_variables_list"] == "Revenue = {{revenue}}\nDate = {{date}}"

    def test_optional_rows_omitted(self):
        """Test that empty optional sections produce no rows."""
        values = _as_dict(placeholders_to_rows(ExtractedPlaceholders(criteria_guidance="   ")))

        assert "examples" not in values
        assert "criteria_guidance" not in values
        assert "input_variables_list" not in values
        assert "variable1_name" not in values
        assert values["checklist"] == ""

    def test_label_used_for_variables_list(self):
        """Test that display labels flow into the variables list row."""
        data = ExtractedPlaceholders(inputs=[InputVariable(name="ebitda", label="EBITDA")])

        assert _as_dict(placeholders_to_rows(data))["input_variables_list"] == "EBITDA = {{ebitda}}"


class TestCsv:
    """Test suite for CSV serialization."""

    def test_round_trips_through_csv_reader(self):
        """Test that multi-line and quoted content survives CSV encoding."""
        rows = [
            PlaceholderRow(placeholder="checklist", content='- a, "quoted"\n- b'),
            PlaceholderRow(placeholder="artifact_name", content="Memo"),
        ]

        text = rows_to_csv(rows)
        parsed = list(csv.reader(io.StringIO(text)))

        assert text.startswith("placeholder,content\r\n")
        assert parsed == [
            ["placeholder", "content"],
            ["checklist", '- a, "quoted"\n- b'],
            ["artifact_name", "Memo"],
        ]

    def test_filename(self):
        """Test download names with and without an artifact name."""
        assert csv_filename("Revenue Summary") == "Revenue Summary placeholders.csv"
        assert csv_filename("  ") == "placeholders.csv"
        assert csv_filename("a/b") == "a-b placeholders.csv"

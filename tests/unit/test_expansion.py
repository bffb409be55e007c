"""Unit tests for the block expansion engine."""

from prompt_assembler.strategies.template_engine.expansion import (
    expand_repeat_group,
    format_bullet_list,
    format_mark_checklist,
    render_block,
    substitute_scalars,
)
from prompt_assembler.strategies.template_engine.markup import Text, parse_block
from prompt_assembler.strategies.template_engine.models import (
    ExtractedPlaceholders,
    InputDefinition,
    InputVariable,
)


# =============================================================================
# List Formatting Tests
# =============================================================================


class TestListFormatting:
    """Test suite for bullet and [MARK] rendering."""

    def test_bullets_added_once(self):
        """Test that items get exactly one bullet prefix."""
        assert format_bullet_list(["a", "- b"]) == "- a\n- b"

    def test_bullets_idempotent(self):
        """Test that rendering already-bulleted items changes nothing."""
        items = ["- first", "- second"]
        once = format_bullet_list(items)

        assert format_bullet_list(once.split("\n")) == once

    def test_mark_strips_one_bullet(self):
        """Test that [MARK] replaces one existing bullet and never doubles."""
        rendered = format_mark_checklist(["Scope Fit: on topic", "- Format: prose", "- - odd"])

        assert rendered.split("\n") == [
            "- [MARK] Scope Fit: on topic",
            "- [MARK] Format: prose",
            "- [MARK] - odd",
        ]
        assert all(line.count("[MARK]") == 1 for line in rendered.split("\n"))

    def test_empty_lists(self):
        """Test that empty lists render as empty text."""
        assert format_bullet_list([]) == ""
        assert format_mark_checklist([]) == ""


# =============================================================================
# Repeat Group Tests
# =============================================================================


class TestExpandRepeatGroup:
    """Test suite for expand_repeat_group."""

    def test_binding_lines_in_order(self):
        """Test the binding-list form renders one line per item in order."""
        nodes = parse_block("{{#each inputs}}\n- {{display_name}}\n{{/each}}")

        expanded = expand_repeat_group(
            nodes, "inputs", [{"display_name": "Revenue"}, {"display_name": "Date"}]
        )

        assert expanded == [Text("- Revenue\n- Date")]

    def test_block_without_group_unchanged(self):
        """Test that a block not using the group is returned unchanged."""
        nodes = parse_block("No groups here {{artifact_name}}")

        assert expand_repeat_group(nodes, "inputs", [{"display_name": "X"}]) == nodes

    def test_other_group_untouched(self):
        """Test that only the named group is expanded."""
        nodes = parse_block("{{#each input_definitions}}{{name}}{{/each}}")

        assert expand_repeat_group(nodes, "inputs", [{"name": "x"}]) == nodes

    def test_zero_items_render_nothing(self):
        """Test that an empty list leaves no marker behind."""
        nodes = parse_block("A\n{{#each inputs}}\n- {{display_name}}\n{{/each}}\nB")

        rendered = substitute_scalars(expand_repeat_group(nodes, "inputs", []), {})

        assert rendered == "A\n\nB"
        assert "{{" not in rendered

    def test_item_fields_shadow_scalars(self):
        """Test that item fields win over document-level scalars of the same name."""
        nodes = parse_block("{{#each inputs}}{{definition}}/{{artifact_name}}{{/each}}")

        expanded = expand_repeat_group(
            nodes,
            "inputs",
            [{"definition": "item"}],
            scalars={"definition": "doc", "artifact_name": "Report"},
        )

        assert expanded == [Text("item/Report")]


# =============================================================================
# Rendering Tests
# =============================================================================


class TestRenderBlock:
    """Test suite for render_block and substitute_scalars."""

    def test_scalars_substituted_everywhere(self):
        """Test that every occurrence of a known key is replaced."""
        data = ExtractedPlaceholders(artifact_name="Memo")

        assert render_block("{{artifact_name}} / {{target_artifact}} / {{artifact_name}}", data) == (
            "Memo / Memo / Memo"
        )

    def test_unknown_placeholder_left_verbatim(self):
        """Test that unknown markers survive exactly as written."""
        data = ExtractedPlaceholders(artifact_name="Memo")

        assert render_block("{{ artifact_name }} {{ not_a_key }}", data) == "Memo {{ not_a_key }}"

    def test_list_scalars_rendered_as_bullets(self):
        """Test that list keys render as bullet lines."""
        data = ExtractedPlaceholders(
            hard_boundary_may_not=["answer unrelated questions"],
            checklist=["- Count: one"],
        )

        rendered = render_block(
            "{{hard_boundary_may_not}}\n{{checklist}}\n{{checklist_with_marks}}", data
        )

        assert rendered == (
            "- answer unrelated questions\n- Count: one\n- [MARK] Count: one"
        )

    def test_mark_checklist_long_key(self):
        """Test the long-form [MARK] checklist key."""
        data = ExtractedPlaceholders(checklist=["Voice: second person"])

        assert render_block("{{checklist, with [MARK] bullets}}", data) == (
            "- [MARK] Voice: second person"
        )

    def test_inserted_values_not_rescanned(self):
        """Test that values containing markers are inserted literally."""
        data = ExtractedPlaceholders(
            artifact_name="{{definition}}",
            definition="SHOULD NOT APPEAR",
            inputs=[InputVariable(name="revenue", use="uses {{artifact_name}}")],
        )

        rendered = render_block(
            "{{artifact_name}}\n{{#each inputs}}{{use}} {{bracketed_name}}{{/each}}", data
        )

        assert rendered == "{{definition}}\nuses {{artifact_name}} {{revenue}}"

    def test_name_use_pairs(self):
        """Test the name/use form joined by one blank line."""
        data = ExtractedPlaceholders(
            inputs=[
                InputVariable(name="revenue", use="financial figure"),
                InputVariable(name="date", use="reporting period"),
            ]
        )
        block = '{{#each inputs sep="\\n\\n"}}\n{{display_name}}\n{{use}}\n{{/each}}'

        assert render_block(block, data) == (
            "Revenue\nfinancial figure\n\nDate\nreporting period"
        )

    def test_name_value_list(self):
        """Test the name/value form with bracketed identifiers."""
        data = ExtractedPlaceholders(
            inputs=[
                InputVariable(name="quarterly_revenue"),
                InputVariable(name="period_end", label="Period End (UTC)"),
            ]
        )
        block = "{{#each input_variables_list}}\n{{display_name}} = {{bracketed_name}}\n{{/each}}"

        assert render_block(block, data) == (
            "Quarterly Revenue = {{quarterly_revenue}}\n"
            "Period End (UTC) = {{period_end}}"
        )

    def test_input_definitions_group(self):
        """Test the definitions group exposes name, display name and definition."""
        data = ExtractedPlaceholders(
            input_definitions=[InputDefinition(name="net_margin", definition="Profit over revenue")]
        )

        assert render_block(
            "{{#each input_definitions}}{{name}}|{{display_name}}: {{definition}}{{/each}}", data
        ) == "net_margin|Net Margin: Profit over revenue"

    def test_unknown_group_left_verbatim(self):
        """Test that a group not backed by any list is emitted as written."""
        block = "{{#each widgets}}\n{{name}}\n{{/each}}"

        assert render_block(block, ExtractedPlaceholders()) == block

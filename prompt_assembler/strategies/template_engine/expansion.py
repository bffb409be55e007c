"""Block expansion engine.

Renders one block's parsed markup against the extracted placeholder values:
repeat groups are expanded first, then scalar placeholders are substituted.
Expanded text becomes literal ``Text`` nodes, so nothing inserted by either
step is ever substituted a second time.
"""

import logging
from collections.abc import Mapping, Sequence

from prompt_assembler.strategies.template_engine.markup import (
    Group,
    Node,
    Placeholder,
    Text,
    iter_groups,
    parse_block,
)
from prompt_assembler.strategies.template_engine.models import ExtractedPlaceholders

logger = logging.getLogger(__name__)

MARK_CHECKLIST_KEY = "checklist, with [MARK] bullets"

SCALAR_KEYS = frozenset(
    {
        "artifact_name",
        "defined_scope",
        "hard_boundary_may_not",
        "definition",
        "examples",
        "checklist",
        "criteria_guidance",
        "target_artifact",
        MARK_CHECKLIST_KEY,
        "checklist_with_marks",
    }
)

# Repeat group -> the ExtractedPlaceholders list it iterates.
REPEAT_GROUPS: dict[str, str] = {
    "inputs": "inputs",
    "input_variables_list": "inputs",
    "input_definitions": "input_definitions",
}

# Item fields each repeat group exposes to its body.
GROUP_FIELDS: dict[str, frozenset[str]] = {
    "inputs": frozenset({"name", "display_name", "use", "bracketed_name"}),
    "input_variables_list": frozenset({"name", "display_name", "use", "bracketed_name"}),
    "input_definitions": frozenset({"name", "display_name", "definition"}),
}

BULLET = "- "


# =============================================================================
# List formatting
# =============================================================================


def format_bullet_list(items: Sequence[str]) -> str:
    """Render items as ``- item`` lines without ever double-prefixing."""
    return "\n".join(item if item.startswith(BULLET) else f"{BULLET}{item}" for item in items)


def format_mark_checklist(items: Sequence[str]) -> str:
    """Render items as ``- [MARK] item`` lines, replacing one existing bullet."""
    return "\n".join(
        f"- [MARK] {item[len(BULLET):] if item.startswith(BULLET) else item}" for item in items
    )


# =============================================================================
# Value tables
# =============================================================================


def scalar_values(data: ExtractedPlaceholders) -> dict[str, str]:
    """Return the rendered text of every known scalar key."""
    marked = format_mark_checklist(data.checklist)
    return {
        "artifact_name": data.artifact_name,
        "defined_scope": data.defined_scope,
        "hard_boundary_may_not": format_bullet_list(data.hard_boundary_may_not),
        "definition": data.definition,
        "examples": format_bullet_list(data.examples),
        "checklist": format_bullet_list(data.checklist),
        "criteria_guidance": data.criteria_guidance,
        "target_artifact": data.artifact_name,
        MARK_CHECKLIST_KEY: marked,
        "checklist_with_marks": marked,
    }


def group_items(data: ExtractedPlaceholders, group: str) -> list[dict[str, str]] | None:
    """Return the per-item fields of a repeat group.

    Args:
        data: Extracted placeholder values.
        group: Repeat group name.

    Returns:
        One field mapping per item, in order, or None for an unknown group.
    """
    if group in ("inputs", "input_variables_list"):
        return [
            {
                "name": v.name,
                "display_name": v.display_name,
                "use": v.use,
                "bracketed_name": v.bracketed_name,
            }
            for v in data.inputs
        ]
    if group == "input_definitions":
        return [
            {
                "name": d.name,
                "display_name": d.display_name,
                "definition": d.definition,
            }
            for d in data.input_definitions
        ]
    return None


# =============================================================================
# Expansion
# =============================================================================


def _render_item(
    body: Sequence[Node], item: Mapping[str, str], scalars: Mapping[str, str]
) -> str:
    parts: list[str] = []
    for node in body:
        if isinstance(node, Text):
            parts.append(node.text)
        elif isinstance(node, Placeholder):
            if node.key in item:
                parts.append(item[node.key])
            else:
                parts.append(scalars.get(node.key, node.source))
        else:
            parts.append(node.source)
    return "".join(parts)


def expand_repeat_group(
    nodes: Sequence[Node],
    group: str,
    items: Sequence[Mapping[str, str]],
    scalars: Mapping[str, str] | None = None,
) -> list[Node]:
    """Replace every ``group`` marker with one rendered body per item.

    Nodes that are not a ``group`` marker pass through unchanged, so a block
    that never uses the group comes back as it went in. Zero items render as
    nothing.

    Args:
        nodes: Parsed block markup.
        group: Name of the repeat group to expand.
        items: Item field mappings, in output order.
        scalars: Document-level values the item body may also reference.

    Returns:
        New node list with the expanded group as literal text.
    """
    scalars = scalars or {}
    expanded: list[Node] = []
    for node in nodes:
        if isinstance(node, Group) and node.name == group:
            text = node.separator.join(_render_item(node.body, item, scalars) for item in items)
            if text:
                expanded.append(Text(text))
        else:
            expanded.append(node)
    return expanded


def substitute_scalars(
    nodes: Sequence[Node], data: ExtractedPlaceholders | Mapping[str, str]
) -> str:
    """Render nodes to text, replacing every known scalar placeholder.

    Unknown placeholders and unexpanded groups are emitted exactly as written.
    """
    values = scalar_values(data) if isinstance(data, ExtractedPlaceholders) else data
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, Text):
            parts.append(node.text)
        elif isinstance(node, Placeholder):
            parts.append(values.get(node.key, node.source))
        else:
            parts.append(node.source)
    return "".join(parts)


def render_nodes(nodes: Sequence[Node], data: ExtractedPlaceholders) -> str:
    """Expand every known repeat group, then substitute scalars."""
    scalars = scalar_values(data)
    result = list(nodes)
    for name in dict.fromkeys(g.name for g in iter_groups(result)):
        items = group_items(data, name)
        if items is None:
            logger.warning(f"Unknown repeat group '{name}' left unexpanded")
            continue
        result = expand_repeat_group(result, name, items, scalars)
    return substitute_scalars(result, scalars)


def render_block(text: str, data: ExtractedPlaceholders) -> str:
    """Parse and render one block's raw text.

    Raises:
        TemplateSyntaxError: If the block markup is malformed.
    """
    return render_nodes(parse_block(text), data)

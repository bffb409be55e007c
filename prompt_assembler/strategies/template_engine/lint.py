"""Static checks for template authoring mistakes.

The assembler tolerates unknown placeholders and empty repeat groups at
render time; these checks surface them to template authors instead.
"""

from collections.abc import Sequence

from prompt_assembler.strategies.template_engine.errors import TemplateSyntaxError
from prompt_assembler.strategies.template_engine.expansion import (
    GROUP_FIELDS,
    REPEAT_GROUPS,
    SCALAR_KEYS,
)
from prompt_assembler.strategies.template_engine.markup import (
    Group,
    Placeholder,
    iter_groups,
    parse_block,
)
from prompt_assembler.strategies.template_engine.models import (
    BlockConfig,
    BlockContent,
    TemplateMetadata,
)


def _lint_group(config: BlockConfig, group: Group) -> list[str]:
    problems: list[str] = []
    prefix = f"{config.filename}:{group.line}"

    fields = GROUP_FIELDS.get(group.name)
    if fields is None:
        return [f"{prefix}: unknown repeat group '{group.name}'"]

    for node in group.body:
        if isinstance(node, Placeholder) and node.key not in fields and node.key not in SCALAR_KEYS:
            problems.append(
                f"{prefix}: unknown field '{node.key}' in repeat group '{group.name}'"
            )

    if REPEAT_GROUPS.get(config.condition or "") != REPEAT_GROUPS[group.name]:
        problems.append(
            f"{prefix}: block '{config.label}' repeats '{group.name}' but is not "
            f"conditioned on it, so an empty list renders an empty section"
        )
    return problems


def lint_block(config: BlockConfig, content: str) -> list[str]:
    """Return authoring problems found in one block's text."""
    try:
        nodes = parse_block(content)
    except TemplateSyntaxError as e:
        return [f"{config.filename}: {e}"]

    problems = [
        f"{config.filename}: unknown placeholder '{node.key}'"
        for node in nodes
        if isinstance(node, Placeholder) and node.key not in SCALAR_KEYS
    ]
    for group in iter_groups(nodes):
        problems.extend(_lint_group(config, group))
    return problems


def lint_template(metadata: TemplateMetadata, blocks: Sequence[BlockContent]) -> list[str]:
    """Return every authoring problem found in a template.

    Args:
        metadata: Validated template metadata.
        blocks: Block contents aligned with ``metadata.blocks``.

    Returns:
        Human-readable problem descriptions; empty when the template is clean.
    """
    problems: list[str] = []
    labels = {block.label for block in metadata.blocks}

    for placeholder in metadata.placeholders:
        if placeholder.block and placeholder.block not in labels:
            problems.append(
                f"placeholder '{placeholder.key}' refers to unknown block '{placeholder.block}'"
            )

    for config, content in zip(metadata.blocks, blocks):
        problems.extend(lint_block(config, content.content))
    return problems

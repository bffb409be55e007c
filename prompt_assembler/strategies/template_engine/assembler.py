"""Template assembler.

Walks the metadata-declared block order, decides which blocks to include,
renders each included block and joins them into the final prompt.
"""

import logging
from collections.abc import Sequence

from prompt_assembler.strategies.template_engine.errors import BlockCountMismatchError
from prompt_assembler.strategies.template_engine.expansion import REPEAT_GROUPS, render_nodes
from prompt_assembler.strategies.template_engine.markup import iter_groups, parse_block
from prompt_assembler.strategies.template_engine.models import (
    BlockConfig,
    BlockContent,
    ExtractedPlaceholders,
    TemplateMetadata,
)

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"


def should_include_block(block: BlockConfig, data: ExtractedPlaceholders) -> bool:
    """Decide whether a block appears in the assembled prompt.

    Required blocks are always included. A conditioned block is included iff
    its condition holds. Anything else is included by default.
    """
    if block.required:
        return True
    if not block.condition:
        return True
    return data.condition_holds(block.condition)


def _check_alignment(metadata: TemplateMetadata, blocks: Sequence[BlockContent]) -> None:
    if len(metadata.blocks) != len(blocks):
        raise BlockCountMismatchError(
            f"Block count mismatch: metadata declares {len(metadata.blocks)} blocks, "
            f"got {len(blocks)} block contents"
        )
    for index, (config, content) in enumerate(zip(metadata.blocks, blocks)):
        if config.label != content.label:
            raise BlockCountMismatchError(
                f"Block {index} mismatch: metadata declares '{config.label}', "
                f"content is labelled '{content.label}'"
            )


def _warn_dangling_groups(
    config: BlockConfig, group_names: set[str], data: ExtractedPlaceholders
) -> None:
    for name in group_names:
        field = REPEAT_GROUPS.get(name)
        if field is None or getattr(data, field):
            continue
        if config.condition and REPEAT_GROUPS.get(config.condition) == field:
            continue
        logger.warning(
            f"Block '{config.label}' renders repeat group '{name}' with no items; "
            f"condition it on '{name}' to exclude it instead"
        )


def assemble_prompt(
    metadata: TemplateMetadata,
    blocks: Sequence[BlockContent],
    data: ExtractedPlaceholders,
) -> str:
    """Assemble the final prompt for a template.

    Args:
        metadata: Template metadata; its block order is the output order.
        blocks: Raw block contents, aligned one-to-one with ``metadata.blocks``.
        data: Placeholder values to render.

    Returns:
        Included blocks, rendered, joined by one blank line.

    Raises:
        BlockCountMismatchError: If ``blocks`` does not line up with the metadata.
        TemplateSyntaxError: If an included block has malformed markup.
    """
    _check_alignment(metadata, blocks)

    sections: list[str] = []
    for config, content in zip(metadata.blocks, blocks):
        if not should_include_block(config, data):
            logger.debug(f"Skipping block '{config.label}' (condition '{config.condition}')")
            continue

        nodes = parse_block(content.content)
        _warn_dangling_groups(config, {g.name for g in iter_groups(nodes)}, data)
        sections.append(render_nodes(nodes, data))

    logger.info(
        f"Assembled '{metadata.name}': {len(sections)}/{len(metadata.blocks)} blocks included"
    )
    return BLOCK_SEPARATOR.join(sections)

"""Template validation script.

Loads every template from the configured store and reports invalid
metadata, malformed block markup, unknown placeholders and repeat groups
in blocks that are not conditioned on their list.

Usage:
    python -m scripts.validate_templates [slug ...]
    or
    python scripts/validate_templates.py (after pip install -e .)

Exits with status 1 when any template has problems.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from prompt_assembler.core.config import get_settings
from prompt_assembler.core.factory import ComponentFactory
from prompt_assembler.strategies.template_engine import InvalidTemplateError, TemplateNotFoundError
from prompt_assembler.strategies.template_engine.lint import lint_template


async def validate(slugs: list[str]) -> int:
    """Validate templates and print a report.

    Args:
        slugs: Templates to check; every template directory when empty.

    Returns:
        Number of templates with problems.
    """
    factory = ComponentFactory(get_settings())
    loader = factory.get_loader()
    failures = 0

    try:
        if not slugs:
            entries = await loader.store.list_dir(get_settings().templates_root)
            slugs = [entry.name for entry in entries if entry.kind == "dir"]

        for slug in slugs:
            try:
                template = await loader.load_template(slug)
            except (TemplateNotFoundError, InvalidTemplateError) as e:
                print(f"[FAIL] {slug}: {e}")
                failures += 1
                continue

            problems = lint_template(template.metadata, template.blocks)
            if problems:
                failures += 1
                print(f"[FAIL] {slug}")
                for problem in problems:
                    print(f"  - {problem}")
            else:
                print(f"[OK]   {slug} ({len(template.blocks)} blocks)")
    finally:
        await factory.aclose()

    return failures


def main() -> None:
    """Run validation for the slugs given on the command line."""
    failures = asyncio.run(validate(sys.argv[1:]))
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()

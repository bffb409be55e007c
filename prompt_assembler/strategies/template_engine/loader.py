"""Template loading from the template store.

A template lives in ``<root>/<slug>/``: ``metadata.json``, one file per block
and an optional ``extraction-rules.txt``. Templates are read fresh on every
call; nothing is cached between requests.
"""

import json
import logging
import re

from pydantic import ValidationError

from prompt_assembler.interfaces.template_store import (
    BaseTemplateStore,
    StoreDecodeError,
    StoredFile,
    StoreFileNotFoundError,
)
from prompt_assembler.strategies.template_engine.errors import (
    InvalidTemplateError,
    TemplateNotFoundError,
)
from prompt_assembler.strategies.template_engine.models import (
    BlockContent,
    LoadedTemplate,
    TemplateMetadata,
    TemplateSummary,
)

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"
RULES_FILENAME = "extraction-rules.txt"

_SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def parse_metadata(content: str, source: str = METADATA_FILENAME) -> TemplateMetadata:
    """Parse and validate metadata JSON.

    Raises:
        InvalidTemplateError: If the JSON is malformed or fails validation.
    """
    try:
        return TemplateMetadata.model_validate(json.loads(content))
    except json.JSONDecodeError as e:
        raise InvalidTemplateError(f"{source} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise InvalidTemplateError(f"{source} is invalid: {e}") from e


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def _block_text(text: str) -> str:
    """Block text without the file's trailing newlines."""
    return _normalize_newlines(text).rstrip("\n")


class TemplateLoader:
    """Reads templates from a ``BaseTemplateStore``."""

    def __init__(self, store: BaseTemplateStore, root: str = "templates") -> None:
        """Initialize the loader.

        Args:
            store: Store holding the template directories.
            root: Store-relative directory containing one folder per template.
        """
        self._store = store
        self._root = root.strip("/")

    @property
    def store(self) -> BaseTemplateStore:
        return self._store

    def path_for(self, slug: str, filename: str = "") -> str:
        """Return the store path of a template file (or of its directory).

        Raises:
            TemplateNotFoundError: If ``slug`` is not a valid template slug.
        """
        if not _SLUG_RE.match(slug):
            raise TemplateNotFoundError(slug)
        base = f"{self._root}/{slug}"
        return f"{base}/{filename}" if filename else base

    def is_template_path(self, path: str) -> bool:
        """Return True if ``path`` lies inside the templates root."""
        return path.startswith(f"{self._root}/")

    async def list_templates(self) -> list[TemplateSummary]:
        """List every template directory that has readable metadata.

        Directories with missing or invalid metadata are skipped with a warning.
        """
        entries = await self._store.list_dir(self._root)
        summaries: list[TemplateSummary] = []
        for entry in entries:
            if entry.kind != "dir":
                continue
            if not _SLUG_RE.match(entry.name):
                logger.warning(
                    f"Skipping template directory with unsupported name: '{entry.name}'"
                )
                continue
            try:
                metadata, _ = await self.load_metadata(entry.name)
            except (TemplateNotFoundError, InvalidTemplateError) as e:
                logger.warning(f"Skipping template '{entry.name}': {e}")
                continue
            summaries.append(
                TemplateSummary(slug=entry.name, name=metadata.name, description=metadata.description)
            )
        logger.info(f"Listed {len(summaries)} templates")
        return summaries

    async def load_metadata(self, slug: str) -> tuple[TemplateMetadata, StoredFile]:
        """Load and validate a template's metadata.

        Returns:
            The parsed metadata and the stored file it came from.

        Raises:
            TemplateNotFoundError: If the template has no metadata file.
            InvalidTemplateError: If the metadata is malformed or not UTF-8.
        """
        try:
            stored = await self._store.read(self.path_for(slug, METADATA_FILENAME))
        except StoreFileNotFoundError as e:
            raise TemplateNotFoundError(slug) from e
        except StoreDecodeError as e:
            raise InvalidTemplateError(f"{slug}/{METADATA_FILENAME} is not valid UTF-8 text") from e
        return parse_metadata(stored.content, f"{slug}/{METADATA_FILENAME}"), stored

    async def load_block_files(self, slug: str, metadata: TemplateMetadata) -> list[StoredFile]:
        """Read every block file in metadata order.

        Raises:
            InvalidTemplateError: If a declared block file is missing or not UTF-8.
        """
        files: list[StoredFile] = []
        for block in metadata.blocks:
            try:
                files.append(await self._store.read(self.path_for(slug, block.filename)))
            except StoreFileNotFoundError as e:
                raise InvalidTemplateError(
                    f"Template '{slug}' declares block '{block.label}' "
                    f"but {block.filename} is missing"
                ) from e
            except StoreDecodeError as e:
                raise InvalidTemplateError(
                    f"Block file {slug}/{block.filename} is not valid UTF-8 text"
                ) from e
        return files

    async def load_blocks(self, slug: str, metadata: TemplateMetadata) -> list[BlockContent]:
        """Load block contents aligned with ``metadata.blocks``."""
        files = await self.load_block_files(slug, metadata)
        return [
            BlockContent(label=block.label, content=_block_text(stored.content))
            for block, stored in zip(metadata.blocks, files)
        ]

    async def load_rules_file(self, slug: str) -> StoredFile | None:
        """Read the extraction rules file, or None if the template has none."""
        try:
            return await self._store.read(self.path_for(slug, RULES_FILENAME))
        except StoreFileNotFoundError:
            return None
        except StoreDecodeError as e:
            raise InvalidTemplateError(f"{slug}/{RULES_FILENAME} is not valid UTF-8 text") from e

    async def load_extraction_rules(self, slug: str) -> str:
        """Return the template's extraction rules text (empty when absent)."""
        stored = await self.load_rules_file(slug)
        return _normalize_newlines(stored.content) if stored else ""

    async def load_template(self, slug: str) -> LoadedTemplate:
        """Load metadata, blocks and extraction rules for one template."""
        logger.info(f"Loading template '{slug}'")
        metadata, _ = await self.load_metadata(slug)
        blocks = await self.load_blocks(slug, metadata)
        rules = await self.load_extraction_rules(slug)
        logger.info(f"Loaded template '{slug}': {len(blocks)} blocks, rules_len={len(rules)}")
        return LoadedTemplate(slug=slug, metadata=metadata, blocks=blocks, extraction_rules=rules)

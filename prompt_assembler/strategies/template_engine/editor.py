"""Admin editing of template files.

Saves go to the template store one file at a time, in a fixed order
(metadata, changed blocks in metadata order, extraction rules), each guarded
by the version token the editor last read. A failure stops the sequence and
reports which files were already committed.
"""

import logging

from pydantic import BaseModel, Field

from prompt_assembler.interfaces.template_store import (
    InvalidStorePathError,
    StoredFile,
    TemplateStoreError,
)
from prompt_assembler.strategies.template_engine.errors import InvalidTemplateError
from prompt_assembler.strategies.template_engine.loader import (
    METADATA_FILENAME,
    RULES_FILENAME,
    TemplateLoader,
    parse_metadata,
)
from prompt_assembler.strategies.template_engine.markup import parse_block
from prompt_assembler.strategies.template_engine.models import TemplateMetadata

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


class EditableFile(BaseModel):
    """A template file as handed to the editor UI."""

    filename: str
    content: str
    version: str | None = Field(default=None, description="None for files not yet stored")
    label: str | None = None


class TemplateFiles(BaseModel):
    """All editable files of one template."""

    slug: str
    metadata: EditableFile
    blocks: list[EditableFile]
    rules: EditableFile


class FileEdit(BaseModel):
    """New content for one file, with the version it was edited from."""

    content: str
    version: str | None = None
    original_content: str | None = Field(
        default=None,
        description="Content as loaded; the file is skipped when unchanged",
    )

    @property
    def changed(self) -> bool:
        return self.original_content is None or self.content != self.original_content


class TemplateChangeSet(BaseModel):
    """Edits to apply to one template."""

    metadata: FileEdit | None = None
    blocks: dict[str, FileEdit] = Field(default_factory=dict, description="Keyed by block filename")
    rules: FileEdit | None = None


class SavedFile(BaseModel):
    filename: str
    version: str


class SaveReport(BaseModel):
    """Outcome of a fully successful save."""

    saved: list[SavedFile] = Field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.saved:
            return "No changes to save."
        return f"Saved {', '.join(f.filename for f in self.saved)}."


class PartialSaveError(Exception):
    """Raised when a save fails after zero or more files were committed.

    Attributes:
        saved: Files committed before the failure, in write order.
        failed: File whose write failed.
        cause: The underlying store error.
    """

    def __init__(self, saved: list[SavedFile], failed: str, cause: TemplateStoreError) -> None:
        self.saved = saved
        self.failed = failed
        self.cause = cause
        partial = f" (saved {', '.join(f.filename for f in saved)} before error)" if saved else ""
        super().__init__(f"Failed to save {failed}: {cause}{partial}")


# =============================================================================
# Editor
# =============================================================================


class TemplateEditor:
    """Loads and saves the editable files of templates."""

    def __init__(self, loader: TemplateLoader) -> None:
        self._loader = loader
        self._store = loader.store

    async def load_files(self, slug: str) -> TemplateFiles:
        """Load metadata, blocks and rules with their version tokens.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            InvalidTemplateError: If metadata is invalid or a block is missing.
        """
        metadata, metadata_file = await self._loader.load_metadata(slug)
        block_files = await self._loader.load_block_files(slug, metadata)
        rules_file = await self._loader.load_rules_file(slug)

        return TemplateFiles(
            slug=slug,
            metadata=EditableFile(
                filename=METADATA_FILENAME,
                content=metadata_file.content,
                version=metadata_file.version,
            ),
            blocks=[
                EditableFile(
                    filename=block.filename,
                    label=block.label,
                    content=stored.content,
                    version=stored.version,
                )
                for block, stored in zip(metadata.blocks, block_files)
            ],
            rules=EditableFile(
                filename=RULES_FILENAME,
                content=rules_file.content if rules_file else "",
                version=rules_file.version if rules_file else None,
            ),
        )

    async def _target_metadata(self, slug: str, changes: TemplateChangeSet) -> TemplateMetadata:
        if changes.metadata is not None and changes.metadata.changed:
            return parse_metadata(changes.metadata.content, f"{slug}/{METADATA_FILENAME}")
        metadata, _ = await self._loader.load_metadata(slug)
        return metadata

    def _plan(
        self, slug: str, metadata: TemplateMetadata, changes: TemplateChangeSet
    ) -> list[tuple[str, FileEdit, str]]:
        """Return (filename, edit, commit message) in write order."""
        order = [block.filename for block in metadata.blocks]
        unknown = sorted(set(changes.blocks) - set(order))
        if unknown:
            raise InvalidTemplateError(
                f"Blocks not declared in {slug} metadata: {', '.join(unknown)}"
            )

        plan: list[tuple[str, FileEdit, str]] = []
        if changes.metadata is not None and changes.metadata.changed:
            plan.append((METADATA_FILENAME, changes.metadata, f"Update {slug} metadata"))
        for filename in order:
            edit = changes.blocks.get(filename)
            if edit is not None and edit.changed:
                parse_block(edit.content)
                plan.append((filename, edit, f"Update {slug} block {filename}"))
        if changes.rules is not None and changes.rules.changed:
            plan.append((RULES_FILENAME, changes.rules, f"Update {slug} extraction rules"))
        return plan

    async def save_changes(self, slug: str, changes: TemplateChangeSet) -> SaveReport:
        """Apply a change set, one file at a time.

        Everything is validated before the first write: metadata must parse,
        changed blocks must be declared and syntactically valid.

        Args:
            slug: Template to modify.
            changes: Edits with the version tokens they were made against.

        Returns:
            The files written and their new version tokens.

        Raises:
            InvalidTemplateError: If validation fails (nothing is written).
            TemplateSyntaxError: If a changed block has malformed markup.
            PartialSaveError: If a write fails; earlier writes stay committed.
        """
        metadata = await self._target_metadata(slug, changes)
        plan = self._plan(slug, metadata, changes)
        logger.info(f"Saving {len(plan)} file(s) for template '{slug}'")

        saved: list[SavedFile] = []
        for filename, edit, message in plan:
            try:
                version = await self._store.write(
                    self._loader.path_for(slug, filename), edit.content, edit.version, message
                )
            except TemplateStoreError as e:
                logger.error(
                    f"Save of '{slug}' stopped at {filename} after "
                    f"{len(saved)} file(s): {e}"
                )
                raise PartialSaveError(saved, filename, e) from e
            saved.append(SavedFile(filename=filename, version=version))

        report = SaveReport(saved=saved)
        logger.info(f"Template '{slug}': {report.message}")
        return report

    async def read_file(self, path: str) -> StoredFile:
        """Read any file inside the templates root."""
        if not self._loader.is_template_path(path):
            raise InvalidStorePathError(path)
        return await self._store.read(path)

    async def write_file(
        self, path: str, content: str, version: str | None, message: str
    ) -> str:
        """Write any file inside the templates root."""
        if not self._loader.is_template_path(path):
            raise InvalidStorePathError(path)
        return await self._store.write(path, content, version, message)

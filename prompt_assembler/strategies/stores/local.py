"""Filesystem-backed template store.

Version tokens are git blob SHA-1 hashes of the file bytes, so a checkout of
the template repository yields the same tokens the GitHub store reports.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path

from prompt_assembler.interfaces.template_store import (
    BaseTemplateStore,
    InvalidStorePathError,
    StoredFile,
    StoreEntry,
    StoreFileNotFoundError,
    TemplateStoreError,
    VersionConflictError,
    decode_content,
    normalize_store_path,
)

logger = logging.getLogger(__name__)


def blob_sha(data: bytes) -> str:
    """Return the git blob SHA-1 of ``data``."""
    header = f"blob {len(data)}\0".encode()
    return hashlib.sha1(header + data).hexdigest()


class LocalTemplateStore(BaseTemplateStore):
    """Template store rooted at a local directory.

    Writes replace files atomically. The version check and the write are not
    locked against other processes; the store serves one request at a time.
    """

    def __init__(self, root: Path | str) -> None:
        """Initialize the store.

        Args:
            root: Directory that store paths are relative to.
        """
        self._root = Path(root).resolve()
        logger.info(f"LocalTemplateStore initialized: root={self._root}")

    def _resolve(self, path: str) -> Path:
        normalized = normalize_store_path(path)
        resolved = (self._root / normalized).resolve()
        if resolved != self._root and self._root not in resolved.parents:
            raise InvalidStorePathError(path)
        return resolved

    async def read(self, path: str) -> StoredFile:
        """Read a file and compute its version token."""
        target = self._resolve(path)
        if not target.is_file():
            raise StoreFileNotFoundError(path)

        data = target.read_bytes()
        logger.debug(f"Read {path} ({len(data)} bytes)")
        return StoredFile(path=path, content=decode_content(data, path), version=blob_sha(data))

    async def write(
        self,
        path: str,
        content: str,
        expected_version: str | None,
        message: str,
    ) -> str:
        """Write a file if ``expected_version`` matches the stored one."""
        target = self._resolve(path)
        current = blob_sha(target.read_bytes()) if target.is_file() else None

        if current != (expected_version or None):
            logger.warning(
                f"Version conflict writing {path}: expected={expected_version} current={current}"
            )
            raise VersionConflictError(path, expected_version, current)

        data = content.encode("utf-8")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
            os.replace(tmp_name, target)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}", exc_info=True)
            raise TemplateStoreError(f"Failed to write {path}: {e}") from e

        version = blob_sha(data)
        logger.info(f"Wrote {path} ({len(data)} bytes, version={version[:7]}): {message}")
        return version

    async def list_dir(self, path: str) -> list[StoreEntry]:
        """List the entries of a directory, sorted by name."""
        target = self._resolve(path)
        if not target.is_dir():
            raise StoreFileNotFoundError(path)
        return [
            StoreEntry(name=child.name, kind="dir" if child.is_dir() else "file")
            for child in sorted(target.iterdir(), key=lambda p: p.name)
            if not child.name.startswith(".")
        ]

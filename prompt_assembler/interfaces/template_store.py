"""Template store interface.

Defines the persistent store that holds template metadata, block files and
extraction rules, with optimistic-concurrency writes guarded by a version
token.
"""

import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class StoredFile:
    """A file read from the store.

    Attributes:
        path: Store-relative path.
        content: Decoded UTF-8 text.
        version: Opaque version token to pass back on write.
    """

    path: str
    content: str
    version: str


@dataclass(frozen=True)
class StoreEntry:
    """A directory listing entry."""

    name: str
    kind: Literal["file", "dir"]


class TemplateStoreError(Exception):
    """Base exception for template store failures."""


class StoreFileNotFoundError(TemplateStoreError):
    """Raised when a path does not exist in the store."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not found: {path}")


class VersionConflictError(TemplateStoreError):
    """Raised when a write carries a stale version token."""

    def __init__(self, path: str, expected: str | None, current: str | None = None) -> None:
        self.path = path
        self.expected = expected
        self.current = current
        super().__init__(
            f"Version conflict on {path}: the file changed since it was loaded. "
            "Reload and reapply your changes."
        )


class InvalidStorePathError(TemplateStoreError):
    """Raised for absolute paths or paths escaping the store root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Invalid path: {path}")


class StoreDecodeError(TemplateStoreError):
    """Raised when a stored file is not valid UTF-8 text."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        detail = f": {reason}" if reason else ""
        super().__init__(f"File is not valid UTF-8 text: {path}{detail}")


def decode_content(data: bytes, path: str) -> str:
    """Decode stored bytes as UTF-8.

    Raises:
        StoreDecodeError: If ``data`` is not valid UTF-8.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StoreDecodeError(path, str(e)) from e


def normalize_store_path(path: str) -> str:
    """Validate and normalize a store-relative path.

    Args:
        path: A relative, forward-slash path.

    Returns:
        The normalized path without leading ``./``.

    Raises:
        InvalidStorePathError: If the path is empty, absolute, or contains
            ``..`` segments.
    """
    if not path or path.startswith(("/", "\\")) or "\\" in path or ":" in path:
        raise InvalidStorePathError(path)
    if any(part == ".." for part in path.split("/")):
        raise InvalidStorePathError(path)
    normalized = posixpath.normpath(path)
    if normalized in (".", ""):
        raise InvalidStorePathError(path)
    return normalized


class BaseTemplateStore(ABC):
    """Abstract base class for template stores.

    Implementations read and write UTF-8 text files addressed by
    store-relative paths. Every write must supply the version token returned
    by the last read; a stale token is rejected, never overwritten.
    """

    @abstractmethod
    async def read(self, path: str) -> StoredFile:
        """Read one file.

        Raises:
            StoreFileNotFoundError: If the file does not exist.
            InvalidStorePathError: If the path is not a safe relative path.
            StoreDecodeError: If the file is not valid UTF-8.
        """

    @abstractmethod
    async def write(
        self,
        path: str,
        content: str,
        expected_version: str | None,
        message: str,
    ) -> str:
        """Write one file.

        Args:
            path: Store-relative path.
            content: New UTF-8 content.
            expected_version: Version token from the last read, or None to
                create a new file.
            message: Change description (commit message for git-backed stores).

        Returns:
            The new version token.

        Raises:
            VersionConflictError: If ``expected_version`` is stale.
            TemplateStoreError: If the write fails for any other reason.
        """

    @abstractmethod
    async def list_dir(self, path: str) -> list[StoreEntry]:
        """List a directory.

        Raises:
            StoreFileNotFoundError: If the directory does not exist.
        """

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

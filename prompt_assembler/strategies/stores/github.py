"""GitHub-backed template store.

Reads and writes template files through the GitHub Contents API. Version
tokens are the blob SHAs GitHub reports; a write with a stale SHA is rejected
by GitHub and surfaced as a version conflict.
"""

import base64
import logging
from urllib.parse import quote

import httpx

from prompt_assembler.interfaces.template_store import (
    BaseTemplateStore,
    StoredFile,
    StoreEntry,
    StoreFileNotFoundError,
    TemplateStoreError,
    VersionConflictError,
    decode_content,
    normalize_store_path,
)

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubTemplateStore(BaseTemplateStore):
    """Template store backed by a GitHub repository branch."""

    def __init__(
        self,
        repo: str,
        token: str,
        branch: str = "main",
        api_url: str = GITHUB_API_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the store.

        Args:
            repo: Repository in ``owner/name`` form.
            token: Token with contents read/write permission.
            branch: Branch to read from and commit to.
            api_url: GitHub API base URL.
            client: Optional preconfigured HTTP client (used by tests).
            timeout: Request timeout in seconds for the default client.
        """
        self._repo = repo
        self._branch = branch
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
        )
        logger.info(f"GitHubTemplateStore initialized: repo={repo}, branch={branch}")

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self._repo}/contents/{quote(normalize_store_path(path))}"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, self._contents_url(path), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"GitHub request failed: {method} {path}: {e}", exc_info=True)
            raise TemplateStoreError(f"GitHub request failed for {path}: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        if response.is_success:
            return
        if response.status_code == 404:
            raise StoreFileNotFoundError(path)
        logger.error(f"GitHub API error: {response.status_code} {response.text}")
        raise TemplateStoreError(f"GitHub API error ({response.status_code}): {response.text}")

    async def read(self, path: str) -> StoredFile:
        """Read a file from the configured branch."""
        response = await self._request("GET", path, params={"ref": self._branch})
        self._raise_for_status(response, path)

        data = response.json()
        if not isinstance(data, dict) or data.get("type") != "file":
            raise StoreFileNotFoundError(path)
        if data.get("encoding") != "base64":
            raise TemplateStoreError(f"Unsupported content encoding for {path}: {data.get('encoding')}")

        content = decode_content(base64.b64decode(data.get("content", "")), path)
        logger.debug(f"Read {path} from GitHub (sha={data['sha'][:7]})")
        return StoredFile(path=path, content=content, version=data["sha"])

    async def write(
        self,
        path: str,
        content: str,
        expected_version: str | None,
        message: str,
    ) -> str:
        """Commit a file; GitHub rejects the commit if the SHA is stale."""
        payload: dict[str, str] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self._branch,
        }
        if expected_version:
            payload["sha"] = expected_version

        response = await self._request("PUT", path, json=payload)
        if response.status_code == 409 or (
            response.status_code == 422 and "sha" in response.text.lower()
        ):
            logger.warning(f"Version conflict writing {path}: {response.text}")
            raise VersionConflictError(path, expected_version)
        self._raise_for_status(response, path)

        data = response.json()
        version = data["content"]["sha"]
        commit_url = (data.get("commit") or {}).get("html_url", "")
        logger.info(f"Committed {path} (sha={version[:7]}) {commit_url}")
        return version

    async def list_dir(self, path: str) -> list[StoreEntry]:
        """List a directory on the configured branch."""
        response = await self._request("GET", path, params={"ref": self._branch})
        self._raise_for_status(response, path)

        data = response.json()
        if not isinstance(data, list):
            raise StoreFileNotFoundError(path)
        return sorted(
            (
                StoreEntry(name=item["name"], kind="dir" if item.get("type") == "dir" else "file")
                for item in data
            ),
            key=lambda entry: entry.name,
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self._client.aclose()

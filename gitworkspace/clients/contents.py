"""Repository contents resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gitworkspace.clients.git_data import _decode_content, _repo_path
from gitworkspace.exceptions import NotFoundError
from gitworkspace.types.contents import ContentEntry, FileContent

if TYPE_CHECKING:
    from gitworkspace.transport import HTTPTransport


def _parse_entry(data: dict[str, Any]) -> ContentEntry:
    return ContentEntry(
        name=data["name"],
        path=data["path"],
        type=data["type"],
        sha=data.get("sha", ""),
    )


class ContentsClient:
    """Client for reading files and directories at a ref."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the contents client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def _get(self, owner: str, repo: str, path: str, ref: str | None) -> Any:
        params = {"ref": ref} if ref else None
        return self.transport.get(
            f"{_repo_path(owner, repo)}/contents/{quote(path.strip('/'), safe='/')}",
            params=params,
        )

    def get_file(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> FileContent:
        """
        Read one file.

        Files above the inline size limit come back with ``encoding`` set
        to "none" and no content; callers fetch those through the blob API
        using ``sha``.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Repository-relative file path
            ref: Branch, tag or commit sha (default branch when omitted)

        Returns:
            FileContent with decoded bytes

        Raises:
            NotFoundError: If the path does not exist, or names a directory
        """
        data = self._get(owner, repo, path, ref)

        if isinstance(data, list) or data.get("type") != "file":
            raise NotFoundError("NOT_A_FILE", f"'{path}' is not a file")

        encoding = data.get("encoding", "base64")
        return FileContent(
            path=data["path"],
            sha=data["sha"],
            content=_decode_content(data) if encoding != "none" else b"",
            encoding=encoding,
            size=data.get("size", 0),
        )

    def list_directory(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> list[ContentEntry]:
        """
        List one directory level.

        A path naming a file yields a single entry for that file.

        Raises:
            NotFoundError: If the path does not exist
        """
        data = self._get(owner, repo, path, ref)

        if isinstance(data, dict):
            return [_parse_entry(data)]
        return [_parse_entry(item) for item in data]

"""Repositories resource client: branches and commit history."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from gitworkspace.clients.git_data import _repo_path
from gitworkspace.types.repos import CommitSummary

if TYPE_CHECKING:
    from gitworkspace.transport import HTTPTransport

# Largest page the API serves
PAGE_SIZE = 100


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_commit_summary(data: dict[str, Any]) -> CommitSummary:
    commit = data.get("commit", {})
    author = commit.get("author") or {}
    return CommitSummary(
        sha=data["sha"],
        message=commit.get("message", ""),
        author_name=author.get("name"),
        author_email=author.get("email"),
        authored_at=_parse_timestamp(author.get("date")),
        parents=[p["sha"] for p in data.get("parents", [])],
    )


class ReposClient:
    """Client for repository-level read operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def list_branches(self, owner: str, repo: str) -> list[str]:
        """
        List all branch names, following pagination.

        Raises:
            NotFoundError: If the repository does not exist
        """
        names: list[str] = []
        page = 1
        while True:
            data = self.transport.get(
                f"{_repo_path(owner, repo)}/branches",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            names.extend(branch["name"] for branch in data)
            if len(data) < PAGE_SIZE:
                return names
            page += 1

    def list_commits(
        self,
        owner: str,
        repo: str,
        sha: str | None = None,
        per_page: int = 30,
    ) -> list[CommitSummary]:
        """
        List the most recent commits reachable from ``sha``.

        Args:
            owner: Repository owner
            repo: Repository name
            sha: Branch name or commit sha to start from (default branch when omitted)
            per_page: Number of commits to return (max 100)

        Raises:
            NotFoundError: If the repository or starting point does not exist
        """
        params: dict[str, Any] = {"per_page": min(per_page, PAGE_SIZE)}
        if sha:
            params["sha"] = sha

        data = self.transport.get(f"{_repo_path(owner, repo)}/commits", params=params)
        return [_parse_commit_summary(item) for item in data]

    def get_commit_files(self, owner: str, repo: str, sha: str) -> list[str]:
        """
        List the paths changed by one commit, following pagination.

        The API serves the file list of a large commit in pages; it stops
        listing files beyond its own cap of 3000.

        Raises:
            NotFoundError: If the commit does not exist
        """
        filenames: list[str] = []
        page = 1
        while True:
            data = self.transport.get(
                f"{_repo_path(owner, repo)}/commits/{sha}",
                params={"per_page": PAGE_SIZE, "page": page},
            )
            files = data.get("files", [])
            filenames.extend(item["filename"] for item in files)
            if len(files) < PAGE_SIZE:
                return filenames
            page += 1

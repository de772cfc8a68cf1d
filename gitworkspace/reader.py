"""
Tree reader.

Read-side operations of a workspace: file listings, directory browsing,
file contents and commit history.
"""

from typing import TYPE_CHECKING

from gitworkspace.exceptions import NotFoundError
from gitworkspace.logging import get_logger
from gitworkspace.types.contents import DirectoryListing
from gitworkspace.types.repos import CommitSummary
from gitworkspace.workspace import BranchWorkspace

if TYPE_CHECKING:
    from gitworkspace.client import GitHubClient

logger = get_logger("reader")


class TreeReader:
    """Reads repository contents at the workspace's active branch."""

    def __init__(self, workspace: BranchWorkspace) -> None:
        self.workspace = workspace

    @property
    def _owner(self) -> str:
        return self.workspace.handle.owner

    @property
    def _repo(self) -> str:
        return self.workspace.handle.name

    @property
    def _client(self) -> "GitHubClient":
        return self.workspace.client

    def list_files(self, only_blobs: bool = False) -> list[str]:
        """
        List every path of the active branch, recursively.

        Args:
            only_blobs: Drop directory (and submodule) entries

        Returns:
            Paths in the order the remote reports them

        Raises:
            NotFoundError: If the branch or its tree cannot be resolved
        """
        branch = self.workspace.current_branch()
        tree = self._client.git.get_tree(self._owner, self._repo, branch, recursive=True)

        if tree.truncated:
            logger.warning(
                "Tree listing of %s@%s was truncated by the remote; "
                "%d entries returned",
                self.workspace.handle.full_name,
                branch,
                len(tree.entries),
            )

        return [e.path for e in tree.entries if e.is_blob or not only_blobs]

    def list_directory(self, path: str = "") -> DirectoryListing:
        """
        List one directory level of the active branch.

        A missing (or empty) directory yields an empty listing rather than
        an error, unlike file reads.
        """
        try:
            entries = self._client.contents.list_directory(
                self._owner, self._repo, path, ref=self.workspace.current_branch()
            )
        except NotFoundError:
            return DirectoryListing()

        listing = DirectoryListing()
        for entry in entries:
            if entry.type == "dir":
                listing.directories.append(entry.path)
            elif entry.type == "file":
                listing.files.append(entry.path)
        return listing

    def read_file(self, path: str) -> bytes:
        """
        Read a file at the tip of the active branch.

        Raises:
            NotFoundError: If the path does not exist on the branch
        """
        return self._read(path, self.workspace.current_branch())

    def read_file_at_commit(self, path: str, commit_sha: str) -> bytes:
        """
        Read a file as it was at a specific commit.

        Independent of the active branch.

        Raises:
            NotFoundError: If the commit or the path does not exist
        """
        return self._read(path, commit_sha)

    def list_commits(self, branch: str | None = None, limit: int = 30) -> list[CommitSummary]:
        """List the most recent commits of a branch (the active one by default)."""
        return self._client.repos.list_commits(
            self._owner,
            self._repo,
            sha=branch or self.workspace.current_branch(),
            per_page=limit,
        )

    def get_commit_files(self, commit_sha: str) -> list[str]:
        """
        List the paths changed by a commit.

        Raises:
            NotFoundError: If the commit does not exist
        """
        return self._client.repos.get_commit_files(self._owner, self._repo, commit_sha)

    def _read(self, path: str, ref: str) -> bytes:
        file = self._client.contents.get_file(self._owner, self._repo, path, ref=ref)
        if file.encoding == "none":
            # Too large to be inlined by the contents API
            return self._client.git.get_blob(self._owner, self._repo, file.sha)
        return file.content

"""
Agent-facing repository workspace.

Composes the branch workspace, tree reader, protected-branch guard, commit
builder and pull request deduplicator behind the operations an agent calls.
"""

import os
from collections.abc import Iterable, Mapping
from typing import Any

from gitworkspace.client import GitHubClient
from gitworkspace.committer import DEFAULT_MAX_WORKERS, AtomicCommitBuilder
from gitworkspace.exceptions import ConfigurationError, WorkspaceError
from gitworkspace.guard import ProtectedBranchGuard
from gitworkspace.logging import get_logger
from gitworkspace.pull_requests import PullRequestDeduplicator
from gitworkspace.reader import TreeReader
from gitworkspace.types.git import DEFAULT_IDENTITY, CommitIdentity
from gitworkspace.types.pulls import PullRequest
from gitworkspace.types.repos import RepositoryHandle
from gitworkspace.types.workspace import CommitAttempt, FileChange, FileReadResult
from gitworkspace.workspace import BranchWorkspace

logger = get_logger()


def _as_change(item: FileChange | Mapping[str, Any]) -> FileChange:
    if isinstance(item, FileChange):
        return item
    return FileChange.from_dict(dict(item))


class RepositoryWorkspace:
    """
    Branch-scoped access to one remote repository.

    Every operation names the branch it works on; the workspace checks it
    out (creating it from the base branch when missing) before reading or
    writing. Use one instance per task: the active branch is per-instance
    state.

    Example:
        ```python
        from gitworkspace import GitHubClient, RepositoryHandle, RepositoryWorkspace

        client = GitHubClient(token="ghp_...")
        handle = RepositoryHandle("octo", "demo", protected_branches={"main"})

        with RepositoryWorkspace(client, handle) as repo:
            repo.commit_files(
                "feature/readme",
                [{"path": "README.md", "content": "# Demo\n"}],
                "Update readme",
            )
            repo.create_pull_request("feature/readme", "Update readme")
        ```
    """

    def __init__(
        self,
        client: GitHubClient,
        handle: RepositoryHandle,
        identity: CommitIdentity = DEFAULT_IDENTITY,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """
        Args:
            client: Remote gateway (GitHubClient or a compatible fake)
            handle: Repository identity, base branch and protected branches
            identity: Author and committer of every commit
            max_workers: Upper bound on concurrent blob uploads per commit
        """
        self.client = client
        self.handle = handle
        self.guard = ProtectedBranchGuard(handle.protected_branches)
        self.workspace = BranchWorkspace(client, handle)
        self.reader = TreeReader(self.workspace)
        self.committer = AtomicCommitBuilder(
            client,
            handle,
            guard=self.guard,
            identity=identity,
            max_workers=max_workers,
        )
        self.pulls = PullRequestDeduplicator(self.workspace)

    @classmethod
    def from_env(cls) -> "RepositoryWorkspace":
        """
        Create a workspace from environment variables.

        Environment variables:
            GITHUB_TOKEN: API token (required)
            GITHUB_API_URL: Base URL for API (optional)
            GITWORKSPACE_OWNER: Repository owner (required)
            GITWORKSPACE_REPO: Repository name (required)
            GITWORKSPACE_BASE_BRANCH: Base branch (optional, default: main)
            GITWORKSPACE_PROTECTED_BRANCHES: Comma-separated protected branches (optional)
            GITWORKSPACE_COMMITTER_NAME: Commit identity name (optional)
            GITWORKSPACE_COMMITTER_EMAIL: Commit identity email (optional)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        owner = os.environ.get("GITWORKSPACE_OWNER")
        repo = os.environ.get("GITWORKSPACE_REPO")

        if not owner:
            raise ConfigurationError("GITWORKSPACE_OWNER environment variable not set")
        if not repo:
            raise ConfigurationError("GITWORKSPACE_REPO environment variable not set")

        protected = os.environ.get("GITWORKSPACE_PROTECTED_BRANCHES", "")
        handle = RepositoryHandle(
            owner=owner,
            name=repo,
            base_branch=os.environ.get("GITWORKSPACE_BASE_BRANCH", "main"),
            protected_branches=frozenset(b.strip() for b in protected.split(",") if b.strip()),
        )
        identity = CommitIdentity(
            name=os.environ.get("GITWORKSPACE_COMMITTER_NAME", DEFAULT_IDENTITY.name),
            email=os.environ.get("GITWORKSPACE_COMMITTER_EMAIL", DEFAULT_IDENTITY.email),
        )

        return cls(GitHubClient.from_env(), handle, identity=identity)

    @property
    def current_branch(self) -> str:
        return self.workspace.current_branch()

    def list_branches(self) -> list[str]:
        """List all branch names of the repository."""
        return self.workspace.list_branches()

    def list_files(self, branch: str) -> list[str]:
        """List every file (directories excluded) of ``branch``."""
        self.workspace.checkout(branch)
        return self.reader.list_files(only_blobs=True)

    def read_files(self, branch: str, filenames: Iterable[str]) -> dict[str, FileReadResult]:
        """
        Read several files of ``branch``.

        A failure for one path is recorded in that path's result and does
        not abort the others.
        """
        self.workspace.checkout(branch)

        results: dict[str, FileReadResult] = {}
        for path in filenames:
            try:
                results[path] = FileReadResult(path=path, content=self.reader.read_file(path))
            except WorkspaceError as e:
                logger.debug("Reading '%s' on '%s' failed: %s", path, branch, e)
                results[path] = FileReadResult(
                    path=path, error_code=e.code, error_message=e.message
                )
            except Exception as e:
                logger.warning("Reading '%s' on '%s' failed unexpectedly: %r", path, branch, e)
                results[path] = FileReadResult(
                    path=path, error_code="READ_FAILED", error_message=str(e) or type(e).__name__
                )
        return results

    def commit_files(
        self,
        branch: str,
        files: Iterable[FileChange | Mapping[str, Any]],
        message: str,
    ) -> CommitAttempt:
        """
        Commit ``files`` to ``branch`` as one commit, creating the branch if needed.

        The protected-branch check runs before the checkout, so a protected
        branch is never created or touched.

        Raises:
            ProtectedBranchError: If ``branch`` is protected
            StaleBranchError: If the branch moved during the commit
            AmbiguousCommitOutcomeError: If the final ref update may or may not have applied
        """
        self.guard.check(branch)
        changes = [_as_change(item) for item in files]
        # Reject bad requests before checkout can create the branch
        if not changes:
            raise ValueError("At least one file change is required")
        if not message or not message.strip():
            raise ValueError("Commit message must not be empty")

        self.workspace.checkout(branch)
        return self.committer.run(branch, changes, message)

    def write_file(
        self, branch: str, path: str, content: str | bytes, message: str
    ) -> CommitAttempt:
        """Create or replace a single file on ``branch``."""
        return self.commit_files(branch, [FileChange(path=path, content=content)], message)

    def create_pull_request(self, branch: str, title: str, body: str = "") -> PullRequest:
        """Open (or reuse) a pull request from ``branch`` into the base branch."""
        self.workspace.checkout(branch)
        return self.pulls.ensure_pull_request(title, body)

    def close(self) -> None:
        """Close the underlying client."""
        self.client.close()

    def __enter__(self) -> "RepositoryWorkspace":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

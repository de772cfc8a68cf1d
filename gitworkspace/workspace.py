"""
Branch-scoped workspace.

Tracks which branch subsequent reads and writes target, and makes sure that
branch exists on the remote before it becomes active.
"""

from typing import TYPE_CHECKING

from gitworkspace.exceptions import NotFoundError, ValidationError
from gitworkspace.logging import get_logger
from gitworkspace.types.git import BRANCH_REF_PREFIX
from gitworkspace.types.repos import RepositoryHandle

if TYPE_CHECKING:
    from gitworkspace.client import GitHubClient

logger = get_logger("workspace")


class BranchWorkspace:
    """
    Holds the active branch of one logical session.

    Not safe to share between concurrent operations on different branches;
    create one workspace per task instead.

    Example:
        ```python
        workspace = BranchWorkspace(client, RepositoryHandle("octo", "demo"))
        workspace.checkout("feature/x")   # created from main if missing
        assert workspace.current_branch() == "feature/x"
        ```
    """

    def __init__(self, client: "GitHubClient", handle: RepositoryHandle) -> None:
        """
        Args:
            client: Remote gateway (GitHubClient or a compatible fake)
            handle: Repository identity; its base branch is the initial active branch
        """
        self.client = client
        self.handle = handle
        self._branch = handle.base_branch

    @property
    def branch(self) -> str:
        return self._branch

    def current_branch(self) -> str:
        """Return the active branch name."""
        return self._branch

    def branch_exists(self, name: str) -> bool:
        """
        Check whether a branch exists on the remote.

        Only a not-found answer means "absent"; any other failure propagates.
        """
        try:
            self.client.git.get_ref(self.handle.owner, self.handle.name, f"heads/{name}")
        except NotFoundError:
            return False
        return True

    def head_sha(self, branch: str | None = None) -> str:
        """
        Return the commit a branch currently points to.

        Raises:
            NotFoundError: If the branch does not exist
        """
        ref = self.client.git.get_ref(
            self.handle.owner, self.handle.name, f"heads/{branch or self._branch}"
        )
        return ref.sha

    def checkout(self, name: str) -> str:
        """
        Make ``name`` the active branch, creating it from the base branch if needed.

        Checking out an existing branch makes no remote mutation. Note that
        checkout is not purely observational: it may create a remote branch.

        Returns:
            The active branch name
        """
        if not name:
            raise ValueError("Branch name must not be empty")

        if not self.branch_exists(name):
            self._create_branch(name, self.handle.base_branch)

        self._branch = name
        return name

    def list_branches(self) -> list[str]:
        """List all branch names of the repository."""
        return self.client.repos.list_branches(self.handle.owner, self.handle.name)

    def _create_branch(self, name: str, source: str) -> None:
        source_sha = self.head_sha(source)
        try:
            self.client.git.create_ref(
                self.handle.owner,
                self.handle.name,
                f"{BRANCH_REF_PREFIX}{name}",
                source_sha,
            )
        except ValidationError:
            # Another session may have created it between the check and the create
            if not self.branch_exists(name):
                raise
            logger.info("Branch '%s' was created concurrently; using it", name)
            return

        logger.info(
            "Created branch '%s' from '%s' at %s in %s",
            name,
            source,
            source_sha,
            self.handle.full_name,
        )

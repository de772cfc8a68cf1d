"""Pull request creation without duplicates."""

from gitworkspace.logging import get_logger
from gitworkspace.types.pulls import PullRequest
from gitworkspace.workspace import BranchWorkspace

logger = get_logger("pulls")


class PullRequestDeduplicator:
    """
    Opens a pull request from the active branch into the base branch,
    reusing an open one when it already exists.

    The remote does not enforce one open pull request per (head, base)
    pair; this lookup is what keeps repeated calls from stacking duplicates.
    """

    def __init__(self, workspace: BranchWorkspace) -> None:
        self.workspace = workspace

    def find_existing(self) -> PullRequest | None:
        """Return the first open pull request for the active branch, if any."""
        handle = self.workspace.handle
        pulls = self.workspace.client.pulls.list(
            handle.owner,
            handle.name,
            state="open",
            head=f"{handle.owner}:{self.workspace.current_branch()}",
            base=handle.base_branch,
        )
        return pulls[0] if pulls else None

    def ensure_pull_request(self, title: str, body: str = "") -> PullRequest:
        """
        Return the open pull request for the active branch, creating it if needed.

        An existing pull request is returned unchanged; its title and body
        are never edited.
        """
        existing = self.find_existing()
        if existing is not None:
            logger.info(
                "Reusing open pull request #%d for '%s'",
                existing.number,
                self.workspace.current_branch(),
            )
            return existing

        handle = self.workspace.handle
        pull = self.workspace.client.pulls.create(
            handle.owner,
            handle.name,
            title=title,
            head=self.workspace.current_branch(),
            base=handle.base_branch,
            body=body,
        )
        pull.created = True
        logger.info(
            "Opened pull request #%d: %s -> %s",
            pull.number,
            pull.head,
            pull.base,
        )
        return pull

"""Pull requests resource client."""

from typing import TYPE_CHECKING, Any

from gitworkspace.clients.git_data import _repo_path
from gitworkspace.types.pulls import PullRequest

if TYPE_CHECKING:
    from gitworkspace.transport import HTTPTransport


def _parse_pull_request(data: dict[str, Any]) -> PullRequest:
    return PullRequest(
        number=data["number"],
        title=data["title"],
        head=data["head"]["ref"],
        base=data["base"]["ref"],
        body=data.get("body"),
        state=data["state"],
        html_url=data.get("html_url"),
    )


class PullsClient:
    """Client for pull request operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the pulls client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str = "",
    ) -> PullRequest:
        """
        Create a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            title: Pull request title
            head: Branch containing changes
            base: Branch to merge into
            body: Pull request description

        Raises:
            ValidationError: If a pull request already exists or the branches are invalid
        """
        data = self.transport.post(
            f"{_repo_path(owner, repo)}/pulls",
            {"title": title, "head": head, "base": base, "body": body},
        )
        return _parse_pull_request(data)

    def list(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        head: str | None = None,
        base: str | None = None,
    ) -> list[PullRequest]:
        """
        List pull requests.

        Args:
            owner: Repository owner
            repo: Repository name
            state: "open", "closed" or "all"
            head: Filter by source, as "owner:branch"
            base: Filter by target branch
        """
        params: dict[str, str] = {"state": state}
        if head:
            params["head"] = head
        if base:
            params["base"] = base

        data = self.transport.get(f"{_repo_path(owner, repo)}/pulls", params=params)
        return [_parse_pull_request(pr) for pr in data]

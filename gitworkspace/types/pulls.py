"""Pull request data models."""

from dataclasses import dataclass


@dataclass
class PullRequest:
    """Pull request information."""

    number: int
    title: str
    head: str  # source branch
    base: str  # target branch
    body: str | None
    state: str  # "open" or "closed"
    html_url: str | None = None
    created: bool = False  # True when the ensuring call opened it

"""Repository-related data models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RepositoryHandle:
    """Immutable identity of a remote repository."""

    owner: str
    name: str
    base_branch: str = "main"
    protected_branches: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("owner and name are required")
        if not self.base_branch:
            raise ValueError("base_branch must not be empty")
        # Accept any iterable of names but store an immutable set
        object.__setattr__(self, "protected_branches", frozenset(self.protected_branches))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class CommitSummary:
    """Commit metadata from the history listing."""

    sha: str
    message: str
    author_name: str | None
    author_email: str | None
    authored_at: datetime | None
    parents: list[str] = field(default_factory=list)

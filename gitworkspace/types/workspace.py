"""Workspace-level data models: requested changes, read results, commit runs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class FileChange:
    """A requested write of one file."""

    path: str
    content: str | bytes

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path.strip():
            raise ValueError("FileChange path must be a non-empty string")
        if self.path.startswith("/"):
            raise ValueError(f"FileChange path must be repository-relative: {self.path!r}")
        if not isinstance(self.content, (str, bytes)):
            raise ValueError(f"FileChange content for {self.path!r} must be str or bytes")

    @property
    def data(self) -> bytes:
        """Raw bytes of the content; text is encoded as UTF-8."""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileChange":
        """Build a change from an agent payload ``{"path": ..., "content": ...}``."""
        try:
            return cls(path=data["path"], content=data["content"])
        except KeyError as e:
            raise ValueError(f"File change is missing field {e.args[0]!r}") from e


@dataclass
class FileReadResult:
    """Outcome of reading one file of a batch."""

    path: str
    content: bytes | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def found(self) -> bool:
        return self.error_code is None

    @property
    def text(self) -> str | None:
        if self.content is None:
            return None
        return self.content.decode("utf-8", errors="replace")


class CommitState(str, Enum):
    """Steps of an atomic commit run, in order."""

    PENDING = "PENDING"
    PARENT_RESOLVED = "PARENT_RESOLVED"
    BLOBS_CREATED = "BLOBS_CREATED"
    TREE_CREATED = "TREE_CREATED"
    COMMIT_CREATED = "COMMIT_CREATED"
    REF_UPDATED = "REF_UPDATED"


@dataclass
class CommitAttempt:
    """Record of one commit run and the objects it produced."""

    branch: str
    message: str
    paths: list[str] = field(default_factory=list)
    state: CommitState = CommitState.PENDING
    parent_sha: str | None = None
    base_tree_sha: str | None = None
    blob_shas: dict[str, str] = field(default_factory=dict)
    tree_sha: str | None = None
    commit_sha: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is CommitState.REF_UPDATED

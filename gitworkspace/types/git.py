"""Git object data models (refs, trees, commits)."""

from dataclasses import dataclass, field

BRANCH_REF_PREFIX = "refs/heads/"

# Regular, non-executable file
BLOB_MODE = "100644"


@dataclass(frozen=True)
class GitRef:
    """A named pointer to a commit."""

    ref: str  # e.g. "refs/heads/main"
    sha: str

    @property
    def branch(self) -> str:
        """The branch name, without the refs/heads/ prefix."""
        if self.ref.startswith(BRANCH_REF_PREFIX):
            return self.ref[len(BRANCH_REF_PREFIX):]
        return self.ref


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a git tree."""

    path: str
    mode: str
    type: str  # "blob", "tree" or "commit"
    sha: str | None
    size: int | None = None

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"


@dataclass
class GitTree:
    """A (possibly recursive) tree listing."""

    sha: str
    entries: list[TreeEntry] = field(default_factory=list)
    truncated: bool = False


@dataclass(frozen=True)
class CommitIdentity:
    """Author/committer identity attached to commits."""

    name: str
    email: str

    def as_dict(self) -> dict[str, str]:
        return {"name": self.name, "email": self.email}


DEFAULT_IDENTITY = CommitIdentity(
    name="gitworkspace",
    email="gitworkspace@users.noreply.github.com",
)


@dataclass
class GitCommit:
    """A commit object as seen through the git data API."""

    sha: str
    tree_sha: str
    parents: list[str]
    message: str = ""

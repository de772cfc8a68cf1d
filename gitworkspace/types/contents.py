"""Repository contents data models."""

from dataclasses import dataclass, field


@dataclass
class FileContent:
    """Decoded content of a single file."""

    path: str
    sha: str
    content: bytes
    encoding: str = "base64"
    size: int = 0


@dataclass
class ContentEntry:
    """One item of a directory listing."""

    name: str
    path: str
    type: str  # "file", "dir", "symlink" or "submodule"
    sha: str


@dataclass
class DirectoryListing:
    """Single-level listing of a directory, split by kind."""

    directories: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.directories and not self.files

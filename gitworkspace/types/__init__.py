"""gitworkspace type definitions.

This module exports all data model types used by the package.
"""

from gitworkspace.types.contents import ContentEntry, DirectoryListing, FileContent
from gitworkspace.types.git import (
    BLOB_MODE,
    DEFAULT_IDENTITY,
    CommitIdentity,
    GitCommit,
    GitRef,
    GitTree,
    TreeEntry,
)
from gitworkspace.types.pulls import PullRequest
from gitworkspace.types.repos import CommitSummary, RepositoryHandle
from gitworkspace.types.workspace import (
    CommitAttempt,
    CommitState,
    FileChange,
    FileReadResult,
)

__all__ = [
    # Git objects
    "BLOB_MODE",
    "DEFAULT_IDENTITY",
    "CommitIdentity",
    "GitCommit",
    "GitRef",
    "GitTree",
    "TreeEntry",
    # Contents
    "ContentEntry",
    "DirectoryListing",
    "FileContent",
    # Repository
    "CommitSummary",
    "RepositoryHandle",
    # Pull requests
    "PullRequest",
    # Workspace
    "CommitAttempt",
    "CommitState",
    "FileChange",
    "FileReadResult",
]

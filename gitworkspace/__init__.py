"""gitworkspace - branch-scoped read/commit access to a remote repository."""

from gitworkspace.client import GitHubClient
from gitworkspace.committer import AtomicCommitBuilder
from gitworkspace.exceptions import (
    AmbiguousCommitOutcomeError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ProtectedBranchError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    StaleBranchError,
    TransportError,
    ValidationError,
    WorkspaceError,
)
from gitworkspace.guard import ProtectedBranchGuard
from gitworkspace.logging import configure_logging, get_logger
from gitworkspace.pull_requests import PullRequestDeduplicator
from gitworkspace.reader import TreeReader
from gitworkspace.repository import RepositoryWorkspace
from gitworkspace.transport import HTTPTransport, RetryConfig
from gitworkspace.types import (
    CommitAttempt,
    CommitIdentity,
    CommitState,
    DirectoryListing,
    FileChange,
    FileReadResult,
    PullRequest,
    RepositoryHandle,
)
from gitworkspace.workspace import BranchWorkspace

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Entry points
    "RepositoryWorkspace",
    "GitHubClient",
    # Components
    "BranchWorkspace",
    "TreeReader",
    "ProtectedBranchGuard",
    "AtomicCommitBuilder",
    "PullRequestDeduplicator",
    # Types
    "RepositoryHandle",
    "FileChange",
    "FileReadResult",
    "DirectoryListing",
    "CommitAttempt",
    "CommitState",
    "CommitIdentity",
    "PullRequest",
    # Exceptions
    "WorkspaceError",
    "ConfigurationError",
    "NotFoundError",
    "ProtectedBranchError",
    "StaleBranchError",
    "AmbiguousCommitOutcomeError",
    "TransportError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "RequestTimeoutError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]

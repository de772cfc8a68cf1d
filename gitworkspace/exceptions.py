"""gitworkspace exception classes."""


class WorkspaceError(Exception):
    """Base exception for all gitworkspace errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(WorkspaceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class NotFoundError(WorkspaceError):
    """Raised when a branch, path or commit does not exist on the remote."""

    pass


class ProtectedBranchError(WorkspaceError):
    """Raised when a commit targets a protected branch.

    Raised before any remote call is made.
    """

    def __init__(self, branch: str) -> None:
        super().__init__(
            "PROTECTED_BRANCH",
            f"Operation not allowed: the branch '{branch}' is protected",
        )
        self.branch = branch


class StaleBranchError(WorkspaceError):
    """Raised when the remote rejects the ref update of a commit.

    The branch moved since the commit run started. The new commit exists
    on the remote but is unreachable; the branch is unchanged.
    """

    def __init__(
        self,
        branch: str,
        commit_sha: str,
        expected_parent: str,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "STALE_BRANCH",
            f"Branch '{branch}' moved away from {expected_parent}; "
            f"commit {commit_sha} was not applied",
            request_id,
        )
        self.branch = branch
        self.commit_sha = commit_sha
        self.expected_parent = expected_parent


class AmbiguousCommitOutcomeError(WorkspaceError):
    """Raised when the ref update failed in a way that may have applied.

    Callers must re-read the branch head before retrying: if it equals
    ``commit_sha`` the commit took effect.
    """

    def __init__(
        self,
        branch: str,
        commit_sha: str,
        expected_parent: str,
        cause: Exception,
    ) -> None:
        super().__init__(
            "COMMIT_OUTCOME_UNKNOWN",
            f"Updating branch '{branch}' to {commit_sha} failed with an "
            f"ambiguous outcome: {cause}",
            getattr(cause, "request_id", None),
        )
        self.branch = branch
        self.commit_sha = commit_sha
        self.expected_parent = expected_parent
        self.cause = cause


class TransportError(WorkspaceError):
    """Raised on network or remote-side failures other than not-found."""

    pass


class AuthenticationError(TransportError):
    """Raised when the token is missing or rejected."""

    pass


class AuthorizationError(TransportError):
    """Raised when access is denied."""

    pass


class ConflictError(TransportError):
    """Raised on conflicts reported by the remote."""

    pass


class RateLimitedError(TransportError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(TransportError):
    """Raised on validation errors (400, 422 and other client errors)."""

    pass


class ServerError(TransportError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class RequestTimeoutError(TransportError):
    """Raised when a request times out before a response arrives."""

    pass

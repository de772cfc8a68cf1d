"""
Atomic multi-file commits.

Builds one commit from a set of file changes through the git data API:

    PENDING -> PARENT_RESOLVED -> BLOBS_CREATED -> TREE_CREATED
            -> COMMIT_CREATED -> REF_UPDATED

Until REF_UPDATED the branch is untouched; objects created by an aborted run
are unreachable and left to the remote's garbage collection. The final ref
update is sent without ``force``, so the remote only accepts it as a
fast-forward of the parent observed at the start of the run.
"""

from collections.abc import Iterable
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Any

from gitworkspace.exceptions import (
    AmbiguousCommitOutcomeError,
    ConflictError,
    RequestTimeoutError,
    ServerError,
    StaleBranchError,
    ValidationError,
)
from gitworkspace.guard import ProtectedBranchGuard
from gitworkspace.logging import get_logger, log_commit_transition
from gitworkspace.types.git import BLOB_MODE, DEFAULT_IDENTITY, CommitIdentity, TreeEntry
from gitworkspace.types.repos import RepositoryHandle
from gitworkspace.types.workspace import CommitAttempt, CommitState, FileChange

if TYPE_CHECKING:
    from gitworkspace.client import GitHubClient

logger = get_logger("commit")

DEFAULT_MAX_WORKERS = 8


def collapse_changes(changes: Iterable[FileChange]) -> dict[str, bytes]:
    """
    Map each path to its content, the last change of a path winning.

    Paths keep the order in which they first appear.
    """
    collapsed: dict[str, bytes] = {}
    for change in changes:
        collapsed[change.path] = change.data
    return collapsed


class AtomicCommitBuilder:
    """
    Commits a set of file changes to a branch as exactly one commit.

    Either every change lands in one new commit whose sole parent is the
    branch tip observed when the run started, or the branch is left as it
    was. Nothing is retried automatically.
    """

    def __init__(
        self,
        client: "GitHubClient",
        handle: RepositoryHandle,
        guard: ProtectedBranchGuard | None = None,
        identity: CommitIdentity = DEFAULT_IDENTITY,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """
        Args:
            client: Remote gateway (GitHubClient or a compatible fake)
            handle: Repository identity
            guard: Protected-branch guard (default: built from the handle's deny list)
            identity: Author and committer of every commit
            max_workers: Upper bound on concurrent blob uploads
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.client = client
        self.handle = handle
        self.guard = guard or ProtectedBranchGuard(handle.protected_branches)
        self.identity = identity
        self.max_workers = max_workers

    def commit(self, branch: str, changes: Iterable[FileChange], message: str) -> str:
        """
        Commit ``changes`` to ``branch``.

        Returns:
            sha of the new commit

        Raises:
            ProtectedBranchError: If the branch is protected (no remote call made)
            NotFoundError: If the branch has no head
            StaleBranchError: If the branch moved during the run
            AmbiguousCommitOutcomeError: If the ref update may or may not have applied
        """
        return self.run(branch, changes, message).commit_sha or ""

    def run(
        self, branch: str, changes: Iterable[FileChange], message: str
    ) -> CommitAttempt:
        """
        Same as :meth:`commit` but returns the full record of the run.
        """
        self.guard.check(branch)

        files = collapse_changes(changes)
        if not files:
            raise ValueError("At least one file change is required")
        if not message or not message.strip():
            raise ValueError("Commit message must not be empty")

        attempt = CommitAttempt(branch=branch, message=message, paths=list(files))

        try:
            parent_sha, base_tree_sha = self._resolve_parent(attempt)
            blob_shas = self._create_blobs(attempt, files)
            tree_sha = self._create_tree(attempt, base_tree_sha, blob_shas)
            commit_sha = self._create_commit(attempt, tree_sha, parent_sha)
        except Exception:
            logger.warning(
                "Commit to '%s' aborted after %s; branch left unchanged",
                branch,
                attempt.state.value,
            )
            raise

        self._update_ref(attempt, commit_sha, parent_sha)

        logger.info(
            "Committed %d file(s) to %s@%s as %s",
            len(attempt.paths),
            self.handle.full_name,
            branch,
            attempt.commit_sha,
        )
        return attempt

    def _advance(self, attempt: CommitAttempt, state: CommitState, **details: Any) -> None:
        attempt.state = state
        log_commit_transition(state.value, attempt.branch, **details)

    def _resolve_parent(self, attempt: CommitAttempt) -> tuple[str, str]:
        ref = self.client.git.get_ref(
            self.handle.owner, self.handle.name, f"heads/{attempt.branch}"
        )
        parent = self.client.git.get_commit(self.handle.owner, self.handle.name, ref.sha)

        attempt.parent_sha = parent.sha
        attempt.base_tree_sha = parent.tree_sha
        self._advance(
            attempt,
            CommitState.PARENT_RESOLVED,
            parent=parent.sha,
            base_tree=parent.tree_sha,
        )
        return parent.sha, parent.tree_sha

    def _create_blobs(self, attempt: CommitAttempt, files: dict[str, bytes]) -> dict[str, str]:
        def create(path: str) -> str:
            return self.client.git.create_blob(self.handle.owner, self.handle.name, files[path])

        workers = min(len(files), self.max_workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="gitworkspace-blob") as executor:
            futures = {path: executor.submit(create, path) for path in files}
            done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)

            for future in futures.values():
                error = future.exception() if future in done else None
                if error is not None:
                    for other in pending:
                        other.cancel()
                    raise error

        # Request order of paths, not completion order
        attempt.blob_shas = {path: future.result() for path, future in futures.items()}
        self._advance(attempt, CommitState.BLOBS_CREATED, blobs=len(attempt.blob_shas))
        return attempt.blob_shas

    def _create_tree(
        self, attempt: CommitAttempt, base_tree_sha: str, blob_shas: dict[str, str]
    ) -> str:
        entries = [
            TreeEntry(path=path, mode=BLOB_MODE, type="blob", sha=sha)
            for path, sha in blob_shas.items()
        ]
        tree_sha = self.client.git.create_tree(
            self.handle.owner,
            self.handle.name,
            entries,
            base_tree=base_tree_sha,
        )
        attempt.tree_sha = tree_sha
        self._advance(attempt, CommitState.TREE_CREATED, tree=tree_sha)
        return tree_sha

    def _create_commit(self, attempt: CommitAttempt, tree_sha: str, parent_sha: str) -> str:
        commit = self.client.git.create_commit(
            self.handle.owner,
            self.handle.name,
            message=attempt.message,
            tree=tree_sha,
            parents=[parent_sha],
            author=self.identity,
            committer=self.identity,
        )
        attempt.commit_sha = commit.sha
        self._advance(attempt, CommitState.COMMIT_CREATED, commit=commit.sha)
        return commit.sha

    def _update_ref(self, attempt: CommitAttempt, commit_sha: str, parent_sha: str) -> None:
        try:
            self.client.git.update_ref(
                self.handle.owner,
                self.handle.name,
                f"heads/{attempt.branch}",
                commit_sha,
                force=False,
            )
        except (ConflictError, ValidationError) as e:
            logger.warning(
                "Branch '%s' moved during commit; %s was not applied: %s",
                attempt.branch,
                commit_sha,
                e.message,
            )
            raise StaleBranchError(attempt.branch, commit_sha, parent_sha, e.request_id) from e
        except (RequestTimeoutError, ServerError) as e:
            logger.error(
                "Outcome of updating '%s' to %s is unknown: %s",
                attempt.branch,
                commit_sha,
                e,
            )
            raise AmbiguousCommitOutcomeError(attempt.branch, commit_sha, parent_sha, e) from e

        self._advance(attempt, CommitState.REF_UPDATED, commit=commit_sha)

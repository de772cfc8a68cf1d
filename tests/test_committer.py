"""
Property-based tests for atomic multi-file commits.

Feature: gitworkspace
"""

import logging
import threading

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gitworkspace.committer import AtomicCommitBuilder, collapse_changes
from gitworkspace.exceptions import (
    AmbiguousCommitOutcomeError,
    AuthorizationError,
    NotFoundError,
    ProtectedBranchError,
    RequestTimeoutError,
    ServerError,
    StaleBranchError,
)
from gitworkspace.testing import SEED_FILES, FakeGitHubClient, create_seeded_client
from gitworkspace.types.git import CommitIdentity
from gitworkspace.types.repos import RepositoryHandle
from gitworkspace.types.workspace import CommitState, FileChange

HANDLE = RepositoryHandle("octo", "demo", protected_branches={"main"})

path_strategy = st.lists(
    st.text(min_size=1, max_size=8, alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-."),
    min_size=1,
    max_size=3,
).map("/".join).filter(lambda p: p not in SEED_FILES and not any(
    s.startswith(f"{p}/") or p.startswith(f"{s}/") for s in SEED_FILES
))

changes_strategy = st.dictionaries(
    path_strategy,
    st.one_of(st.text(max_size=50), st.binary(max_size=50)),
    min_size=1,
    max_size=8,
).filter(lambda files: not any(
    a != b and b.startswith(f"{a}/") for a in files for b in files
))


def branch_client(branch: str = "feature/x") -> FakeGitHubClient:
    """A seeded remote with ``branch`` created from main."""
    client = create_seeded_client()
    client.create_branch("octo", "demo", branch)
    return client


def as_bytes(content: str | bytes) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


@given(files=changes_strategy)
@settings(max_examples=50, deadline=None)
def test_property_commit_applies_every_change(files: dict[str, str | bytes]) -> None:
    """
    Property: A successful commit applies all changes and nothing else

    For any set of file changes, the new commit SHALL be the branch head,
    have the previous head as its only parent, contain every changed path
    with its new content, and leave unrelated paths unchanged.
    """
    client = branch_client()
    before = client.branch_head("octo", "demo", "feature/x")
    builder = AtomicCommitBuilder(client, HANDLE)

    sha = builder.commit(
        "feature/x",
        [FileChange(path=p, content=c) for p, c in files.items()],
        "Apply changes",
    )

    assert client.branch_head("octo", "demo", "feature/x") == sha
    assert client.git.get_commit("octo", "demo", sha).parents == [before]
    for path, content in files.items():
        assert client.file_at("octo", "demo", sha, path) == as_bytes(content)
    for path, content in SEED_FILES.items():
        assert client.file_at("octo", "demo", sha, path) == as_bytes(content)


@given(files=changes_strategy, data=st.data())
@settings(max_examples=50, deadline=None)
def test_property_blob_failure_leaves_branch_unchanged(
    files: dict[str, str | bytes], data: st.DataObject
) -> None:
    """
    Property: Blob failures abort the commit

    For any set of N changes and any one of them failing to upload, the
    branch head SHALL be unchanged and no commit SHALL be created.
    """
    client = branch_client()
    before = client.branch_head("octo", "demo", "feature/x")
    commits_before = client.commit_count("octo", "demo")
    failing = data.draw(st.sampled_from(sorted(files)))
    failing_content = as_bytes(files[failing])
    client.configure_error(
        "git.create_blob",
        ServerError("SERVER_ERROR", "blob store unavailable"),
        when=lambda owner, repo, content: content == failing_content,
    )
    builder = AtomicCommitBuilder(client, HANDLE)

    with pytest.raises(ServerError):
        builder.commit(
            "feature/x",
            [FileChange(path=p, content=c) for p, c in files.items()],
            "Apply changes",
        )

    assert client.branch_head("octo", "demo", "feature/x") == before
    assert client.commit_count("octo", "demo") == commits_before
    assert not client.was_called("git.create_tree")
    assert not client.was_called("git.update_ref")


@given(contents=st.lists(st.text(max_size=20), min_size=2, max_size=6))
@settings(max_examples=50, deadline=None)
def test_property_duplicate_paths_last_write_wins(contents: list[str]) -> None:
    """
    Property: Duplicate paths collapse to the last write

    For any sequence of writes to one path within a commit, the committed
    content SHALL be the last one and a single blob SHALL be uploaded.
    """
    client = branch_client()
    builder = AtomicCommitBuilder(client, HANDLE)

    sha = builder.commit(
        "feature/x",
        [FileChange(path="dup.txt", content=c) for c in contents],
        "Write dup",
    )

    assert client.file_at("octo", "demo", sha, "dup.txt") == contents[-1].encode("utf-8")
    assert client.call_count("git.create_blob") == 1


def test_collapse_changes_keeps_first_seen_order() -> None:
    changes = [
        FileChange("b.txt", "1"),
        FileChange("a.txt", "2"),
        FileChange("b.txt", "3"),
    ]

    assert collapse_changes(changes) == {"b.txt": b"3", "a.txt": b"2"}


class TestPreconditions:
    """Tests for checks made before any remote call."""

    def test_protected_branch_makes_no_calls(self) -> None:
        client = create_seeded_client()
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(ProtectedBranchError):
            builder.commit("main", [FileChange("a.txt", "a")], "Add a")

        assert client.get_calls() == []

    def test_empty_changes_rejected(self) -> None:
        client = branch_client()
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(ValueError):
            builder.commit("feature/x", [], "Nothing")

        assert client.get_calls() == []

    def test_empty_message_rejected(self) -> None:
        client = branch_client()
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(ValueError):
            builder.commit("feature/x", [FileChange("a.txt", "a")], "  ")

    def test_invalid_worker_count(self) -> None:
        with pytest.raises(ValueError):
            AtomicCommitBuilder(create_seeded_client(), HANDLE, max_workers=0)

    def test_missing_branch(self) -> None:
        client = create_seeded_client()
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(NotFoundError):
            builder.commit("feature/missing", [FileChange("a.txt", "a")], "Add a")

        assert not client.was_called("git.create_blob")


class TestRefUpdate:
    """Tests for the final compare-and-swap of the branch."""

    def test_concurrent_advance_is_stale(self) -> None:
        client = branch_client()
        builder = AtomicCommitBuilder(client, HANDLE)
        advanced: list[str] = []

        def advance(*args: object, **kwargs: object) -> None:
            advanced.append(
                client.push_commit("octo", "demo", "feature/x", {"other.txt": "other"})
            )

        client.configure_hook("git.update_ref", advance)

        with pytest.raises(StaleBranchError) as exc_info:
            builder.commit("feature/x", [FileChange("a.txt", "a")], "Add a")

        error = exc_info.value
        assert error.code == "STALE_BRANCH"
        assert client.branch_head("octo", "demo", "feature/x") == advanced[0]
        assert error.commit_sha != advanced[0]
        assert client.file_at("octo", "demo", "feature/x", "a.txt") is None

    def test_update_ref_is_never_forced(self) -> None:
        client = branch_client()
        AtomicCommitBuilder(client, HANDLE).commit("feature/x", [FileChange("a.txt", "a")], "Add a")

        (call,) = client.get_calls("git.update_ref")
        assert call.kwargs["force"] is False
        assert call.args[2] == "heads/feature/x"

    def test_timeout_after_apply_is_ambiguous(self) -> None:
        client = branch_client()
        client.configure_error(
            "git.update_ref",
            RequestTimeoutError("TIMEOUT", "read timed out"),
            after_apply=True,
        )
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(AmbiguousCommitOutcomeError) as exc_info:
            builder.commit("feature/x", [FileChange("a.txt", "a")], "Add a")

        # The update did land; the caller finds out by re-reading the head
        assert client.branch_head("octo", "demo", "feature/x") == exc_info.value.commit_sha

    def test_server_error_before_apply_is_ambiguous(self) -> None:
        client = branch_client()
        before = client.branch_head("octo", "demo", "feature/x")
        client.configure_error("git.update_ref", ServerError("SERVER_ERROR", "bad gateway"))
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(AmbiguousCommitOutcomeError) as exc_info:
            builder.commit("feature/x", [FileChange("a.txt", "a")], "Add a")

        assert exc_info.value.expected_parent == before
        assert isinstance(exc_info.value.cause, ServerError)
        assert client.branch_head("octo", "demo", "feature/x") == before

    def test_other_errors_propagate(self) -> None:
        client = branch_client()
        client.configure_error("git.update_ref", AuthorizationError("FORBIDDEN", "denied"))
        builder = AtomicCommitBuilder(client, HANDLE)

        with pytest.raises(AuthorizationError):
            builder.commit("feature/x", [FileChange("a.txt", "a")], "Add a")


class TestRun:
    """Tests for the commit run record and its side effects."""

    def test_attempt_record(self) -> None:
        client = branch_client()
        before = client.branch_head("octo", "demo", "feature/x")

        attempt = AtomicCommitBuilder(client, HANDLE).run(
            "feature/x",
            [FileChange("b.txt", "b"), FileChange("a.txt", "a")],
            "Add files",
        )

        assert attempt.succeeded
        assert attempt.state is CommitState.REF_UPDATED
        assert attempt.parent_sha == before
        assert attempt.paths == ["b.txt", "a.txt"]
        assert list(attempt.blob_shas) == ["b.txt", "a.txt"]
        assert attempt.commit_sha == client.branch_head("octo", "demo", "feature/x")

    def test_binary_content_preserved(self) -> None:
        client = branch_client()
        payload = bytes(range(256))

        sha = AtomicCommitBuilder(client, HANDLE).commit(
            "feature/x", [FileChange("image.bin", payload)], "Add image"
        )

        assert client.file_at("octo", "demo", sha, "image.bin") == payload

    def test_identity_used_for_author_and_committer(self) -> None:
        client = branch_client()
        identity = CommitIdentity(name="release-bot", email="bot@example.com")

        AtomicCommitBuilder(client, HANDLE, identity=identity).commit(
            "feature/x", [FileChange("a.txt", "a")], "Add a"
        )

        (call,) = client.get_calls("git.create_commit")
        assert call.kwargs["author"] == identity
        assert call.kwargs["committer"] == identity

    def test_blobs_uploaded_concurrently(self) -> None:
        client = branch_client()
        barrier = threading.Barrier(3, timeout=5)
        client.configure_hook("git.create_blob", lambda *args, **kwargs: barrier.wait())

        sha = AtomicCommitBuilder(client, HANDLE, max_workers=8).commit(
            "feature/x",
            [FileChange(f"f{i}.txt", str(i)) for i in range(3)],
            "Add three",
        )

        assert client.branch_head("octo", "demo", "feature/x") == sha

    def test_single_worker(self) -> None:
        client = branch_client()

        sha = AtomicCommitBuilder(client, HANDLE, max_workers=1).commit(
            "feature/x",
            [FileChange(f"f{i}.txt", str(i)) for i in range(4)],
            "Add four",
        )

        assert client.file_at("octo", "demo", sha, "f3.txt") == b"3"

    def test_transitions_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        client = branch_client()
        caplog.set_level(logging.DEBUG, logger="gitworkspace.commit")

        AtomicCommitBuilder(client, HANDLE).commit("feature/x", [FileChange("a.txt", "a")], "Add a")

        states = [
            record.getMessage().split(":", 1)[0]
            for record in caplog.records
            if record.name == "gitworkspace.commit" and record.levelno == logging.DEBUG
        ]
        assert states == [
            "PARENT_RESOLVED",
            "BLOBS_CREATED",
            "TREE_CREATED",
            "COMMIT_CREATED",
            "REF_UPDATED",
        ]

"""
Pytest fixtures for gitworkspace testing.

Provides a fake remote and workspaces wired to it.
"""

from typing import Generator

import pytest

from gitworkspace.repository import RepositoryWorkspace
from gitworkspace.testing.fake import FakeGitHubClient
from gitworkspace.types.repos import RepositoryHandle

SEED_FILES = {
    "README.md": "# Demo\n",
    "src/app.py": "print('hello')\n",
    "src/util/helpers.py": "def helper():\n    return 1\n",
    "docs/guide.md": "Guide\n",
}


def create_seeded_client(
    owner: str = "octo",
    repo: str = "demo",
    files: dict[str, str | bytes] | None = None,
    branch: str = "main",
) -> FakeGitHubClient:
    """Create a FakeGitHubClient holding one repository with ``files`` on ``branch``."""
    client = FakeGitHubClient()
    client.seed_repository(owner, repo, SEED_FILES if files is None else files, branch=branch)
    return client


@pytest.fixture
def fake_client() -> Generator[FakeGitHubClient, None, None]:
    """
    Provide an empty FakeGitHubClient.

    Example:
        ```python
        def test_my_feature(fake_client):
            fake_client.seed_repository("octo", "demo", {"a.txt": "a"})
            my_function(fake_client)
            assert fake_client.was_called("git.update_ref")
        ```
    """
    client = FakeGitHubClient()
    yield client
    client.reset()


@pytest.fixture
def repo_handle() -> RepositoryHandle:
    """Provide a handle for octo/demo with ``main`` protected."""
    return RepositoryHandle(
        owner="octo",
        name="demo",
        base_branch="main",
        protected_branches=frozenset({"main"}),
    )


@pytest.fixture
def seeded_client(repo_handle: RepositoryHandle) -> FakeGitHubClient:
    """Provide a FakeGitHubClient whose ``main`` branch holds a few files."""
    return create_seeded_client(
        repo_handle.owner, repo_handle.name, branch=repo_handle.base_branch
    )


@pytest.fixture
def repository_workspace(
    seeded_client: FakeGitHubClient, repo_handle: RepositoryHandle
) -> RepositoryWorkspace:
    """
    Provide a RepositoryWorkspace over the seeded fake remote.

    Example:
        ```python
        def test_commit(repository_workspace, seeded_client):
            repository_workspace.write_file("feature/x", "a.txt", "a", "Add a")
            assert seeded_client.file_at("octo", "demo", "feature/x", "a.txt") == b"a"
        ```
    """
    return RepositoryWorkspace(seeded_client, repo_handle)

"""Shared fixtures for the gitworkspace test suite."""

from gitworkspace.testing.fixtures import (  # noqa: F401
    fake_client,
    repo_handle,
    repository_workspace,
    seeded_client,
)

"""
Pytest plugin for gitworkspace testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitworkspace.testing.conftest"]

Or import the fixtures directly:

    from gitworkspace.testing.fixtures import fake_client, repository_workspace
"""

# Re-export all fixtures for pytest auto-discovery
from gitworkspace.testing.fixtures import (
    fake_client,
    repo_handle,
    repository_workspace,
    seeded_client,
)

__all__ = [
    "fake_client",
    "repo_handle",
    "seeded_client",
    "repository_workspace",
]

"""gitworkspace testing utilities.

Provides an in-memory remote and fixtures for testing code built on
gitworkspace.
"""

from gitworkspace.testing.fake import FakeGitHubClient, InjectedError, MockCall
from gitworkspace.testing.fixtures import SEED_FILES, create_seeded_client

__all__ = [
    # Fake client
    "FakeGitHubClient",
    "MockCall",
    "InjectedError",
    # Helper functions
    "create_seeded_client",
    "SEED_FILES",
]

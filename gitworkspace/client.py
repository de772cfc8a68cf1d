"""
gitworkspace remote gateway client.

Provides the resource clients the workspace uses to talk to the GitHub REST API.
"""

import os
from typing import Any

from gitworkspace.clients import ContentsClient, GitDataClient, PullsClient, ReposClient
from gitworkspace.exceptions import ConfigurationError
from gitworkspace.transport import HTTPTransport, RetryConfig


class GitHubClient:
    """
    Client for the GitHub REST API.

    Aggregates the resource clients and handles authentication.

    Example:
        ```python
        from gitworkspace import GitHubClient

        client = GitHubClient(token="ghp_...")
        ref = client.git.get_ref("octo", "demo", "heads/main")

        # Or create from environment variables
        client = GitHubClient.from_env()
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: API token (personal access token or app installation token)
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
        """
        if not token:
            raise ConfigurationError("An API token is required")

        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
        )

        self.git = GitDataClient(self._transport)
        self.contents = ContentsClient(self._transport)
        self.repos = ReposClient(self._transport)
        self.pulls = PullsClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            GITHUB_TOKEN: API token (required)
            GITHUB_API_URL: Base URL for API (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        token = os.environ.get("GITHUB_TOKEN")
        base_url = os.environ.get("GITHUB_API_URL", cls.DEFAULT_BASE_URL)

        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")

        return cls(
            token=token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

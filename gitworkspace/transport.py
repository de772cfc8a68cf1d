"""
HTTP Transport for gitworkspace.

Handles HTTP communication with the GitHub REST API: token authentication,
retry of idempotent requests and error parsing into typed exceptions.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from gitworkspace.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    TransportError,
    ValidationError,
)
from gitworkspace.logging import log_http_request, log_http_response

API_VERSION = "2022-11-28"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior.

    Only methods listed in ``retry_methods`` are ever retried. Object
    creation and ref updates are not idempotent and are sent once.
    """

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503, 504])
    retry_methods: frozenset[str] = frozenset({"GET", "HEAD"})
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer with token authentication and retry logic.

    Handles:
    - Bearer token and GitHub API version headers
    - Exponential backoff with jitter for retries of idempotent requests
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        user_agent: str = "gitworkspace",
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: API token sent as a bearer credential
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            user_agent: User-Agent header value
            http_transport: Optional httpx transport to send requests through
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=True,
            transport=http_transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": user_agent,
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an authenticated request.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/octo/demo/git/blobs")
            params: Query parameters
            body: JSON request body (for POST/PATCH)

        Returns:
            Parsed JSON response (a dict or a list), or None for empty bodies

        Raises:
            WorkspaceError: On API errors
        """
        method = method.upper()

        def make_request() -> httpx.Response:
            log_http_request(method, path, dict(self._client.headers), body)
            started = time.monotonic()
            response = self._client.request(method, path, params=params, json=body)
            log_http_response(
                response.status_code,
                path,
                elapsed_ms=(time.monotonic() - started) * 1000,
                request_id=response.headers.get("X-GitHub-Request-Id"),
            )
            return response

        return self._execute_with_retry(method, make_request)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: dict[str, Any]) -> Any:
        return self.request("POST", path, body=body)

    def patch(self, path: str, body: dict[str, Any]) -> Any:
        return self.request("PATCH", path, body=body)

    def _execute_with_retry(
        self, method: str, request_fn: Callable[[], httpx.Response]
    ) -> Any:
        """
        Execute a request, retrying retryable failures of idempotent methods.

        Args:
            method: HTTP method of the request
            request_fn: Function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            TransportError: On a redirect that could not be followed
            WorkspaceError: On non-retryable errors or after max retries
        """
        retryable_method = method in self.retry_config.retry_methods
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                # Redirects are followed by the client; any 3xx left here
                # carries no resource body
                if 300 <= response.status_code < 400:
                    raise TransportError(
                        "UNEXPECTED_REDIRECT",
                        f"HTTP {response.status_code} without a followable Location",
                        response.headers.get("X-GitHub-Request-Id"),
                    )

                if response.status_code < 400:
                    if not response.content:
                        return None
                    return response.json()

                error = self._parse_error_response(response)

                if not retryable_method or not self._should_retry(
                    response.status_code, attempt
                ):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.TimeoutException as e:
                if not retryable_method or attempt >= self.retry_config.max_retries:
                    raise RequestTimeoutError("TIMEOUT", str(e) or "Request timed out") from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

            except httpx.RequestError as e:
                if not retryable_method or attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

        # Should not reach here, but just in case
        if last_error:
            if isinstance(last_error, TransportError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> TransportError | NotFoundError:
        """
        Parse an error response into a typed exception.

        GitHub error bodies look like ``{"message": ..., "errors": [...]}``;
        the request id comes from the ``X-GitHub-Request-Id`` header.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate exception instance
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        details = data.get("errors")
        if isinstance(details, list) and details:
            reasons = [d.get("message", "") if isinstance(d, dict) else str(d) for d in details]
            reasons = [r for r in reasons if r]
            if reasons:
                message = f"{message}: {'; '.join(reasons)}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, request_id)
        elif status_code == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after(response), request_id
                )
            return AuthorizationError("FORBIDDEN", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, request_id)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after(response), request_id
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, request_id)
        elif status_code == 422:
            return ValidationError("UNPROCESSABLE_ENTITY", message, request_id)
        else:
            return ValidationError("BAD_REQUEST", message, request_id)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            return int(retry_after_str)
        except ValueError:
            return 60

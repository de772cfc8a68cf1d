"""
gitworkspace logging utilities.

Provides configurable logging for HTTP requests/responses and commit steps.
Ensures no credentials (API tokens, authorization headers) are logged.
"""

import logging
import re
from typing import Any

# Create package-specific loggers
_sdk_logger = logging.getLogger("gitworkspace")
_http_logger = logging.getLogger("gitworkspace.http")
_commit_logger = logging.getLogger("gitworkspace.commit")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values
    (re.compile(r"(Bearer|token)\s+[A-Za-z0-9_\-.]{8,}", re.IGNORECASE), r"\1 [TOKEN_REDACTED]"),
    # GitHub token formats (classic, OAuth, app, refresh, fine-grained)
    (re.compile(r"\bgh[pousr]_[A-Za-z0-9]{16,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{16,}\b"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"authorization", "token", "secret", "password", "api_key"}

# Characters of a token kept visible at each end
_TOKEN_PREVIEW_LENGTH = 4


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    commit_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gitworkspace logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        commit_level: Log level for commit step logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gitworkspace.logging import configure_logging

        # Trace every step of each commit
        configure_logging(level=logging.INFO, commit_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)

    _commit_logger.setLevel(commit_level if commit_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gitworkspace logger.

    Args:
        name: Logger name suffix (e.g., "http", "commit"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"gitworkspace.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain tokens or authorization headers

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def truncate_token(token: str) -> str:
    """
    Truncate a token for safe logging.

    Returns something like "ghp_...wxyz", or a full redaction for short values.
    """
    if len(token) <= _TOKEN_PREVIEW_LENGTH * 4:
        return "[TOKEN_REDACTED]"

    return f"{token[:_TOKEN_PREVIEW_LENGTH]}...{token[-_TOKEN_PREVIEW_LENGTH:]}"


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: authorization, token, secret, password, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        # Blob payloads can be large; only their shape is useful here
        if "content" in body and isinstance(body["content"], str):
            body = {**body, "content": f"<{len(body['content'])} chars>"}
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
    request_id: str | None = None,
) -> None:
    """Log an HTTP response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if request_id:
        log_parts.append(f"request_id={request_id}")

    _http_logger.debug(" | ".join(log_parts))


def log_commit_transition(
    state: str,
    branch: str,
    **details: Any,
) -> None:
    """
    Log one transition of a commit run at DEBUG level.

    Args:
        state: State the run just entered (e.g. "BLOBS_CREATED")
        branch: Target branch
        **details: Object ids or counts relevant to the transition
    """
    if not _commit_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{state}: branch={branch}"]
    log_parts.extend(f"{key}={value}" for key, value in details.items())

    _commit_logger.debug(" | ".join(log_parts))


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "truncate_token",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_commit_transition",
]

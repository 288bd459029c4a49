"""Input validation helpers for samplepush."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from samplepush.core.exceptions import (
    InvalidURLError,
    PathValidationError,
    ValidationError,
)


def validate_server_url(url: str, field: str = "url") -> str:
    """Validate and normalize a service base URL.

    Args:
        url: URL to validate.
        field: Name of the setting the URL came from.

    Returns:
        URL with surrounding whitespace and trailing slashes removed.

    Raises:
        InvalidURLError: If the URL is empty, has no host, or is not http(s).
    """
    url = (url or "").strip()
    if not url:
        raise InvalidURLError(url, "URL is empty", field=field)

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https", field=field)
    if not parsed.netloc:
        raise InvalidURLError(url, "missing host", field=field)

    return url.rstrip("/")


def validate_workers(workers: int) -> int:
    """Validate worker pool size."""
    if workers < 1:
        raise ValidationError(
            f"Invalid worker count: {workers} (must be >= 1)",
            field="workers",
            value=workers,
        )
    return workers


def validate_timeout(timeout: float | None) -> float | None:
    """Validate request timeout; None disables the timeout."""
    if timeout is None:
        return None
    if timeout <= 0:
        raise ValidationError(
            f"Invalid timeout: {timeout} (must be > 0)",
            field="timeout",
            value=timeout,
        )
    return timeout


def validate_path_exists(
    path: str | Path,
    *,
    must_be_dir: bool = False,
    description: str = "path",
) -> Path:
    """Validate that a path exists.

    Args:
        path: Path to check.
        must_be_dir: Also require a directory.
        description: What the path is, for error messages.

    Returns:
        The path as a Path.

    Raises:
        PathValidationError: If the path is missing or not a directory.
    """
    path = Path(path)
    if not path.exists():
        raise PathValidationError(str(path), f"{description} does not exist")
    if must_be_dir and not path.is_dir():
        raise PathValidationError(str(path), f"{description} is not a directory")
    return path

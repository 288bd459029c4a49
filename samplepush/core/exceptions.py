"""Exception hierarchy for samplepush.

Provides typed exceptions for different failure modes with clear error messages.
"""

from __future__ import annotations

from typing import Any


class SamplePushError(Exception):
    """Base exception for all samplepush errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SamplePushError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SamplePushError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = "", field: str = "url"):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field=field, value=url)
        self.url = url
        self.reason = reason


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Sample Errors
# =============================================================================


class SampleError(SamplePushError):
    """Error tied to a single sample reference."""

    def __init__(self, message: str, reference: str | None = None):
        details = {"sample": reference} if reference is not None else {}
        super().__init__(message, details)
        self.reference = reference


class InvalidSampleReferenceError(SampleError):
    """Reference is neither a readable local file nor a decodable document ID."""

    def __init__(self, reference: str, reason: str = ""):
        msg = "Not a local file or a valid CRITs document identifier"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, reference)
        self.reason = reason


class SampleResolutionError(SampleError):
    """Sample content could not be resolved."""


class MimeDetectionError(SampleError):
    """Content-type sniffing failed for a file."""

    def __init__(self, path: str, reason: str = ""):
        msg = "MIME type detection failed"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, path)
        self.reason = reason


# =============================================================================
# Connection Errors
# =============================================================================


class ConnectionError(SamplePushError):
    """Base class for connection-related errors."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url


class NetworkError(ConnectionError):
    """Network-level error (DNS, TCP, TLS)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, url)
        self.cause = cause


# =============================================================================
# Operation Errors
# =============================================================================


class OperationError(SamplePushError):
    """Error during an operation."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        full_details = {"operation": operation}
        if details:
            full_details.update(details)
        super().__init__(message, full_details)
        self.operation = operation


class UploadError(OperationError):
    """Error during upload."""

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        full_details = details or {}
        if reference:
            full_details["sample"] = reference
        super().__init__("upload", message, full_details)
        self.reference = reference


class DownloadError(OperationError):
    """Error while fetching a sample from the file server."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ):
        full_details: dict[str, Any] = {}
        if url:
            full_details["url"] = url
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__("download", message, full_details)
        self.url = url
        self.status_code = status_code


class SampleListError(OperationError):
    """Sample list file could not be read."""

    def __init__(self, path: str, reason: str = ""):
        msg = "Couldn't open file containing sample list"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__("read-list", msg, {"path": path})
        self.path = path


class WalkError(OperationError):
    """Directory traversal failed."""

    def __init__(self, path: str, reason: str = ""):
        msg = f"Walk error at {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__("walk", msg, {"path": path})
        self.path = path


"""Core modules for samplepush."""

from samplepush.core.config import CONFIG_DIR, CONFIG_FILE, Settings
from samplepush.core.exceptions import (
    ConfigurationError,
    ConnectionError,
    DownloadError,
    InvalidSampleReferenceError,
    InvalidURLError,
    MimeDetectionError,
    NetworkError,
    OperationError,
    PathValidationError,
    SampleError,
    SampleListError,
    SamplePushError,
    SampleResolutionError,
    UploadError,
    ValidationError,
    WalkError,
)
from samplepush.core.logging import LogContext, get_logger, setup_logging
from samplepush.core.output import (
    OutputFormat,
    console,
    print_error,
    print_json,
    print_success,
    print_summary,
    print_warning,
)
from samplepush.core.validation import (
    validate_path_exists,
    validate_server_url,
    validate_timeout,
    validate_workers,
)

__all__ = [
    # Exceptions
    "SamplePushError",
    "ConfigurationError",
    "ValidationError",
    "InvalidURLError",
    "PathValidationError",
    "SampleError",
    "InvalidSampleReferenceError",
    "SampleResolutionError",
    "MimeDetectionError",
    "ConnectionError",
    "NetworkError",
    "OperationError",
    "UploadError",
    "DownloadError",
    "SampleListError",
    "WalkError",
    # Validation
    "validate_server_url",
    "validate_workers",
    "validate_timeout",
    "validate_path_exists",
    # Config
    "Settings",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Output
    "OutputFormat",
    "print_summary",
    "print_json",
    "print_error",
    "print_warning",
    "print_success",
    "console",
    # Logging
    "get_logger",
    "setup_logging",
    "LogContext",
]

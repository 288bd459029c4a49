"""samplepush - A CLI for bulk sample ingestion into a sample-storage service.

This package uploads malware/file samples to a Holmes-Storage style service
over multipart HTTP PUT, supporting:
- Sample lists (local paths or CRITs document identifiers)
- Directory trees filtered by sniffed MIME type
- Fallback download from a CRITs file server
- Parallel uploads with per-sample outcome reporting
"""

__version__ = "0.1.0"

from samplepush.core.config import Settings
from samplepush.core.exceptions import (
    ConfigurationError,
    DownloadError,
    InvalidSampleReferenceError,
    NetworkError,
    SamplePushError,
    UploadError,
    ValidationError,
)
from samplepush.services.push import PushService

__all__ = [
    "__version__",
    "Settings",
    "PushService",
    "SamplePushError",
    "ConfigurationError",
    "DownloadError",
    "InvalidSampleReferenceError",
    "NetworkError",
    "UploadError",
    "ValidationError",
]

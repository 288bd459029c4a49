"""Sample upload machinery for samplepush.

This module provides the pieces a push run is assembled from:
- Request builder (reference resolution and multipart PUT construction)
- Sample copier (one upload on a fresh HTTP client)
- Directory walker (MIME-filtered dispatch)
- Worker pool (fixed-size threads with an outstanding-work counter)

Use `PushService` from `samplepush.services.push` as the public API.
"""

from samplepush.uploaders.constants import SAMPLE_CONTENT_TYPE, SAMPLE_FIELD
from samplepush.uploaders.copier import copy_sample, make_client
from samplepush.uploaders.pool import WorkCounter, WorkerPool
from samplepush.uploaders.request_builder import (
    build_request,
    decode_sample_record,
    fetch_from_file_server,
    open_sample,
)
from samplepush.uploaders.walker import matches_mime_filter, sniff_mime_type, walk_directory

__all__ = [
    # Constants
    "SAMPLE_FIELD",
    "SAMPLE_CONTENT_TYPE",
    # Request builder
    "build_request",
    "decode_sample_record",
    "fetch_from_file_server",
    "open_sample",
    # Copier
    "copy_sample",
    "make_client",
    # Walker
    "walk_directory",
    "sniff_mime_type",
    "matches_mime_filter",
    # Pool
    "WorkCounter",
    "WorkerPool",
]

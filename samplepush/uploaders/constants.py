"""Shared constants for uploader modules."""

# =============================================================================
# Storage PUT
# =============================================================================

# Multipart field carrying the sample bytes
SAMPLE_FIELD = "sample"

# Content type of the sample part
SAMPLE_CONTENT_TYPE = "application/octet-stream"

# =============================================================================
# File Server GET
# =============================================================================

# Only this status is treated as a successful download
DOWNLOAD_OK_STATUS = 200

DOWNLOAD_FAILED_MESSAGE = "Couldn't download file"

"""Build storage PUT requests for sample references.

A reference is resolved to bytes by opening it as a local file first. If that
fails, it is decoded as a CRITs document identifier and the bytes are fetched
from the CRITs file server at ``<cfs>/<hex-id>``. The resolved bytes are
wrapped in a fully buffered multipart PUT request.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from samplepush.core.exceptions import (
    DownloadError,
    InvalidSampleReferenceError,
    NetworkError,
    SampleResolutionError,
)
from samplepush.models.sample import SampleRecord, wire_text
from samplepush.uploaders.constants import (
    DOWNLOAD_FAILED_MESSAGE,
    DOWNLOAD_OK_STATUS,
    SAMPLE_CONTENT_TYPE,
    SAMPLE_FIELD,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Reference Resolution
# =============================================================================


def decode_sample_record(reference: str) -> SampleRecord:
    """Decode a reference into a CRITs document identifier.

    Raises:
        InvalidSampleReferenceError: If the reference is not a supported encoding.
    """
    try:
        return SampleRecord.decode(reference)
    except PydanticValidationError as e:
        reason = e.errors()[0]["msg"] if e.errors() else str(e)
        raise InvalidSampleReferenceError(reference, reason) from e


def fetch_from_file_server(
    client: httpx.Client,
    file_server_url: str,
    record: SampleRecord,
) -> bytes:
    """Download sample bytes from the CRITs file server.

    The response body is always read in full and closed, whatever the status.

    Raises:
        DownloadError: If the server answers with anything but 200.
        NetworkError: If the request fails at the transport level.
    """
    url = f"{file_server_url}/{record.hex_id}"
    logger.debug("Fetching %s", url)

    try:
        with client.stream("GET", url) as resp:
            content = resp.read()
    except httpx.HTTPError as e:
        raise NetworkError(url, str(e)) from e

    if resp.status_code != DOWNLOAD_OK_STATUS:
        raise DownloadError(DOWNLOAD_FAILED_MESSAGE, url=url, status_code=resp.status_code)

    return content


def open_sample(
    reference: str,
    *,
    client: httpx.Client,
    file_server_url: Optional[str] = None,
) -> bytes:
    """Resolve a sample reference to its full content.

    Args:
        reference: Local path or encoded CRITs document identifier.
        client: HTTP client used for the file server fallback.
        file_server_url: Base URL of the CRITs file server, if any.

    Returns:
        Sample bytes.

    Raises:
        InvalidSampleReferenceError: Not a local file and not a valid identifier.
        SampleResolutionError: No file server configured, or the local read failed.
        DownloadError: File server did not return the sample.
        NetworkError: File server unreachable.
    """
    try:
        f = open(reference, "rb")
    except OSError as e:
        logger.debug("%s is not a local file (%s)", reference, e.strerror or e)
    else:
        with f:
            try:
                return f.read()
            except OSError as e:
                raise SampleResolutionError(f"Failed to read sample: {e}", reference) from e

    record = decode_sample_record(reference)
    if not file_server_url:
        raise SampleResolutionError(
            "Sample is not a local file and no CRITs file server is configured",
            reference,
        )
    return fetch_from_file_server(client, file_server_url, record)


# =============================================================================
# Request Construction
# =============================================================================


def build_request(
    uri: str,
    params: Mapping[str, str],
    reference: str,
    *,
    client: httpx.Client,
    file_server_url: Optional[str] = None,
) -> httpx.Request:
    """Build a multipart PUT request carrying one sample.

    The file part is named ``sample`` and its filename is the reference string
    as given, with undecodable filename bytes replaced by U+FFFD. Each entry
    of ``params`` becomes one form field. The body is read into memory before
    the request is returned.

    Args:
        uri: Storage endpoint URL.
        params: Submission metadata fields.
        reference: Local path or encoded CRITs document identifier.
        client: HTTP client used for the file server fallback.
        file_server_url: Base URL of the CRITs file server, if any.

    Returns:
        Ready-to-send request.
    """
    content = open_sample(reference, client=client, file_server_url=file_server_url)

    try:
        request = httpx.Request(
            "PUT",
            uri,
            data=dict(params),
            files={SAMPLE_FIELD: (wire_text(reference), content, SAMPLE_CONTENT_TYPE)},
        )
        request.read()
    except UnicodeError as e:
        raise InvalidSampleReferenceError(reference, f"cannot encode form data: {e}") from e
    return request

"""Copy one sample into the storage service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime
from typing import Optional

import httpx

from samplepush.core.config import Settings
from samplepush.core.exceptions import SamplePushError, UploadError
from samplepush.models.progress import UploadOutcome
from samplepush.models.sample import SubmissionMetadata
from samplepush.uploaders.request_builder import build_request

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], httpx.Client]


def make_client(settings: Settings) -> httpx.Client:
    """Create a fresh HTTP client for a single copy.

    Certificate validation is disabled only when ``settings.insecure`` is set.
    A ``None`` timeout waits indefinitely.
    """
    return httpx.Client(verify=settings.verify_ssl, timeout=settings.timeout)


def copy_sample(
    reference: str,
    settings: Settings,
    *,
    client_factory: ClientFactory = make_client,
    now: Optional[datetime] = None,
) -> UploadOutcome:
    """Resolve a sample, PUT it to storage and report the outcome.

    Creates a fresh httpx client per call, so concurrent workers never share
    connection state. Errors are logged and returned as a failed outcome
    rather than raised.

    Args:
        reference: Local path or encoded CRITs document identifier.
        settings: Run settings.
        client_factory: Builds the per-call HTTP client.
        now: Submission timestamp override.

    Returns:
        UploadOutcome with status code and response body on completion.
    """
    start_time = time.time()
    metadata = SubmissionMetadata.for_sample(
        reference,
        user_id=settings.user_id,
        source=settings.source,
        comment=settings.comment,
        now=now,
    )

    try:
        with client_factory(settings) as client:
            request = build_request(
                settings.storage_endpoint,
                metadata.to_fields(),
                reference,
                client=client,
                file_server_url=settings.cfs_url,
            )
            try:
                resp = client.send(request)
            except httpx.HTTPError as e:
                raise UploadError(f"Request to {request.url} failed: {e}", reference) from e
            body = resp.text
    except SamplePushError as e:
        logger.error("ERROR: %s", e)
        return UploadOutcome.failure(reference, e, time.time() - start_time)

    duration = time.time() - start_time
    success = 200 <= resp.status_code < 300
    level = logging.INFO if success else logging.WARNING
    logger.log(level, "Uploaded %s: HTTP %d %s", reference, resp.status_code, body)

    return UploadOutcome(
        reference=reference,
        success=success,
        status_code=resp.status_code,
        body=body,
        error="" if success else f"HTTP {resp.status_code}",
        duration=duration,
    )

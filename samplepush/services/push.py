"""Push service: feeds sample references to the worker pool.

Producers run on the calling thread in order: the sample list file, then the
directory walk. Uploads run on the pool. The run ends when every dispatched
reference has an outcome, or at the first failure in fail-fast mode.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from samplepush.core.config import Settings
from samplepush.core.exceptions import ConfigurationError, SampleListError, WalkError
from samplepush.core.logging import LogContext
from samplepush.models.progress import RunSummary, UploadOutcome, WalkReport
from samplepush.uploaders.copier import copy_sample
from samplepush.uploaders.pool import WorkerPool
from samplepush.uploaders.walker import Sniffer, sniff_mime_type, walk_directory

logger = logging.getLogger(__name__)

Copier = Callable[[str, Settings], UploadOutcome]


class PushService:
    """Upload samples from a list file and/or a directory tree."""

    def __init__(
        self,
        settings: Settings,
        *,
        copier: Copier = copy_sample,
        sniff: Sniffer = sniff_mime_type,
    ) -> None:
        """Initialize service.

        Args:
            settings: Immutable run settings.
            copier: Uploads one reference and returns its outcome.
            sniff: MIME type detector for directory mode.
        """
        self.settings = settings
        self.copier = copier
        self.sniff = sniff

    def copy(self, reference: str) -> UploadOutcome:
        """Upload a single reference with this service's settings."""
        return self.copier(reference, self.settings)

    # =========================================================================
    # Producers
    # =========================================================================

    def dispatch_list(self, file_list: str | os.PathLike[str], pool: WorkerPool) -> int:
        """Submit every non-blank line of a sample list file.

        Returns:
            Number of references submitted.

        Raises:
            SampleListError: If the list file cannot be opened or read.
        """
        path = os.fspath(file_list)
        try:
            f = open(path, encoding="utf-8", errors="surrogateescape")
        except OSError as e:
            raise SampleListError(path, e.strerror or str(e)) from e

        submitted = 0
        with f:
            try:
                for line in f:
                    reference = line.rstrip("\r\n")
                    if not reference.strip():
                        continue
                    if not pool.submit(reference):
                        logger.warning("Run aborted; not dispatching remaining samples")
                        break
                    submitted += 1
            except OSError as e:
                raise SampleListError(path, e.strerror or str(e)) from e

        logger.info("Dispatched %d samples from %s", submitted, path)
        return submitted

    def dispatch_directory(self, directory: str | os.PathLike[str], pool: WorkerPool) -> WalkReport:
        """Walk a directory and submit files matching the MIME filter."""
        report = walk_directory(
            directory,
            pool.submit,
            recursive=self.settings.recursive,
            mime_filter=self.settings.mime_filter,
            sniff=self.sniff,
        )
        logger.info(
            "Walked %s: %d files, %d dispatched, %d skipped",
            directory,
            report.visited,
            report.dispatched,
            report.skipped,
        )
        return report

    # =========================================================================
    # Run
    # =========================================================================

    def run(
        self,
        file_list: Optional[Path] = None,
        directory: Optional[Path] = None,
    ) -> RunSummary:
        """Upload every sample from the given sources.

        Args:
            file_list: Newline-delimited list of sample references.
            directory: Root directory to walk.

        Returns:
            RunSummary with per-sample outcomes.

        Raises:
            ConfigurationError: If neither source is given.
            SampleListError: If the list file cannot be read.
        """
        if file_list is None and directory is None:
            raise ConfigurationError("Nothing to upload. Pass a sample list and/or a directory.")

        errors: list[str] = []
        skipped = 0
        pool = WorkerPool(self.copy, self.settings.workers, fail_fast=self.settings.fail_fast)

        with LogContext(
            "push",
            logger,
            storage=self.settings.storage_url,
            workers=self.settings.workers,
        ) as log_ctx:
            pool.start()
            try:
                if file_list is not None:
                    self.dispatch_list(file_list, pool)

                if directory is not None and not pool.aborted:
                    try:
                        skipped += self.dispatch_directory(directory, pool).skipped
                    except WalkError as e:
                        logger.error("walk error: %s", e)
                        errors.append(str(e))

                pool.wait()
            finally:
                pool.close(wait=not pool.aborted)

            outcomes = pool.outcomes
            duration = log_ctx.elapsed

        succeeded = sum(1 for o in outcomes if o.success)
        failed = len(outcomes) - succeeded
        errors.extend(f"{o.reference}: {o.error}" for o in outcomes if not o.success)

        if pool.aborted and pool.first_failure is not None:
            not_attempted = pool.dispatched - len(outcomes)
            errors.append(
                f"Run aborted after failed upload of {pool.first_failure.reference} "
                f"({not_attempted} samples not completed)"
            )

        if errors:
            logger.warning("Push completed with %d failures", failed)

        return RunSummary(
            success=not errors,
            dispatched=pool.dispatched,
            succeeded=succeeded,
            failed=failed,
            duration=duration,
            skipped=skipped,
            aborted=pool.aborted,
            errors=errors,
            outcomes=outcomes,
        )

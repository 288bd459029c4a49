"""Directory walker that dispatches samples by sniffed MIME type."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from samplepush.core.exceptions import MimeDetectionError, WalkError
from samplepush.models.progress import WalkReport

logger = logging.getLogger(__name__)

Sniffer = Callable[[str], str]
Dispatcher = Callable[[str], bool]


def sniff_mime_type(path: str) -> str:
    """Detect a file's MIME type from its content using libmagic.

    Symlinks are followed, so the target's content is classified.

    Raises:
        MimeDetectionError: If the file cannot be read or classified.
    """
    import magic

    try:
        return magic.from_file(os.path.realpath(path), mime=True)
    except (OSError, magic.MagicException) as e:
        raise MimeDetectionError(path, str(e)) from e


def matches_mime_filter(mime_type: str, mime_filter: str) -> bool:
    """An empty filter matches everything; otherwise substring match."""
    return not mime_filter or mime_filter in mime_type


def walk_directory(
    root: str | os.PathLike[str],
    dispatch: Dispatcher,
    *,
    recursive: bool = False,
    mime_filter: str = "",
    sniff: Sniffer = sniff_mime_type,
) -> WalkReport:
    """Walk a directory and dispatch files whose MIME type matches the filter.

    In non-recursive mode only the files directly under ``root`` are visited.
    Entries are visited in sorted order and symlinked directories are not
    followed. Every dispatch or skip decision is logged.

    Args:
        root: Directory to walk.
        dispatch: Called with each matching file path. Returning False stops
            the walk.
        recursive: Descend into subdirectories.
        mime_filter: Substring the sniffed MIME type must contain.
        sniff: MIME type detector.

    Returns:
        WalkReport with visit/dispatch/skip counts.

    Raises:
        WalkError: If the root is not a directory or a directory is unreadable.
    """
    root_path = os.path.abspath(os.fspath(root))
    if not os.path.isdir(root_path):
        raise WalkError(root_path, "not a directory")

    def on_error(err: OSError) -> None:
        raise WalkError(err.filename or root_path, err.strerror or str(err)) from err

    report = WalkReport()

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=on_error):
        if recursive:
            dirnames.sort()
        else:
            dirnames.clear()

        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            report.visited += 1

            if not os.path.isfile(path) and not os.path.islink(path):
                logger.debug("Skipping %s (not a regular file)", path)
                report.skipped += 1
                continue

            try:
                mime_type = sniff(path)
            except MimeDetectionError as e:
                logger.warning("mimetype error (skipping %s): %s", path, e)
                report.skipped += 1
                continue

            if not matches_mime_filter(mime_type, mime_filter):
                logger.info("Skipping %s (%s)", path, mime_type)
                report.skipped += 1
                continue

            logger.info("Adding %s (%s)", path, mime_type)
            if dispatch(path) is False:
                logger.warning("Dispatch stopped; ending walk at %s", path)
                return report
            report.dispatched += 1

    return report

"""Main CLI entry point for samplepush."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from samplepush import __version__
from samplepush.cli.common import exit_code_for, handle_errors
from samplepush.core.config import Settings
from samplepush.core.logging import setup_logging
from samplepush.core.output import OutputFormat, print_summary
from samplepush.core.validation import validate_path_exists
from samplepush.services.push import PushService

logger = logging.getLogger(__name__)


# =============================================================================
# Command
# =============================================================================


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="samplepush")
@click.option(
    "--file",
    "-file",
    "file_list",
    type=click.Path(dir_okay=False, path_type=Path),
    help="List of samples (paths or CRITs IDs) to upload, one per line. "
    "Samples are first searched locally, then on the CRITs file server.",
)
@click.option("--cfs", "-cfs", help="Full URL to your CRITs file server, as a fallback")
@click.option(
    "--storage",
    "-storage",
    help="Full URL to your storage server, e.g. 'http://storage:8080'",
)
@click.option("--mime", "-mime", help="Only upload files with this MIME type (as substring)")
@click.option(
    "--dir",
    "-dir",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory of samples to upload",
)
@click.option("--comment", "-comment", help="Comment of submitter")
@click.option("--src", "-src", "source", help="Source information for the files")
@click.option("--uid", "-uid", help="User ID of submitter  [default: -1]")
@click.option("--workers", "-workers", type=int, help="Number of parallel workers  [default: 1]")
@click.option("--rec", "-rec", "recursive", is_flag=True, help="Walk --dir recursively")
@click.option("--insecure", "-insecure", is_flag=True, help="Disable certificate checking")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML file with default settings",
)
@click.option("--timeout", type=float, help="Per-request timeout in seconds (default: none)")
@click.option("--fail-fast", is_flag=True, help="Abort the whole run on the first failed upload")
@click.option(
    "--output",
    "-o",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Summary format",
)
@click.option("--quiet", "-q", is_flag=True, help="Only log errors")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@handle_errors
def cli(
    file_list: Optional[Path],
    cfs: Optional[str],
    storage: Optional[str],
    mime: Optional[str],
    directory: Optional[Path],
    comment: Optional[str],
    source: Optional[str],
    uid: Optional[str],
    workers: Optional[int],
    recursive: bool,
    insecure: bool,
    config_path: Optional[Path],
    timeout: Optional[float],
    fail_fast: bool,
    output_format: str,
    quiet: bool,
    verbose: bool,
) -> None:
    """samplepush - Upload samples to a sample-storage service.

    Samples come from a list file (--file), a directory (--dir), or both.
    References in the list that are not local files are fetched from the
    CRITs file server (--cfs).

    Example:

      samplepush --storage http://storage:8080 --dir ./samples --rec --mime pdf

      samplepush -storage http://storage:8080 -file hashes.txt -cfs http://crits:8081 -workers 8
    """
    setup_logging(quiet=quiet, verbose=verbose)

    if file_list is None and directory is None:
        raise click.UsageError("Nothing to upload. Pass --file and/or --dir.")
    if directory is not None:
        validate_path_exists(directory, must_be_dir=True, description="sample directory")

    settings = Settings.load(
        config_path,
        storage_url=storage,
        cfs_url=cfs,
        user_id=uid,
        source=source,
        comment=comment,
        mime_filter=mime,
        workers=workers,
        recursive=recursive or None,
        insecure=insecure or None,
        timeout=timeout,
        fail_fast=fail_fast or None,
    )
    logger.debug("Settings: %s", settings.to_dict())

    summary = PushService(settings).run(file_list=file_list, directory=directory)

    fmt = OutputFormat.from_string(output_format)
    if fmt == OutputFormat.JSON or not quiet:
        print_summary(summary, fmt)

    sys.exit(exit_code_for(summary))


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

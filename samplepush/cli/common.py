"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, TypeVar

import click

from samplepush.core.exceptions import (
    ConfigurationError,
    SampleListError,
    SamplePushError,
    ValidationError,
)
from samplepush.core.output import print_error
from samplepush.models.progress import RunSummary

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_ERROR = 2
    UPLOAD_FAILED = 3
    ABORTED = 4


def exit_code_for(summary: RunSummary) -> int:
    """Map a run summary to the process exit code."""
    if summary.aborted:
        return ExitCode.ABORTED
    if not summary.success:
        return ExitCode.UPLOAD_FAILED
    return ExitCode.SUCCESS


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Handle common errors and convert to exit codes."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Capture errors and exit with consistent messaging."""
        try:
            return f(*args, **kwargs)
        except (ConfigurationError, ValidationError, SampleListError) as e:
            print_error(str(e))
            sys.exit(ExitCode.CONFIG_ERROR)
        except SamplePushError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore

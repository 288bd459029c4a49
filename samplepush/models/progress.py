"""Outcome models for tracking upload status.

Provides dataclasses for per-sample outcomes and run summaries.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional


@dataclass
class UploadOutcome:
    """Result of pushing one sample to storage."""

    reference: str
    success: bool
    status_code: Optional[int] = None
    body: str = ""
    error: str = ""
    duration: float = 0.0

    @property
    def completed(self) -> bool:
        """Whether the storage service answered at all."""
        return self.status_code is not None

    @classmethod
    def failure(cls, reference: str, error: Exception | str, duration: float = 0.0) -> UploadOutcome:
        """Build a failed outcome from an error."""
        return cls(reference=reference, success=False, error=str(error), duration=duration)


@dataclass
class WalkReport:
    """Counts from one directory walk."""

    visited: int = 0
    dispatched: int = 0
    skipped: int = 0


@dataclass
class RunSummary:
    """Summary of a complete push run."""

    success: bool
    dispatched: int
    succeeded: int
    failed: int
    duration: float
    skipped: int = 0
    aborted: bool = False
    errors: List[str] = field(default_factory=list)
    outcomes: List[UploadOutcome] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Calculate success rate percentage."""
        if self.dispatched == 0:
            return 100.0
        return (self.succeeded / self.dispatched) * 100

    def to_dict(self, *, include_outcomes: bool = True) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        data = asdict(self)
        data["success_rate"] = round(self.success_rate, 1)
        if not include_outcomes:
            data.pop("outcomes")
        return data

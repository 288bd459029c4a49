"""Data models for samplepush.

Provides Pydantic models for wire records and dataclasses for run outcomes.
"""

from __future__ import annotations

from .base import BaseModel
from .progress import RunSummary, UploadOutcome, WalkReport
from .sample import (
    SampleRecord,
    SubmissionMetadata,
    format_timestamp,
    sample_name,
    wire_text,
)

__all__ = [
    # Base
    "BaseModel",
    # Wire records
    "SampleRecord",
    "SubmissionMetadata",
    "format_timestamp",
    "sample_name",
    "wire_text",
    # Outcomes
    "UploadOutcome",
    "WalkReport",
    "RunSummary",
]

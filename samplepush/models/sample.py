"""Sample identifier and submission metadata models.

A sample reference that is not a local path is expected to carry a CRITs
sample document identifier. Three text encodings are accepted:

- a bare ObjectId: ``5f1d7c0e9b1e8a3d4c2b1a09``
- a JSON document: ``{"_id": "5f1d7c0e9b1e8a3d4c2b1a09", "md5": "..."}``
- MongoDB extended JSON: ``{"_id": {"$oid": "5f1d7c0e9b1e8a3d4c2b1a09"}}``
"""

from __future__ import annotations

import os
import re
from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import BaseModel

OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def format_timestamp(when: datetime) -> str:
    """Render a submission timestamp as RFC 3339 with UTC offset.

    Naive datetimes are taken to be local time.
    """
    if when.tzinfo is None:
        when = when.astimezone()
    return when.isoformat(timespec="seconds")


def wire_text(value: str) -> str:
    """Render a filesystem string as valid UTF-8 for the multipart body.

    Filenames that are not valid UTF-8 arrive as surrogate escapes; those
    bytes become U+FFFD instead of failing the upload.
    """
    try:
        raw = os.fsencode(value)
    except UnicodeEncodeError:
        raw = value.encode("utf-8", "replace")
    return raw.decode("utf-8", "replace")


def sample_name(reference: str) -> str:
    """Return the display name (basename) for a sample reference."""
    return wire_text(os.path.basename(reference.rstrip(os.sep)) or reference)


class SampleRecord(BaseModel):
    """CRITs sample document identifier."""

    id: str = Field(..., alias="_id", description="12-byte ObjectId as hex")
    md5: Optional[str] = Field(None, description="MD5 digest recorded by CRITs")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_object_id(cls, value: Any) -> str:
        if isinstance(value, dict) and "$oid" in value:
            value = value["$oid"]
        if not isinstance(value, str) or not OBJECT_ID_RE.match(value.strip()):
            raise ValueError("_id must be a 24-character hex ObjectId")
        return value.strip().lower()

    @property
    def hex_id(self) -> str:
        """Lowercase hex rendering used in file server URLs."""
        return self.id

    @classmethod
    def decode(cls, text: str) -> SampleRecord:
        """Decode a sample reference into a document identifier.

        Raises:
            pydantic.ValidationError: If the text is not a supported encoding.
        """
        text = text.strip()
        if OBJECT_ID_RE.match(text):
            return cls.model_validate({"_id": text})
        return cls.model_validate_json(text)


class SubmissionMetadata(BaseModel):
    """Form fields attached to every sample upload."""

    # Values go on the wire as given
    model_config = ConfigDict(str_strip_whitespace=False)

    user_id: str
    source: str = ""
    name: str
    date: str
    comment: str = ""

    @classmethod
    def for_sample(
        cls,
        reference: str,
        *,
        user_id: str,
        source: str = "",
        comment: str = "",
        now: Optional[datetime] = None,
    ) -> SubmissionMetadata:
        """Build metadata for one upload, stamped with the current time."""
        return cls(
            user_id=wire_text(user_id),
            source=wire_text(source),
            name=sample_name(reference),
            date=format_timestamp(now or datetime.now()),
            comment=wire_text(comment),
        )

    def to_fields(self) -> dict[str, str]:
        """Return the multipart form fields."""
        return self.model_dump()

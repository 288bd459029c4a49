"""Pytest configuration and fixtures for samplepush tests."""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from email.message import Message
from email.parser import BytesParser
from email.policy import HTTP
from pathlib import Path
from typing import Generator

import httpx
import pytest

from samplepush.core.config import Settings

STORAGE_URL = "http://storage.example.org:8080"
CFS_URL = "http://crits.example.org:8081"
OBJECT_ID = "5f1d7c0e9b1e8a3d4c2b1a09"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the user's config file and environment."""
    monkeypatch.setattr("samplepush.core.config.CONFIG_FILE", tmp_path / "missing.yaml")
    for name in (
        "SAMPLEPUSH_STORAGE",
        "SAMPLEPUSH_CFS",
        "SAMPLEPUSH_UID",
        "SAMPLEPUSH_SOURCE",
        "SAMPLEPUSH_COMMENT",
        "SAMPLEPUSH_WORKERS",
        "SAMPLEPUSH_INSECURE",
        "SAMPLEPUSH_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at fake storage and file servers."""
    return Settings(
        storage_url=STORAGE_URL,
        cfs_url=CFS_URL,
        user_id="42",
        source="unit-test",
        comment="pushed from tests",
    )


@pytest.fixture
def mock_client_factory() -> Callable[..., Callable[[Settings], httpx.Client]]:
    """Build a client factory whose clients answer through ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]):
        def make(settings: Settings) -> httpx.Client:
            return httpx.Client(transport=httpx.MockTransport(handler))

        return make

    return factory


def parse_multipart(request: httpx.Request) -> dict[str, Message]:
    """Split a buffered multipart request body into parts keyed by field name."""
    header = f"Content-Type: {request.headers['content-type']}\r\n\r\n".encode()
    message = BytesParser(policy=HTTP).parsebytes(header + request.content)
    parts: dict[str, Message] = {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        parts[name] = part
    return parts


def field_value(part: Message) -> str:
    """Decode a plain form field part."""
    return part.get_payload(decode=True).decode()

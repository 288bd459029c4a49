"""Tests for samplepush.uploaders.copier."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from conftest import OBJECT_ID, STORAGE_URL, field_value, parse_multipart

from samplepush.core.config import Settings
from samplepush.uploaders.copier import copy_sample, make_client

FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture
def sample_file(temp_dir: Path) -> Path:
    path = temp_dir / "evil.exe"
    path.write_bytes(b"MZ\x90\x00")
    return path


class TestCopySample:
    """Tests for copy_sample."""

    def test_successful_upload(self, settings: Settings, sample_file: Path, mock_client_factory):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text='{"ResponseCode":1}')

        outcome = copy_sample(
            str(sample_file),
            settings,
            client_factory=mock_client_factory(handler),
            now=FIXED_NOW,
        )

        assert outcome.success
        assert outcome.status_code == 200
        assert outcome.body == '{"ResponseCode":1}'
        assert outcome.error == ""

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "PUT"
        assert str(request.url) == f"{STORAGE_URL}/samples/"

        parts = parse_multipart(request)
        assert field_value(parts["user_id"]) == "42"
        assert field_value(parts["source"]) == "unit-test"
        assert field_value(parts["name"]) == "evil.exe"
        assert field_value(parts["date"]) == "2024-03-01T12:30:45+02:00"
        assert field_value(parts["comment"]) == "pushed from tests"
        assert parts["sample"].get_filename() == str(sample_file)

    def test_logs_status_and_body(
        self, settings: Settings, sample_file: Path, mock_client_factory, caplog
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="stored")

        with caplog.at_level(logging.INFO, logger="samplepush"):
            copy_sample(str(sample_file), settings, client_factory=mock_client_factory(handler))

        assert f"Uploaded {sample_file}: HTTP 200 stored" in caplog.text

    def test_non_2xx_is_a_failed_outcome(
        self, settings: Settings, sample_file: Path, mock_client_factory
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="disk full")

        outcome = copy_sample(
            str(sample_file), settings, client_factory=mock_client_factory(handler)
        )

        assert not outcome.success
        assert outcome.completed
        assert outcome.status_code == 500
        assert outcome.body == "disk full"
        assert outcome.error == "HTTP 500"

    def test_unresolvable_reference_is_isolated(
        self, settings: Settings, mock_client_factory, caplog
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("nothing should be sent")

        with caplog.at_level(logging.ERROR, logger="samplepush"):
            outcome = copy_sample(
                "/no/such/sample", settings, client_factory=mock_client_factory(handler)
            )

        assert not outcome.success
        assert not outcome.completed
        assert "Not a local file" in outcome.error
        assert "ERROR:" in caplog.text

    def test_download_failure_is_isolated(self, settings: Settings, mock_client_factory):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(404)
            raise AssertionError("storage should not be called")

        outcome = copy_sample(OBJECT_ID, settings, client_factory=mock_client_factory(handler))

        assert not outcome.success
        assert "Couldn't download file" in outcome.error

    def test_remote_sample_is_uploaded(self, settings: Settings, mock_client_factory):
        methods: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            methods.append(request.method)
            if request.method == "GET":
                return httpx.Response(200, content=b"remote")
            return httpx.Response(200, text="ok")

        outcome = copy_sample(OBJECT_ID, settings, client_factory=mock_client_factory(handler))

        assert outcome.success
        assert methods == ["GET", "PUT"]

    def test_storage_unreachable_is_isolated(
        self, settings: Settings, sample_file: Path, mock_client_factory
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        outcome = copy_sample(
            str(sample_file), settings, client_factory=mock_client_factory(handler)
        )

        assert not outcome.success
        assert "connection refused" in outcome.error

    def test_fresh_client_per_call(
        self, settings: Settings, sample_file: Path, mock_client_factory
    ):
        clients: list[httpx.Client] = []
        factory = mock_client_factory(lambda request: httpx.Response(200))

        def tracking_factory(s: Settings) -> httpx.Client:
            client = factory(s)
            clients.append(client)
            return client

        copy_sample(str(sample_file), settings, client_factory=tracking_factory)
        copy_sample(str(sample_file), settings, client_factory=tracking_factory)

        assert len(clients) == 2
        assert clients[0] is not clients[1]
        assert all(c.is_closed for c in clients)


class TestMakeClient:
    """Tests for make_client."""

    def test_defaults(self, settings: Settings):
        with make_client(settings) as client:
            assert client.timeout.read is None
            assert client.timeout.connect is None

    def test_timeout_applied(self):
        settings = Settings(storage_url=STORAGE_URL, timeout=5.0)
        with make_client(settings) as client:
            assert client.timeout.read == 5.0

    def test_insecure_disables_verification(self):
        settings = Settings(storage_url=STORAGE_URL, insecure=True)
        with patch("samplepush.uploaders.copier.httpx.Client") as mock_client:
            make_client(settings)
        mock_client.assert_called_once_with(verify=False, timeout=None)

    def test_secure_by_default(self, settings: Settings):
        with patch("samplepush.uploaders.copier.httpx.Client") as mock_client:
            make_client(settings)
        mock_client.assert_called_once_with(verify=True, timeout=None)


@pytest.mark.skipif(sys.platform != "linux", reason="needs a byte-transparent filesystem")
class TestUndecodableFilenames:
    """Samples whose on-disk names are not valid UTF-8."""

    def test_upload_succeeds_with_replacement_characters(
        self, settings: Settings, temp_dir: Path, mock_client_factory
    ):
        path = temp_dir / os.fsdecode(b"sample_\xff\xfe.exe")
        path.write_bytes(b"MZ")
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text="stored")

        outcome = copy_sample(str(path), settings, client_factory=mock_client_factory(handler))

        assert outcome.success, outcome.error
        assert len(requests) == 1
        body = requests[0].content
        # filename and name field
        assert body.count("sample_\ufffd\ufffd.exe".encode()) == 2
        assert b"MZ" in body

"""Tests for samplepush.services.push."""

from __future__ import annotations

import functools
import os
import sys
import threading
from pathlib import Path

import httpx
import pytest
from conftest import STORAGE_URL

from samplepush.core.config import Settings
from samplepush.core.exceptions import ConfigurationError, SampleListError
from samplepush.models.progress import UploadOutcome
from samplepush.services.push import PushService
from samplepush.uploaders.copier import copy_sample


class RecordingCopier:
    """Copier stand-in that records references and fails selected ones."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.references: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, reference: str, settings: Settings) -> UploadOutcome:
        with self._lock:
            self.references.append(reference)
        if reference in self.failing:
            return UploadOutcome(reference=reference, success=False, error="HTTP 500")
        return UploadOutcome(reference=reference, success=True, status_code=200)


def sniff_all(path: str) -> str:
    return "application/pdf" if path.endswith(".pdf") else "application/octet-stream"


def make_service(copier: RecordingCopier, **overrides) -> PushService:
    settings = Settings(storage_url=STORAGE_URL, **overrides)
    return PushService(settings, copier=copier, sniff=sniff_all)


@pytest.fixture
def sample_list(temp_dir: Path) -> Path:
    path = temp_dir / "samples.txt"
    path.write_text("/data/one.exe\n\n5f1d7c0e9b1e8a3d4c2b1a09\r\n/data/with space.bin\n")
    return path


@pytest.fixture
def sample_dir(temp_dir: Path) -> Path:
    root = temp_dir / "samples"
    root.mkdir()
    (root / "a.bin").write_bytes(b"a")
    (root / "b.pdf").write_bytes(b"b")
    sub = root / "nested"
    sub.mkdir()
    (sub / "c.pdf").write_bytes(b"c")
    return root


class TestPushServiceRun:
    """Tests for PushService.run."""

    def test_list_lines_dispatched_in_order(self, sample_list: Path):
        copier = RecordingCopier()

        summary = make_service(copier).run(file_list=sample_list)

        assert copier.references == [
            "/data/one.exe",
            "5f1d7c0e9b1e8a3d4c2b1a09",
            "/data/with space.bin",
        ]
        assert summary.success
        assert summary.dispatched == 3
        assert summary.succeeded == 3
        assert summary.failed == 0

    def test_directory_non_recursive(self, sample_dir: Path):
        copier = RecordingCopier()

        summary = make_service(copier).run(directory=sample_dir)

        assert sorted(copier.references) == [str(sample_dir / "a.bin"), str(sample_dir / "b.pdf")]
        assert summary.dispatched == 2

    def test_directory_recursive_with_mime_filter(self, sample_dir: Path):
        copier = RecordingCopier()

        summary = make_service(copier, recursive=True, mime_filter="pdf").run(directory=sample_dir)

        assert sorted(copier.references) == [
            str(sample_dir / "b.pdf"),
            str(sample_dir / "nested" / "c.pdf"),
        ]
        assert summary.skipped == 1

    def test_list_and_directory_combined(self, sample_list: Path, sample_dir: Path):
        copier = RecordingCopier()

        summary = make_service(copier, workers=4).run(file_list=sample_list, directory=sample_dir)

        assert summary.dispatched == 5
        assert len(summary.outcomes) == 5
        assert summary.success

    def test_failures_are_isolated(self, sample_list: Path):
        copier = RecordingCopier(failing={"/data/one.exe"})

        summary = make_service(copier, workers=2).run(file_list=sample_list)

        assert not summary.success
        assert not summary.aborted
        assert summary.succeeded == 2
        assert summary.failed == 1
        assert summary.errors == ["/data/one.exe: HTTP 500"]

    def test_fail_fast_aborts(self, temp_dir: Path):
        path = temp_dir / "samples.txt"
        path.write_text("bad\n" + "".join(f"good-{i}\n" for i in range(50)))
        copier = RecordingCopier(failing={"bad"})

        summary = make_service(copier, fail_fast=True).run(file_list=path)

        assert summary.aborted
        assert not summary.success
        assert summary.failed == 1
        assert any("Run aborted" in e for e in summary.errors)

    def test_missing_list_raises(self, temp_dir: Path):
        with pytest.raises(SampleListError) as exc_info:
            make_service(RecordingCopier()).run(file_list=temp_dir / "missing.txt")

        assert "Couldn't open file containing sample list" in str(exc_info.value)

    def test_missing_directory_recorded_as_error(self, temp_dir: Path):
        summary = make_service(RecordingCopier()).run(directory=temp_dir / "missing")

        assert not summary.success
        assert summary.dispatched == 0
        assert summary.errors and "Walk error" in summary.errors[0]

    def test_requires_a_source(self):
        with pytest.raises(ConfigurationError):
            make_service(RecordingCopier()).run()

    def test_summary_serializes(self, sample_list: Path):
        summary = make_service(RecordingCopier()).run(file_list=sample_list)

        data = summary.to_dict()

        assert data["success_rate"] == 100.0
        assert len(data["outcomes"]) == 3
        assert "outcomes" not in summary.to_dict(include_outcomes=False)

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a byte-transparent filesystem")
    def test_walked_file_with_undecodable_name_is_uploaded(
        self, settings: Settings, temp_dir: Path, mock_client_factory
    ):
        root = temp_dir / "samples"
        root.mkdir()
        (root / os.fsdecode(b"sample_\xff\xfe.exe")).write_bytes(b"MZ")
        puts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            puts.append(request)
            return httpx.Response(200, text="stored")

        copier = functools.partial(copy_sample, client_factory=mock_client_factory(handler))
        service = PushService(settings, copier=copier, sniff=sniff_all)

        summary = service.run(directory=root)

        assert summary.success, summary.errors
        assert summary.succeeded == 1
        assert len(puts) == 1

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from egress.types import OutputType, UploadResult


class FakeBackend:
    """In-memory backend that either returns ``result`` or raises ``error``."""

    def __init__(self, result: UploadResult | None = None, error: Exception | None = None) -> None:
        self.result = result or UploadResult(location="fake://bucket/out.mp4", size=42, presigned_url="https://signed")
        self.error = error
        self.calls: list[tuple[str, str, OutputType]] = []
        self._lock = threading.Lock()

    def upload(self, local_path: str, storage_path: str, output_type: OutputType) -> UploadResult:
        with self._lock:
            self.calls.append((local_path, storage_path, output_type))
        if self.error is not None:
            raise self.error
        return self.result


class RecordingReporter:
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def record_success(self, output_type: OutputType, elapsed_ms: float) -> None:
        self.events.append(("success", output_type, elapsed_ms))

    def record_failure(self, output_type: OutputType, elapsed_ms: float) -> None:
        self.events.append(("failure", output_type, elapsed_ms))

    def record_backup_write(self, output_type: OutputType) -> None:
        self.events.append(("backup_write", output_type))

    def kinds(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def fake_backend_factory():
    return FakeBackend


@pytest.fixture()
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "in.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"x" * 1024)
    return path

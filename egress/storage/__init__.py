"""Storage abstraction (local filesystem, S3 or libcloud providers)."""

from __future__ import annotations

from typing import Protocol

from egress.types import OutputType, UploadResult


class UploadBackend(Protocol):
    def upload(self, local_path: str, storage_path: str, output_type: OutputType) -> UploadResult:
        ...


def join_key(prefix: str, storage_path: str) -> str:
    """Object key for ``storage_path`` under ``prefix``, without leading slashes."""
    prefix = prefix.strip("/")
    storage_path = storage_path.lstrip("/")
    return f"{prefix}/{storage_path}" if prefix else storage_path


__all__ = ["UploadBackend", "join_key"]

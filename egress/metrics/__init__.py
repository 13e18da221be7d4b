"""Upload outcome reporting."""

from __future__ import annotations

from typing import Protocol

from egress.metrics.upload_metrics import UploadMetrics
from egress.types import OutputType


class OutcomeReporter(Protocol):
    def record_success(self, output_type: OutputType, elapsed_ms: float) -> None:
        ...

    def record_failure(self, output_type: OutputType, elapsed_ms: float) -> None:
        ...

    def record_backup_write(self, output_type: OutputType) -> None:
        ...


__all__ = ["OutcomeReporter", "UploadMetrics"]

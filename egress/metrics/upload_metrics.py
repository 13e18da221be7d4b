"""
Upload Metrics Collection

Counts upload outcomes per output type for monitoring and analysis.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from egress.types import OutputType


@dataclass
class UploadMetrics:
    """
    Outcome counters collected by an uploader.

    Keys are output type labels (``mp4``, ``json``, ...). Safe to share between
    threads.
    """

    success_count: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    failure_count: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    backup_writes: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    # Accumulated elapsed time of primary attempts (in milliseconds)
    success_elapsed_ms: float = 0.0
    failure_elapsed_ms: float = 0.0

    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def record_success(self, output_type: OutputType, elapsed_ms: float) -> None:
        with self._lock:
            self.success_count[output_type.label] += 1
            self.success_elapsed_ms += elapsed_ms

    def record_failure(self, output_type: OutputType, elapsed_ms: float) -> None:
        with self._lock:
            self.failure_count[output_type.label] += 1
            self.failure_elapsed_ms += elapsed_ms

    def record_backup_write(self, output_type: OutputType) -> None:
        with self._lock:
            self.backup_writes[output_type.label] += 1

    @property
    def total_successes(self) -> int:
        with self._lock:
            return sum(self.success_count.values())

    @property
    def total_failures(self) -> int:
        with self._lock:
            return sum(self.failure_count.values())

    @property
    def total_backup_writes(self) -> int:
        with self._lock:
            return sum(self.backup_writes.values())

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary for serialization."""
        with self._lock:
            return {
                "primary": {
                    "success": dict(self.success_count),
                    "failure": dict(self.failure_count),
                },
                "backup_writes": dict(self.backup_writes),
                "elapsed_ms": {
                    "success": self.success_elapsed_ms,
                    "failure": self.failure_elapsed_ms,
                },
            }

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of key metrics."""
        with self._lock:
            successes = self.total_successes
            failures = self.total_failures
            attempts = successes + failures
            elapsed = self.success_elapsed_ms + self.failure_elapsed_ms
            return {
                "primary_attempts": attempts,
                "primary_successes": successes,
                "primary_failures": failures,
                "backup_writes": self.total_backup_writes,
                "primary_failure_rate": failures / attempts if attempts > 0 else 0.0,
                "average_elapsed_ms": elapsed / attempts if attempts > 0 else 0.0,
            }

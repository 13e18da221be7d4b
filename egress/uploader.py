"""Primary/backup upload orchestration."""

from __future__ import annotations

import contextlib
import os
import threading
import time

from loguru import logger

from egress.exceptions import UploadFailedError
from egress.metrics import OutcomeReporter
from egress.settings import StorageConfig
from egress.storage import UploadBackend
from egress.storage.factory import get_backend
from egress.types import OutputType, UploadResult


class Uploader:
    """Delivers files to a primary backend, falling back to an optional backup.

    One instance serves one output session. ``manifest_required`` turns true once
    any file of the session landed on the backup and never turns false again.
    """

    def __init__(
        self,
        primary: UploadBackend,
        backup: UploadBackend | None = None,
        reporter: OutcomeReporter | None = None,
    ) -> None:
        self.primary = primary
        self.backup = backup
        self.reporter = reporter
        self._backup_used = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        conf: StorageConfig | None,
        backup: StorageConfig | None = None,
        reporter: OutcomeReporter | None = None,
    ) -> "Uploader":
        """Build an uploader from storage configs.

        A primary backend that cannot be built raises. A broken backup config is
        logged and the uploader runs without a backup.
        """
        primary = get_backend(conf)

        backup_backend = None
        if backup is not None:
            try:
                backup_backend = get_backend(backup)
            except Exception:
                logger.exception("failed to create backup uploader")

        return cls(primary, backup_backend, reporter)

    def upload(
        self,
        local_path: str,
        storage_path: str,
        output_type: OutputType,
        delete_after_upload: bool = False,
    ) -> UploadResult:
        start = time.perf_counter()
        try:
            result = self.primary.upload(local_path, storage_path, output_type)
        except Exception as primary_err:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            self._report_failure(output_type, elapsed_ms)
            if self.backup is None:
                raise

            logger.warning(
                "primary upload of {} failed, trying backup: {}", storage_path, primary_err
            )
            try:
                result = self.backup.upload(local_path, storage_path, output_type)
            except Exception as backup_err:
                raise UploadFailedError(primary_err, backup_err) from backup_err

            with self._lock:
                self._backup_used = True
            self._report_backup_write(output_type)
            logger.info("uploaded {} to backup storage at {}", storage_path, result.location)
        else:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            self._report_success(output_type, elapsed_ms)

        if delete_after_upload and not _is_same_file(local_path, result.location):
            with contextlib.suppress(OSError):
                os.remove(local_path)
        return result

    def manifest_required(self) -> bool:
        with self._lock:
            return self._backup_used

    def _report_success(self, output_type: OutputType, elapsed_ms: float) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter.record_success(output_type, elapsed_ms)
        except Exception:
            logger.exception("upload reporter failed to record success")

    def _report_failure(self, output_type: OutputType, elapsed_ms: float) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter.record_failure(output_type, elapsed_ms)
        except Exception:
            logger.exception("upload reporter failed to record failure")

    def _report_backup_write(self, output_type: OutputType) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter.record_backup_write(output_type)
        except Exception:
            logger.exception("upload reporter failed to record backup write")


def _is_same_file(local_path: str, location: str) -> bool:
    """True when a local backend stored the object at ``local_path`` itself."""
    try:
        return os.path.samefile(local_path, location)
    except (OSError, ValueError):
        # Remote locations (URLs) are not paths
        return False


__all__ = ["Uploader"]

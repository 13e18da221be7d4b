from __future__ import annotations

import os
import shutil
from pathlib import Path

from egress.exceptions import ConfigurationError
from egress.settings import StorageConfig
from egress.types import OutputType, UploadResult


class LocalStorage:
    def __init__(self, root: Path | str = "") -> None:
        if "\x00" in str(root):
            raise ConfigurationError("Local storage path contains a null byte", {"path_prefix": repr(str(root))})
        # Directories are created per upload so a bad root fails the upload, not construction.
        self.root = Path(root)

    @classmethod
    def from_config(cls, conf: StorageConfig) -> "LocalStorage":
        return cls(conf.path_prefix)

    def _target(self, storage_path: str) -> Path:
        if self.root == Path(""):
            return Path(storage_path)
        return self.root / storage_path.lstrip("/")

    def upload(self, local_path: str, storage_path: str, output_type: OutputType) -> UploadResult:
        source = Path(local_path)
        size = source.stat().st_size

        target = self._target(storage_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if not (target.exists() and os.path.samefile(source, target)):
            shutil.copyfile(source, target)
        return UploadResult(location=str(target), size=size)


__all__ = ["LocalStorage"]

"""
Storage backend selection.

A ``StorageConfig`` names one destination. Provider sections are checked in a fixed
priority order (s3, gcp, azure, alioss); with none set the local filesystem is used.
"""

from __future__ import annotations

from loguru import logger

from egress.settings import StorageConfig
from egress.storage import UploadBackend
from egress.storage.cloud import CloudStorage
from egress.storage.local import LocalStorage
from egress.storage.s3 import S3Storage


def get_backend(conf: StorageConfig | None) -> UploadBackend:
    """Build the backend described by ``conf``. Constructor errors propagate unchanged."""
    if conf is None:
        return LocalStorage.from_config(StorageConfig())

    providers = conf.providers()
    if len(providers) > 1:
        logger.warning(
            "Storage config sets several providers {}, using {}", providers, providers[0]
        )

    if conf.s3 is not None:
        return S3Storage(conf.s3, prefix=conf.path_prefix)
    if conf.gcp is not None:
        return CloudStorage.for_gcp(conf.gcp, prefix=conf.path_prefix)
    if conf.azure is not None:
        return CloudStorage.for_azure(conf.azure, prefix=conf.path_prefix)
    if conf.alioss is not None:
        return CloudStorage.for_alioss(conf.alioss, prefix=conf.path_prefix)
    return LocalStorage.from_config(conf)


__all__ = ["get_backend"]

"""Resilient file delivery to local or object storage with backup failover."""

from __future__ import annotations

from egress.types import OutputType, UploadResult
from egress.uploader import Uploader

__all__ = ["OutputType", "UploadResult", "Uploader"]

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class OutputType(str, Enum):
    """Kind of file being delivered. The value doubles as the MIME content type."""

    UNKNOWN = ""
    RAW = "audio/x-raw"
    OGG = "audio/ogg"
    IVF = "video/x-ivf"
    MP4 = "video/mp4"
    TS = "video/mp2t"
    WEBM = "video/webm"
    HLS = "application/x-mpegurl"
    JSON = "application/json"
    BLOB = "application/octet-stream"
    JPEG = "image/jpeg"
    PNG = "image/png"

    @property
    def content_type(self) -> str:
        return self.value or DEFAULT_CONTENT_TYPE

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class UploadResult:
    """Where a file ended up after a successful upload."""

    location: str
    size: int
    presigned_url: str = ""


__all__ = ["OutputType", "UploadResult", "DEFAULT_CONTENT_TYPE"]

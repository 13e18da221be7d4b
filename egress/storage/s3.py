from __future__ import annotations

from pathlib import Path
from typing import Any

import boto3
from boto3.exceptions import Boto3Error
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from egress.exceptions import ConfigurationError, S3Error
from egress.settings import S3Config
from egress.storage import join_key
from egress.types import OutputType, UploadResult

DEFAULT_REGION = "us-east-1"


class S3Storage:
    def __init__(self, conf: S3Config, prefix: str = "") -> None:
        self.conf = conf
        self.bucket = conf.bucket
        self.prefix = prefix.strip("/")
        self.region = conf.region or DEFAULT_REGION

        try:
            session = boto3.session.Session(
                aws_access_key_id=conf.access_key,
                aws_secret_access_key=conf.secret,
                aws_session_token=conf.session_token,
                region_name=self.region,
            )
            client_config = Config(
                retries={"max_attempts": conf.max_retries, "mode": "standard"},
                s3={"addressing_style": "path" if conf.force_path_style else "auto"},
            )
            self.client = session.client("s3", endpoint_url=conf.endpoint, config=client_config)
        except (ValueError, BotoCoreError) as exc:
            raise ConfigurationError(
                f"Invalid S3 configuration for bucket {self.bucket}: {exc}",
                {"bucket": self.bucket, "endpoint": conf.endpoint or ""},
            ) from exc

    def _key(self, storage_path: str) -> str:
        return join_key(self.prefix, storage_path)

    def _extra_args(self, output_type: OutputType) -> dict[str, Any]:
        extra: dict[str, Any] = {"ContentType": output_type.content_type}
        if self.conf.metadata:
            extra["Metadata"] = dict(self.conf.metadata)
        if self.conf.tagging:
            extra["Tagging"] = self.conf.tagging
        if self.conf.content_disposition:
            extra["ContentDisposition"] = self.conf.content_disposition
        return extra

    def location(self, key: str) -> str:
        if self.conf.endpoint:
            return f"{self.conf.endpoint}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def get_presigned_url(self, key: str, expires: int = 3600) -> str:
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires,
        )

    def upload(self, local_path: str, storage_path: str, output_type: OutputType) -> UploadResult:
        size = Path(local_path).stat().st_size
        key = self._key(storage_path)
        try:
            self.client.upload_file(local_path, self.bucket, key, ExtraArgs=self._extra_args(output_type))
            presigned_url = ""
            if self.conf.presign_expires:
                presigned_url = self.get_presigned_url(key, self.conf.presign_expires)
        except (BotoCoreError, ClientError, Boto3Error) as exc:
            raise S3Error(
                f"S3 upload to s3://{self.bucket}/{key} failed: {exc}",
                {"bucket": self.bucket, "key": key},
            ) from exc
        return UploadResult(location=self.location(key), size=size, presigned_url=presigned_url)


__all__ = ["S3Storage"]

"""
Object storage backends driven by Apache Libcloud.

Covers the providers that are not reached through boto3:
- Google Cloud Storage
- Azure Blob Storage
- Alibaba Cloud OSS
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

from libcloud.common.types import LibcloudError
from libcloud.storage.providers import get_driver
from libcloud.storage.types import Provider

from egress.exceptions import CloudStorageError, ConfigurationError
from egress.settings import AliOSSConfig, AzureConfig, GCPConfig
from egress.storage import join_key
from egress.types import OutputType, UploadResult


class CloudStorage:
    """
    Upload-only libcloud backend.

    Usage:
        storage = CloudStorage.for_gcp(GCPConfig(bucket="recordings", credentials_json=...))
        storage = CloudStorage.for_azure(AzureConfig(account_name=..., account_key=..., container_name=...))
        storage = CloudStorage.for_alioss(AliOSSConfig(bucket=..., endpoint="oss-cn-hangzhou.aliyuncs.com", ...))
    """

    PROVIDERS = {
        "gcp": Provider.GOOGLE_STORAGE,
        "azure": Provider.AZURE_BLOBS,
        "alioss": Provider.ALIYUN_OSS,
    }

    def __init__(
        self,
        provider: str,
        container: str,
        key: str,
        secret: Optional[str],
        location_for: Callable[[str], str],
        prefix: str = "",
        **driver_kwargs: Any,
    ):
        """
        Args:
            provider: One of ``PROVIDERS``
            container: Bucket/container name
            key: Access key / account name / service account email
            secret: Secret key / account key / private key
            location_for: Builds the public location of an object key
            prefix: Key prefix applied to every storage path
            driver_kwargs: Provider specific driver options (project, host, ...)
        """
        if provider not in self.PROVIDERS:
            raise ConfigurationError(
                f"Unknown provider: {provider}. Supported: {list(self.PROVIDERS)}",
                {"provider": provider},
            )

        driver_cls = get_driver(self.PROVIDERS[provider])
        self.provider = provider
        self.prefix = prefix.strip("/")
        self._location_for = location_for
        self._driver = driver_cls(key, secret, **driver_kwargs)
        self._container_name = container
        self._container = None

    @classmethod
    def for_gcp(cls, conf: GCPConfig, prefix: str = "") -> "CloudStorage":
        driver_kwargs: dict[str, Any] = {}
        if conf.credentials_json:
            try:
                credentials = json.loads(conf.credentials_json)
                key = credentials["client_email"]
                secret = credentials["private_key"]
            except (ValueError, KeyError, TypeError) as exc:
                raise ConfigurationError(
                    f"Invalid GCP credentials JSON: {exc}", {"bucket": conf.bucket}
                ) from exc
            project = conf.project or credentials.get("project_id")
        else:
            # Fall back to the metadata server of the instance we run on
            key, secret = "default", None
            project = conf.project
            driver_kwargs["auth_type"] = "GCE"
        if project:
            driver_kwargs["project"] = project

        def location_for(object_key: str) -> str:
            return f"https://{conf.bucket}.storage.googleapis.com/{object_key}"

        return cls("gcp", conf.bucket, key, secret, location_for, prefix, **driver_kwargs)

    @classmethod
    def for_azure(cls, conf: AzureConfig, prefix: str = "") -> "CloudStorage":
        def location_for(object_key: str) -> str:
            return f"https://{conf.account_name}.blob.core.windows.net/{conf.container_name}/{object_key}"

        return cls("azure", conf.container_name, conf.account_name, conf.account_key, location_for, prefix)

    @classmethod
    def for_alioss(cls, conf: AliOSSConfig, prefix: str = "") -> "CloudStorage":
        def location_for(object_key: str) -> str:
            return f"https://{conf.bucket}.{conf.endpoint}/{object_key}"

        return cls(
            "alioss", conf.bucket, conf.access_key, conf.secret, location_for, prefix, host=conf.endpoint
        )

    def _get_container(self):
        """Get container (lazy load)."""
        if self._container is None:
            self._container = self._driver.get_container(self._container_name)
        return self._container

    def upload(self, local_path: str, storage_path: str, output_type: OutputType) -> UploadResult:
        size = Path(local_path).stat().st_size
        key = join_key(self.prefix, storage_path)
        try:
            self._driver.upload_object(
                file_path=local_path,
                container=self._get_container(),
                object_name=key,
                extra={"content_type": output_type.content_type},
            )
        except (LibcloudError, OSError) as exc:
            raise CloudStorageError(
                f"{self.provider} upload to {self._container_name}/{key} failed: {exc}",
                {"provider": self.provider, "container": self._container_name, "key": key},
            ) from exc
        return UploadResult(location=self._location_for(key), size=size)


__all__ = ["CloudStorage"]

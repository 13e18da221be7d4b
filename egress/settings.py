from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from egress.exceptions import ConfigurationError

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


class _StorageSection(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class S3Config(_StorageSection):
    bucket: str
    access_key: str | None = None
    secret: str | None = None
    session_token: str | None = None
    region: str | None = None
    endpoint: str | None = None
    force_path_style: bool = False
    # Retry budget handed to botocore; the orchestrator itself never retries.
    max_retries: int = Field(5, ge=0, le=20)
    metadata: dict[str, str] = Field(default_factory=dict)
    tagging: str | None = None
    content_disposition: str | None = None
    presign_expires: int = Field(3600, ge=0, le=604800)

    @field_validator("bucket")
    @classmethod
    def _bucket_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bucket must not be empty")
        return value.strip()

    @field_validator("endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or None


class GCPConfig(_StorageSection):
    bucket: str
    credentials_json: str | None = None
    project: str | None = None


class AzureConfig(_StorageSection):
    account_name: str
    account_key: str
    container_name: str


class AliOSSConfig(_StorageSection):
    bucket: str
    access_key: str
    secret: str
    endpoint: str

    @field_validator("endpoint")
    @classmethod
    def _bare_host(cls, value: str) -> str:
        # OSS endpoints are configured either as hosts or as URLs
        for scheme in ("https://", "http://"):
            if value.startswith(scheme):
                value = value[len(scheme):]
        return value.rstrip("/")


class StorageConfig(_StorageSection):
    """One storage destination. At most one provider section is expected.

    With no provider section the destination is the local filesystem, rooted at
    ``path_prefix``.
    """

    path_prefix: str = ""
    s3: S3Config | None = None
    gcp: GCPConfig | None = None
    azure: AzureConfig | None = None
    alioss: AliOSSConfig | None = None

    def providers(self) -> list[str]:
        """Populated provider sections, in selection priority order."""
        return [name for name in ("s3", "gcp", "azure", "alioss") if getattr(self, name) is not None]

    @property
    def kind(self) -> str:
        providers = self.providers()
        return providers[0] if providers else "local"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_file: Path | None = None

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class Settings(BaseModel):
    storage: StorageConfig | None = None
    backup_storage: StorageConfig | None = None
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                EGRESS_CONFIG environment variable or defaults to config/default.yaml.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            FileNotFoundError: If configuration file does not exist.
            ConfigurationError: If configuration is invalid.
        """
        config_path = path or Path(os.getenv("EGRESS_CONFIG", "config/default.yaml"))
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as fp:
            try:
                payload: Any = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc
        if not isinstance(payload, dict):
            raise ConfigurationError("Invalid configuration: top level must be a mapping", {"path": str(config_path)})
        try:
            return cls(**payload)
        except (ValidationError, TypeError) as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "StorageConfig",
    "S3Config",
    "GCPConfig",
    "AzureConfig",
    "AliOSSConfig",
    "LoggingSettings",
    "get_settings",
]

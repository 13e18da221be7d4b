"""CLI for uploading a single file with primary/backup failover."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from egress.exceptions import ConfigurationError
from egress.logging_config import setup_logging
from egress.metrics import UploadMetrics
from egress.settings import get_settings
from egress.types import OutputType
from egress.uploader import Uploader

OUTPUT_TYPES = {output_type.label: output_type for output_type in OutputType}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload a file to the configured storage, falling back to backup storage")
    parser.add_argument("file", type=Path, help="Local file to upload")
    parser.add_argument("storage_path", help="Destination path inside the storage")
    parser.add_argument("--config", type=Path, help="YAML config (default: $EGRESS_CONFIG or config/default.yaml)")
    parser.add_argument("--output-type", choices=sorted(OUTPUT_TYPES), default="blob", help="Kind of file, sets the content type")
    parser.add_argument("--delete", action="store_true", help="Delete the local file after a successful upload")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings(str(args.config) if args.config else None)
    except (FileNotFoundError, ConfigurationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    setup_logging(
        level=args.log_level.upper() if args.log_level else settings.logging.level,
        json_format=args.json_logs or settings.logging.json_format,
        log_file=settings.logging.log_file,
    )

    metrics = UploadMetrics()
    try:
        uploader = Uploader.from_config(settings.storage, settings.backup_storage, metrics)
    except ConfigurationError as exc:
        logger.error("Invalid storage configuration: {}", exc)
        return 2

    try:
        result = uploader.upload(
            str(args.file),
            args.storage_path,
            OUTPUT_TYPES[args.output_type],
            delete_after_upload=args.delete,
        )
    except Exception as exc:
        logger.error("Upload of {} failed: {}", args.file, exc)
        return 1

    report = {
        "location": result.location,
        "size": result.size,
        "presigned_url": result.presigned_url,
        "manifest_required": uploader.manifest_required(),
        "metrics": metrics.get_summary(),
    }
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

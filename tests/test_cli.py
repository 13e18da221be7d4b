from __future__ import annotations

import json
from pathlib import Path

import pytest

from egress.cli import main
from egress.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    setup_logging(level="INFO")


def write_config(tmp_path: Path, storage: str, backup: str | None = None) -> Path:
    text = f"storage:\n{storage}"
    if backup:
        text += f"backup_storage:\n{backup}"
    config = tmp_path / "egress.yaml"
    config.write_text(text, encoding="utf-8")
    return config


def test_upload_to_local_storage(tmp_path, media_file, capsys):
    config = write_config(tmp_path, f"  path_prefix: {tmp_path / 'store'}\n")

    code = main([str(media_file), "room/in.mp4", "--config", str(config), "--output-type", "mp4"])

    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["location"] == str(tmp_path / "store" / "room" / "in.mp4")
    assert report["size"] == media_file.stat().st_size
    assert report["manifest_required"] is False
    assert report["metrics"]["primary_successes"] == 1
    assert media_file.exists()


def test_falls_back_to_backup_and_deletes(tmp_path, media_file, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    config = write_config(
        tmp_path,
        f"  path_prefix: {blocker / 'store'}\n",
        f"  path_prefix: {tmp_path / 'backup'}\n",
    )

    code = main([str(media_file), "in.mp4", "--config", str(config), "--delete"])

    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["location"] == str(tmp_path / "backup" / "in.mp4")
    assert report["manifest_required"] is True
    assert report["metrics"]["primary_failures"] == 1
    assert report["metrics"]["backup_writes"] == 1
    assert not media_file.exists()


def test_upload_failure_exit_code(tmp_path, capsys):
    config = write_config(tmp_path, f"  path_prefix: {tmp_path / 'store'}\n")

    code = main([str(tmp_path / "missing.mp4"), "in.mp4", "--config", str(config)])

    assert code == 1
    assert capsys.readouterr().out == ""


def test_bad_config_exit_code(tmp_path, media_file):
    config = write_config(tmp_path, "  s3:\n    region: eu-west-1\n")

    assert main([str(media_file), "in.mp4", "--config", str(config)]) == 2
    assert main([str(media_file), "in.mp4", "--config", str(tmp_path / "absent.yaml")]) == 2


def test_bad_s3_endpoint_exit_code(tmp_path, media_file):
    config = write_config(tmp_path, "  s3:\n    bucket: recordings\n    endpoint: 'not a url'\n")

    assert main([str(media_file), "in.mp4", "--config", str(config)]) == 2

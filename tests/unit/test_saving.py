# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from observability import logger
from orchestrator.saving import (
    UploadFallbackManager,
    format_file_name,
    format_video_title,
)
from spec import RECORDING_MIME_TYPE, VIDEO_DESCRIPTION, VIDEO_PRIVACY_STATUS

from fakes import FakeUploader


STARTED_AT = datetime(2023, 11, 5, 18, 7, 9)
NOW = datetime(2024, 1, 2, 3, 4, 5)
DATA = b"\x00\x01webm\xff"


def _manager(tmp_path: Path, **kwargs: Any) -> UploadFallbackManager:
    root = tmp_path / "app"
    root.mkdir(exist_ok=True)
    return UploadFallbackManager(root_dir=root, clock=lambda: NOW, **kwargs)


# ---------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------

def test_file_name_format_is_zero_padded() -> None:
    assert format_file_name(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02-03-04-05.webm"


def test_video_title_uses_session_start() -> None:
    assert format_video_title(STARTED_AT) == "infra-workshop session at 2023/11/05 18:07:09"


# ---------------------------------------------------------------------
# Upload path
# ---------------------------------------------------------------------

def test_successful_upload_returns_id_and_skips_local_save(tmp_path: Path) -> None:
    uploader = FakeUploader(video_id="vid42")
    manager = _manager(tmp_path, uploader=uploader)

    result = asyncio.run(manager.persist(DATA, STARTED_AT))

    assert result.uploaded
    assert result.video_url == "https://youtu.be/vid42"
    assert result.file_path is None
    assert not manager.fallback_dir.exists()

    assert uploader.calls == [{
        "data": DATA,
        "title": "infra-workshop session at 2023/11/05 18:07:09",
        "description": VIDEO_DESCRIPTION,
        "privacy_status": VIDEO_PRIVACY_STATUS,
        "mime_type": RECORDING_MIME_TYPE,
    }]


def test_upload_failure_falls_back_to_local_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    emitted: list[str] = []
    monkeypatch.setattr(logger, "_print", emitted.append)

    uploader = FakeUploader(fail=ConnectionError("quota exceeded"))
    manager = _manager(tmp_path, uploader=uploader)

    result = asyncio.run(manager.persist(DATA, STARTED_AT))

    assert not result.uploaded
    assert result.file_name == "2024-01-02-03-04-05.webm"
    assert result.upload_error is not None
    assert "quota exceeded" in result.upload_error
    assert (tmp_path / "video" / "2024-01-02-03-04-05.webm").read_bytes() == DATA
    assert any('"UPLOAD_FAILED"' in line for line in emitted)


# ---------------------------------------------------------------------
# Disabled / absent uploader take the same path
# ---------------------------------------------------------------------

@pytest.mark.parametrize(
    "kwargs",
    [
        {"uploader": None},
        {"uploader": FakeUploader(), "upload_disabled": True},
    ],
)
def test_disabled_or_absent_upload_saves_locally(tmp_path: Path, kwargs: dict[str, Any]) -> None:
    manager = _manager(tmp_path, **kwargs)

    result = asyncio.run(manager.persist(DATA, STARTED_AT))

    assert not manager.upload_enabled
    assert result.upload_error == "upload is disabled"
    assert result.file_path == manager.fallback_dir / "2024-01-02-03-04-05.webm"
    assert result.file_path.read_bytes() == DATA

    uploader = kwargs.get("uploader")
    if uploader is not None:
        assert uploader.calls == []


def test_fallback_directory_is_created_once_and_reused(tmp_path: Path) -> None:
    times = iter([datetime(2024, 5, 6, 7, 8, 9), datetime(2024, 5, 6, 7, 8, 10)])
    root = tmp_path / "app"
    root.mkdir()
    manager = UploadFallbackManager(root_dir=root, clock=lambda: next(times))

    asyncio.run(manager.persist(b"one", STARTED_AT))
    asyncio.run(manager.persist(b"two", STARTED_AT))

    names = sorted(p.name for p in (tmp_path / "video").iterdir())
    assert names == ["2024-05-06-07-08-09.webm", "2024-05-06-07-08-10.webm"]


def test_filesystem_failure_propagates(tmp_path: Path) -> None:
    manager = _manager(tmp_path)
    (tmp_path / "video").write_text("occupied")

    with pytest.raises(OSError):
        asyncio.run(manager.persist(DATA, STARTED_AT))

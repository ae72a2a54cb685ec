"""
Upload / fallback protocol for a finished capture.

Sequence:
1. Upload disabled, or no upload client configured -> go to 3.
2. Upload with a title built from the session start time. Success ends
   the protocol; nothing is written locally.
3. Write the bytes to <root_dir>/../video/<now>.webm, creating the
   directory when absent.

Upload failures are recovered by step 3. Filesystem failures propagate.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

from orchestrator.runtime_context import UploaderProtocol

from observability.logger import log_event

from spec import (
    FALLBACK_DIR_PARTS,
    FILE_NAME_TIME_FORMAT,
    RECORDING_EXTENSION,
    RECORDING_MIME_TYPE,
    VIDEO_DESCRIPTION,
    VIDEO_PRIVACY_STATUS,
    VIDEO_TITLE_PREFIX,
    VIDEO_TITLE_TIME_FORMAT,
    VIDEO_URL_PREFIX,
)


# ------------------------------------------------------------------
# Formatting
# ------------------------------------------------------------------

def format_file_name(when: datetime) -> str:
    """YYYY-MM-DD-HH-MM-SS.webm"""
    return f"{when.strftime(FILE_NAME_TIME_FORMAT)}.{RECORDING_EXTENSION}"


def format_video_title(started_at: datetime) -> str:
    return f"{VIDEO_TITLE_PREFIX} {started_at.strftime(VIDEO_TITLE_TIME_FORMAT)}"


def video_url(video_id: str) -> str:
    return f"{VIDEO_URL_PREFIX}{video_id}"


# ------------------------------------------------------------------
# Result
# ------------------------------------------------------------------

@dataclass(frozen=True)
class SaveResult:
    """
    Outcome of the protocol.

    Exactly one of video_id / file_name is set.
    upload_error says why the local path was taken.
    """
    video_id: str | None = None
    video_url: str | None = None
    file_name: str | None = None
    file_path: Path | None = None
    upload_error: str | None = None

    @property
    def uploaded(self) -> bool:
        return self.video_id is not None


# ------------------------------------------------------------------
# Manager
# ------------------------------------------------------------------

class UploadFallbackManager:
    """
    Persists captured bytes remotely, or locally when that is not possible.

    An absent uploader takes the same path as upload_disabled=True.
    """

    def __init__(
        self,
        *,
        root_dir: Path,
        uploader: UploaderProtocol | None = None,
        upload_disabled: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._uploader = uploader
        self._upload_disabled = upload_disabled
        self._fallback_dir = Path(root_dir).joinpath(*FALLBACK_DIR_PARTS)
        self._clock = clock

    @property
    def fallback_dir(self) -> Path:
        return self._fallback_dir

    @property
    def upload_enabled(self) -> bool:
        return self._uploader is not None and not self._upload_disabled

    async def persist(self, data: bytes, started_at: datetime) -> SaveResult:
        """Run the upload/fallback protocol for one capture."""
        upload_error: str
        if self._uploader is None or self._upload_disabled:
            upload_error = "upload is disabled"
        else:
            try:
                video_id = await self._uploader.upload(
                    data=data,
                    title=format_video_title(started_at),
                    description=VIDEO_DESCRIPTION,
                    privacy_status=VIDEO_PRIVACY_STATUS,
                    mime_type=RECORDING_MIME_TYPE,
                )
            except Exception as exc:  # pylint: disable=broad-exception-caught
                upload_error = f"{type(exc).__name__}: {exc}"
                log_event({
                    "event_type": "UPLOAD_FAILED",
                    "exception": type(exc).__name__,
                    "message": str(exc),
                })
            else:
                url = video_url(video_id)
                log_event({
                    "event_type": "UPLOAD_SUCCEEDED",
                    "video_id": video_id,
                    "video_url": url,
                    "bytes": len(data),
                })
                return SaveResult(video_id=video_id, video_url=url)

        return await self._save_locally(data, upload_error=upload_error)

    async def _save_locally(self, data: bytes, *, upload_error: str) -> SaveResult:
        # File name comes from the current time, not the session start
        file_name = format_file_name(self._clock())
        file_path = self._fallback_dir / file_name

        log_event({
            "event_type": "RECORD_SAVING",
            "file_path": str(file_path),
            "reason": upload_error,
        })

        await asyncio.to_thread(self._write, file_path, data)

        log_event({
            "event_type": "RECORD_SAVED",
            "file_path": str(file_path),
            "bytes": len(data),
        })
        return SaveResult(
            file_name=file_name,
            file_path=file_path,
            upload_error=upload_error,
        )

    def _write(self, file_path: Path, data: bytes) -> None:
        self._fallback_dir.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)

"""
YouTube upload adapter.

Role in the system:
- Receives the finished webm bytes plus title/description/privacy.
- Performs one non-resumable videos.insert call.
- Returns the new video id, or raises.

Architectural constraints:
- No retries here; the caller falls back to a local save.
- The Google client is synchronous, so the call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import io
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from observability.logger import log_event


GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
YOUTUBE_UPLOAD_SCOPE = "https://www.googleapis.com/auth/youtube.upload"


class YouTubeUploader:
    """UploaderProtocol implementation using an OAuth refresh token."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        service: Any | None = None,
    ) -> None:
        if service is None:
            credentials = Credentials(
                token=None,
                refresh_token=refresh_token,
                client_id=client_id,
                client_secret=client_secret,
                token_uri=GOOGLE_TOKEN_URI,
                scopes=[YOUTUBE_UPLOAD_SCOPE],
            )
            service = build(
                "youtube",
                "v3",
                credentials=credentials,
                cache_discovery=False,
            )
        self._service = service

    async def upload(
        self,
        *,
        data: bytes,
        title: str,
        description: str,
        privacy_status: str,
        mime_type: str,
    ) -> str:
        log_event({
            "event_type": "UPLOAD_STARTED",
            "title": title,
            "bytes": len(data),
        })
        response = await asyncio.to_thread(
            self._insert,
            data=data,
            title=title,
            description=description,
            privacy_status=privacy_status,
            mime_type=mime_type,
        )
        video_id = response.get("id")
        if not video_id:
            raise RuntimeError(f"upload response carried no video id: {response!r}")
        return str(video_id)

    def _insert(
        self,
        *,
        data: bytes,
        title: str,
        description: str,
        privacy_status: str,
        mime_type: str,
    ) -> dict[str, Any]:
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=False)
        request = self._service.videos().insert(
            part="snippet,status",
            fields="snippet(title,description),status(privacyStatus),id",
            body={
                "snippet": {"title": title, "description": description},
                "status": {"privacyStatus": privacy_status},
            },
            media_body=media,
        )
        return request.execute()

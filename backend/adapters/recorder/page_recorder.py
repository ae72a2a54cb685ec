"""
Recorder backed by one browser page (Playwright).

The record page exposes a ``window.recorder`` object:
- start(options) -> epoch milliseconds of the capture start
- stop() -> base64 webm
- takeShot() -> base64 png of the composed canvas
- toggleDebug() -> new debug flag
- setScreenUrl(url)

This adapter only marshals calls and payloads; capture timing is the
page's business.
"""

from __future__ import annotations

import base64
from datetime import datetime

from playwright.async_api import Page

from observability.logger import log_event


class PageRecorder:
    """One capture session bound to one page. Closed when the session ends."""

    def __init__(
        self,
        *,
        page: Page,
        screen_url: str | None,
        voice_channel_id: str,
        text_channel_id: str,
    ) -> None:
        self._page = page
        self._screen_url = screen_url
        self._voice_channel_id = voice_channel_id
        self._text_channel_id = text_channel_id
        self._started_at: datetime | None = None

    @property
    def started_at(self) -> datetime:
        if self._started_at is None:
            raise RuntimeError("recorder has not been started")
        return self._started_at

    async def start(self) -> datetime:
        started_ms = await self._page.evaluate(
            "(options) => window.recorder.start(options)",
            {
                "screenUrl": self._screen_url,
                "voiceChannelId": self._voice_channel_id,
                "textChannelId": self._text_channel_id,
            },
        )
        self._started_at = datetime.fromtimestamp(float(started_ms) / 1000)
        log_event({
            "event_type": "PAGE_RECORDER_STARTED",
            "started_at": self._started_at.isoformat(),
            "screen_url": self._screen_url,
        })
        return self._started_at

    async def stop(self) -> bytes:
        encoded = await self._page.evaluate("() => window.recorder.stop()")
        return base64.b64decode(encoded)

    async def take_shot(self) -> bytes:
        encoded = await self._page.evaluate("() => window.recorder.takeShot()")
        return base64.b64decode(encoded)

    async def toggle_debug(self) -> bool:
        return bool(await self._page.evaluate("() => window.recorder.toggleDebug()"))

    async def set_screen_url(self, url: str | None) -> None:
        self._screen_url = url
        await self._page.evaluate("(url) => window.recorder.setScreenUrl(url)", url)

    async def close(self) -> None:
        if not self._page.is_closed():
            await self._page.close()

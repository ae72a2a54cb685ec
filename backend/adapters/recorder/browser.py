"""
Capture browser lifecycle (Playwright, persistent Chromium context).

Responsibilities:
- Launch Chromium once per process with the capture extension loaded
- Hand out one fresh page-backed Recorder per session
- Report browser health (disconnect is logged, never silently ignored)

Extensions only load in a persistent, headed context, hence
launch_persistent_context(headless=False).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from playwright.async_api import BrowserContext, Playwright, async_playwright

from adapters.recorder.extension_id import chromium_launch_args, generate_extension_id
from adapters.recorder.page_recorder import PageRecorder

from observability.logger import log_event


class BrowserRecorderFactory:
    """RecorderFactoryProtocol implementation over one shared browser."""

    def __init__(
        self,
        *,
        extension_path: Path,
        user_data_dir: Path,
        record_page_url: str | None = None,
        display: str | None = None,
    ) -> None:
        self._extension_path = extension_path
        self._user_data_dir = user_data_dir
        self._display = display

        self.extension_id = generate_extension_id(extension_path)
        self.record_page_url = (
            record_page_url or f"chrome-extension://{self.extension_id}/record.html"
        )

        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def launch(self) -> None:
        env: dict[str, str | float | bool] = dict(os.environ)
        if self._display:
            env["DISPLAY"] = self._display

        log_event({
            "event_type": "BROWSER_LAUNCHING",
            "extension_path": str(self._extension_path),
            "extension_id": self.extension_id,
        })

        self._playwright = await async_playwright().start()
        self._context = await self._playwright.chromium.launch_persistent_context(
            str(self._user_data_dir),
            headless=False,
            no_viewport=True,
            ignore_default_args=["--disable-extensions"],
            args=chromium_launch_args(self._extension_path),
            env=env,
        )
        self._context.on("close", self._on_close)
        self._connected = True

        log_event({"event_type": "BROWSER_LAUNCHED"})

    def _on_close(self, _context: Any) -> None:
        self._connected = False
        log_event({"event_type": "BROWSER_DISCONNECTED"})

    async def create(
        self,
        *,
        screen_url: str | None,
        voice_channel_id: str,
        text_channel_id: str,
    ) -> PageRecorder:
        if self._context is None or not self._connected:
            raise RuntimeError("capture browser is not running")

        page = await self._context.new_page()
        try:
            await page.goto(self.record_page_url)
            await page.wait_for_function("() => window.recorder !== undefined")
        except Exception:
            await page.close()
            raise

        return PageRecorder(
            page=page,
            screen_url=screen_url,
            voice_channel_id=voice_channel_id,
            text_channel_id=text_channel_id,
        )

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

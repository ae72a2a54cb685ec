"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Build the process-wide collaborators (browser, voice bridge, uploader)
- Build the one session state machine and its gateway
- Launch / close the capture browser with the app lifespan
- Register routes
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from config import AppConfig

from adapters.recorder.browser import BrowserRecorderFactory
from adapters.upload.youtube import YouTubeUploader
from adapters.voice.bridge import BridgeVoiceConnector
from orchestrator.runtime_context import RecorderFactoryProtocol, UploaderProtocol
from orchestrator.saving import UploadFallbackManager
from orchestrator.state_machine import SessionStateMachine
from session.gateway import ChatGateway

from observability.logger import log_event

from server.routes import register_routes


def create_app(
    config: AppConfig | None = None,
    *,
    recorder_factory: RecorderFactoryProtocol | None = None,
    voice_connector: BridgeVoiceConnector | None = None,
    uploader: UploaderProtocol | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators may be injected (tests); otherwise they are built
    from config. The capture browser is only launched when this
    factory built it.
    """
    if config is None:
        config = AppConfig.load_from_env()

    browser: BrowserRecorderFactory | None = None
    if recorder_factory is None:
        browser = BrowserRecorderFactory(
            extension_path=config.extension_path,
            user_data_dir=config.browser_user_data_dir,
            record_page_url=config.record_page_url,
            display=config.display,
        )
        recorder_factory = browser

    if voice_connector is None:
        voice_connector = BridgeVoiceConnector()

    if uploader is None:
        uploader = build_uploader(config)

    saver = UploadFallbackManager(
        root_dir=config.root_dir,
        uploader=uploader,
        upload_disabled=config.upload_disabled,
    )
    state_machine = SessionStateMachine(
        recorder_factory=recorder_factory,
        voice_connector=voice_connector,
        saver=saver,
        start_timeout_s=config.start_timeout_s,
    )
    gateway = ChatGateway(
        state_machine=state_machine,
        control_scope=voice_connector.collect_control,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if browser is not None:
            await browser.launch()
        try:
            yield
        finally:
            if browser is not None:
                await browser.close()

    app = FastAPI(title="Session Recorder API", lifespan=lifespan)

    app.state.config = config
    app.state.gateway = gateway
    app.state.browser = browser

    log_event({
        "event_type": "APP_CREATED",
        "env": config.env,
        "upload_enabled": saver.upload_enabled,
        "fallback_dir": str(saver.fallback_dir),
    })

    # Routes
    register_routes(app)

    return app


def build_uploader(config: AppConfig) -> UploaderProtocol | None:
    """Upload client from the credentials bundle; None when disabled or incomplete."""
    if config.upload_disabled or not config.has_upload_credentials:
        log_event({
            "event_type": "UPLOAD_CLIENT_DISABLED",
            "upload_disabled": config.upload_disabled,
            "has_credentials": config.has_upload_credentials,
        })
        return None

    assert config.youtube_client_id is not None
    assert config.youtube_client_secret is not None
    assert config.youtube_refresh_token is not None
    return YouTubeUploader(
        client_id=config.youtube_client_id,
        client_secret=config.youtube_client_secret,
        refresh_token=config.youtube_refresh_token,
    )

# pylint: disable=missing-module-docstring,missing-function-docstring

from pathlib import Path
from typing import Any

import pytest

import server.main as server_main
from config import AppConfig
from server.app import build_uploader
from spec import START_TIMEOUT_S_DEFAULT


ENV_VARS = (
    "ENV",
    "LOG_LEVEL",
    "RECORDER_ROOT_DIR",
    "UPLOAD_DISABLED",
    "YOUTUBE_CLIENT_ID",
    "YOUTUBE_CLIENT_SECRET",
    "YOUTUBE_REFRESH_TOKEN",
    "EXTENSION_PATH",
    "RECORD_PAGE_URL",
    "BROWSER_USER_DATA_DIR",
    "DISPLAY",
    "START_TIMEOUT_S",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RECORDER_ROOT_DIR", str(tmp_path))
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config = AppConfig.load_from_env()

    assert config.env == "dev"
    assert config.root_dir == tmp_path.resolve()
    assert config.upload_disabled is False
    assert config.has_upload_credentials is False
    assert config.extension_path == (tmp_path / "chrome").resolve()
    assert config.record_page_url is None
    assert config.display is None
    assert config.start_timeout_s == START_TIMEOUT_S_DEFAULT


def test_overrides(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("UPLOAD_DISABLED", "1")
    clean_env.setenv("YOUTUBE_CLIENT_ID", "id")
    clean_env.setenv("YOUTUBE_CLIENT_SECRET", "secret")
    clean_env.setenv("YOUTUBE_REFRESH_TOKEN", "refresh")
    clean_env.setenv("DISPLAY", ":99")
    clean_env.setenv("START_TIMEOUT_S", "2.5")

    config = AppConfig.load_from_env()

    assert config.upload_disabled is True
    assert config.has_upload_credentials is True
    assert config.display == ":99"
    assert config.start_timeout_s == 2.5


def test_upload_client_absent_when_disabled_or_incomplete(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("YOUTUBE_CLIENT_ID", "id")
    assert build_uploader(AppConfig.load_from_env()) is None

    clean_env.setenv("YOUTUBE_CLIENT_SECRET", "secret")
    clean_env.setenv("YOUTUBE_REFRESH_TOKEN", "refresh")
    clean_env.setenv("UPLOAD_DISABLED", "1")
    assert build_uploader(AppConfig.load_from_env()) is None


def test_server_runs_with_configured_log_level(
    clean_env: pytest.MonkeyPatch,
) -> None:
    calls: list[dict[str, Any]] = []

    def fake_run(app: str, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    clean_env.setattr(server_main, "load_dotenv", lambda: False)
    clean_env.setattr(server_main.uvicorn, "run", fake_run)
    clean_env.setenv("LOG_LEVEL", "DEBUG")

    server_main.main(["--port", "9001"])

    assert calls == [{
        "app": "server.asgi:app",
        "host": "127.0.0.1",
        "port": 9001,
        "log_level": "debug",
    }]

"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No orchestration logic
- No protocol constants
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from spec import START_TIMEOUT_S_DEFAULT


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the server, adapters and state machine.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str
    log_level: str

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    # Fallback recordings land in <root_dir>/../video/
    root_dir: Path

    # ------------------------------------------------------------------
    # Upload (video host)
    # ------------------------------------------------------------------

    upload_disabled: bool
    youtube_client_id: str | None
    youtube_client_secret: str | None
    youtube_refresh_token: str | None

    # ------------------------------------------------------------------
    # Browser / recorder
    # ------------------------------------------------------------------

    extension_path: Path
    record_page_url: str | None
    browser_user_data_dir: Path
    display: str | None
    start_timeout_s: float = START_TIMEOUT_S_DEFAULT

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------

    @property
    def has_upload_credentials(self) -> bool:
        """True iff the whole upload credentials bundle is present."""
        return bool(
            self.youtube_client_id
            and self.youtube_client_secret
            and self.youtube_refresh_token
        )

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if START_TIMEOUT_S is not a number.
        """
        root_dir = Path(os.environ.get("RECORDER_ROOT_DIR", os.getcwd())).resolve()

        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            root_dir=root_dir,

            upload_disabled=os.environ.get("UPLOAD_DISABLED", "0") == "1",
            youtube_client_id=os.environ.get("YOUTUBE_CLIENT_ID"),
            youtube_client_secret=os.environ.get("YOUTUBE_CLIENT_SECRET"),
            youtube_refresh_token=os.environ.get("YOUTUBE_REFRESH_TOKEN"),

            extension_path=Path(
                os.environ.get("EXTENSION_PATH", str(root_dir / "chrome"))
            ).resolve(),
            record_page_url=os.environ.get("RECORD_PAGE_URL"),
            browser_user_data_dir=Path(
                os.environ.get(
                    "BROWSER_USER_DATA_DIR", str(root_dir / ".browser-profile")
                )
            ),
            display=os.environ.get("DISPLAY"),
            start_timeout_s=float(
                os.environ.get("START_TIMEOUT_S", str(START_TIMEOUT_S_DEFAULT))
            ),
        )

"""
SPEC-AS-CONSTANTS
-----------------
Single source of truth for all behavioral constants in the recorder.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic strings or numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Command protocol
# =============================================================================

COMMAND_PREFIX: Final[str] = "?record"

# =============================================================================
# Rejection / reply texts
# =============================================================================

MSG_NOT_RECORDING: Final[str] = "not recording. please start."
MSG_STARTING: Final[str] = "starting recorder now"
MSG_RECORDING: Final[str] = "recording now"
MSG_SAVING: Final[str] = "saving record now"
MSG_NO_VOICE_CHANNEL: Final[str] = "please connect to voice channel"
MSG_DIRECT_MESSAGE: Final[str] = "you must not send from DM!"
MSG_INVALID_COMMAND: Final[str] = "invalid command"

MSG_SCREEN_URL_SET: Final[str] = "screen url successfully set!"
MSG_RECORDER_LAUNCHED: Final[str] = "recorder successfully launched!"
MSG_RECORDER_STOPPED: Final[str] = "recorder successfully stopped!"
MSG_UPLOAD_FAILED: Final[str] = "uploading to youtube failed."

# =============================================================================
# Session timing
# =============================================================================

# Upper bound on the Starting phase (browser page + voice join + start)
START_TIMEOUT_S_DEFAULT: Final[float] = 60.0

# =============================================================================
# Upload / fallback
# =============================================================================

RECORDING_MIME_TYPE: Final[str] = "video/webm"
RECORDING_EXTENSION: Final[str] = "webm"

# Relative to the configured root dir
FALLBACK_DIR_PARTS: Final[tuple[str, ...]] = ("..", "video")

FILE_NAME_TIME_FORMAT: Final[str] = "%Y-%m-%d-%H-%M-%S"
VIDEO_TITLE_TIME_FORMAT: Final[str] = "%Y/%m/%d %H:%M:%S"

VIDEO_TITLE_PREFIX: Final[str] = "infra-workshop session at"
VIDEO_DESCRIPTION: Final[str] = (
    "this is recorded by recording-bot"
    "(https://github.com/infra-workshop/recording-bot)."
)
VIDEO_PRIVACY_STATUS: Final[str] = "unlisted"
VIDEO_URL_PREFIX: Final[str] = "https://youtu.be/"

# =============================================================================
# Extension identity
# =============================================================================

EXTENSION_ID_ALPHABET: Final[str] = "abcdefghijklmnop"
EXTENSION_ID_LENGTH: Final[int] = 32

# =============================================================================
# Browser
# =============================================================================

BROWSER_WINDOW_SIZE: Final[tuple[int, int]] = (1500, 1200)
SCREENSHOT_FILE_NAME: Final[str] = "screenshot.png"

# =============================================================================
# Help card
# =============================================================================

HELP_TITLE: Final[str] = "infra workshop recorder v0.0"

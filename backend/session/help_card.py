"""Usage card sent privately on `?record help`."""

from __future__ import annotations

from typing import Any, Final

from spec import HELP_TITLE


HELP_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("?record screen <url>\n?record url <url>", "sets url for screen sharing"),
    ("?record start", "start recording"),
    ("?record stop", "stop recording and save webm"),
    ("?record take", "take a picture of the canvas"),
    ("?record debug", "toggle debug mode. this will reset when stop the recording."),
)


def build_help_embed() -> dict[str, Any]:
    """Embed payload understood by the chat bridge."""
    return {
        "title": HELP_TITLE,
        "fields": [{"name": name, "value": value} for name, value in HELP_FIELDS],
    }

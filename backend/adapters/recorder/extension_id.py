"""
Chromium extension id derivation.

Chromium derives an unpacked extension's id from its directory path:
sha256 of the path, each hex digit n mapped to the n-th letter of
"a".."p", first 32 letters. Knowing the id up front lets the capture
browser whitelist the extension at launch.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Final, Mapping

from spec import BROWSER_WINDOW_SIZE, EXTENSION_ID_ALPHABET, EXTENSION_ID_LENGTH


_HEX_TO_ID_ALPHABET: Final[Mapping[str, str]] = {
    **{
        hex_digit: EXTENSION_ID_ALPHABET[int(hex_digit, 16)]
        for hex_digit in "0123456789abcdef"
    },
    **{
        hex_digit: EXTENSION_ID_ALPHABET[int(hex_digit, 16)]
        for hex_digit in "ABCDEF"
    },
}


def hex_to_id_alphabet(hex_digits: str) -> str:
    """Map every hex digit to its id-alphabet letter (case-insensitive)."""
    return "".join(_HEX_TO_ID_ALPHABET[c] for c in hex_digits)


def generate_extension_id(path: str | Path) -> str:
    """
    Deterministic 32-letter id for an extension directory.

    Pure: the same path always yields the same id.
    """
    digest = hashlib.sha256(str(path).encode("utf-8")).hexdigest()
    return hex_to_id_alphabet(digest)[:EXTENSION_ID_LENGTH]


def chromium_launch_args(extension_path: str | Path) -> list[str]:
    """Browser args loading and whitelisting the capture extension."""
    extension_id = generate_extension_id(extension_path)
    width, height = BROWSER_WINDOW_SIZE
    return [
        f"--whitelisted-extension-id={extension_id}",
        f"--load-extension={extension_path}",
        f"--window-size={width},{height}",
        "--disable-web-security",
        "--disable-infobars",
        "--no-sandbox",
        "--disable-setuid-sandbox",
    ]

# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from orchestrator.commands import (
    CommandType,
    Help,
    SetScreenUrl,
    Start,
    Stop,
    TakeShot,
    ToggleDebug,
    Unknown,
    parse_command,
)


@pytest.mark.parametrize(
    "content, expected",
    [
        ("?record start", Start()),
        ("?record stop", Stop()),
        ("?record take", TakeShot()),
        ("?record debug", ToggleDebug()),
        ("?record help", Help()),
        ("?record", Help()),
        ("  ?record   ", Help()),
        ("?record screen http://x", SetScreenUrl(url="http://x")),
        ("?record url http://x", SetScreenUrl(url="http://x")),
        ("?record dance", Unknown(name="dance")),
    ],
)
def test_parse(content: str, expected: object) -> None:
    assert parse_command(content) == expected


def test_argument_is_rest_of_line() -> None:
    cmd = parse_command("?record screen   http://x/?q=a b  c ")
    assert cmd == SetScreenUrl(url="http://x/?q=a b  c")


def test_screen_without_argument_clears_url() -> None:
    assert parse_command("?record screen") == SetScreenUrl(url=None)


@pytest.mark.parametrize("content", ["hello", "", "?recordstart", "?recorder start", "say ?record start"])
def test_non_commands_are_ignored(content: str) -> None:
    assert parse_command(content) is None


def test_command_type_discriminants() -> None:
    assert SetScreenUrl(url=None).command_type is CommandType.SET_SCREEN_URL
    assert Unknown(name="x").command_type is CommandType.UNKNOWN

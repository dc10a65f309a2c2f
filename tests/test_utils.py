import datetime as dt

import pytest

from core.utils import (
    format_duration,
    format_uptime,
    parse_channel_id,
    parse_duration,
    parse_user_id,
    sanitize_text,
)


@pytest.mark.parametrize("text,expected", [
    ("10m", dt.timedelta(minutes=10)),
    ("1h30m", dt.timedelta(hours=1, minutes=30)),
    ("1d12h", dt.timedelta(days=1, hours=12)),
    ("45s", dt.timedelta(seconds=45)),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "0m", "soon", "10x"])
def test_parse_duration_rejects(text):
    assert parse_duration(text) is None


def test_format_duration():
    assert format_duration(dt.timedelta(days=1, hours=2)) == "1d2h"
    assert format_duration(dt.timedelta(seconds=30)) == "30s"
    assert format_duration(dt.timedelta(0)) == "0s"


def test_format_uptime():
    assert format_uptime(0) == "0d 0h 0m"
    assert format_uptime(90061) == "1d 1h 1m"


def test_snowflake_parsing():
    assert parse_user_id("<@!123456789012345678>") == 123456789012345678
    assert parse_user_id("123456789012345678") == 123456789012345678
    assert parse_user_id("1234") is None
    assert parse_channel_id("<#123456789012345678>") == 123456789012345678


def test_sanitize_text_breaks_mentions():
    assert sanitize_text("@everyone hi") == "@\u200beveryone hi"
    assert sanitize_text(None) == ""
    assert len(sanitize_text("x" * 50, max_len=10)) == 10

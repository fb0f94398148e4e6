"""Tests dates : caractères de pattern, échappement, formats nommés, fallback."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from welcome_block.core.dates import DateFormatter, SAMPLE_CHARS, format_pattern
from welcome_block.core.entity import EntityTypeManager
from welcome_block.database import db_get_date_format

NOW = 1700000000


def _utc(ts=NOW):
    return datetime.fromtimestamp(ts, tz=ZoneInfo("UTC"))


# ── format_pattern ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("pattern, expected", [
    ("Y-m-d", "2023-11-14"),
    ("F jS, Y g:i a", "November 14th, 2023 10:13 pm"),
    ("D, m/d/Y - H:i", "Tue, 11/14/2023 - 22:13"),
    ("l N w z", "Tuesday 2 2 317"),
    ("W o t L", "46 2023 30 0"),
    ("y M n", "23 Nov 11"),
    ("h G A s", "10 22 PM 20"),
    ("B", "967"),
    ("U", "1700000000"),
    ("c", "2023-11-14T22:13:20+00:00"),
    ("r", "Tue, 14 Nov 2023 22:13:20 +0000"),
    ("O P p Z", "+0000 +00:00 Z 0"),
    ("e T I", "UTC UTC 0"),
])
def test_pattern_chars(pattern, expected):
    assert format_pattern(_utc(), pattern) == expected


def test_backslash_escapes_next_char():
    assert format_pattern(_utc(), "\\Y\\-Y") == "Y-2023"


def test_unknown_chars_are_literal():
    assert format_pattern(_utc(), "[Y] #1!") == "[2023] #1!"


@pytest.mark.parametrize("day, suffix", [
    (1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (11, "th"), (12, "th"), (13, "th"),
    (21, "st"), (22, "nd"), (23, "rd"), (31, "st"),
])
def test_ordinal_suffix(day, suffix):
    dt = datetime(2023, 1, day, tzinfo=timezone.utc)
    assert format_pattern(dt, "S") == suffix


def test_microseconds_and_millis():
    dt = datetime(2023, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
    assert format_pattern(dt, "u v") == "123456 123"


def test_negative_offset():
    dt = datetime.fromtimestamp(NOW, tz=ZoneInfo("America/New_York"))
    assert format_pattern(dt, "H:i O P") == "17:13 -0500 -05:00"


# ── DateFormatter ───────────────────────────────────────────────────────────

def test_custom_type_uses_given_pattern():
    assert DateFormatter().format(NOW, "custom", "Y-m-d") == "2023-11-14"


def test_custom_type_with_empty_pattern_falls_back():
    assert DateFormatter().format(NOW, "custom", "") == "Tue, 11/14/2023 - 22:13"


def test_custom_type_with_empty_pattern_uses_catalog_fallback(db):
    fallback = db_get_date_format(db, "fallback")
    fallback.pattern = "Y/m/d"
    db.commit()
    formatter = DateFormatter(EntityTypeManager(db).get_storage("date_format"))
    assert formatter.format(NOW, "custom", "") == "2023/11/14"


def test_named_format_from_catalog(db):
    formatter = DateFormatter(EntityTypeManager(db).get_storage("date_format"))
    assert formatter.format(NOW, "medium") == "Tue, 11/14/2023 - 22:13"
    assert formatter.format(NOW, "long") == "Tuesday, November 14, 2023 - 22:13"
    assert formatter.format(NOW, "html_week") == "2023-W46"
    assert formatter.format(NOW, "html_datetime") == "2023-11-14T22:13:20+0000"


def test_unknown_format_falls_back(db):
    formatter = DateFormatter(EntityTypeManager(db).get_storage("date_format"))
    assert formatter.format(NOW, "nope") == "Tue, 11/14/2023 - 22:13"


def test_no_storage_uses_builtin_fallback():
    assert DateFormatter().format(NOW, "medium") == "Tue, 11/14/2023 - 22:13"


def test_custom_pattern_ignored_for_named_format(db):
    formatter = DateFormatter(EntityTypeManager(db).get_storage("date_format"))
    assert formatter.format(NOW, "html_year", "Y-m-d") == "2023"


def test_timezone_from_env(monkeypatch):
    monkeypatch.setenv("SITE_TIMEZONE", "Europe/Paris")
    assert DateFormatter().format(NOW, "custom", "H:i O") == "23:13 +0100"


def test_explicit_timezone_wins(monkeypatch):
    monkeypatch.setenv("SITE_TIMEZONE", "Europe/Paris")
    assert DateFormatter(timezone="UTC").format(NOW, "custom", "H:i") == "22:13"


def test_sample_formats_cover_every_char():
    samples = DateFormatter(clock=lambda: NOW).get_sample_date_formats()
    assert set(samples) == set(SAMPLE_CHARS)
    assert samples["Y"] == "2023"
    assert samples["F"] == "November"
    assert samples["U"] == "1700000000"

"""Unit tests for filename dates, effective dates and the git oracle."""

from __future__ import annotations

import datetime as dt
import subprocess
import typing as typ
from types import SimpleNamespace

import pytest

from sitecascade.dates import GitTimestampOracle, get_date, parse_date
from sitecascade.entries import Entry, EntryInfo
from sitecascade.errors import InvalidDateError
from tests._helpers import FIXED_NOW, StubOracle

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

MTIME = dt.datetime(2024, 3, 4, 5, 6, tzinfo=dt.UTC)
BIRTHTIME = dt.datetime(2023, 1, 1, tzinfo=dt.UTC)


def _entry(info: EntryInfo | None = None) -> Entry:
    return Entry(name="post.md", path="/post.md", type="file", src="/repo/post.md", info=info)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("2024-01-02_hello", ("hello", dt.datetime(2024, 1, 2, tzinfo=dt.UTC))),
        ("2024-01-02-hello.md", ("hello.md", dt.datetime(2024, 1, 2, tzinfo=dt.UTC))),
        (
            "2024-01-02-10-30_hello",
            ("hello", dt.datetime(2024, 1, 2, 10, 30, tzinfo=dt.UTC)),
        ),
        (
            "2024-01-02-10-30-45_hello",
            ("hello", dt.datetime(2024, 1, 2, 10, 30, 45, tzinfo=dt.UTC)),
        ),
        ("no-date-here", ("no-date-here", None)),
        ("2024-01-02", ("2024-01-02", None)),
        ("\u0662\u0660\u0662\u0664-01-02_hello", ("\u0662\u0660\u0662\u0664-01-02_hello", None)),
    ],
)
def test_parse_date(name: str, expected: tuple[str, dt.datetime | None]) -> None:
    assert parse_date(name) == expected


def test_parse_date_rejects_impossible_calendar_dates() -> None:
    """Month 13 is not a date, so the name is left untouched."""
    assert parse_date("2024-13-02_hello") == ("2024-13-02_hello", None)


def test_get_date_passes_datetimes_through() -> None:
    assert get_date(MTIME) is MTIME


def test_get_date_normalizes_naive_values() -> None:
    assert get_date(dt.datetime(2024, 1, 1)) == dt.datetime(2024, 1, 1, tzinfo=dt.UTC)
    assert get_date(dt.date(2024, 1, 1)) == dt.datetime(2024, 1, 1, tzinfo=dt.UTC)


def test_get_date_treats_numbers_as_epoch_milliseconds() -> None:
    assert get_date(1_700_000_000_000) == dt.datetime.fromtimestamp(1_700_000_000, dt.UTC)


def test_get_date_parses_iso_strings() -> None:
    assert get_date("2024-05-06T07:08:09Z") == dt.datetime(2024, 5, 6, 7, 8, 9, tzinfo=dt.UTC)
    assert get_date("2024-05-06") == dt.datetime(2024, 5, 6, tzinfo=dt.UTC)


def test_get_date_rejects_garbage() -> None:
    with pytest.raises(InvalidDateError) as excinfo:
        get_date("yesterday-ish", _entry())
    assert excinfo.value.value == "yesterday-ish"
    assert excinfo.value.source == "/repo/post.md"


def test_git_keywords_use_oracle_first() -> None:
    oracle = StubOracle({"modified": FIXED_NOW})
    entry = _entry(EntryInfo(mtime=MTIME, birthtime=BIRTHTIME))
    assert get_date("Git Last Modified", entry, oracle=oracle) == FIXED_NOW
    assert oracle.calls == [("modified", "/repo/post.md")]


def test_git_keywords_fall_back_to_filesystem_then_now() -> None:
    oracle = StubOracle()
    entry = _entry(EntryInfo(mtime=MTIME, birthtime=BIRTHTIME))
    assert get_date("git last modified", entry, oracle=oracle) == MTIME
    assert get_date("git created", entry, oracle=oracle) == BIRTHTIME
    assert get_date("git created", _entry(), oracle=oracle, now=lambda: FIXED_NOW) == FIXED_NOW


def test_missing_value_uses_entry_times_then_now() -> None:
    now = lambda: FIXED_NOW  # noqa: E731
    assert get_date(None, now=now) == FIXED_NOW
    assert get_date(None, _entry(EntryInfo(mtime=MTIME, birthtime=BIRTHTIME))) == BIRTHTIME
    assert get_date(None, _entry(EntryInfo(mtime=MTIME))) == MTIME
    assert get_date(None, _entry(), now=now) == FIXED_NOW


def test_git_oracle_parses_commit_timestamp(mocker: MockerFixture) -> None:
    run = mocker.patch(
        "sitecascade.dates.subprocess.run",
        return_value=SimpleNamespace(stdout="1700000000\n"),
    )
    result = GitTimestampOracle().get_timestamp("created", "/repo/post.md")
    assert result == dt.datetime.fromtimestamp(1_700_000_000, dt.UTC)
    command = run.call_args.args[0]
    assert command[:2] == ["git", "log"]
    assert "--diff-filter=A" in command
    assert command[-1] == "/repo/post.md"


@pytest.mark.parametrize(
    "side_effect",
    [
        FileNotFoundError("git"),
        subprocess.CalledProcessError(128, ["git"]),
        subprocess.TimeoutExpired(["git"], 30),
    ],
)
def test_git_oracle_failures_are_soft(
    mocker: MockerFixture, side_effect: BaseException
) -> None:
    mocker.patch("sitecascade.dates.subprocess.run", side_effect=side_effect)
    assert GitTimestampOracle().get_timestamp("modified", "/repo/post.md") is None


@pytest.mark.parametrize("stdout", ["", "0\n", "not-a-number\n"])
def test_git_oracle_ignores_empty_or_bad_output(
    mocker: MockerFixture, stdout: str
) -> None:
    mocker.patch(
        "sitecascade.dates.subprocess.run", return_value=SimpleNamespace(stdout=stdout)
    )
    assert GitTimestampOracle().get_timestamp("modified", "/repo/post.md") is None

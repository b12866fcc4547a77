"""Resolve page dates from data values, filenames and version control.

Two entry points are exposed:

* :func:`parse_date` splits a ``yyyy-mm-dd[-hh-ii[-ss]]`` prefix off a file
  or directory name.
* :func:`get_date` turns whatever ended up in a page's ``date`` field into a
  timezone-aware UTC :class:`datetime.datetime`, consulting a
  :class:`TimestampOracle` for the ``"git created"`` and
  ``"git last modified"`` keywords.

Examples
--------
>>> from sitecascade.dates import parse_date
>>> parse_date("2024-01-02_hello")
('hello', datetime.datetime(2024, 1, 2, 0, 0, tzinfo=datetime.timezone.utc))
>>> parse_date("no-date-here")
('no-date-here', None)
"""

from __future__ import annotations

import datetime as dt
import subprocess
import typing as typ

from ._constants import DATE_PREFIX_PATTERN, GIT_CREATED, GIT_LAST_MODIFIED
from .errors import InvalidDateError
from .logging import get_logger

if typ.TYPE_CHECKING:
    from .entries import Entry

TimestampKind = typ.Literal["created", "modified"]
Clock = typ.Callable[[], dt.datetime]

logger = get_logger("dates")


def utc_now() -> dt.datetime:
    """Return the current time as an aware UTC datetime."""
    return dt.datetime.now(dt.UTC)


class TimestampOracle(typ.Protocol):
    """Best-effort lookup of historical timestamps for a source file."""

    def get_timestamp(self, kind: TimestampKind, src: str) -> dt.datetime | None:
        """Return the timestamp or ``None`` when it cannot be determined."""
        ...


class NullTimestampOracle:
    """Oracle that never knows anything; used when git lookups are disabled."""

    def get_timestamp(self, kind: TimestampKind, src: str) -> dt.datetime | None:  # noqa: ARG002
        return None


class GitTimestampOracle:
    """Read commit timestamps with ``git log``.

    Every failure mode (missing binary, file outside a repository, empty or
    unparsable output) yields ``None`` so callers fall back to filesystem
    metadata.
    """

    def __init__(self, executable: str = "git", *, timeout: float = 30) -> None:
        self.executable = executable
        self.timeout = timeout

    def _command(self, kind: TimestampKind, src: str) -> list[str]:
        if kind == "created":
            return [
                self.executable,
                "log",
                "--diff-filter=A",
                "--follow",
                "-1",
                "--format=%at",
                "--",
                src,
            ]
        return [self.executable, "log", "-1", "--format=%at", "--", src]

    def get_timestamp(self, kind: TimestampKind, src: str) -> dt.datetime | None:
        try:
            result = subprocess.run(  # noqa: S603
                self._command(kind, src),
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("git %s lookup failed for %s: %s", kind, src, exc)
            return None

        output = result.stdout.strip()
        try:
            seconds = int(output.splitlines()[0]) if output else 0
        except ValueError:
            logger.debug("unparsable git output for %s: %r", src, output)
            return None
        if not seconds:
            return None
        return dt.datetime.fromtimestamp(seconds, dt.UTC)


def parse_date(name: str) -> tuple[str, dt.datetime | None]:
    """Split a leading date prefix from ``name``.

    Parameters
    ----------
    name : str
        File or directory name, e.g. ``"2024-01-02-10-30_hello.md"``.

    Returns
    -------
    tuple[str, datetime | None]
        The remaining name and the UTC date, or ``(name, None)`` when there is
        no prefix or the prefix is not a real calendar date.
    """
    match = DATE_PREFIX_PATTERN.match(name)
    if not match:
        return name, None

    parts = match.groupdict()
    try:
        date = dt.datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            tzinfo=dt.UTC,
        )
    except ValueError:
        logger.debug("ignoring invalid date prefix in %r", name)
        return name, None
    return parts["slug"], date


def _parse_iso(value: str) -> dt.datetime | None:
    sanitized = value.strip()
    if not sanitized:
        return None
    if sanitized.endswith(("Z", "z")):
        sanitized = sanitized[:-1] + "+00:00"
    try:
        parsed = dt.datetime.fromisoformat(sanitized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed


def _file_time(entry: Entry, kind: TimestampKind) -> dt.datetime | None:
    info = entry.get_info()
    if info is None:
        return None
    return info.birthtime if kind == "created" else info.mtime


def get_date(
    value: object,
    entry: Entry | None = None,
    *,
    oracle: TimestampOracle | None = None,
    now: Clock = utc_now,
) -> dt.datetime:
    """Return the effective date of a page.

    Parameters
    ----------
    value : object
        The page's ``date`` value: a datetime or date, epoch milliseconds, an
        ISO-8601 string, one of the git keywords, or ``None``.
    entry : Entry, optional
        Source entry supplying filesystem timestamps and the git locator.
    oracle : TimestampOracle, optional
        Version-control lookup for the git keywords.
    now : Callable[[], datetime], optional
        Clock used when nothing better is known.

    Raises
    ------
    InvalidDateError
        If ``value`` is a string that is neither a git keyword nor ISO-8601.
    """
    match value:
        case dt.datetime():
            return value if value.tzinfo else value.replace(tzinfo=dt.UTC)
        case dt.date():
            return dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC)
        case bool():
            pass
        case int() | float():
            return dt.datetime.fromtimestamp(value / 1000, dt.UTC)
        case str():
            return _resolve_string_date(value, entry, oracle, now)

    if entry is None:
        return now()
    return _file_time(entry, "created") or _file_time(entry, "modified") or now()


def _resolve_string_date(
    value: str,
    entry: Entry | None,
    oracle: TimestampOracle | None,
    now: Clock,
) -> dt.datetime:
    keyword = value.strip().lower()
    if entry is not None and keyword in (GIT_LAST_MODIFIED, GIT_CREATED):
        kind: TimestampKind = "modified" if keyword == GIT_LAST_MODIFIED else "created"
        resolved = oracle.get_timestamp(kind, entry.src) if oracle else None
        return resolved or _file_time(entry, kind) or now()

    parsed = _parse_iso(value)
    if parsed is None:
        raise InvalidDateError(value, entry.src if entry else None)
    return parsed


__all__ = [
    "Clock",
    "GitTimestampOracle",
    "NullTimestampOracle",
    "TimestampKind",
    "TimestampOracle",
    "get_date",
    "parse_date",
    "utc_now",
]

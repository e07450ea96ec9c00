"""The Range value type: a half-open span of instants.

A Range covers `[begin, end)`. An absent `end` means the range is unbounded
into the future. Bounds are compared after normalizing them to UTC, so ranges
built from local and UTC datetimes describing the same instants are equal.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import MAXYEAR, MINYEAR, datetime, timedelta, timezone, tzinfo
from functools import total_ordering
from locale import LC_TIME, setlocale
from locale import Error as LocaleError
from typing import Any
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser
from typing_extensions import override

from timeranges.util import OPEN_END

# setlocale is process-wide
_LOCALE_LOCK = threading.Lock()


class InvalidRange(ValueError):
    """Explicit bounds where the end precedes the begin."""


def normalize(instant: datetime) -> datetime:
    """Return `instant` as an aware UTC datetime.

    Naive datetimes are interpreted as local system time. Instants whose UTC
    equivalent falls outside the representable years are clamped to
    `datetime.max` / `datetime.min` in UTC.
    """
    try:
        return instant.astimezone(timezone.utc)
    except OverflowError:
        if instant.year > (MINYEAR + MAXYEAR) // 2:
            return datetime.max.replace(tzinfo=timezone.utc)
        return datetime.min.replace(tzinfo=timezone.utc)


def _advance(instant: datetime, duration: timedelta) -> datetime:
    """Move `instant` by elapsed time, keeping its own representation."""
    moved = normalize(instant) + duration
    if instant.tzinfo is None:
        return moved.astimezone().replace(tzinfo=None)
    return moved.astimezone(instant.tzinfo)


@contextmanager
def _time_locale(name: str) -> Iterator[None]:
    with _LOCALE_LOCK:
        saved = setlocale(LC_TIME)
        try:
            setlocale(LC_TIME, name)
        except LocaleError as exc:
            raise ValueError(
                f"Unknown locale {name!r}: {exc}\n"
                f"Hint: Use 'C' for culture-invariant names, or an installed "
                f"locale such as 'de_DE.UTF-8'"
            ) from exc
        try:
            yield
        finally:
            setlocale(LC_TIME, saved)


def _check_instant(value: Any, edge: str) -> None:
    if not isinstance(value, datetime):
        raise TypeError(
            f"Range {edge} must be a datetime.\n"
            f"Got {type(value).__name__!r}: {value!r}\n"
            f"Hint: Build instants with datetime, e.g.\n"
            f"  Range(datetime(2025, 1, 1, tzinfo=timezone.utc))"
        )


def _check_duration(value: Any) -> None:
    if not isinstance(value, timedelta):
        raise TypeError(
            f"Range duration must be a timedelta.\n"
            f"Got {type(value).__name__!r}: {value!r}\n"
            f"Example: Range.from_duration(start, timedelta(hours=1))"
        )


@total_ordering
@dataclass(frozen=True, eq=False)
class Range:
    begin: datetime
    end: datetime | None = None
    _begin_utc: datetime = field(init=False, repr=False)
    _end_utc: datetime | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        _check_instant(self.begin, "begin")
        if self.end is not None:
            _check_instant(self.end, "end")

        begin_utc = normalize(self.begin)
        end_utc = None if self.end is None else normalize(self.end)
        if end_utc is not None and end_utc < begin_utc:
            raise InvalidRange(
                f"Range end ({self.end.isoformat()}) must be >= begin "
                f"({self.begin.isoformat()}).\n"
                f"Hint: Use Range.from_duration(start, duration) to build a range "
                f"from a possibly negative duration."
            )

        object.__setattr__(self, "_begin_utc", begin_utc)
        object.__setattr__(self, "_end_utc", end_utc)

    @classmethod
    def from_duration(cls, start: datetime, duration: timedelta) -> "Range":
        """Build the range between `start` and `start + duration`.

        A negative duration yields a range that ends at `start`.
        """
        _check_instant(start, "start")
        _check_duration(duration)
        moved = _advance(start, duration)
        if duration < timedelta(0):
            return cls(moved, start)
        return cls(start, moved)

    @classmethod
    def parse(
        cls, text: str, *, open_end: str = OPEN_END, dayfirst: bool = False
    ) -> "Range":
        """Parse `"<begin> - <end>"` as rendered by `format`.

        Each bound is read with dateutil's parser. An end equal to `open_end`
        gives an unbounded range.
        """
        begin_text, sep, end_text = text.partition(" - ")
        if not sep:
            raise ValueError(
                f"Cannot parse range from {text!r}.\n"
                f"Expected '<begin> - <end>', "
                f"e.g. '2025-01-01 09:00 - 2025-01-01 10:00'"
            )
        try:
            begin = date_parser.parse(begin_text.strip(), dayfirst=dayfirst)
            end_text = end_text.strip()
            if end_text == open_end:
                return cls(begin)
            return cls(begin, date_parser.parse(end_text, dayfirst=dayfirst))
        except (date_parser.ParserError, OverflowError) as exc:
            raise ValueError(f"Cannot parse range from {text!r}: {exc}") from exc

    @property
    def _key(self) -> tuple[Any, ...]:
        # Unbounded sorts after any finite end at the same begin
        if self._end_utc is None:
            return (self._begin_utc, 1)
        return (self._begin_utc, 0, self._end_utc)

    @property
    def duration(self) -> timedelta | None:
        """Length of the range, or None when unbounded."""
        if self._end_utc is None:
            return None
        return self._end_utc - self._begin_utc

    @property
    def is_unbounded(self) -> bool:
        return self.end is None

    @property
    def is_empty(self) -> bool:
        return self._end_utc is not None and self._end_utc == self._begin_utc

    def contains(self, instant: datetime) -> bool:
        """True if `instant` falls in `[begin, end)`."""
        _check_instant(instant, "instant")
        point = normalize(instant)
        if point < self._begin_utc:
            return False
        return self._end_utc is None or point < self._end_utc

    def overlaps(self, other: "Range") -> bool:
        """True if the two ranges share at least one instant."""
        if self._end_utc is not None and other._begin_utc >= self._end_utc:
            return False
        if other._end_utc is not None and self._begin_utc >= other._end_utc:
            return False
        return True

    def shift(self, duration: timedelta) -> "Range":
        """Return a copy with both bounds moved by `duration`."""
        _check_duration(duration)
        end = None if self.end is None else _advance(self.end, duration)
        return replace(self, begin=_advance(self.begin, duration), end=end)

    def format(
        self,
        pattern: str,
        tz: str | tzinfo | None = None,
        open_end: str | None = None,
        locale: str | None = None,
    ) -> str:
        """Render `"<begin> - <end>"` with `strftime(pattern)` on each bound.

        Args:
            pattern: strftime pattern applied to both bounds.
            tz: IANA timezone name or tzinfo to render both bounds in.
                Defaults to each bound's own representation.
            open_end: Text for an unbounded end. Defaults to `datetime.max`
                rendered with `pattern`.
            locale: LC_TIME locale for month and day names, e.g. "C" for
                culture-invariant output or "de_DE.UTF-8". Defaults to the
                process locale.
        """
        if locale is None:
            return self._render(pattern, tz, open_end)
        with _time_locale(locale):
            return self._render(pattern, tz, open_end)

    def _render(
        self, pattern: str, tz: str | tzinfo | None, open_end: str | None
    ) -> str:
        zone = ZoneInfo(tz) if isinstance(tz, str) else tz
        begin = self.begin if zone is None else self.begin.astimezone(zone)
        if self.end is None:
            end_text = (
                datetime.max.strftime(pattern) if open_end is None else open_end
            )
        else:
            end = self.end if zone is None else self.end.astimezone(zone)
            end_text = end.strftime(pattern)
        return f"{begin.strftime(pattern)} - {end_text}"

    def __add__(self, other: Any) -> "Range":
        if not isinstance(other, timedelta):
            return NotImplemented
        return self.shift(other)

    def __sub__(self, other: Any) -> "Range":
        if not isinstance(other, timedelta):
            return NotImplemented
        return self.shift(-other)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return (
            self._begin_utc == other._begin_utc and self._end_utc == other._end_utc
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self._key < other._key

    @override
    def __hash__(self) -> int:
        return hash((self._begin_utc, self._end_utc))

    @override
    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self)
        return self.format(format_spec)

    @override
    def __str__(self) -> str:
        """Human-friendly string showing bounds and duration."""
        if self.end is None:
            return f"Range({self.begin.isoformat()}→{OPEN_END})"
        return f"Range({self.begin.isoformat()}→{self.end.isoformat()}, {self.duration})"

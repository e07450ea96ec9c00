"""Derive ranges from time-indexed series.

A series maps instants to samples. Samples are read in chronological order
regardless of the mapping's own iteration order; a range opens at the first
"on" sample and closes at the next "off" sample.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from typing import Any, Protocol, TypeVar

from timeranges.range import Range, normalize

logger = logging.getLogger(__name__)


class _Comparable(Protocol):
    def __ge__(self, other: Any, /) -> bool: ...


T = TypeVar("T", bound=_Comparable)


def _chronological(series: Mapping[datetime, Any]) -> list[tuple[datetime, Any]]:
    for instant in series:
        if not isinstance(instant, datetime):
            raise TypeError(
                f"Series keys must be datetimes.\n"
                f"Got {type(instant).__name__!r}: {instant!r}"
            )
    return sorted(series.items(), key=lambda item: normalize(item[0]))


def _scan(samples: Iterable[tuple[datetime, bool]]) -> Iterator[Range]:
    start: datetime | None = None
    emitted = 0
    for instant, on in samples:
        if on and start is None:
            start = instant
        elif not on and start is not None:
            yield Range(start, instant)
            emitted += 1
            start = None

    # Still on when the series ends
    if start is not None:
        yield Range(start)
        emitted += 1
    logger.debug("series scan emitted %d ranges", emitted)


def from_pulse(pulse: Mapping[datetime, bool]) -> Iterator[Range]:
    """Yield a range for every run of True samples in `pulse`.

    Consecutive True samples extend the same range. A run still on at the
    last sample yields an unbounded range.

    Example:
        >>> pulse = {t1: True, t2: False, t3: True, t4: True, t5: False}
        >>> list(from_pulse(pulse))
        [Range(t1, t2), Range(t3, t5)]
    """
    yield from _scan((instant, bool(on)) for instant, on in _chronological(pulse))


def from_values(values: Mapping[datetime, T], minimum: T) -> Iterator[Range]:
    """Yield a range for every run of samples at or above `minimum`.

    Example:
        >>> values = {t1: 0, t2: 1, t3: 2, t4: 0, t5: 3}
        >>> list(from_values(values, 1))
        [Range(t2, t4), Range(t5, None)]
    """
    yield from _scan(
        (instant, value >= minimum) for instant, value in _chronological(values)
    )

"""Utility constants for timeranges.

Time unit constants are `timedelta` values so they can be added to instants
and passed wherever a duration is expected.
"""

from datetime import timedelta

# Time unit constants
SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
WEEK = timedelta(weeks=1)

# Explicit marker for an unbounded end in rendered ranges
OPEN_END = "..."

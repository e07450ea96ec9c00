from .ops import difference, intersect, merge, slice
from .range import InvalidRange, Range, normalize
from .series import from_pulse, from_values
from .util import DAY, HOUR, MINUTE, OPEN_END, SECOND, WEEK

__all__ = [
    "Range",
    "InvalidRange",
    "normalize",
    "merge",
    "slice",
    "intersect",
    "difference",
    "from_pulse",
    "from_values",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
    "OPEN_END",
]

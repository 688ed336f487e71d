"""Unit constants and calendar modes for waitlimit.

Calendar-scale units are fixed-length approximations. Their lengths are
stored in integer nanoseconds so that non-integral years (sidereal) stay
exact to the nanosecond.
"""

from typing import Literal, TypeAlias, get_args

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
FORTNIGHT = 1209600

# Sub-second constants (all values in nanoseconds)
NANOS_PER_SECOND = 1_000_000_000
MILLISECOND = 1_000_000
MICROSECOND = 1_000
NANOSECOND = 1

CalendarMode: TypeAlias = Literal["commercial", "julian", "gregorian", "sidereal"]

CALENDAR_MODES: tuple[CalendarMode, ...] = get_args(CalendarMode)

DEFAULT_CALENDAR: CalendarMode = "commercial"

# Year lengths in nanoseconds
_YEAR_NANOS: dict[CalendarMode, int] = {
    "commercial": 360 * DAY * NANOS_PER_SECOND,
    "julian": 31_557_600 * NANOS_PER_SECOND,
    "gregorian": 31_556_952 * NANOS_PER_SECOND,
    "sidereal": 31_558_149_763_545_600,
}


def year_nanos(mode: str) -> int:
    """Return the length of one year in nanoseconds for a calendar mode."""
    try:
        return _YEAR_NANOS[mode]  # pyright: ignore[reportArgumentType]
    except KeyError:
        valid = ", ".join(CALENDAR_MODES)
        raise ValueError(
            f"Invalid calendar mode '{mode}'. Valid modes: {valid}"
        ) from None


def month_nanos(mode: str) -> int:
    """A month is a twelfth of the mode's year."""
    return year_nanos(mode) // 12

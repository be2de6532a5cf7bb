"""
Composite durations.

A composite duration splits a flat seconds count into years, days, hours,
minutes and seconds. Years are always 365 days long: these are durations,
not calendar dates, so no leap adjustment is made.
"""

from enum import IntEnum
from typing import NamedTuple


class TimeUnit(IntEnum):
    YEAR = 0
    DAY = 1
    HOUR = 2
    MINUTE = 3
    SECOND = 4


TIME_UNIT_COUNT = len(TimeUnit)

DAYS_PER_YEAR = 365
HOURS_PER_DAY = 24
MINUTES_PER_HOUR = 60
SECONDS_PER_MINUTE = 60

SECONDS_PER_HOUR = MINUTES_PER_HOUR * SECONDS_PER_MINUTE
SECONDS_PER_DAY = HOURS_PER_DAY * SECONDS_PER_HOUR
SECONDS_PER_YEAR = DAYS_PER_YEAR * SECONDS_PER_DAY


class UnitDescriptor(NamedTuple):
    symbol: str
    seconds: int
    # None means unbounded.
    max_value: int | None


UNITS: tuple[UnitDescriptor, ...] = (
    UnitDescriptor("year", SECONDS_PER_YEAR, None),
    UnitDescriptor("day", SECONDS_PER_DAY, DAYS_PER_YEAR),
    UnitDescriptor("hour", SECONDS_PER_HOUR, HOURS_PER_DAY),
    UnitDescriptor("minute", SECONDS_PER_MINUTE, MINUTES_PER_HOUR),
    UnitDescriptor("second", 1, SECONDS_PER_MINUTE),
)

# Maximum values of the bounded units, indexed by rank - 1 (day first).
BOUNDED_MAX_VALUES: tuple[int, ...] = (
    DAYS_PER_YEAR,
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
    SECONDS_PER_MINUTE,
)

AGO = " ago"
FROM_NOW = " from now"
RIGHT_NOW = "right now"


class CompositeTime(NamedTuple):
    years: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def is_zero(self) -> bool:
        return not any(self)


def seconds_to_composite(seconds: int) -> CompositeTime:
    """Split a non-negative seconds count into a CompositeTime.

    Every component except years lands within [0, unit max).
    """
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    values = []
    remainder = seconds
    for unit in UNITS:
        value, remainder = divmod(remainder, unit.seconds)
        values.append(value)
    return CompositeTime(*values)


def composite_to_seconds(comp: CompositeTime) -> int:
    """Total seconds represented by comp."""
    return sum(value * unit.seconds for value, unit in zip(comp, UNITS))


def format_composite(comp: CompositeTime, direction: str) -> str:
    """Render comp as e.g. "1d2h ago".

    Each non-zero unit is written as its value followed by the first letter
    of its symbol, most significant first, with no separators.
    """
    parts = [
        f"{value}{unit.symbol[0]}" for value, unit in zip(comp, UNITS) if value > 0
    ]
    return "".join(parts) + direction

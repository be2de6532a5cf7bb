"""
Relative-time resolution of timestamps embedded in log lines.

For each line the registry locates a timestamp, which is parsed with the
pattern's strptime format. A missing year is taken from the current local
year; if the result then lies in the future (a December syslog line read
in January) the year is decremented once. The parsed time is rendered
either through the user's output format or as a rounded duration such as
"2d3h ago".

Lines with no recognisable or parseable timestamp resolve to None and are
passed through untouched by the caller.
"""

import calendar
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime

from ts_annotate.approximate import approximate_time
from ts_annotate.composite_time import (
    AGO,
    FROM_NOW,
    RIGHT_NOW,
    format_composite,
    seconds_to_composite,
)
from ts_annotate.patterns import TimestampRegistry
from ts_annotate.time_format import FormatBuffer

logger: logging.Logger = logging.getLogger(__name__)

_YEAR_DIRECTIVES = ("%Y", "%y")
# Leap year used while parsing year-less text so that "Feb 29" parses.
_PLACEHOLDER_YEAR = 2000


@dataclass(frozen=True)
class ParsedTime:
    """Broken-down fields of a parsed timestamp."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    # Seconds east of UTC when the text carried a numeric zone.
    utcoffset: int | None = None
    year_inferred: bool = False

    def to_epoch(self) -> int:
        """Convert to epoch seconds, normalising out-of-range days like mktime."""
        fields = (self.year, self.month, self.day, self.hour, self.minute, self.second)
        if self.utcoffset is not None:
            return calendar.timegm(fields + (0, 0, 0)) - self.utcoffset
        # isdst=-1 lets mktime work out daylight saving.
        return int(time.mktime(fields + (0, 0, -1)))

    def with_year(self, year: int) -> "ParsedTime":
        return replace(self, year=year)

    def to_struct_time(self) -> time.struct_time:
        """The fields as written, with out-of-range days normalised like mktime."""
        fields = (self.year, self.month, self.day, self.hour, self.minute, self.second)
        tm = time.gmtime(calendar.timegm(fields + (0, 0, 0)))
        return time.struct_time(tuple(tm)[:8] + (-1,))


def parse_timestamp(text: str, parse_format: str, now_seconds: int) -> ParsedTime | None:
    """Parse text with parse_format, inferring a missing year from now."""
    has_year = any(d in parse_format for d in _YEAR_DIRECTIVES)
    if not has_year:
        text = f"{_PLACEHOLDER_YEAR} {text}"
        parse_format = f"%Y {parse_format}"

    try:
        dt = datetime.strptime(text, parse_format)
    except ValueError as e:
        logger.debug(f"Could not parse {text!r} with {parse_format!r}: {e}")
        return None

    offset = dt.utcoffset()
    year = dt.year
    if not has_year:
        year = time.localtime(now_seconds).tm_year

    return ParsedTime(
        year=year,
        month=dt.month,
        day=dt.day,
        hour=dt.hour,
        minute=dt.minute,
        second=dt.second,
        utcoffset=int(offset.total_seconds()) if offset is not None else None,
        year_inferred=not has_year,
    )


def correct_future(parsed: ParsedTime, now_seconds: int) -> tuple[ParsedTime, int] | None:
    """Move parsed back a year if it lies in the future.

    Returns:
        The corrected time and its epoch seconds, or None if it cannot be
        converted
    """
    try:
        epoch = parsed.to_epoch()
        if epoch > now_seconds:
            parsed = parsed.with_year(parsed.year - 1)
            epoch = parsed.to_epoch()
    except (OverflowError, ValueError) as e:
        logger.debug(f"Could not convert {parsed} to epoch seconds: {e}")
        return None
    return parsed, epoch


def format_relative(delta: int, precision: int) -> str:
    """Render a signed seconds delta (now - then) as e.g. "1d2h ago"."""
    if delta == 0:
        return RIGHT_NOW
    comp = approximate_time(precision, seconds_to_composite(abs(delta)))
    return format_composite(comp, AGO if delta >= 0 else FROM_NOW)


@dataclass(frozen=True)
class Resolution:
    """Annotation for a line and the span of the timestamp it replaces."""

    text: str
    start: int
    end: int

    def apply(self, line: str) -> str:
        """The annotation followed by whatever came after the timestamp."""
        return self.text + line[self.end :]


class RelativeTimeResolver:
    """Turns the first recognised timestamp in a line into a relative time."""

    def __init__(
        self,
        registry: TimestampRegistry,
        precision: int,
        output_format: FormatBuffer | None = None,
    ) -> None:
        """
        Args:
            registry: Compiled timestamp patterns
            precision: Number of significant duration units to keep
            output_format: If given, parsed times are rendered through this
                format instead of as a relative duration
        """
        self.registry = registry
        self.precision = precision
        self.output_format = output_format

    def resolve(self, line: str, now_seconds: int) -> Resolution | None:
        match = self.registry.find_match(line)
        if match is None:
            return None

        parsed = parse_timestamp(match.text, match.parse_format, now_seconds)
        if parsed is None:
            return None

        corrected = correct_future(parsed, now_seconds)
        if corrected is None:
            return None
        parsed, epoch = corrected

        if self.output_format is not None:
            text = self.output_format.render(parsed.to_struct_time())
        else:
            text = format_relative(now_seconds - epoch, self.precision)
        return Resolution(text=text, start=match.start, end=match.end)

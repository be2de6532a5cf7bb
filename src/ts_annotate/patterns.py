"""
Registry of known log timestamp layouts.

Patterns are tried in the order they are listed and the first pattern that
matches anywhere in the line wins, so more specific layouts must come
before looser layouts that would also match them (the Kubernetes
nanosecond layout before plain ISO-8601, for example).

When a pattern matches more text than its parse format describes
(fractional seconds, a trailing "Z"), the parseable part is captured by the
named group ``stamp``. The whole match is still the span that gets
replaced in the output line.
"""

import logging
import re
from dataclasses import dataclass, field

from ts_annotate.errors import PatternCompileError

logger: logging.Logger = logging.getLogger(__name__)

STAMP_GROUP = "stamp"


@dataclass(frozen=True)
class TimestampPattern:
    regex: str
    description: str
    parse_format: str


@dataclass(frozen=True)
class TimestampMatch:
    start: int
    end: int
    text: str
    parse_format: str
    description: str


TIMESTAMP_PATTERNS: tuple[TimestampPattern, ...] = (
    TimestampPattern(
        regex=r"(?P<stamp>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.\d{9}Z",
        description="Kubernetes pod log entry with timestamp",
        parse_format="%Y-%m-%dT%H:%M:%S",
    ),
    TimestampPattern(
        regex=r"(?P<stamp>\d{2}\d{2} \d{2}:\d{2}:\d{2})\.\d{6}",
        description="Kubernetes client-go log format with microseconds",
        parse_format="%m%d %H:%M:%S",
    ),
    TimestampPattern(
        regex=r"\d+\s+\w\w\w\s+\d\d+\s+\d\d:\d\d:\d\d\s+[+-]\d\d\d\d",
        description="16 Jun 94 07:29:35 with timezone",
        parse_format="%d %b %y %H:%M:%S %z",
    ),
    TimestampPattern(
        regex=r"\d\d[-\s/]\w\w\w/\d\d+\s+\d\d:\d\d:\d\d\s+[+-]\d\d\d\d",
        description="21 dec/93 17:05:30 +0000",
        parse_format="%d %b/%y %H:%M:%S %z",
    ),
    TimestampPattern(
        regex=r"\d\d[-\s/]\w\w\w\s+\d\d:\d\d:\d\d\s+[+-]\d\d\d\d",
        description="21 dec 17:05:30 +0000",
        parse_format="%d %b %H:%M:%S %z",
    ),
    TimestampPattern(
        regex=r"\d\d[-\s/]\w\w\w/\d\d+\s+\d\d:\d\d",
        description="21 dec/93 17:05 without seconds and timezone",
        parse_format="%d %b/%y %H:%M",
    ),
    TimestampPattern(
        regex=r"\d\d[-\s/]\w\w\w\s+\d\d:\d\d",
        description="21 dec 17:05 without seconds and timezone",
        parse_format="%d %b %H:%M",
    ),
    TimestampPattern(
        regex=r"\d\d\d\d[-:]\d\d[-:]\d\dT\d\d:\d\d:\d\d",
        description="ISO-8601 format",
        parse_format="%Y-%m-%dT%H:%M:%S",
    ),
    TimestampPattern(
        regex=r"\w\w\w\s+\w\w\w\s+\d\d\s+\d\d:\d\d",
        description="Lastlog format",
        parse_format="%a %b %d %H:%M",
    ),
    TimestampPattern(
        regex=r"\w{3}\s+\d{1,2}\s+\d\d:\d\d:\d\d",
        description="Syslog format with day",
        parse_format="%b %d %H:%M:%S",
    ),
)


@dataclass(frozen=True)
class _CompiledPattern:
    pattern: TimestampPattern
    compiled: re.Pattern[str]


@dataclass(frozen=True)
class TimestampRegistry:
    """Compiled timestamp patterns, read-only once built."""

    entries: tuple[_CompiledPattern, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.entries)

    def find_match(self, line: str) -> TimestampMatch | None:
        """Return the first registered timestamp found in line, if any."""
        for entry in self.entries:
            m = entry.compiled.search(line)
            if m is None:
                continue
            if STAMP_GROUP in entry.compiled.groupindex:
                text = m.group(STAMP_GROUP)
            else:
                text = m.group(0)
            return TimestampMatch(
                start=m.start(),
                end=m.end(),
                text=text,
                parse_format=entry.pattern.parse_format,
                description=entry.pattern.description,
            )
        return None


def compile_all(
    patterns: tuple[TimestampPattern, ...] = TIMESTAMP_PATTERNS,
) -> TimestampRegistry:
    """Compile every pattern, in order.

    Raises:
        PatternCompileError: If any pattern is not a valid regular expression
    """
    entries = []
    for index, pattern in enumerate(patterns):
        try:
            compiled = re.compile(pattern.regex)
        except re.error as e:
            raise PatternCompileError(index, pattern.regex, e.msg, e.pos) from e
        entries.append(_CompiledPattern(pattern=pattern, compiled=compiled))
    logger.debug(f"Compiled {len(entries)} timestamp patterns")
    return TimestampRegistry(entries=tuple(entries))

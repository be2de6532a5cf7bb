from ts_annotate.approximate import approximate_time
from ts_annotate.composite_time import (
    CompositeTime,
    composite_to_seconds,
    format_composite,
    seconds_to_composite,
)
from ts_annotate.patterns import TimestampMatch, TimestampRegistry, compile_all
from ts_annotate.resolver import RelativeTimeResolver, format_relative


def relative_time(seconds_ago: int, precision: int = 2) -> str:
    """Render how long ago something happened, e.g. relative_time(95310) -> "1d2h ago".

    Negative values describe the future ("1d2h from now").
    """
    return format_relative(seconds_ago, precision)


__all__ = [
    "CompositeTime",
    "RelativeTimeResolver",
    "TimestampMatch",
    "TimestampRegistry",
    "approximate_time",
    "compile_all",
    "composite_to_seconds",
    "format_composite",
    "relative_time",
    "seconds_to_composite",
]

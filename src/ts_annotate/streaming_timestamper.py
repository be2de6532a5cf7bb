import time

from ts_annotate.args import Args
from ts_annotate.clocks import Clocks, Timespec, gettime, init_clocks
from ts_annotate.patterns import TimestampRegistry
from ts_annotate.resolver import RelativeTimeResolver
from ts_annotate.time_format import (
    SanitiseOp,
    fill_microseconds,
    sanitise_time_format,
    validate_time_format,
)


class StreamingTimestamper:
    """
    Annotates lines one at a time as they are read.

    In the default mode each line is prefixed with the current time (or
    the time since the previous line / the program start). In relative
    mode the line up to the end of the first recognised timestamp is
    replaced by how long ago it was; lines without one are returned
    unchanged.
    """

    def __init__(
        self,
        args: Args,
        registry: TimestampRegistry,
        clocks: Clocks | None = None,
    ) -> None:
        self.args = args
        self.clocks = clocks if clocks is not None else Clocks()
        self.mode = args.clock_mode()
        self.state = init_clocks(self.mode, self.clocks)

        op = SanitiseOp.COLLAPSE if args.relative else SanitiseOp.EXPAND
        self.sanitised = sanitise_time_format(args.time_format, op)
        self.format_buffer = validate_time_format(self.sanitised.format)

        self.resolver: RelativeTimeResolver | None = None
        if args.relative:
            self.resolver = RelativeTimeResolver(
                registry,
                args.precision,
                self.format_buffer if args.user_format_specified else None,
            )

    def timestamp_line(self, line: str) -> str:
        """Annotate a single line, keeping its line ending."""
        now = gettime(self.mode, self.clocks, self.state)
        if self.resolver is not None:
            resolution = self.resolver.resolve(line, now.seconds)
            if resolution is None:
                return line
            return resolution.apply(line)
        return f"{self.format_now(now)} {line}"

    def format_now(self, now: Timespec) -> str:
        text = self.format_buffer.render(time.localtime(now.seconds))
        return fill_microseconds(
            text, now.nanoseconds, self.sanitised.n_microsecond_specifiers
        )

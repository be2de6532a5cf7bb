import argparse
from dataclasses import dataclass

from ts_annotate.clocks import ClockMode
from ts_annotate.composite_time import TIME_UNIT_COUNT
from ts_annotate.errors import ConfigurationError
from ts_annotate.time_format import count_microsecond_specifiers

DEFAULT_FORMAT = "%b %d %H:%M:%S"
DEFAULT_DELTA_FORMAT = "%H:%M:%S"
DEFAULT_PRECISION = 2
MIN_PRECISION = 1
MAX_PRECISION = TIME_UNIT_COUNT - 1

USAGE = "ts-annotate [-r] [-i | -s] [-m] [-p precision] [format]"


@dataclass
class Args:
    relative: bool
    incremental: bool
    since_start: bool
    monotonic: bool
    precision: int
    format: str | None
    self_test: bool = False
    verbose: bool = False

    @staticmethod
    def parse_args(args: list[str] | None = None) -> "Args":
        return _parse_args(args)

    @property
    def user_format_specified(self) -> bool:
        return self.format is not None

    @property
    def time_format(self) -> str:
        if self.format is not None:
            return self.format
        if self.incremental or self.since_start:
            return DEFAULT_DELTA_FORMAT
        return DEFAULT_FORMAT

    @property
    def hires_timestamping(self) -> bool:
        return count_microsecond_specifiers(self.time_format) > 0 or self.monotonic

    def clock_mode(self) -> ClockMode:
        # Relative mode measures against the current time, never a delta.
        return ClockMode(
            monotonic=self.monotonic,
            incremental=self.incremental and not self.relative,
            since_start=self.since_start and not self.relative,
            hires=self.hires_timestamping,
        )

    def to_cmd_args(self) -> list[str]:
        args = [
            "-r" if self.relative else "",
            "-i" if self.incremental else "",
            "-s" if self.since_start else "",
            "-m" if self.monotonic else "",
            "--self-test" if self.self_test else "",
            "--verbose" if self.verbose else "",
            "-p",
            str(self.precision),
        ]
        out = [arg for arg in args if arg]
        if self.format is not None:
            out += ["--", self.format]
        return out

    def __post_init__(self):
        assert isinstance(self.relative, bool)
        assert isinstance(self.incremental, bool)
        assert isinstance(self.since_start, bool)
        assert isinstance(self.monotonic, bool)
        assert isinstance(self.precision, int)
        assert self.format is None or isinstance(self.format, str)
        assert isinstance(self.self_test, bool)
        assert isinstance(self.verbose, bool)
        if self.incremental and self.since_start:
            raise ConfigurationError("Options '-i' and '-s' cannot be used together.")
        if not MIN_PRECISION <= self.precision <= MAX_PRECISION:
            raise ConfigurationError(
                f"-p {self.precision} is out of range. Valid values are between "
                f"{MIN_PRECISION} and {MAX_PRECISION} inclusive."
            )


def _parse_args(args: list[str] | None = None) -> Args:
    parser = argparse.ArgumentParser(
        prog="ts-annotate",
        usage=USAGE,
        description="Timestamp each line of standard input",
    )
    parser.add_argument(
        "-r",
        dest="relative",
        action="store_true",
        help="Replace timestamps found in each line with relative times (e.g. 2d3h ago)",
    )
    delta_mode = parser.add_mutually_exclusive_group()
    delta_mode.add_argument(
        "-i",
        dest="incremental",
        action="store_true",
        help="Stamp each line with the time since the previous line",
    )
    delta_mode.add_argument(
        "-s",
        dest="since_start",
        action="store_true",
        help="Stamp each line with the time since the program started",
    )
    parser.add_argument(
        "-m",
        dest="monotonic",
        action="store_true",
        help="Use the monotonic clock",
    )
    parser.add_argument(
        "-p",
        dest="precision",
        type=int,
        default=DEFAULT_PRECISION,
        help=f"Number of significant units in relative times ({MIN_PRECISION}-{MAX_PRECISION}, default: {DEFAULT_PRECISION})",
    )
    parser.add_argument(
        "--self-test",
        action="store_true",
        help="Run the built-in approximation self test and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "format",
        nargs="?",
        default=None,
        help="strftime format; %%.S, %%.s and %%.T add microseconds",
    )

    tmp = parser.parse_args(args)
    try:
        return Args(
            relative=tmp.relative,
            incremental=tmp.incremental,
            since_start=tmp.since_start,
            monotonic=tmp.monotonic,
            precision=tmp.precision,
            format=tmp.format,
            self_test=tmp.self_test,
            verbose=tmp.verbose,
        )
    except ConfigurationError as e:
        parser.error(str(e))

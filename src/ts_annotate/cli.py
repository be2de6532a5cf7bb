"""
CLI Entry point.

Reads standard input line by line and writes each line, annotated with a
timestamp, to standard output.
"""

import io
import logging
import os
import sys
from typing import TextIO

from ts_annotate.args import Args
from ts_annotate.config import apply_timezone, log_level
from ts_annotate.errors import TsError
from ts_annotate.patterns import compile_all
from ts_annotate.run import StopSignal, process_lines
from ts_annotate.self_test import run_self_test
from ts_annotate.streaming_timestamper import StreamingTimestamper

logger = logging.getLogger("ts_annotate")

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send ts_annotate log records to stderr."""
    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.handlers.clear()
    logger.addHandler(ch)
    logger.setLevel(log_level(verbose))
    logger.propagate = False


def _open_streams() -> tuple[TextIO, TextIO]:
    # surrogateescape passes undecodable bytes through unchanged.
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(encoding="utf-8", errors="surrogateescape", newline="")
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(
            encoding="utf-8",
            errors="surrogateescape",
            newline="",
            line_buffering=True,
        )
    return sys.stdin, sys.stdout


def _fail(message: str) -> int:
    print(f"ts-annotate: {message}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ts-annotate command."""
    args = Args.parse_args(argv)

    try:
        configure_logging(args.verbose)
    except TsError as e:
        return _fail(str(e))

    if args.self_test:
        return run_self_test()

    try:
        tz = apply_timezone()
        registry = compile_all()
        timestamper = StreamingTimestamper(args, registry)
    except TsError as e:
        return _fail(str(e))
    logger.debug(f"Running with {args} in TZ={tz}")

    stop = StopSignal()
    stop.install()

    infile, outfile = _open_streams()
    rtn = process_lines(infile, outfile, timestamper, stop)
    if rtn != 0:
        # stdout is flushed again at interpreter exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    return rtn


if __name__ == "__main__":
    sys.exit(main())

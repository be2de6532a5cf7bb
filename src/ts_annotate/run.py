"""
The line processing loop.

One line is read, annotated, written and flushed before the next read.
SIGINT and SIGTERM request a cooperative stop: a signal that arrives while
the loop is blocked reading ends the read immediately, otherwise the line
in flight is completed and flushed before the loop exits.
"""

import logging
import signal
from typing import TextIO

from ts_annotate.streaming_timestamper import StreamingTimestamper

logger: logging.Logger = logging.getLogger(__name__)


class _ReadInterrupted(Exception):
    pass


class StopSignal:
    """Process-wide stop request set from signal handlers."""

    def __init__(self) -> None:
        self.received: int | None = None
        self._reading = False

    def install(self) -> None:
        signal.signal(signal.SIGINT, self._handle)
        signal.signal(signal.SIGTERM, self._handle)

    def _handle(self, signum, frame) -> None:
        self.received = signum
        if self._reading:
            raise _ReadInterrupted()

    def readline(self, infile: TextIO) -> str | None:
        """Read a line, or return None if a stop was requested meanwhile."""
        if self.received is not None:
            return None
        self._reading = True
        try:
            return infile.readline()
        except _ReadInterrupted:
            return None
        finally:
            self._reading = False


def process_lines(
    infile: TextIO,
    outfile: TextIO,
    timestamper: StreamingTimestamper,
    stop: StopSignal | None = None,
) -> int:
    """Annotate infile line by line into outfile.

    Returns:
        0 on end of input or a requested stop, 1 if reading or writing failed
    """
    if stop is None:
        stop = StopSignal()

    count = 0
    while True:
        try:
            line = stop.readline(infile)
        except OSError as e:
            logger.error(f"read failed: {e}")
            break
        if line is None:
            logger.debug(f"Stopping on signal {stop.received}")
            break
        if line == "":
            break

        annotated = timestamper.timestamp_line(line)
        try:
            outfile.write(annotated)
            outfile.flush()
        except OSError as e:
            logger.error(f"write failed: {e}")
            return 1
        count += 1

    logger.debug(f"Processed {count} lines")
    try:
        outfile.flush()
    except OSError as e:
        logger.error(f"flush failed: {e}")
        return 1
    return 0

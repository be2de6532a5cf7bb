"""
Clock readings for stamping lines with the current time.

In monotonic mode readings come from the monotonic clock shifted by the
monodelta, the offset between the wall clock and the monotonic clock
captured once at startup, so they render as wall-clock-equivalent times.
In incremental mode each reading becomes the time since the previous
line; in since-start mode the time since the program started.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, NamedTuple

from ts_annotate.errors import ClockError

logger: logging.Logger = logging.getLogger(__name__)

NANOSECONDS_PER_SECOND = 1_000_000_000


class Timespec(NamedTuple):
    seconds: int
    nanoseconds: int = 0


def _from_ns(ns: int) -> Timespec:
    seconds, nanoseconds = divmod(ns, NANOSECONDS_PER_SECOND)
    return Timespec(seconds, nanoseconds)


@dataclass
class Clocks:
    """Wall and monotonic clocks, replaceable for tests."""

    wall_ns: Callable[[], int] = time.time_ns
    monotonic_ns: Callable[[], int] = time.monotonic_ns

    def wall(self) -> Timespec:
        try:
            return _from_ns(self.wall_ns())
        except OSError as e:
            raise ClockError(f"wall clock unavailable: {e}") from e

    def monotonic(self) -> Timespec:
        try:
            return _from_ns(self.monotonic_ns())
        except OSError as e:
            raise ClockError(f"monotonic clock unavailable: {e}") from e


@dataclass(frozen=True)
class ClockMode:
    monotonic: bool = False
    incremental: bool = False
    since_start: bool = False
    hires: bool = False


@dataclass
class ClockState:
    """Rolling state owned by the processing loop."""

    last_seconds: int
    last_nanoseconds: int
    monodelta: int


def init_clocks(mode: ClockMode, clocks: Clocks) -> ClockState:
    """Capture the start time and, in monotonic mode, the monodelta.

    Raises:
        ClockError: If a clock is unavailable or the wall clock is behind
            the monotonic clock
    """
    now = clocks.wall()
    state = ClockState(
        last_seconds=now.seconds,
        last_nanoseconds=now.nanoseconds if mode.hires else 0,
        monodelta=0,
    )

    if mode.monotonic:
        mono = clocks.monotonic()
        if now.seconds < mono.seconds:
            raise ClockError("real time is less than monotonic time!")
        state.monodelta = now.seconds - mono.seconds
        state.last_seconds = mono.seconds + state.monodelta
        state.last_nanoseconds = mono.nanoseconds
        logger.debug(f"Monodelta is {state.monodelta}s")

    return state


def gettime(mode: ClockMode, clocks: Clocks, state: ClockState) -> Timespec:
    """Read the clock for the next line, updating state in incremental mode."""
    now = clocks.monotonic() if mode.monotonic else clocks.wall()
    seconds, nanoseconds = now

    if mode.monotonic:
        seconds += state.monodelta

    if not (mode.incremental or mode.since_start):
        return Timespec(seconds, nanoseconds)

    delta_seconds = seconds - state.last_seconds
    delta_nanoseconds = nanoseconds - state.last_nanoseconds if mode.hires else 0
    if delta_nanoseconds < 0:
        delta_seconds -= 1
        delta_nanoseconds += NANOSECONDS_PER_SECOND

    if mode.incremental:
        state.last_seconds = seconds
        state.last_nanoseconds = nanoseconds if mode.hires else 0

    return Timespec(delta_seconds, delta_nanoseconds)

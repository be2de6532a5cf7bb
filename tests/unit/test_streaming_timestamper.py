"""
Unit tests for StreamingTimestamper.
"""

import calendar
import os
import time
import unittest
from unittest.mock import patch

from ts_annotate.args import Args
from ts_annotate.clocks import Clocks
from ts_annotate.patterns import compile_all
from ts_annotate.streaming_timestamper import StreamingTimestamper

NS = 1_000_000_000
NOW = calendar.timegm((2024, 1, 10, 12, 0, 0))

_env = patch.dict(os.environ, {"TZ": "UTC"})


def setUpModule() -> None:
    _env.start()
    time.tzset()


def tearDownModule() -> None:
    _env.stop()
    time.tzset()


def make_args(**kwargs) -> Args:
    values = dict(
        relative=False,
        incremental=False,
        since_start=False,
        monotonic=False,
        precision=2,
        format=None,
    )
    values.update(kwargs)
    return Args(**values)


def wall_clock(*readings_ns: int) -> Clocks:
    it = iter(readings_ns)
    return Clocks(wall_ns=it.__next__)


class StreamingTimestamperTester(unittest.TestCase):
    """Line annotation in absolute and relative modes."""

    @classmethod
    def setUpClass(cls) -> None:
        cls.registry = compile_all()

    def test_default_format(self) -> None:
        clocks = wall_clock(NOW * NS, NOW * NS)
        stamper = StreamingTimestamper(make_args(), self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("hello\n"), "Jan 10 12:00:00 hello\n")

    def test_microseconds(self) -> None:
        clocks = wall_clock(NOW * NS, NOW * NS + 123_456_789)
        args = make_args(format="%Y-%m-%d %H:%M:%.S")
        stamper = StreamingTimestamper(args, self.registry, clocks)
        self.assertTrue(stamper.args.hires_timestamping)
        self.assertEqual(
            stamper.timestamp_line("hello\n"), "2024-01-10 12:00:00.123456 hello\n"
        )

    def test_line_without_newline(self) -> None:
        clocks = wall_clock(NOW * NS, NOW * NS)
        stamper = StreamingTimestamper(make_args(format="%H:%M"), self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("last"), "12:00 last")

    def test_incremental(self) -> None:
        clocks = wall_clock(NOW * NS, (NOW + 65) * NS, (NOW + 70) * NS)
        stamper = StreamingTimestamper(make_args(incremental=True), self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("a\n"), "00:01:05 a\n")
        self.assertEqual(stamper.timestamp_line("b\n"), "00:00:05 b\n")

    def test_since_start(self) -> None:
        clocks = wall_clock(NOW * NS, (NOW + 65) * NS, (NOW + 70) * NS)
        stamper = StreamingTimestamper(make_args(since_start=True), self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("a\n"), "00:01:05 a\n")
        self.assertEqual(stamper.timestamp_line("b\n"), "00:01:10 b\n")

    def test_delta_modes_follow_local_time(self) -> None:
        clocks = wall_clock(NOW * NS, (NOW + 65) * NS)
        self.addCleanup(time.tzset)
        with patch.dict(os.environ, {"TZ": "EST5"}):
            time.tzset()
            stamper = StreamingTimestamper(make_args(incremental=True), self.registry, clocks)
            line = stamper.timestamp_line("a\n")
        self.assertEqual(line, "19:01:05 a\n")

    def test_relative(self) -> None:
        clocks = wall_clock(NOW * NS, NOW * NS)
        stamper = StreamingTimestamper(make_args(relative=True), self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("2024-01-09T10:00:00 x\n"), "1d2h ago x\n")

    def test_relative_no_match(self) -> None:
        clocks = wall_clock(NOW * NS, NOW * NS)
        stamper = StreamingTimestamper(make_args(relative=True), self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("plain line\n"), "plain line\n")

    def test_relative_with_format_collapses_microseconds(self) -> None:
        clocks = wall_clock(NOW * NS, NOW * NS)
        args = make_args(relative=True, format="%H:%M:%.S")
        stamper = StreamingTimestamper(args, self.registry, clocks)
        self.assertEqual(stamper.sanitised.format, "%H:%M:%S")
        self.assertEqual(
            stamper.timestamp_line("Jan 10 11:00:00 host x\n"), "11:00:00 host x\n"
        )

    def test_relative_ignores_delta_modes(self) -> None:
        clocks = wall_clock(NOW * NS, (NOW + 3600) * NS)
        args = make_args(relative=True, incremental=True)
        stamper = StreamingTimestamper(args, self.registry, clocks)
        self.assertEqual(stamper.timestamp_line("2024-01-10T12:00:00 x"), "1h ago x")


if __name__ == "__main__":
    unittest.main()
